# web_app.py
from flask import Flask, jsonify

from challenge_bp import challenge_bp
from config import Config, configure_logging
from errors import ChallengeError
from services import EXTENSION_KEY, build_services, get_services, request_fields, require_user
from session_state import resolve_state, route_for
from setup_bp import setup_bp


def create_app(config: Config = None, storage=None) -> Flask:
    config = config or Config.from_env()
    if not config.TESTING:
        configure_logging(config.LOG_LEVEL)

    app = Flask(__name__)
    app.secret_key = config.SECRET_KEY
    app.config.update(
        TESTING=config.TESTING,
        STORAGE_BACKEND=config.STORAGE_BACKEND,
    )
    app.json.ensure_ascii = False  # emojis stay readable
    app.extensions[EXTENSION_KEY] = build_services(config, storage)

    app.register_blueprint(setup_bp)
    app.register_blueprint(challenge_bp)
    app.register_error_handler(ChallengeError, handle_challenge_error)

    # ---------------- Index ---------------- #
    @app.route('/')
    def index():
        services = get_services()
        state = resolve_state(services.auth, services.plans)
        return jsonify({'state': state.value, 'route': route_for(state)})

    # ---------------- Auth ---------------- #
    @app.route('/api/signup', methods=['POST'])
    def signup():
        data = request_fields('name', 'email', 'password', 'confirmPassword')
        name = (data['name'] or '').strip()
        email = (data['email'] or '').strip()
        password = data['password'] or ''
        confirm = data['confirmPassword'] or ''

        services = get_services()
        services.auth.validate_signup(name, email, password, confirm)
        user = services.auth.sign_up(email, password, name)
        app.logger.info("[signup] created user %s", user.id)
        return jsonify({'success': True, 'user': user.to_dict()}), 201

    @app.route('/api/login', methods=['POST'])
    def login():
        data = request_fields('email', 'password')
        email = (data['email'] or '').strip()
        user = get_services().auth.login(email, data['password'] or '')
        return jsonify({'success': True, 'user': user.to_dict()}), 200

    @app.route('/api/logout', methods=['POST'])
    def logout():
        get_services().auth.logout()
        return jsonify({'success': True}), 200

    @app.route('/api/me')
    def me():
        _, user, err_resp, err_code = require_user()
        if err_resp:
            return err_resp, err_code
        return jsonify({'success': True, 'user': user.to_dict()}), 200

    return app


def handle_challenge_error(error: ChallengeError):
    return jsonify(error.to_dict()), error.status


if __name__ == '__main__':
    config = Config.from_env()
    create_app(config).run(debug=True, host=config.HOST, port=config.PORT)
