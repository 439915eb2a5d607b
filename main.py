import threading

import webview

from config import Config
from web_app import create_app

# ---------------- Flask Backend ---------------- #
config = Config.from_env()
app = create_app(config)


# ---------------- PyWebView Frontend ---------------- #
def start_flask():
    app.run(debug=False, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    # Run Flask in a separate thread
    threading.Thread(target=start_flask, daemon=True).start()

    # Open a pywebview window pointing to the Flask app
    webview.create_window("30-Day Challenge", f"http://{config.HOST}:{config.PORT}")
    webview.start()
