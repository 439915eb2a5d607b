import unittest

from auth_manager import AuthManager, Session
from errors import (
    DuplicateEmail, InvalidCredentials, InvalidEmailFormat, NameRequired,
    PasswordMismatch, PasswordTooLong, PasswordTooShort,
)
from local_storage import MemoryStorage, read_json


class TestValidation(unittest.TestCase):
    def test_email_validation(self):
        """local@domain.tld with no whitespace"""
        self.assertTrue(AuthManager.validate_email("test@example.com"))
        self.assertTrue(AuthManager.validate_email("user.name@domain.co.uk"))

        self.assertFalse(AuthManager.validate_email("invalid-email"))
        self.assertFalse(AuthManager.validate_email("@domain.com"))
        self.assertFalse(AuthManager.validate_email("user@domain"))
        self.assertFalse(AuthManager.validate_email("us er@domain.com"))
        self.assertFalse(AuthManager.validate_email("a@b@c.com"))

    def test_password_validation(self):
        AuthManager.validate_password("123456")
        AuthManager.validate_password("x" * 50)

        with self.assertRaises(PasswordTooShort) as ctx:
            AuthManager.validate_password("12345")
        self.assertEqual(ctx.exception.message, "Password must be at least 6 characters")

        with self.assertRaises(PasswordTooLong):
            AuthManager.validate_password("x" * 51)

    def test_signup_form_reports_first_problem(self):
        with self.assertRaises(NameRequired):
            AuthManager.validate_signup("  ", "bad", "1", "2")
        with self.assertRaises(InvalidEmailFormat):
            AuthManager.validate_signup("Sam", "bad", "1", "2")
        with self.assertRaises(PasswordTooShort):
            AuthManager.validate_signup("Sam", "sam@example.com", "1", "2")
        with self.assertRaises(PasswordMismatch):
            AuthManager.validate_signup("Sam", "sam@example.com", "secret1", "secret2")
        AuthManager.validate_signup("Sam", "sam@example.com", "secret1", "secret1")


class TestAccounts(unittest.TestCase):
    def setUp(self):
        self.storage = MemoryStorage()
        self.auth = AuthManager(self.storage)

    def test_sign_up_creates_user_and_session(self):
        user = self.auth.sign_up("test@example.com", "securepass", "Test User")

        current = self.auth.get_current_user()
        self.assertEqual(current, user)
        self.assertEqual(current.email, "test@example.com")
        self.assertEqual(current.name, "Test User")
        self.assertTrue(self.auth.is_authenticated())

    def test_password_is_stored_hashed(self):
        self.auth.sign_up("test@example.com", "securepass", "Test User")

        users = read_json(self.storage, "users")
        self.assertEqual(len(users), 1)
        self.assertNotEqual(users[0]["passwordHash"], "securepass")
        self.assertNotIn("passwordHash", read_json(self.storage, "currentUser"))

    def test_sign_up_duplicate_email_keeps_session(self):
        first = self.auth.sign_up("dup@example.com", "securepass", "First")

        with self.assertRaises(DuplicateEmail):
            self.auth.sign_up("dup@example.com", "otherpass", "Second")

        self.assertEqual(self.auth.get_current_user(), first)
        self.assertEqual(len(read_json(self.storage, "users")), 1)

    def test_email_match_is_case_sensitive(self):
        self.auth.sign_up("case@example.com", "securepass", "Lower")
        upper = self.auth.sign_up("Case@example.com", "securepass", "Upper")
        self.assertNotEqual(upper.id, read_json(self.storage, "users")[0]["id"])

    def test_login_valid_user(self):
        user = self.auth.sign_up("login@example.com", "securepass", "Login")
        self.auth.logout()

        self.assertEqual(self.auth.login("login@example.com", "securepass"), user)
        self.assertEqual(self.auth.get_current_user(), user)

    def test_login_invalid_credentials(self):
        self.auth.sign_up("login2@example.com", "securepass", "Login")
        self.auth.logout()

        with self.assertRaises(InvalidCredentials):
            self.auth.login("login2@example.com", "wrongpass")
        with self.assertRaises(InvalidCredentials):
            self.auth.login("nobody@example.com", "securepass")
        with self.assertRaises(InvalidCredentials):
            self.auth.login("LOGIN2@example.com", "securepass")
        self.assertFalse(self.auth.is_authenticated())

    def test_logout_is_idempotent(self):
        self.auth.sign_up("out@example.com", "securepass", "Out")
        self.auth.logout()
        self.auth.logout()
        self.assertIsNone(self.auth.get_current_user())

    def test_logout_is_logged(self):
        user = self.auth.sign_up("bye@example.com", "securepass", "Bye")
        with self.assertLogs("auth_manager", level="INFO") as logs:
            self.auth.logout()
        self.assertIn(f"User {user.id} logged out", logs.output[0])

    def test_corrupted_users_record_reads_as_empty(self):
        self.storage.set_item("users", "{oops")
        with self.assertRaises(InvalidCredentials):
            self.auth.login("a@example.com", "securepass")
        # sign-up still works and rewrites the record
        self.auth.sign_up("a@example.com", "securepass", "A")
        self.assertEqual(len(read_json(self.storage, "users")), 1)

    def test_corrupted_current_user_means_logged_out(self):
        self.storage.set_item("currentUser", '{"id": "1"}')
        self.assertFalse(self.auth.is_authenticated())


class TestSeparateSessions(unittest.TestCase):
    def test_sessions_share_accounts_not_login_state(self):
        storage = MemoryStorage()
        alice = AuthManager(storage, Session())
        bob = AuthManager(storage, Session())

        alice_user = alice.sign_up("alice@example.com", "securepass", "Alice")
        self.assertIsNone(bob.get_current_user())

        bob.login("alice@example.com", "securepass")
        alice.logout()
        self.assertEqual(bob.get_current_user(), alice_user)
        self.assertIsNone(alice.get_current_user())


if __name__ == '__main__':
    unittest.main()
