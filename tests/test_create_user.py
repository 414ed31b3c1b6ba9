"""Tests for the create_user command-line script."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout

from notes_api.core.security import verify_password
from notes_api.models import User
from notes_api.scripts.create_user import main
from tests.helpers import count_rows, make_database


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        self.database = make_database()

    def tearDown(self) -> None:
        self.database.dispose()

    def run_main(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv), database=self.database)
        return code, out.getvalue(), err.getvalue()

    def test_creates_user_with_roles(self) -> None:
        code, out, _ = self.run_main("admin1", "Admin@Example.com", "secret1", "Admin", "Manager")
        self.assertEqual(code, 0)
        self.assertIn("Created user 'admin1' with roles Admin, Manager", out)

        db = self.database.session()
        try:
            user = db.query(User).one()
            self.assertEqual(user.email, "admin@example.com")
            self.assertEqual(user.roles, ["Admin", "Manager"])
            self.assertTrue(verify_password("secret1", user.password_hash))
        finally:
            db.close()

    def test_default_role(self) -> None:
        code, out, _ = self.run_main("worker", "worker@example.com", "secret1")
        self.assertEqual(code, 0)
        self.assertIn("Employee", out)

    def test_duplicate_fails(self) -> None:
        self.assertEqual(self.run_main("admin1", "a@example.com", "secret1")[0], 0)
        code, _, err = self.run_main("admin1", "b@example.com", "secret1")
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)
        self.assertEqual(count_rows(self.database, User), 1)

    def test_invalid_input_fails(self) -> None:
        code, _, err = self.run_main("admin1", "not-an-email", "secret1")
        self.assertEqual(code, 1)
        self.assertIn("email", err)
        code, _, _ = self.run_main("admin1", "a@example.com", "abc")
        self.assertEqual(code, 1)
        self.assertEqual(count_rows(self.database, User), 0)


if __name__ == "__main__":
    unittest.main()
