"""Settings validation."""

import unittest

from pydantic import ValidationError

from notes_api.core.config import Settings


def _settings(**overrides) -> Settings:
    values = {
        "ACCESS_TOKEN_SECRET": "access",
        "REFRESH_TOKEN_SECRET": "refresh",
        "DATABASE_URL": "sqlite://",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        s = _settings()
        self.assertEqual(s.API_V1_PREFIX, "/api/v1")
        self.assertEqual(s.ACCESS_TOKEN_EXPIRE_MINUTES, 15)
        self.assertEqual(s.REFRESH_COOKIE_NAME, "jwt")
        self.assertEqual(s.refresh_token_max_age, 7 * 24 * 60 * 60)
        self.assertEqual(s.LOGIN_RATE_LIMIT, "5/minute")

    def test_secrets_must_differ(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            _settings(ACCESS_TOKEN_SECRET="same", REFRESH_TOKEN_SECRET="same")
        self.assertIn("must differ", str(ctx.exception))

    def test_blank_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(ACCESS_TOKEN_SECRET="  ")

    def test_database_url_scheme(self) -> None:
        self.assertEqual(_settings(DATABASE_URL=" sqlite:///notes.db ").DATABASE_URL, "sqlite:///notes.db")
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="mysql://localhost/notes")

    def test_only_hmac_algorithms(self) -> None:
        self.assertEqual(_settings(JWT_ALGORITHM="HS512").JWT_ALGORITHM, "HS512")
        with self.assertRaises(ValidationError):
            _settings(JWT_ALGORITHM="RS256")

    def test_redis_url(self) -> None:
        self.assertIsNone(_settings(REDIS_URL="").REDIS_URL)
        self.assertEqual(_settings(REDIS_URL="redis://cache:6379/0").REDIS_URL, "redis://cache:6379/0")
        with self.assertRaises(ValidationError):
            _settings(REDIS_URL="http://cache")

    def test_bounds(self) -> None:
        for field, value in (
            ("ACCESS_TOKEN_EXPIRE_MINUTES", 0),
            ("REFRESH_TOKEN_EXPIRE_DAYS", 91),
            ("BCRYPT_ROUNDS", 3),
            ("NOTES_CACHE_TTL_SECONDS", 0),
        ):
            with self.subTest(field=field):
                with self.assertRaises(ValidationError):
                    _settings(**{field: value})


if __name__ == "__main__":
    unittest.main()
