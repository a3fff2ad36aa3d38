"""Unit tests for sumbar_api.core.config: startup refuses unsafe or malformed settings."""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from sumbar_api.core.config import Settings

LONG_SECRET = "x" * 40


class TestJwtSecretRequired(unittest.TestCase):
    """There is no fallback signing key."""

    def test_missing_secret_refuses_to_start(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ValidationError) as ctx:
                Settings(_env_file=None)
        self.assertIn("JWT_SECRET", str(ctx.exception))

    def test_blank_secret_refuses_to_start(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_SECRET="   ")

    def test_short_secret_rejected_in_prod(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, APP_ENV="prod", JWT_SECRET="short-secret")

    def test_long_secret_accepted_in_prod(self) -> None:
        s = Settings(_env_file=None, APP_ENV="prod", JWT_SECRET=LONG_SECRET)
        self.assertEqual(s.JWT_SECRET.get_secret_value(), LONG_SECRET)

    def test_secret_is_not_rendered(self) -> None:
        s = Settings(_env_file=None, JWT_SECRET=LONG_SECRET)
        self.assertNotIn(LONG_SECRET, repr(s))


class TestSettingsDefaults(unittest.TestCase):
    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            s = Settings(_env_file=None, JWT_SECRET=LONG_SECRET)
        self.assertEqual(s.JWT_ALGORITHM, "HS256")
        self.assertEqual(s.JWT_EXPIRE_MINUTES, 1440)
        self.assertEqual(s.ADMIN_ROLE_ID, 1)
        self.assertEqual(s.API_V1_PREFIX, "/api/v1")


class TestSettingsValidation(unittest.TestCase):
    """Field validators reject out-of-range or malformed values."""

    def test_database_url_scheme(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_SECRET=LONG_SECRET, DATABASE_URL="mysql://u:p@h/db")
        s = Settings(_env_file=None, JWT_SECRET=LONG_SECRET, DATABASE_URL=" sqlite:// ")
        self.assertEqual(s.DATABASE_URL, "sqlite://")

    def test_database_url_is_stripped_before_scheme_check(self) -> None:
        s = Settings(
            _env_file=None,
            JWT_SECRET=LONG_SECRET,
            DATABASE_URL="  postgresql://u:p@db:5432/sumbar\n",
        )
        self.assertEqual(s.DATABASE_URL, "postgresql://u:p@db:5432/sumbar")
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_SECRET=LONG_SECRET, DATABASE_URL="   ")

    def test_bcrypt_rounds_bounds(self) -> None:
        for rounds in (3, 16):
            with self.subTest(rounds=rounds):
                with self.assertRaises(ValidationError):
                    Settings(_env_file=None, JWT_SECRET=LONG_SECRET, BCRYPT_ROUNDS=rounds)

    def test_expire_minutes_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_SECRET=LONG_SECRET, JWT_EXPIRE_MINUTES=0)

    def test_api_prefix_must_be_absolute(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, JWT_SECRET=LONG_SECRET, API_V1_PREFIX="api/v1")

    def test_cors_wildcard_only_in_dev(self) -> None:
        dev = Settings(_env_file=None, JWT_SECRET=LONG_SECRET, CORS_ORIGINS="*")
        self.assertEqual(dev.cors_origins, ["*"])
        prod = Settings(
            _env_file=None,
            APP_ENV="prod",
            JWT_SECRET=LONG_SECRET,
            CORS_ORIGINS="*, https://sumbarprov.go.id",
        )
        self.assertEqual(prod.cors_origins, ["https://sumbarprov.go.id"])


if __name__ == "__main__":
    unittest.main()
