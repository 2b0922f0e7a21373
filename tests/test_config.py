import unittest
from dataclasses import FrozenInstanceError

from pydantic import ValidationError

from app.core.config import MILLISECONDS_PER_DAY, RefreshTokenConfig, Settings


class TestConfig(unittest.TestCase):
    def test_refresh_token_config_from_settings(self):
        settings = Settings(
            _env_file=None,
            ENVIRONMENT="prod",
            REFRESH_TOKEN_COOKIE_NAME="rt",
            REFRESH_TOKEN_EXPIRE_DAYS=3,
            COOKIE_SAME_SITE="lax",
            COOKIE_DOMAIN="example.com",
        )

        config = RefreshTokenConfig.from_settings(settings)

        self.assertEqual(config.cookie_name, "rt")
        self.assertEqual(config.ttl_ms, 3 * MILLISECONDS_PER_DAY)
        self.assertTrue(config.secure)
        self.assertTrue(config.http_only)
        self.assertEqual(config.same_site, "lax")
        self.assertEqual(config.domain, "example.com")

    def test_dev_relaxes_secure_cookies(self):
        settings = Settings(_env_file=None, ENVIRONMENT="dev", COOKIE_SAME_SITE="strict")
        self.assertFalse(settings.COOKIE_SECURE)

    def test_prod_requires_secure_cookies(self):
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, ENVIRONMENT="prod", COOKIE_SECURE=False)

    def test_refresh_ttl_must_be_positive(self):
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, REFRESH_TOKEN_EXPIRE_DAYS=0)
        with self.assertRaises(ValueError):
            RefreshTokenConfig(ttl_ms=0)

    def test_database_url_normalization(self):
        self.assertEqual(
            Settings(_env_file=None, DATABASE_URL="postgresql://u:p@db/x").database_url_computed,
            "postgresql+asyncpg://u:p@db/x",
        )
        self.assertEqual(
            Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///./tokens.db").database_url_computed,
            "sqlite+aiosqlite:///./tokens.db",
        )

    def test_config_is_frozen(self):
        config = RefreshTokenConfig()
        with self.assertRaises(FrozenInstanceError):
            config.ttl_ms = 1


if __name__ == "__main__":
    unittest.main()
