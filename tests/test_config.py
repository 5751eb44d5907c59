"""Tests for application settings."""

from inbox.config import Settings


class TestAllowedOrigins:
    """Tests for the CORS origin list."""

    def test_frontend_url_is_always_allowed(self):
        settings = Settings(frontend_url="https://inbox.acme.io/", cors_origins="")

        assert settings.allowed_origins == ["https://inbox.acme.io"]

    def test_extra_origins_follow_frontend_without_duplicates(self):
        settings = Settings(
            frontend_url="https://inbox.acme.io",
            cors_origins="https://admin.acme.io, https://inbox.acme.io,,",
        )

        assert settings.allowed_origins == ["https://inbox.acme.io", "https://admin.acme.io"]

    def test_no_frontend_configured(self):
        settings = Settings(frontend_url="", cors_origins="https://admin.acme.io")

        assert settings.allowed_origins == ["https://admin.acme.io"]
