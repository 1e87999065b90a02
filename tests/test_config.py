"""Tests for settings and logging helpers"""
import io
import logging

import pytest

from storefront.config import Settings, load_settings
from storefront.logging import (
    configure_logging,
    get_log_level,
    get_logger,
    sanitize_id_for_logging,
    sanitize_string_for_logging,
)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        """Test an empty environment gives file-backed INR defaults."""
        settings = Settings.from_env({})

        assert settings.cart_backend == "file"
        assert settings.cart_storage_key == "techgear-cart"
        assert settings.cart_storage_path == ".techgear-cart.json"
        assert settings.cart_ttl_seconds is None
        assert settings.currency == "INR"

    def test_reads_environment(self):
        """Test every variable is picked up."""
        settings = Settings.from_env({
            "SUPABASE_URL": "https://x.supabase.co",
            "SUPABASE_ANON_KEY": "anon",
            "UPSTASH_REDIS_REST_URL": "https://redis",
            "UPSTASH_REDIS_REST_TOKEN": "tok",
            "CART_STORAGE_BACKEND": " Redis ",
            "CART_TTL_SECONDS": "86400",
            "STORE_CURRENCY": "usd",
        })

        assert settings.supabase_url == "https://x.supabase.co"
        assert settings.redis_token == "tok"
        assert settings.cart_backend == "redis"
        assert settings.cart_ttl_seconds == 86400
        assert settings.currency == "USD"

    def test_unknown_backend(self):
        """Test an unsupported backend is rejected."""
        with pytest.raises(ValueError):
            Settings.from_env({"CART_STORAGE_BACKEND": "sqlite"})

    @pytest.mark.parametrize("ttl", ["0", "-5", "soon"])
    def test_bad_ttl(self, ttl):
        """Test TTL must be a positive integer."""
        with pytest.raises(ValueError):
            Settings.from_env({"CART_TTL_SECONDS": ttl})

    def test_load_settings_reads_dotenv(self, tmp_path, monkeypatch):
        """Test .env values fill gaps but do not override the environment."""
        env_file = tmp_path / ".env"
        env_file.write_text("CART_STORAGE_KEY=from-dotenv\nSTORE_CURRENCY=EUR\n", encoding="utf-8")
        # setenv then delenv so monkeypatch removes whatever load_dotenv adds
        monkeypatch.setenv("CART_STORAGE_KEY", "placeholder")
        monkeypatch.delenv("CART_STORAGE_KEY")
        monkeypatch.setenv("STORE_CURRENCY", "GBP")

        settings = load_settings(str(env_file))

        assert settings.cart_storage_key == "from-dotenv"
        assert settings.currency == "GBP"


class TestLogging:
    """Tests for log sanitizing helpers."""

    def test_get_logger_is_cached(self):
        assert get_logger("storefront.test") is get_logger("storefront.test")

    def test_sanitize_id(self):
        assert sanitize_id_for_logging(None) == "N/A"
        assert sanitize_id_for_logging("abc\ndefghijk") == "abc\\ndef"

    def test_sanitize_string(self):
        assert sanitize_string_for_logging("a\r\nb") == "a\\r\\nb"
        assert sanitize_string_for_logging("x" * 60, max_length=10) == "x" * 10 + "..."

    def test_sanitize_string_keeps_one_line(self):
        city = "Pune\nINFO - storefront - forged"
        assert "\n" not in sanitize_string_for_logging(city)


class TestLogSetup:
    """Tests for root logger configuration."""

    def test_log_level_from_env(self):
        assert get_log_level({"LOG_LEVEL": "debug"}) == logging.DEBUG
        assert get_log_level({"LOG_LEVEL": " WARNING "}) == logging.WARNING

    def test_log_level_defaults_to_info(self):
        assert get_log_level({}) == logging.INFO
        assert get_log_level({"LOG_LEVEL": "chatty"}) == logging.INFO

    def test_host_handlers_are_left_alone(self, bare_root_logger):
        existing = logging.NullHandler()
        bare_root_logger.addHandler(existing)

        assert configure_logging({}) is False
        assert bare_root_logger.handlers == [existing]

    def test_production_format_has_no_timestamp(self, bare_root_logger):
        stream = io.StringIO()

        configured = configure_logging({"STOREFRONT_ENV": "production", "LOG_LEVEL": "INFO"}, stream=stream)
        get_logger("storefront.setup").info("cart saved")

        assert configured is True
        assert stream.getvalue() == "INFO - storefront.setup - cart saved\n"


@pytest.fixture
def bare_root_logger():
    """Root logger with its handlers detached for the test, restored afterwards."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    for handler in saved_handlers:
        root.removeHandler(handler)
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)
