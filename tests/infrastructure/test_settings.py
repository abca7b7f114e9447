"""Tests for environment-driven settings and logging set-up."""

from pathlib import Path

import pytest
import structlog

from storefront.infrastructure.logging import configure_logging
from storefront.infrastructure.settings import load_settings

_VARS = (
    "STORE_NAME",
    "ORDER_PREFIX",
    "CURRENCY_SYMBOL",
    "SHIPPING_FLAT_RATE",
    "FREE_SHIPPING_THRESHOLD",
    "PROCESSING_STATUS_NAME",
    "STOREFRONT_DATA_DIR",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


class TestSettings:

    def test_defaults(self):
        settings = load_settings()
        assert settings.store_name == "My Store"
        assert settings.order_prefix == "ORD"
        assert settings.currency_symbol == "$"
        assert settings.shipping_rates.flat_rate == 500
        assert settings.shipping_rates.free_shipping_threshold == 5000
        assert settings.processing_status_name == "processing"
        assert settings.data_dir == Path("data")
        assert settings.log_level == "INFO"

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ORDER_PREFIX", "SHOP")
        monkeypatch.setenv("SHIPPING_FLAT_RATE", "799")
        monkeypatch.setenv("FREE_SHIPPING_THRESHOLD", "0")
        monkeypatch.setenv("STOREFRONT_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = load_settings()
        assert settings.order_prefix == "SHOP"
        assert settings.shipping_rates.flat_rate == 799
        assert settings.shipping_rates.free_shipping_threshold == 0
        assert settings.data_dir == tmp_path
        assert settings.log_level == "DEBUG"

    def test_cached_until_cleared(self, monkeypatch):
        first = load_settings()
        monkeypatch.setenv("STORE_NAME", "Other")
        assert load_settings() is first
        load_settings.cache_clear()
        assert load_settings().store_name == "Other"


class TestLogging:

    def test_events_go_to_stderr(self, capsys):
        configure_logging("INFO")
        try:
            structlog.get_logger("test").info("order_placed", order_number="ORD-1")
            captured = capsys.readouterr()
            assert captured.out == ""
            assert "order_placed" in captured.err
            assert "order_number=ORD-1" in captured.err
        finally:
            structlog.reset_defaults()

    def test_level_filter(self, capsys):
        configure_logging("WARNING")
        try:
            structlog.get_logger("test").info("hidden")
            structlog.get_logger("test").warning("shown")
            err = capsys.readouterr().err
            assert "hidden" not in err
            assert "shown" in err
        finally:
            structlog.reset_defaults()
