"""
Unit Tests: logging configuration

Tests for utils/logging_config.py covering customer data masking and
handler setup.
"""

import logging

import pytest

from utils.logging_config import SecretMaskingFilter, setup_logging


class TestSecretMaskingFilter:

    def test_masks_redis_url_password(self):
        masked = SecretMaskingFilter.mask("connecting to redis://:s3cret@cache:6379/0")

        assert "s3cret" not in masked
        assert "[REDACTED_PASSWORD]" in masked

    def test_masks_password_assignment(self):
        assert "hunter2" not in SecretMaskingFilter.mask("password=hunter2")

    def test_masks_card_number(self):
        masked = SecretMaskingFilter.mask("payment_method=card 4111 1111 1111 1111")

        assert "4111" not in masked
        assert "[REDACTED_CARD]" in masked

    def test_masks_email(self):
        assert SecretMaskingFilter.mask("receipt to ada@example.com") == "receipt to [REDACTED_EMAIL]"

    def test_masks_phone_field(self):
        masked = SecretMaskingFilter.mask("ShippingAddressDTO(city='Sacramento', phone='+1 555 123 4567')")

        assert "555" not in masked
        assert "phone='[REDACTED_PHONE]'" in masked

    def test_digit_runs_outside_phone_field_are_kept(self):
        text = "[Checkout] Order 555-123-4567 created for cart 2024.555.0101"

        assert SecretMaskingFilter.mask(text) == text

    def test_masks_street(self):
        masked = SecretMaskingFilter.mask("street='1 Harbour Road'")

        assert "Harbour" not in masked

    def test_leaves_prices_alone(self):
        text = "[Checkout] Submitting cart session-1: 2 items, total 107.23"

        assert SecretMaskingFilter.mask(text) == text

    def test_filter_masks_args(self):
        record = logging.LogRecord(
            "checkout", logging.INFO, __file__, 1, "customer %s", ("ada@example.com",), None
        )

        assert SecretMaskingFilter().filter(record) is True
        assert record.getMessage() == "customer [REDACTED_EMAIL]"


class TestSetupLogging:

    @pytest.fixture
    def restore_root_logger(self):
        root = logging.getLogger()
        level = root.level
        yield
        for handler in root.handlers[:]:
            if any(isinstance(f, SecretMaskingFilter) for f in handler.filters):
                root.removeHandler(handler)
                handler.close()
        root.setLevel(level)

    def test_writes_masked_log_file(self, tmp_path, restore_root_logger):
        setup_logging(log_dir=tmp_path)

        logging.getLogger("services.checkout").info("order for ada@example.com")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = (tmp_path / "cart_engine.log").read_text(encoding="utf-8")
        assert "Logging initialized" in content
        assert "[REDACTED_EMAIL]" in content
        assert "ada@example.com" not in content
