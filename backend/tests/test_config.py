"""Tests for settings."""

import pytest
from pydantic import ValidationError

from storefront.core.config import Settings, settings


class TestErasureSettings:
    """Right-to-erasure configuration defaults and validation."""

    def test_hash_rounds_default(self):
        assert settings.ANONYMIZATION_HASH_ROUNDS == 30000

    def test_tag_length_default(self):
        assert settings.ANONYMIZATION_TAG_LENGTH == 12

    def test_salt_is_at_least_256_bits(self):
        assert settings.ANONYMIZATION_SALT_BYTES >= 32

    def test_email_domain_default(self):
        assert settings.ANONYMIZATION_EMAIL_DOMAIN == "example.invalid"

    def test_test_environment_uses_sqlite(self):
        assert settings.is_sqlite is True
        assert settings.is_testing is True

    def test_rejects_short_salt(self):
        with pytest.raises(ValidationError):
            Settings(ANONYMIZATION_SALT_BYTES=16)

    def test_rejects_negative_rounds(self):
        with pytest.raises(ValidationError):
            Settings(ANONYMIZATION_HASH_ROUNDS=-1)

    def test_rejects_tag_that_overflows_column(self):
        with pytest.raises(ValidationError):
            Settings(ANONYMIZATION_TAG_LENGTH=60)

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ANONYMIZATION_TAG_LENGTH", "16")
        assert Settings().ANONYMIZATION_TAG_LENGTH == 16
