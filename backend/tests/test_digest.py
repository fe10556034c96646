"""Tests for the key-stretched SHA-256 digest."""

import hashlib

import pytest

from storefront.services.digest import build_label_source, derive_anon_tag, stretch


class TestStretch:
    """Tests for stretch()."""

    def test_zero_rounds_is_plain_sha256(self):
        """With no extra rounds the result is the single SHA-256 of the input."""
        assert stretch("alice@example.com", 0) == hashlib.sha256(b"alice@example.com").hexdigest()

    def test_output_is_64_lowercase_hex(self):
        digest = stretch("Alice", 5)
        assert len(digest) == 64
        assert digest == digest.lower()
        int(digest, 16)

    def test_deterministic(self):
        """Identical input and rounds give identical output."""
        assert stretch("Alice|Carter", 1000) == stretch("Alice|Carter", 1000)

    @pytest.mark.parametrize("rounds", [1, 2, 17, 500])
    def test_each_round_hashes_previous_raw_digest(self, rounds):
        """Round n is SHA-256 over the raw bytes (not hex) of round n-1."""
        previous = stretch("payload", rounds - 1)
        expected = hashlib.sha256(bytes.fromhex(previous)).hexdigest()
        assert stretch("payload", rounds) == expected

    def test_rounds_change_the_digest(self):
        base = stretch("payload", 0)
        seen = {base}
        for rounds in range(1, 50):
            digest = stretch("payload", rounds)
            assert digest != base
            seen.add(digest)
        assert len(seen) == 50

    def test_empty_and_none_hash_like_empty_bytes(self):
        empty = hashlib.sha256(b"").hexdigest()
        assert stretch("", 0) == empty
        assert stretch(None, 0) == empty
        assert stretch(b"", 0) == empty

    def test_negative_rounds_behave_like_zero(self):
        assert stretch("x", -5) == stretch("x", 0)

    def test_text_is_utf8_encoded(self):
        assert stretch("Zoë", 0) == hashlib.sha256("Zoë".encode("utf-8")).hexdigest()
        assert stretch("Zoë", 3) == stretch("Zoë".encode("utf-8"), 3)

    def test_engine_round_count_matches_manual_loop(self):
        digest = hashlib.sha256(b"source").digest()
        for _ in range(30000):
            digest = hashlib.sha256(digest).digest()
        assert stretch("source", 30000) == digest.hex()


class TestLabelHelpers:
    """Tests for label source and tag helpers."""

    def test_label_source_field_order(self):
        source = build_label_source("a@x.com", "Alice", "Carter", "alicec", "ff00")
        assert source == "a@x.com|Alice|Carter|alicec|ff00"

    def test_label_source_missing_fields_are_empty(self):
        source = build_label_source(None, "Alice", None, None, "ff00")
        assert source == "|Alice|||ff00"

    def test_label_source_separator_keeps_boundaries(self):
        """Shifting text between adjacent fields changes the source."""
        assert build_label_source("ab", "c", "", "", "00") != build_label_source(
            "a", "bc", "", "", "00"
        )

    def test_derive_anon_tag_truncates(self):
        digest = "0123456789abcdef" * 4
        assert derive_anon_tag(digest, 12) == "anon_0123456789ab"
        assert derive_anon_tag(digest, 4) == "anon_0123"

    def test_derive_anon_tag_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            derive_anon_tag("abc", 0)
