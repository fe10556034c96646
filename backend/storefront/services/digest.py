"""Key-stretched SHA-256 digest used to derive anonymized labels."""

import hashlib

LABEL_SEPARATOR = "|"


def stretch(value: str | bytes | None, rounds: int) -> str:
    """Hash a value with SHA-256, then re-hash the raw digest ``rounds`` more times.

    ``None`` hashes like the empty string and negative round counts behave
    like zero, so every input yields a digest.

    Args:
        value: Text (UTF-8 encoded before hashing) or raw bytes.
        rounds: Additional SHA-256 passes over the previous raw digest.

    Returns:
        64-character lowercase hex digest.
    """
    if value is None:
        data = b""
    elif isinstance(value, str):
        data = value.encode("utf-8")
    else:
        data = bytes(value)

    digest = hashlib.sha256(data).digest()
    for _ in range(max(rounds, 0)):
        digest = hashlib.sha256(digest).digest()
    return digest.hex()


def build_label_source(
    email: str | None,
    first_name: str | None,
    last_name: str | None,
    username: str | None,
    salt_hex: str,
) -> str:
    """Join personal fields and salt in a fixed order, missing fields as empty."""
    parts = (email, first_name, last_name, username, salt_hex)
    return LABEL_SEPARATOR.join(part or "" for part in parts)


def derive_anon_tag(digest: str, length: int, prefix: str = "anon_") -> str:
    """Build the anonymized label from the leading hex characters of a digest."""
    if length < 1:
        raise ValueError(f"Tag length must be positive, got {length}")
    return f"{prefix}{digest[:length]}"
