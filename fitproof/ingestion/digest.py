import hashlib


def sha256_hex(content: str | bytes) -> str:
    """Lowercase hex SHA-256 of text (UTF-8 encoded) or raw bytes."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()
