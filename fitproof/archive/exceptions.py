class ArchiveError(Exception):
    """Base exception for archive adapter errors."""


class ArchiveReadError(ArchiveError):
    """Raised when the container itself cannot be opened or parsed."""


class EntryDecodeError(ArchiveError):
    """Raised when one entry's bytes cannot be decoded as text."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot decode {path}: {reason}")
        self.path = path
