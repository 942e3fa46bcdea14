class IngestionError(Exception):
    """Base exception for entry-level ingestion problems."""


class EntryParseWarning(IngestionError):
    """Raised when an entry's text is not a JSON array of records.

    Never fatal: the orchestrator turns it into a diagnostic and moves on.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path


class RecordSkipped(IngestionError):
    """Raised for a single unusable record; the rest of the entry is still read."""
