from collections.abc import Iterable
from typing import ClassVar

from fitproof.archive.models import ArchiveEntry
from fitproof.processor.exceptions import MissingExpectedDirectoryError


class PathFilter:
    """Selects the raw Fit data entries of a Takeout archive.

    Pure over its input: the same listing always yields the same selection.
    """

    REQUIRED_ROOT: ClassVar[str] = "takeout/fit/"
    DATA_EXTENSION: ClassVar[str] = ".json"
    EXCLUDED_MARKERS: ClassVar[tuple[str, ...]] = (
        "daily activity metrics",
        "all sessions",
        "activities",
    )
    # Google spells this folder with a capital A; matched case-sensitively.
    RAW_DATA_MARKER: ClassVar[str] = "Takeout/Fit/All data"

    def has_required_root(self, entries: Iterable[ArchiveEntry]) -> bool:
        return any(
            entry.normalized_path.lower().startswith(self.REQUIRED_ROOT) for entry in entries
        )

    def select(self, entries: Iterable[ArchiveEntry]) -> list[ArchiveEntry]:
        """Return accepted entries in archive order.

        Raises:
            MissingExpectedDirectoryError: if no entry lives under Takeout/Fit/.
        """
        listing = list(entries)
        if not self.has_required_root(listing):
            raise MissingExpectedDirectoryError()
        return [entry for entry in listing if self.accepts(entry)]

    def accepts(self, entry: ArchiveEntry) -> bool:
        if entry.is_directory:
            return False
        path = entry.normalized_path
        lowered = path.lower()
        if self.REQUIRED_ROOT not in lowered:
            return False
        if not path.endswith(self.DATA_EXTENSION):
            return False
        if any(marker in lowered for marker in self.EXCLUDED_MARKERS):
            return False
        return self.RAW_DATA_MARKER in path
