from abc import ABC, abstractmethod
from collections.abc import Iterator
from types import TracebackType

from fitproof.archive.models import ArchiveEntry


class BaseArchive(ABC):
    """An opened container. Close it (or use it as a context manager) when done."""

    @abstractmethod
    def entries(self) -> Iterator[ArchiveEntry]:
        """Yield every entry, directories included, in archive order."""

    @abstractmethod
    def read_text(self, entry: ArchiveEntry) -> str:
        """Read and decode one entry.

        Raises:
            EntryDecodeError: if the entry bytes cannot be read or decoded.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the underlying container."""

    def __enter__(self) -> "BaseArchive":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class BaseArchiveReader(ABC):
    """Contract for all archive adapters."""

    @abstractmethod
    def open(self, raw_bytes: bytes) -> BaseArchive:
        """Open an uploaded container held in memory.

        Args:
            raw_bytes: Raw archive content.

        Returns:
            An opened archive exposing lazy entry enumeration.

        Raises:
            ArchiveReadError: if the container cannot be parsed.
        """
