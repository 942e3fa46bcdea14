from dataclasses import dataclass


@dataclass(frozen=True)
class ArchiveEntry:
    """One member of an opened archive; content is read on demand."""

    path: str
    is_directory: bool

    @property
    def normalized_path(self) -> str:
        """Entry path with Windows separators turned into forward slashes."""
        return self.path.replace("\\", "/")
