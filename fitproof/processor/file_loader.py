from pathlib import Path

from fitproof.processor.models import UploadedArchive


class FileLoader:
    """Reads an export archive from disk into an UploadedArchive."""

    def load(self, path: Path) -> UploadedArchive:
        """Read archive bytes from disk.

        Raises:
            FileNotFoundError: if nothing exists at path.
            IsADirectoryError: if path is a directory.
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if path.is_dir():
            raise IsADirectoryError(f"Expected an archive file, got directory: {path}")
        return UploadedArchive.from_bytes(path.name, path.read_bytes())
