import io
import zipfile
import zlib
from collections.abc import Iterator

from fitproof.archive.base import BaseArchive, BaseArchiveReader
from fitproof.archive.exceptions import ArchiveReadError, EntryDecodeError
from fitproof.archive.models import ArchiveEntry


class ZipArchive(BaseArchive):
    """Opened zip container backed by :mod:`zipfile`."""

    def __init__(self, zf: zipfile.ZipFile, encoding: str) -> None:
        self._zf = zf
        self._encoding = encoding

    def entries(self) -> Iterator[ArchiveEntry]:
        for info in self._zf.infolist():
            yield ArchiveEntry(path=info.filename, is_directory=info.is_dir())

    def read_text(self, entry: ArchiveEntry) -> str:
        try:
            raw = self._zf.read(entry.path)
        except (zipfile.BadZipFile, zlib.error, EOFError, OSError, KeyError, RuntimeError) as exc:
            raise EntryDecodeError(entry.path, str(exc)) from exc
        try:
            return raw.decode(self._encoding)
        except UnicodeDecodeError as exc:
            raise EntryDecodeError(entry.path, str(exc)) from exc

    def close(self) -> None:
        self._zf.close()


class ZipArchiveReader(BaseArchiveReader):
    """Opens zip archives from in-memory bytes."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def open(self, raw_bytes: bytes) -> BaseArchive:
        try:
            zf = zipfile.ZipFile(io.BytesIO(raw_bytes))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, ValueError) as exc:
            raise ArchiveReadError(f"zipfile could not open archive: {exc}") from exc
        return ZipArchive(zf, self._encoding)
