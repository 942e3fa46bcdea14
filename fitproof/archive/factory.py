from fitproof.archive.base import BaseArchiveReader
from fitproof.archive.zip_adapter import ZipArchiveReader
from fitproof.config.settings import Settings


class ArchiveReaderFactory:
    """Creates the correct archive reader based on settings."""

    ADAPTERS: dict[str, type[ZipArchiveReader]] = {
        "zipfile": ZipArchiveReader,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseArchiveReader:
        engine = settings.archive_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown archive engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls(encoding=settings.entry_encoding)
