from dataclasses import dataclass

from fitproof.ingestion.digest import sha256_hex
from fitproof.ingestion.models import Diagnostic, ProcessedDataset


@dataclass(frozen=True)
class UploadedArchive:
    """An uploaded export archive held in memory."""

    filename: str
    raw_bytes: bytes
    file_size_bytes: int
    file_hash_sha256: str

    @classmethod
    def from_bytes(cls, filename: str, raw_bytes: bytes) -> "UploadedArchive":
        return cls(
            filename=filename,
            raw_bytes=raw_bytes,
            file_size_bytes=len(raw_bytes),
            file_hash_sha256=sha256_hex(raw_bytes),
        )


@dataclass(frozen=True)
class ProcessingResult:
    """Successful outcome of one pipeline run."""

    archive: UploadedArchive
    dataset: ProcessedDataset
    diagnostics: tuple[Diagnostic, ...] = ()
