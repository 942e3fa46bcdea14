from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from fitproof.archive.base import BaseArchive
from fitproof.archive.models import ArchiveEntry
from fitproof.ingestion.models import DatasetBuilder, Diagnostic, ProcessedDataset
from fitproof.processor.models import UploadedArchive


@dataclass(frozen=True)
class EntryText:
    """Decoded text of one accepted entry and its digest."""

    entry: ArchiveEntry
    text: str
    digest: str


@dataclass(slots=True)
class PipelineContext:
    upload: UploadedArchive
    archive: BaseArchive | None = None
    entries: list[ArchiveEntry] = field(default_factory=list)
    accepted: list[ArchiveEntry] = field(default_factory=list)
    texts: list[EntryText] = field(default_factory=list)
    builder: DatasetBuilder = field(default_factory=DatasetBuilder)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    dataset: ProcessedDataset | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
