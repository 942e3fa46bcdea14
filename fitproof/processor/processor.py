from fitproof.archive.factory import ArchiveReaderFactory
from fitproof.config.settings import Settings
from fitproof.ingestion.path_filter import PathFilter
from fitproof.logging.logger import Log
from fitproof.processor.models import ProcessingResult, UploadedArchive
from fitproof.processor.pipeline import PipelineContext, PipelineStep
from fitproof.processor.steps import (
    CheckExtensionStep,
    FilterEntriesStep,
    LogFailedStep,
    NormalizeStep,
    OpenArchiveStep,
    ParseRecordsStep,
    ReadEntriesStep,
    RequireSignalDataStep,
)


class Processor:
    """Orchestrates the full ingestion pipeline for one uploaded archive.

    Pipeline: check extension -> open -> filter paths -> read + digest ->
    parse -> require data -> normalize. Each call owns its own context, so a
    single Processor can serve concurrent uploads.
    """

    def __init__(
        self,
        steps: list[PipelineStep],
        failed_step: PipelineStep | None = None,
    ) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def process(self, upload: UploadedArchive) -> ProcessingResult:
        """Run every step; on failure run the failed step and re-raise."""
        Log.info(f"Processing {upload.filename} ({upload.file_size_bytes} bytes)")
        context = PipelineContext(upload=upload)
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            context.error_message = str(exc)
            if self._failed_step is not None:
                self._failed_step.run(context)
            raise
        finally:
            if context.archive is not None:
                context.archive.close()

        if context.dataset is None:
            raise ValueError("Pipeline finished without producing a dataset")
        return ProcessingResult(
            archive=upload,
            dataset=context.dataset,
            diagnostics=tuple(context.diagnostics),
        )


def build_processor(settings: Settings) -> Processor:
    """Build a Processor with all required adapters."""
    archive_reader = ArchiveReaderFactory.create(settings)
    steps: list[PipelineStep] = [
        CheckExtensionStep(extension=settings.archive_extension),
        OpenArchiveStep(archive_reader=archive_reader),
        FilterEntriesStep(path_filter=PathFilter()),
        ReadEntriesStep(max_workers=settings.entry_read_workers),
        ParseRecordsStep(),
        RequireSignalDataStep(),
        NormalizeStep(),
    ]
    return Processor(steps=steps, failed_step=LogFailedStep())
