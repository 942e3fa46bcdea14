from concurrent.futures import ThreadPoolExecutor
from functools import partial

from fitproof.archive.base import BaseArchive, BaseArchiveReader
from fitproof.archive.exceptions import ArchiveReadError, EntryDecodeError
from fitproof.archive.models import ArchiveEntry
from fitproof.ingestion.digest import sha256_hex
from fitproof.ingestion.exceptions import EntryParseWarning
from fitproof.ingestion.models import (
    DIAGNOSTIC_DECODE_ERROR,
    DIAGNOSTIC_PARSE_WARNING,
    Diagnostic,
    FileDigest,
)
from fitproof.ingestion.normalizer import normalize_dataset
from fitproof.ingestion.path_filter import PathFilter
from fitproof.ingestion.record_parser import parse_entry
from fitproof.logging.logger import Log
from fitproof.processor.exceptions import (
    ArchiveCorruptError,
    NoEligibleFilesError,
    NotAZipLikeFileError,
    NoRecognizedSignalDataError,
)
from fitproof.processor.pipeline import EntryText, PipelineContext, PipelineStep


class CheckExtensionStep(PipelineStep):
    def __init__(self, extension: str = ".zip") -> None:
        self._extension = extension

    def run(self, context: PipelineContext) -> PipelineContext:
        if not context.upload.filename.endswith(self._extension):
            raise NotAZipLikeFileError()
        return context


class OpenArchiveStep(PipelineStep):
    def __init__(self, archive_reader: BaseArchiveReader) -> None:
        self._archive_reader = archive_reader

    def run(self, context: PipelineContext) -> PipelineContext:
        try:
            context.archive = self._archive_reader.open(context.upload.raw_bytes)
        except ArchiveReadError as exc:
            Log.warning(f"Cannot open {context.upload.filename}: {exc}")
            raise ArchiveCorruptError() from exc
        context.entries = list(context.archive.entries())
        Log.info(
            f"Opened {context.upload.filename}: {len(context.entries)} entries",
            sha256=context.upload.file_hash_sha256,
        )
        return context


class FilterEntriesStep(PipelineStep):
    def __init__(self, path_filter: PathFilter) -> None:
        self._path_filter = path_filter

    def run(self, context: PipelineContext) -> PipelineContext:
        context.accepted = self._path_filter.select(context.entries)
        if not context.accepted:
            raise NoEligibleFilesError()
        Log.info(f"Accepted {len(context.accepted)} of {len(context.entries)} entries")
        return context


class ReadEntriesStep(PipelineStep):
    """Reads and digests accepted entries; a decode failure only drops that entry."""

    def __init__(self, max_workers: int = 1) -> None:
        self._max_workers = max_workers

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.archive is None:
            raise ValueError("PipelineContext.archive must be set before reading entries")
        read_one = partial(_read_entry, context.archive)
        if self._max_workers > 1 and len(context.accepted) > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                outcomes = list(pool.map(read_one, context.accepted))
        else:
            outcomes = [read_one(entry) for entry in context.accepted]

        for outcome in outcomes:
            if isinstance(outcome, Diagnostic):
                Log.warning(outcome.message, file=outcome.filename)
                context.diagnostics.append(outcome)
                continue
            context.texts.append(outcome)
            context.builder.add_digest(
                FileDigest(filename=outcome.entry.normalized_path, hash=outcome.digest)
            )
            Log.debug("Processing file", file=outcome.entry.normalized_path)
        Log.info(f"Read {len(context.texts)} entries, {len(context.diagnostics)} unreadable")
        return context


def _read_entry(archive: BaseArchive, entry: ArchiveEntry) -> EntryText | Diagnostic:
    try:
        text = archive.read_text(entry)
    except EntryDecodeError as exc:
        return Diagnostic(
            kind=DIAGNOSTIC_DECODE_ERROR,
            filename=entry.normalized_path,
            message=str(exc),
        )
    return EntryText(entry=entry, text=text, digest=sha256_hex(text))


class ParseRecordsStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        for item in context.texts:
            path = item.entry.normalized_path
            try:
                result = parse_entry(path, item.text)
            except EntryParseWarning as exc:
                self._warn(context, path, str(exc))
                continue
            if result.kind is None:
                Log.debug("No recognized signal, digest only", file=path)
                continue
            context.builder.mark_recognized()
            context.builder.add_readings(result.kind, result.readings)
            summary = result.skip_summary()
            if summary is not None:
                self._warn(context, path, summary)
            Log.info(
                f"Processed {len(result.readings)} valid points from {path}",
                kind=result.kind.value,
            )
        return context

    def _warn(self, context: PipelineContext, path: str, message: str) -> None:
        Log.warning(message, file=path)
        context.diagnostics.append(
            Diagnostic(kind=DIAGNOSTIC_PARSE_WARNING, filename=path, message=message)
        )


class RequireSignalDataStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        if context.builder.recognized_entries == 0:
            raise NoRecognizedSignalDataError()
        return context


class NormalizeStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        context.dataset = normalize_dataset(context.builder)
        Log.info(
            f"Normalized {context.dataset.total_readings} readings: "
            f"heart_rate={len(context.dataset.heart_rate)} "
            f"steps={len(context.dataset.steps)} "
            f"distance={len(context.dataset.distance)} "
            f"sleep={len(context.dataset.sleep)}"
        )
        return context


class LogFailedStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        Log.error(
            f"Processing {context.upload.filename} failed: {context.error_message}",
            sha256=context.upload.file_hash_sha256,
        )
        return context
