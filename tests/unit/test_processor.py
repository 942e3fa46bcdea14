from unittest.mock import MagicMock

import pytest

from fitproof.archive.base import BaseArchive, BaseArchiveReader
from fitproof.archive.exceptions import ArchiveReadError, EntryDecodeError
from fitproof.archive.models import ArchiveEntry
from fitproof.ingestion.digest import sha256_hex
from fitproof.ingestion.models import (
    DIAGNOSTIC_DECODE_ERROR,
    DIAGNOSTIC_PARSE_WARNING,
    FileDigest,
    Reading,
    SignalKind,
)
from fitproof.ingestion.path_filter import PathFilter
from fitproof.processor.exceptions import (
    ArchiveCorruptError,
    MissingExpectedDirectoryError,
    NoEligibleFilesError,
    NotAZipLikeFileError,
    NoRecognizedSignalDataError,
)
from fitproof.processor.models import UploadedArchive
from fitproof.processor.pipeline import EntryText, PipelineContext
from fitproof.processor.processor import Processor, build_processor
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
from tests.takeout_fixtures import HEART_RATE_PATH, SESSIONS_PATH, STEPS_PATH, WEIGHT_PATH

HR_TEXT = '[{"startTimeNanos": "2000000", "value": [61]}, {"startTimeNanos": "1000000", "value": [60]}]'


def _make_context(filename: str = "takeout.zip") -> PipelineContext:
    return PipelineContext(upload=UploadedArchive.from_bytes(filename, b"PK-fake"))


def _entry(path: str, is_directory: bool = False) -> ArchiveEntry:
    return ArchiveEntry(path=path, is_directory=is_directory)


def _make_archive(texts: dict[str, str | Exception]) -> MagicMock:
    archive = MagicMock(spec=BaseArchive)
    entries = [_entry("Takeout/Fit/", is_directory=True)] + [_entry(p) for p in texts]
    archive.entries.side_effect = lambda: iter(entries)

    def _read(entry: ArchiveEntry) -> str:
        value = texts[entry.path]
        if isinstance(value, Exception):
            raise value
        return value

    archive.read_text.side_effect = _read
    return archive


class TestCheckExtensionStep:
    def test_accepts_zip(self) -> None:
        context = _make_context("takeout-20240101T000000Z-001.zip")
        assert CheckExtensionStep().run(context) is context

    @pytest.mark.parametrize("filename", ["takeout.tgz", "takeout.zip.txt", "takeout"])
    def test_rejects_other_extensions(self, filename: str) -> None:
        with pytest.raises(NotAZipLikeFileError, match="ZIP"):
            CheckExtensionStep().run(_make_context(filename))


class TestOpenArchiveStep:
    def test_opens_and_lists_entries(self) -> None:
        reader = MagicMock(spec=BaseArchiveReader)
        archive = _make_archive({HEART_RATE_PATH: "[]"})
        reader.open.return_value = archive
        context = _make_context()

        OpenArchiveStep(reader).run(context)

        reader.open.assert_called_once_with(b"PK-fake")
        assert context.archive is archive
        assert [e.path for e in context.entries] == ["Takeout/Fit/", HEART_RATE_PATH]

    def test_translates_read_error_to_archive_corrupt(self) -> None:
        reader = MagicMock(spec=BaseArchiveReader)
        reader.open.side_effect = ArchiveReadError("bad zip")

        with pytest.raises(ArchiveCorruptError, match="corrupted") as exc_info:
            OpenArchiveStep(reader).run(_make_context())
        assert isinstance(exc_info.value.__cause__, ArchiveReadError)


class TestFilterEntriesStep:
    def test_keeps_accepted_entries(self) -> None:
        context = _make_context()
        context.entries = [_entry("Takeout/Fit/", True), _entry(HEART_RATE_PATH), _entry(SESSIONS_PATH)]

        FilterEntriesStep(PathFilter()).run(context)

        assert [e.path for e in context.accepted] == [HEART_RATE_PATH]

    def test_missing_root_propagates(self) -> None:
        context = _make_context()
        context.entries = [_entry("Takeout/Drive/a.json")]
        with pytest.raises(MissingExpectedDirectoryError):
            FilterEntriesStep(PathFilter()).run(context)

    def test_raises_when_nothing_accepted(self) -> None:
        context = _make_context()
        context.entries = [_entry("Takeout/Fit/", True), _entry(SESSIONS_PATH)]
        with pytest.raises(NoEligibleFilesError, match="No valid Google Fit data"):
            FilterEntriesStep(PathFilter()).run(context)


class TestReadEntriesStep:
    def _context(self, texts: dict[str, str | Exception]) -> PipelineContext:
        context = _make_context()
        context.archive = _make_archive(texts)
        context.accepted = [_entry(p) for p in texts]
        return context

    def test_digests_each_entry_in_order(self) -> None:
        context = self._context({STEPS_PATH: "[1]", HEART_RATE_PATH: "[2]"})

        ReadEntriesStep().run(context)

        assert context.builder.file_digests == [
            FileDigest(STEPS_PATH, sha256_hex("[1]")),
            FileDigest(HEART_RATE_PATH, sha256_hex("[2]")),
        ]
        assert [t.text for t in context.texts] == ["[1]", "[2]"]

    def test_decode_error_becomes_diagnostic(self) -> None:
        context = self._context(
            {STEPS_PATH: EntryDecodeError(STEPS_PATH, "invalid start byte"), HEART_RATE_PATH: "[]"}
        )

        ReadEntriesStep().run(context)

        assert [d.filename for d in context.builder.file_digests] == [HEART_RATE_PATH]
        assert len(context.diagnostics) == 1
        assert context.diagnostics[0].kind == DIAGNOSTIC_DECODE_ERROR
        assert context.diagnostics[0].filename == STEPS_PATH

    def test_concurrent_reads_keep_encounter_order(self) -> None:
        texts: dict[str, str | Exception] = {
            f"Takeout/Fit/All data/raw_heart_rate.bpm_{i}.json": f"[{i}]" for i in range(20)
        }
        context = self._context(texts)

        ReadEntriesStep(max_workers=4).run(context)

        assert [d.filename for d in context.builder.file_digests] == list(texts)

    def test_requires_open_archive(self) -> None:
        with pytest.raises(ValueError, match="archive"):
            ReadEntriesStep().run(_make_context())


class TestParseRecordsStep:
    def _context(self, texts: dict[str, str]) -> PipelineContext:
        context = _make_context()
        context.texts = [
            EntryText(entry=_entry(p), text=t, digest=sha256_hex(t)) for p, t in texts.items()
        ]
        return context

    def test_adds_readings_by_kind(self) -> None:
        context = self._context({HEART_RATE_PATH: HR_TEXT})

        ParseRecordsStep().run(context)

        assert context.builder.readings[SignalKind.HEART_RATE] == [Reading(2, 61), Reading(1, 60)]
        assert context.diagnostics == []

    def test_non_array_entry_is_a_warning(self) -> None:
        context = self._context({HEART_RATE_PATH: '{"foo": 1}', STEPS_PATH: "[]"})

        ParseRecordsStep().run(context)

        assert len(context.diagnostics) == 1
        assert context.diagnostics[0].kind == DIAGNOSTIC_PARSE_WARNING
        assert context.diagnostics[0].filename == HEART_RATE_PATH

    def test_skipped_elements_are_summarized_once(self) -> None:
        text = '[{"value": [1]}, {"startTimeNanos": "1"}, {"startTimeNanos": "1000000", "value": [70]}]'
        context = self._context({HEART_RATE_PATH: text})

        ParseRecordsStep().run(context)

        assert context.builder.readings[SignalKind.HEART_RATE] == [Reading(1, 70)]
        assert len(context.diagnostics) == 1
        assert "Skipped 2 of 3 records" in context.diagnostics[0].message

    def test_unrecognized_entry_adds_nothing(self) -> None:
        context = self._context({WEIGHT_PATH: '[{"startTimeNanos": "1", "value": [70]}]'})

        ParseRecordsStep().run(context)

        assert context.builder.total_readings == 0
        assert context.diagnostics == []
        assert context.builder.recognized_entries == 0

    def test_counts_recognized_array_entries(self) -> None:
        context = self._context(
            {HEART_RATE_PATH: "[]", STEPS_PATH: '[{"value": [1]}]', WEIGHT_PATH: "[]"}
        )

        ParseRecordsStep().run(context)

        assert context.builder.recognized_entries == 2
        assert context.builder.total_readings == 0

    def test_non_array_entry_is_not_recognized(self) -> None:
        context = self._context({HEART_RATE_PATH: '{"foo": 1}'})

        ParseRecordsStep().run(context)

        assert context.builder.recognized_entries == 0


class TestRequireSignalDataStep:
    def test_raises_when_no_entry_was_recognized(self) -> None:
        with pytest.raises(NoRecognizedSignalDataError, match="No fitness data found"):
            RequireSignalDataStep().run(_make_context())

    def test_passes_with_recognized_entry_and_no_readings(self) -> None:
        context = _make_context()
        context.builder.mark_recognized()
        assert RequireSignalDataStep().run(context) is context


class TestNormalizeStep:
    def test_builds_sorted_dataset(self) -> None:
        context = _make_context()
        context.builder.add_readings(SignalKind.HEART_RATE, [Reading(2, 61), Reading(1, 60)])

        NormalizeStep().run(context)

        assert context.dataset is not None
        assert context.dataset.heart_rate == (Reading(1, 60), Reading(2, 61))


class TestProcessor:
    def test_runs_steps_in_order_and_returns_result(self) -> None:
        calls: list[str] = []

        def _step(name: str) -> MagicMock:
            step = MagicMock()
            step.run.side_effect = lambda ctx: calls.append(name) or ctx
            return step

        normalize = NormalizeStep()
        processor = Processor(steps=[_step("a"), _step("b"), normalize])

        result = processor.process(UploadedArchive.from_bytes("t.zip", b"x"))

        assert calls == ["a", "b"]
        assert result.archive.filename == "t.zip"
        assert result.dataset.total_readings == 0
        assert result.diagnostics == ()

    def test_runs_failed_step_and_reraises(self) -> None:
        failing = MagicMock()
        failing.run.side_effect = NoEligibleFilesError()
        failed_step = MagicMock()
        later = MagicMock()
        processor = Processor(steps=[failing, later], failed_step=failed_step)

        with pytest.raises(NoEligibleFilesError):
            processor.process(UploadedArchive.from_bytes("t.zip", b"x"))

        later.run.assert_not_called()
        failed_step.run.assert_called_once()
        context = failed_step.run.call_args.args[0]
        assert "No valid Google Fit data" in context.error_message

    def test_closes_archive_on_failure(self) -> None:
        archive = MagicMock(spec=BaseArchive)

        def _open(ctx: PipelineContext) -> PipelineContext:
            ctx.archive = archive
            return ctx

        opener = MagicMock()
        opener.run.side_effect = _open
        failing = MagicMock()
        failing.run.side_effect = MissingExpectedDirectoryError()
        processor = Processor(steps=[opener, failing])

        with pytest.raises(MissingExpectedDirectoryError):
            processor.process(UploadedArchive.from_bytes("t.zip", b"x"))

        archive.close.assert_called_once()

    def test_raises_when_no_dataset_produced(self) -> None:
        processor = Processor(steps=[])
        with pytest.raises(ValueError, match="dataset"):
            processor.process(UploadedArchive.from_bytes("t.zip", b"x"))


class TestLogFailedStep:
    def test_returns_context(self) -> None:
        context = _make_context()
        context.error_message = "boom"
        assert LogFailedStep().run(context) is context


class TestBuildProcessor:
    def test_builds_from_settings(self) -> None:
        settings = MagicMock(
            archive_engine="zipfile",
            entry_encoding="utf-8",
            archive_extension=".zip",
            entry_read_workers=2,
        )
        assert isinstance(build_processor(settings), Processor)

    def test_unknown_engine_fails_fast(self) -> None:
        settings = MagicMock(archive_engine="7z", entry_encoding="utf-8")
        with pytest.raises(ValueError, match="Unknown archive engine"):
            build_processor(settings)


class TestMissingRootStopsEarly:
    def test_no_read_digest_or_parse_work(self) -> None:
        archive = MagicMock(spec=BaseArchive)
        entries = [
            _entry("Takeout/Drive/", is_directory=True),
            _entry("Takeout/Drive/raw_heart_rate.bpm.json"),
        ]
        archive.entries.side_effect = lambda: iter(entries)
        reader = MagicMock(spec=BaseArchiveReader)
        reader.open.return_value = archive
        parse_step = MagicMock()
        failed_step = MagicMock()
        processor = Processor(
            steps=[
                OpenArchiveStep(reader),
                FilterEntriesStep(PathFilter()),
                ReadEntriesStep(),
                parse_step,
                NormalizeStep(),
            ],
            failed_step=failed_step,
        )

        with pytest.raises(MissingExpectedDirectoryError):
            processor.process(UploadedArchive.from_bytes("takeout.zip", b"PK-fake"))

        archive.read_text.assert_not_called()
        parse_step.run.assert_not_called()
        context = failed_step.run.call_args.args[0]
        assert context.texts == []
        assert context.builder.file_digests == []
        assert context.builder.total_readings == 0
        archive.close.assert_called_once()
