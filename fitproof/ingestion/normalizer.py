from collections.abc import Iterable

from fitproof.ingestion.models import DatasetBuilder, ProcessedDataset, Reading, SignalKind


def sort_by_timestamp(readings: Iterable[Reading]) -> tuple[Reading, ...]:
    """Order readings by timestamp. No deduplication or gap filling."""
    return tuple(sorted(readings, key=lambda reading: reading.timestamp_millis))


def normalize_dataset(builder: DatasetBuilder) -> ProcessedDataset:
    """Freeze the accumulated readings into a time-ordered dataset."""
    return ProcessedDataset(
        heart_rate=sort_by_timestamp(builder.readings[SignalKind.HEART_RATE]),
        steps=sort_by_timestamp(builder.readings[SignalKind.STEPS]),
        distance=sort_by_timestamp(builder.readings[SignalKind.DISTANCE]),
        sleep=sort_by_timestamp(builder.readings[SignalKind.SLEEP]),
        file_digests=tuple(builder.file_digests),
    )
