from dataclasses import dataclass, field
from enum import Enum


class SignalKind(str, Enum):
    """Signal families recognised in a Fit export."""

    HEART_RATE = "heart_rate"
    STEPS = "steps"
    DISTANCE = "distance"
    SLEEP = "sleep"


@dataclass(frozen=True)
class PlainNumber:
    """A bare numeric value, e.g. ``"value": [72]``."""

    number: int | float


@dataclass(frozen=True)
class IntVal:
    """Tagged ``{"intVal": ...}`` value."""

    value: int | float


@dataclass(frozen=True)
class FpVal:
    """Tagged ``{"fpVal": ...}`` value."""

    value: int | float


@dataclass(frozen=True)
class StringVal:
    """Tagged ``{"stringVal": ...}`` value."""

    value: str | int | float


TaggedValue = IntVal | FpVal | StringVal
RecordValue = PlainNumber | TaggedValue


@dataclass(frozen=True)
class RawRecord:
    """One data point as exported, before coercion."""

    start_time_nanos: str
    value: RecordValue
    data_type_name: str = ""


@dataclass(frozen=True)
class Reading:
    """A single timestamped sample of one signal."""

    timestamp_millis: int
    value: int | float | str


@dataclass(frozen=True)
class FileDigest:
    """SHA-256 of one source entry as stored in the archive."""

    filename: str
    hash: str


DIAGNOSTIC_DECODE_ERROR = "entry_decode_error"
DIAGNOSTIC_PARSE_WARNING = "entry_parse_warning"


@dataclass(frozen=True)
class Diagnostic:
    """A non-fatal, per-entry problem reported alongside a successful run."""

    kind: str
    filename: str
    message: str


@dataclass(frozen=True)
class ProcessedDataset:
    """Normalized output of one ingestion run.

    Every reading sequence is sorted ascending by ``timestamp_millis``;
    duplicate timestamps are kept.
    """

    heart_rate: tuple[Reading, ...] = ()
    steps: tuple[Reading, ...] = ()
    distance: tuple[Reading, ...] = ()
    sleep: tuple[Reading, ...] = ()
    file_digests: tuple[FileDigest, ...] = ()

    def readings(self, kind: SignalKind) -> tuple[Reading, ...]:
        return getattr(self, kind.value)

    @property
    def total_readings(self) -> int:
        return sum(len(self.readings(kind)) for kind in SignalKind)


@dataclass
class DatasetBuilder:
    """Accumulates readings and digests during the single ingestion pass."""

    readings: dict[SignalKind, list[Reading]] = field(
        default_factory=lambda: {kind: [] for kind in SignalKind}
    )
    file_digests: list[FileDigest] = field(default_factory=list)
    recognized_entries: int = 0

    def add_readings(self, kind: SignalKind, readings: list[Reading]) -> None:
        self.readings[kind].extend(readings)

    def add_digest(self, digest: FileDigest) -> None:
        self.file_digests.append(digest)

    def mark_recognized(self) -> None:
        """Count an entry that classified into a signal and parsed as an array."""
        self.recognized_entries += 1

    @property
    def total_readings(self) -> int:
        return sum(len(items) for items in self.readings.values())
