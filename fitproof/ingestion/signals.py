"""Signal kind inference from Google Fit export file names.

Google names raw data files after the data type, e.g.
``raw_com.google.heart_rate.bpm_com.google.android.apps.fitness.json``.
The markers below are matched against the lowercased entry path; the first
match wins.
"""

from fitproof.ingestion.models import SignalKind

SIGNAL_MARKERS: tuple[tuple[str, SignalKind], ...] = (
    ("heart_rate.bpm", SignalKind.HEART_RATE),
    ("step_count.delta", SignalKind.STEPS),
    ("distance.delta", SignalKind.DISTANCE),
    ("sleep.segment", SignalKind.SLEEP),
)

NUMERIC_KINDS = frozenset({SignalKind.HEART_RATE, SignalKind.STEPS, SignalKind.DISTANCE})


def classify_signal(path: str) -> SignalKind | None:
    """Return the signal kind for an entry path, or None if it is not a known signal."""
    lowered = path.lower()
    for marker, kind in SIGNAL_MARKERS:
        if marker in lowered:
            return kind
    return None
