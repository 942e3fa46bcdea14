"""Interquartile-range outlier detection for heart-rate series.

Quartiles are positional, not interpolated: over a sorted copy of ``n``
values, ``q1`` is the value at index ``n // 4`` and ``q3`` the value at
index ``(3 * n) // 4``. Values strictly outside
``[q1 - k * iqr, q3 + k * iqr]`` are anomalies, with ``k`` defaulting to 1.5.
"""

from collections.abc import Sequence

from fitproof.anomaly.models import AnomalyReport, OutlierBounds
from fitproof.ingestion.models import ProcessedDataset, Reading


class IqrAnomalyDetector:
    """Stateless IQR outlier detector."""

    MIN_READINGS = 4
    FENCE_MULTIPLIER = 1.5

    def __init__(
        self,
        min_readings: int = MIN_READINGS,
        fence_multiplier: float = FENCE_MULTIPLIER,
    ) -> None:
        if min_readings < 1:
            raise ValueError(f"min_readings must be positive, got {min_readings}")
        if fence_multiplier < 0:
            raise ValueError(f"fence_multiplier must be >= 0, got {fence_multiplier}")
        self._min_readings = min_readings
        self._fence_multiplier = fence_multiplier

    def bounds(self, values: Sequence[float]) -> OutlierBounds | None:
        """Fences for values, or None when there are too few to judge."""
        if len(values) < self._min_readings:
            return None
        ordered = sorted(values)
        n = len(ordered)
        q1 = ordered[n // 4]
        q3 = ordered[(3 * n) // 4]
        iqr = q3 - q1
        return OutlierBounds(
            q1=q1,
            q3=q3,
            lower=q1 - self._fence_multiplier * iqr,
            upper=q3 + self._fence_multiplier * iqr,
        )

    def detect(self, readings: Sequence[Reading]) -> tuple[Reading, ...]:
        """Readings whose value falls outside the fences, in the order given."""
        fences = self.bounds([float(r.value) for r in readings])
        return _outside(readings, fences)

    def report(self, dataset: ProcessedDataset) -> AnomalyReport:
        fences = self.bounds([float(r.value) for r in dataset.heart_rate])
        return AnomalyReport(
            heart_rate_anomalies=_outside(dataset.heart_rate, fences),
            bounds=fences,
        )


def _outside(
    readings: Sequence[Reading], fences: OutlierBounds | None
) -> tuple[Reading, ...]:
    if fences is None:
        return ()
    return tuple(r for r in readings if not fences.contains(float(r.value)))
