from dataclasses import dataclass

from fitproof.ingestion.models import Reading


@dataclass(frozen=True)
class OutlierBounds:
    """Tukey fences derived from positional quartiles."""

    q1: float
    q3: float
    lower: float
    upper: float

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper


@dataclass(frozen=True)
class AnomalyReport:
    """Heart-rate outliers of a dataset, in dataset order."""

    heart_rate_anomalies: tuple[Reading, ...] = ()
    bounds: OutlierBounds | None = None
