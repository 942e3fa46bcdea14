from fitproof.anomaly.detector import IqrAnomalyDetector
from fitproof.config.settings import Settings


class AnomalyDetectorFactory:
    """Creates the configured anomaly detector."""

    @classmethod
    def create(cls, settings: Settings) -> IqrAnomalyDetector:
        return IqrAnomalyDetector(
            min_readings=settings.anomaly_min_readings,
            fence_multiplier=settings.anomaly_fence_multiplier,
        )
