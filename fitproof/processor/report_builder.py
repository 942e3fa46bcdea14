from dataclasses import asdict

from fitproof.anomaly.models import AnomalyReport
from fitproof.ingestion.models import Reading, SignalKind
from fitproof.processor.models import ProcessingResult


class ReportBuilder:
    """Converts a processing result and its anomaly report to a JSON-serializable dict."""

    def build(
        self,
        result: ProcessingResult,
        anomalies: AnomalyReport,
    ) -> dict[str, object]:
        dataset = result.dataset
        return {
            "archive": {
                "filename": result.archive.filename,
                "file_size_bytes": result.archive.file_size_bytes,
                "sha256": result.archive.file_hash_sha256,
            },
            "counts": {kind.value: len(dataset.readings(kind)) for kind in SignalKind},
            "series": {
                kind.value: [self._reading_to_dict(r) for r in dataset.readings(kind)]
                for kind in SignalKind
            },
            "file_digests": [asdict(d) for d in dataset.file_digests],
            "diagnostics": [asdict(d) for d in result.diagnostics],
            "anomalies": {
                "bounds": asdict(anomalies.bounds) if anomalies.bounds else None,
                "heart_rate": [
                    self._reading_to_dict(r) for r in anomalies.heart_rate_anomalies
                ],
            },
        }

    def _reading_to_dict(self, reading: Reading) -> dict[str, object]:
        return {"timestamp": reading.timestamp_millis, "value": reading.value}
