import json
import sys
from pathlib import Path

from fitproof.anomaly.factory import AnomalyDetectorFactory
from fitproof.config.settings import Settings
from fitproof.logging.logger import Log
from fitproof.processor.exceptions import ProcessorError
from fitproof.processor.file_loader import FileLoader
from fitproof.processor.processor import build_processor
from fitproof.processor.report_builder import ReportBuilder


def main(argv: list[str] | None = None) -> int:
    """Entry point: load archive -> process -> detect anomalies -> print report."""
    args = sys.argv[1:] if argv is None else argv
    settings = Settings()
    Log.configure(settings.log_level, stream=sys.stderr)
    if len(args) != 1:
        Log.error("Usage: fitproof <takeout-export.zip>")
        return 2

    try:
        upload = FileLoader().load(Path(args[0]))
    except OSError as exc:
        Log.error(str(exc))
        return 2

    processor = build_processor(settings)
    try:
        result = processor.process(upload)
    except ProcessorError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    anomalies = AnomalyDetectorFactory.create(settings).report(result.dataset)
    Log.info(
        f"Found {len(anomalies.heart_rate_anomalies)} heart rate anomalies "
        f"in {len(result.dataset.heart_rate)} readings"
    )
    payload = ReportBuilder().build(result, anomalies)
    rendered = json.dumps(payload, indent=2)
    if settings.report_output_dir:
        out_path = write_report(Path(settings.report_output_dir), upload.file_hash_sha256, rendered)
        Log.info(f"Report written to {out_path}")
    print(rendered)
    return 0


def write_report(output_dir: Path, archive_sha256: str, rendered: str) -> Path:
    """Persist a rendered report as {output_dir}/{archive_sha256}.json."""
    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = output_dir / f"{archive_sha256}.json"
    out_path.write_text(rendered, encoding="utf-8")
    return out_path


if __name__ == "__main__":
    sys.exit(main())
