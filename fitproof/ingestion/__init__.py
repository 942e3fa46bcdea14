from fitproof.ingestion.models import (
    Diagnostic,
    FileDigest,
    ProcessedDataset,
    Reading,
    SignalKind,
)
from fitproof.ingestion.path_filter import PathFilter
from fitproof.ingestion.record_parser import parse_entry

__all__ = [
    "Diagnostic",
    "FileDigest",
    "PathFilter",
    "ProcessedDataset",
    "Reading",
    "SignalKind",
    "parse_entry",
]
