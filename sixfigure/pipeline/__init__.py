"""Ingest orchestration: adapters, salary extraction, normalization and storage."""

from .models import IngestRunResult, SourceRunStats
from .runner import IngestPipeline

__all__ = [
    "IngestPipeline",
    "IngestRunResult",
    "SourceRunStats",
]
