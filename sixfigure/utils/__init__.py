"""Utility functions for hashing, time handling and location inference."""

from .hashing import compute_content_hash, compute_job_key, hash_string
from .location import infer_country_code
from .timestamps import ensure_utc, format_timestamp, from_unix_millis, parse_iso_datetime, utc_now

__all__ = [
    # Hashing
    "compute_job_key",
    "compute_content_hash",
    "hash_string",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "from_unix_millis",
    "format_timestamp",
    # Location
    "infer_country_code",
]
