"""Deterministic hashes for job identity and change detection.

- job_key: stable identity of a posting (provider + board + external id)
- content_hash: changes whenever the posting text or its salary text changes,
  so an upsert knows when the salary has to be re-resolved
"""

import hashlib
import re
from typing import Optional

_WHITESPACE_RE = re.compile(r"\s+")


def hash_string(value: str) -> str:
    """Hex SHA256 of a UTF-8 string."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def _normalize_text(text: Optional[str]) -> str:
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text.lower()).strip()


def compute_job_key(source_type: str, source_identifier: str, external_id: str) -> str:
    """Unique job key: SHA256 of "source_type:source_identifier:external_id".

    Provider and board are case-insensitive; the external id is kept as-is
    because some ATSs use case-sensitive ids.

    Example:
        >>> len(compute_job_key("greenhouse", "ExampleCorp", "12345"))
        64
    """
    composite_key = ":".join(
        (source_type.lower().strip(), source_identifier.lower().strip(), external_id.strip())
    )
    return hash_string(composite_key)


def compute_content_hash(
    title: str,
    description: str,
    location: Optional[str] = None,
    salary_raw: Optional[str] = None,
) -> str:
    """Hash of normalized title, description, location and salary text.

    Case and whitespace differences do not change the hash.
    """
    parts = (title, description, location, salary_raw)
    return hash_string("\n".join(_normalize_text(part) for part in parts))
