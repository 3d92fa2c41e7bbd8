"""Domain models for Six Figure Jobs."""

from .models import Job, RawJob, SourceStatus

__all__ = ["Job", "RawJob", "SourceStatus"]
