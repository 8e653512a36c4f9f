"""
Archival of aging log files into compressed, timestamped bundles.
"""

from logarchive.archive.archiver import run_archive
from logarchive.archive.errors import (
    ArchiveError,
    SourceNotFound,
    InvalidDestination,
    BundleWriteFailed,
    PermissionDenied,
    RunLogWriteFailed,
)
from logarchive.archive.schemas import (
    ArchiveRequest,
    ArchiveResult,
    ArchiveBundle,
    CandidateFile,
    RunRecord,
)

__all__ = [
    "run_archive",
    "ArchiveError",
    "SourceNotFound",
    "InvalidDestination",
    "BundleWriteFailed",
    "PermissionDenied",
    "RunLogWriteFailed",
    "ArchiveRequest",
    "ArchiveResult",
    "ArchiveBundle",
    "CandidateFile",
    "RunRecord",
]
