"""
Exception hierarchy for the archiver.

Configuration errors (SourceNotFound, InvalidDestination) are raised before
anything on disk changes. BundleWriteFailed and PermissionDenied abort a run
without leaving a bundle at its final path. RunLogWriteFailed never escapes
run_archive; it is reported as a warning on the result.
"""

from pathlib import Path
from typing import Optional


class ArchiveError(Exception):
    """Base class for every failure surfaced by the archiver."""

    kind = "archive_error"

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class SourceNotFound(ArchiveError):
    kind = "source_not_found"


class InvalidDestination(ArchiveError):
    kind = "invalid_destination"

    def __init__(self, message: str, source: Path, destination: Path):
        super().__init__(message, path=destination)
        self.source = source
        self.destination = destination


class BundleWriteFailed(ArchiveError):
    kind = "bundle_write_failed"


class PermissionDenied(ArchiveError):
    kind = "permission_denied"


class RunLogWriteFailed(ArchiveError):
    kind = "run_log_write_failed"


# Errors caused by the request itself; retrying without changing it won't help
CONFIGURATION_ERRORS = (SourceNotFound, InvalidDestination)
