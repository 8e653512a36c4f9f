"""
Schemas for the log archiver.

This module defines the request passed into an archival run, the files and
bundles it works with, the records persisted to the run log and the result
handed back to the caller.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from pathlib import Path

from logarchive.core.settings import (
    DEFAULT_RETAIN_LOGS_DAYS,
    DEFAULT_RETAIN_ARCHIVES_DAYS,
    DEST_DIR_SUFFIX,
)


class ArchiveRequest(BaseModel):
    """Immutable policy for a single archival run."""
    model_config = ConfigDict(frozen=True)

    source_dir: Path
    dest_dir: Optional[Path] = None       # Defaults to <source_dir>-archives
    retain_logs_days: int = Field(default=DEFAULT_RETAIN_LOGS_DAYS, ge=0)
    retain_archives_days: int = Field(default=DEFAULT_RETAIN_ARCHIVES_DAYS, ge=0)
    delete_originals: bool = False

    def effective_dest_dir(self, resolved_source: Optional[Path] = None) -> Path:
        """
        Destination as given, or the sibling ``<source>-archives`` directory.

        The sibling is named after the resolved source, so ``.`` or ``logs/..``
        still default to a directory next to the source rather than inside it.
        """
        if self.dest_dir is not None:
            return self.dest_dir
        source = resolved_source or Path(self.source_dir).expanduser().resolve()
        return source.parent / (source.name + DEST_DIR_SUFFIX)


class CandidateFile(BaseModel):
    """A file under the source directory that qualifies for the bundle."""
    path: Path
    relative_path: str       # Name inside the bundle
    mtime: float
    size_bytes: int


class ArchiveBundle(BaseModel):
    """A committed bundle at its final path."""
    path: Path
    created_at: datetime
    size_bytes: int
    source_dir: Path
    file_count: int


class RunRecord(BaseModel):
    """One line of the per-destination run log."""
    timestamp: datetime
    source_dir: Path
    bundle_path: Optional[Path] = None    # None when nothing was archived
    size_bytes: int = 0
    file_count: int = 0
    delete_originals: bool = False
    retain_logs_days: int
    retain_archives_days: int


class ArchiveResult(BaseModel):
    """Outcome of a successful run; warnings hold non-fatal failures."""
    bundle_path: Optional[Path] = None
    file_count: int = 0
    bytes_written: int = 0
    pruned_archive_count: int = 0
    deleted_original_count: int = 0
    run_log_path: Optional[Path] = None
    warnings: List[str] = Field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)
