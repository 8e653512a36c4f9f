"""
The archival routine.

A run validates the request, selects aging files under the source directory,
writes them into a gzip tarball through a ``.partial`` staging file, commits it
with a single rename, records the run, optionally deletes the archived
originals and finally prunes expired bundles.

Once the rename has committed the run counts as successful: run log, deletion
and pruning failures are collected as warnings on the result instead of being
raised.
"""

import os
import time
import tarfile
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from logarchive.archive.errors import (
    SourceNotFound,
    InvalidDestination,
    BundleWriteFailed,
    PermissionDenied,
    RunLogWriteFailed,
)
from logarchive.archive.schemas import (
    ArchiveRequest,
    ArchiveBundle,
    ArchiveResult,
    CandidateFile,
    RunRecord,
)
from logarchive.archive.selection import select_candidates
from logarchive.archive.retention import prune_bundles
from logarchive.archive.run_log import append_run_record
from logarchive.core.settings import (
    BUNDLE_PREFIX,
    BUNDLE_SUFFIX,
    BUNDLE_TIMESTAMP_FORMAT,
    RUN_LOG_NAME,
    STAGING_SUFFIX,
)

logger = logging.getLogger(__name__)


def resolve_paths(request: ArchiveRequest) -> Tuple[Path, Path]:
    """
    Canonicalize source and destination and check that they may be used together.

    Nothing on disk is modified here.

    Raises:
        SourceNotFound: If the source is missing or not a directory
        InvalidDestination: If the destination equals or lies inside the source
    """
    source = Path(request.source_dir).expanduser().resolve()
    if not source.is_dir():
        raise SourceNotFound(f"Log directory does not exist: {request.source_dir}", path=source)

    dest = Path(request.effective_dest_dir(source)).expanduser().resolve()
    if dest == source or source in dest.parents:
        raise InvalidDestination(
            f"Destination must not be inside the log directory "
            f"(LOG_DIR = {source}, DEST_DIR = {dest})",
            source=source,
            destination=dest,
        )
    return source, dest


def ensure_destination(dest: Path) -> None:
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        raise PermissionDenied(f"Cannot create destination {dest}: {e}", path=dest) from e
    except (FileExistsError, NotADirectoryError) as e:
        raise InvalidDestination(
            f"Destination is not a directory: {dest}", source=dest.parent, destination=dest
        ) from e
    except OSError as e:
        raise BundleWriteFailed(f"Cannot create destination {dest}: {e}", path=dest) from e


def bundle_path_for(dest: Path, moment: datetime) -> Path:
    """
    Final path for a bundle created at ``moment``.

    Second-granularity names can collide; an existing name gets a ``_1``,
    ``_2``... suffix instead of being overwritten.
    """
    stem = BUNDLE_PREFIX + moment.strftime(BUNDLE_TIMESTAMP_FORMAT)
    path = dest / f"{stem}{BUNDLE_SUFFIX}"
    sequence = 1
    while path.exists():
        path = dest / f"{stem}_{sequence}{BUNDLE_SUFFIX}"
        sequence += 1
    return path


def staging_path_for(bundle_path: Path) -> Path:
    return bundle_path.with_name(bundle_path.name + STAGING_SUFFIX)


def write_bundle(candidates: List[CandidateFile], bundle_path: Path) -> Tuple[int, List[CandidateFile]]:
    """
    Write candidates into a gzip tarball and atomically move it into place.

    The archive is built at the staging path, fsynced, then renamed over
    ``bundle_path``. On any failure the staging file is removed and the final
    path is never created. Candidates removed from disk after selection are
    left out; if none remain, nothing is committed.

    Returns:
        (size in bytes of the committed bundle, candidates actually written)

    Raises:
        PermissionDenied: If a source file or the staging file is not accessible
        BundleWriteFailed: On any other I/O or compression failure
    """
    staging = staging_path_for(bundle_path)
    included: List[CandidateFile] = []
    try:
        with open(staging, "wb") as fh:
            with tarfile.open(fileobj=fh, mode="w:gz") as tar:
                for candidate in candidates:
                    try:
                        tar.add(str(candidate.path), arcname=candidate.relative_path, recursive=False)
                    except FileNotFoundError:
                        logger.warning(f"Skipping {candidate.path}: removed before it could be archived")
                        continue
                    included.append(candidate)
            fh.flush()
            os.fsync(fh.fileno())
        if included:
            os.replace(staging, bundle_path)
    except PermissionError as e:
        _discard_staging(staging)
        raise PermissionDenied(f"Permission denied while writing bundle: {e}", path=bundle_path) from e
    except (OSError, tarfile.TarError) as e:
        _discard_staging(staging)
        raise BundleWriteFailed(f"Failed to write bundle {bundle_path.name}: {e}", path=bundle_path) from e

    if not included:
        _discard_staging(staging)
        return 0, included
    return bundle_path.stat().st_size, included


def _discard_staging(staging: Path) -> None:
    try:
        staging.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error(f"Could not remove staging file {staging}: {e}")


def delete_originals(candidates: List[CandidateFile]) -> Tuple[int, List[str]]:
    """Delete exactly the archived files, carrying on past individual failures."""
    deleted = 0
    warnings = []
    for candidate in candidates:
        try:
            candidate.path.unlink()
            deleted += 1
        except FileNotFoundError:
            logger.debug(f"Original already gone: {candidate.path}")
        except OSError as e:
            message = f"Could not delete original {candidate.path}: {e}"
            logger.warning(message)
            warnings.append(message)
    return deleted, warnings


def run_archive(request: ArchiveRequest, now: Optional[float] = None) -> ArchiveResult:
    """
    Execute one archival pass.

    Args:
        request: Policy for this run
        now: Reference time in epoch seconds (defaults to the current time)

    Returns:
        ArchiveResult describing the bundle (if any), pruning and warnings

    Raises:
        SourceNotFound, InvalidDestination: Before anything on disk changes
        BundleWriteFailed, PermissionDenied: If the bundle could not be committed
    """
    if now is None:
        now = time.time()
    moment = datetime.fromtimestamp(now).astimezone()

    source, dest = resolve_paths(request)
    ensure_destination(dest)
    run_log = dest / RUN_LOG_NAME

    candidates = select_candidates(source, dest.name, request.retain_logs_days, now)
    result = ArchiveResult(run_log_path=run_log)
    archived = []
    bundle = None

    if not candidates:
        logger.info(
            f"No files older than {request.retain_logs_days} days found in {source}. Nothing to archive."
        )
    else:
        bundle_path = bundle_path_for(dest, moment)
        logger.info(f"Creating archive: {bundle_path} ({len(candidates)} files)")
        size, archived = write_bundle(candidates, bundle_path)
        skipped = len(candidates) - len(archived)
        if skipped:
            result.warnings.append(f"{skipped} selected file(s) disappeared before they could be archived")
        if archived:
            bundle = ArchiveBundle(
                path=bundle_path,
                created_at=moment,
                size_bytes=size,
                source_dir=source,
                file_count=len(archived),
            )
            result.bundle_path = bundle.path
            result.bytes_written = bundle.size_bytes
    result.file_count = len(archived)

    record = RunRecord(
        timestamp=moment,
        source_dir=source,
        bundle_path=bundle.path if bundle else None,
        size_bytes=bundle.size_bytes if bundle else 0,
        file_count=len(archived),
        delete_originals=request.delete_originals,
        retain_logs_days=request.retain_logs_days,
        retain_archives_days=request.retain_archives_days,
    )
    try:
        append_run_record(run_log, record)
    except RunLogWriteFailed as e:
        logger.warning(str(e))
        result.warnings.append(str(e))

    if bundle and request.delete_originals:
        deleted, warnings = delete_originals(archived)
        result.deleted_original_count = deleted
        result.warnings.extend(warnings)
        logger.info(f"Deleted {deleted} original file(s) that were archived")

    pruned, warnings = prune_bundles(dest, request.retain_archives_days, now)
    result.pruned_archive_count = len(pruned)
    result.warnings.extend(warnings)

    logger.info(
        f"Done: {result.file_count} file(s), {result.bytes_written} bytes, "
        f"{result.pruned_archive_count} expired bundle(s) pruned, {len(result.warnings)} warning(s)"
    )
    return result
