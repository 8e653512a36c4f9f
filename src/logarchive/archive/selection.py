"""
Candidate selection for an archival run.

Walks the source tree, skipping any directory named like the destination, and
keeps regular files that are old enough and not already compressed.
"""

import os
import stat
import logging
from typing import List
from pathlib import Path

from logarchive.archive.errors import PermissionDenied
from logarchive.archive.schemas import CandidateFile
from logarchive.core.settings import EXEMPT_EXTENSIONS, SECONDS_PER_DAY

logger = logging.getLogger(__name__)


def is_exempt(name: str) -> bool:
    """True for names ending in an already-compressed extension."""
    return name.lower().endswith(EXEMPT_EXTENSIONS)


def age_cutoff(now: float, days: int) -> float:
    """Timestamp before which something is older than ``days`` days."""
    return now - days * SECONDS_PER_DAY


def _walk_error(error: OSError) -> None:
    if isinstance(error, PermissionError):
        path = Path(error.filename) if error.filename else None
        raise PermissionDenied(f"Cannot read {error.filename}: {error.strerror}", path=path) from error
    logger.warning(f"Skipping unreadable entry {error.filename}: {error}")


def select_candidates(source_dir: Path, dest_name: str, retain_days: int, now: float) -> List[CandidateFile]:
    """
    Collect files under source_dir eligible for archiving.

    Args:
        source_dir: Resolved source directory
        dest_name: Base name of the destination; matching directories are pruned
        retain_days: Files must be strictly older than this many days
        now: Reference time (epoch seconds)

    Returns:
        Candidates sorted by their path relative to source_dir

    Raises:
        PermissionDenied: If a directory under source_dir cannot be listed
    """
    cutoff = age_cutoff(now, retain_days)
    candidates = []

    for root, dirnames, filenames in os.walk(source_dir, onerror=_walk_error):
        # Pruned in place so os.walk never descends into them
        dirnames[:] = sorted(d for d in dirnames if d != dest_name)

        for name in filenames:
            if is_exempt(name):
                continue
            path = Path(root) / name
            try:
                st = path.lstat()
            except FileNotFoundError:
                # Rotated away between listing and stat
                continue
            # Symlinks are never followed or archived
            if not stat.S_ISREG(st.st_mode):
                continue
            if st.st_mtime >= cutoff:
                continue
            candidates.append(CandidateFile(
                path=path,
                relative_path=path.relative_to(source_dir).as_posix(),
                mtime=st.st_mtime,
                size_bytes=st.st_size,
            ))

    candidates.sort(key=lambda c: c.relative_path)
    logger.debug(f"Selected {len(candidates)} candidate(s) under {source_dir}")
    return candidates
