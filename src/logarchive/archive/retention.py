"""
Retention pruning for committed bundles.
"""

import re
import logging
from pathlib import Path
from typing import List, Tuple

from logarchive.archive.selection import age_cutoff
from logarchive.core.settings import BUNDLE_NAME_PATTERN

logger = logging.getLogger(__name__)

_BUNDLE_RE = re.compile(BUNDLE_NAME_PATTERN)


def is_bundle_name(name: str) -> bool:
    return bool(_BUNDLE_RE.match(name))


def list_bundles(dest_dir: Path) -> List[Path]:
    """Committed bundles in dest_dir, oldest name first. Staging files are excluded."""
    if not dest_dir.is_dir():
        return []
    return sorted(
        p for p in dest_dir.iterdir()
        if p.is_file() and not p.is_symlink() and is_bundle_name(p.name)
    )


def prune_bundles(dest_dir: Path, retain_days: int, now: float) -> Tuple[List[Path], List[str]]:
    """
    Delete bundles strictly older than retain_days.

    A bundle exactly retain_days old is kept. A failure on one bundle is
    reported and pruning carries on with the rest.

    Returns:
        (deleted bundle paths, warning messages)
    """
    cutoff = age_cutoff(now, retain_days)
    pruned = []
    warnings = []

    for bundle in list_bundles(dest_dir):
        try:
            if bundle.stat().st_mtime >= cutoff:
                continue
            bundle.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            message = f"Could not prune expired bundle {bundle}: {e}"
            logger.warning(message)
            warnings.append(message)
            continue
        logger.info(f"Pruned expired bundle {bundle.name}")
        pruned.append(bundle)

    return pruned, warnings
