"""
Append-only run log kept next to the bundles.

Each run adds exactly one line. Lines are written with a single ``os.write`` on
an ``O_APPEND`` descriptor so concurrent writers never interleave or truncate
each other's records.
"""

import os
import re
import logging
from datetime import datetime
from pathlib import Path
from typing import List

from logarchive.archive.errors import RunLogWriteFailed
from logarchive.archive.schemas import RunRecord

logger = logging.getLogger(__name__)

RECORD_PATTERN = re.compile(
    r'^\[(?P<timestamp>[^\]]+)\] '
    r'source="(?P<source>[^"]*)" '
    r'archive="(?P<archive>[^"]*)" '
    r'size_bytes=(?P<size>\d+) '
    r'files=(?P<files>\d+) '
    r'delete_originals=(?P<delete>true|false) '
    r'keep_days=(?P<keep_days>\d+) '
    r'keep_arch_days=(?P<keep_arch_days>\d+)$'
)


def format_run_record(record: RunRecord) -> str:
    """Render a record as a single log line (no trailing newline)."""
    bundle = str(record.bundle_path) if record.bundle_path else ""
    return (
        f'[{record.timestamp.isoformat(timespec="seconds")}] '
        f'source="{record.source_dir}" '
        f'archive="{bundle}" '
        f'size_bytes={record.size_bytes} '
        f'files={record.file_count} '
        f'delete_originals={"true" if record.delete_originals else "false"} '
        f'keep_days={record.retain_logs_days} '
        f'keep_arch_days={record.retain_archives_days}'
    )


def parse_run_record(line: str) -> RunRecord:
    """
    Parse one run log line.

    Raises:
        ValueError: If the line is not a run record
    """
    match = RECORD_PATTERN.match(line.strip())
    if not match:
        raise ValueError(f"Not a run record: {line!r}")
    archive = match.group("archive")
    return RunRecord(
        timestamp=datetime.fromisoformat(match.group("timestamp")),
        source_dir=Path(match.group("source")),
        bundle_path=Path(archive) if archive else None,
        size_bytes=int(match.group("size")),
        file_count=int(match.group("files")),
        delete_originals=match.group("delete") == "true",
        retain_logs_days=int(match.group("keep_days")),
        retain_archives_days=int(match.group("keep_arch_days")),
    )


def append_run_record(log_path: Path, record: RunRecord) -> None:
    """
    Append a record to the run log, creating the file if needed.

    Raises:
        RunLogWriteFailed: If the log cannot be opened or written
    """
    data = (format_run_record(record) + "\n").encode("utf-8")
    try:
        fd = os.open(log_path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)
        try:
            written = os.write(fd, data)
        finally:
            os.close(fd)
    except OSError as e:
        raise RunLogWriteFailed(f"Could not append to run log {log_path}: {e}", path=log_path) from e
    if written != len(data):
        raise RunLogWriteFailed(
            f"Short write to run log {log_path} ({written} of {len(data)} bytes)", path=log_path
        )


def read_run_records(log_path: Path) -> List[RunRecord]:
    """Load every parseable record; unknown lines are skipped."""
    if not log_path.exists():
        return []

    records = []
    with open(log_path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                records.append(parse_run_record(line))
            except ValueError:
                logger.debug(f"Skipping unrecognised line {lineno} in {log_path}")
    return records
