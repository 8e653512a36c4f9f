"""Shared fixtures for archiver tests."""

import os
import time
from pathlib import Path

import pytest

DAY = 86400


def set_age(path: Path, days: float, now: float) -> Path:
    """Backdate a file's mtime to ``days`` days before ``now``."""
    stamp = now - days * DAY
    os.utime(path, (stamp, stamp))
    return path


@pytest.fixture
def now():
    return float(int(time.time()))


@pytest.fixture
def source_dir(tmp_path):
    path = tmp_path / "logs"
    path.mkdir()
    return path


@pytest.fixture
def make_log(source_dir, now):
    """Create a file under the source directory with a given age in days."""

    def _make(relative: str, days: float, content: str = "log line\n") -> Path:
        path = source_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return set_age(path, days, now)

    return _make
