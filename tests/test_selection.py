"""
Tests for candidate selection.
"""

import os

import pytest

from logarchive.archive.errors import PermissionDenied
from logarchive.archive.selection import select_candidates, is_exempt
from logarchive.core.settings import EXEMPT_EXTENSIONS

from conftest import set_age


def names(candidates):
    return [c.relative_path for c in candidates]


def test_only_files_older_than_retention_are_selected(source_dir, make_log, now):
    make_log("ten.log", 10)
    make_log("five.log", 5)
    make_log("one.log", 1)

    candidates = select_candidates(source_dir, "logs-archives", 7, now)

    assert names(candidates) == ["ten.log"]
    assert candidates[0].size_bytes == len("log line\n")


@pytest.mark.parametrize("extension", EXEMPT_EXTENSIONS)
def test_compressed_files_are_never_selected(source_dir, make_log, now, extension):
    make_log(f"old{extension}", 365)

    assert select_candidates(source_dir, "logs-archives", 0, now) == []


def test_exemption_ignores_case():
    assert is_exempt("SYSLOG.GZ")
    assert is_exempt("app.log.tar")
    assert not is_exempt("app.log")
    assert not is_exempt("gz")


def test_nested_files_keep_relative_paths(source_dir, make_log, now):
    make_log("nginx/access.log", 30)
    make_log("nginx/old/error.log", 30)

    candidates = select_candidates(source_dir, "logs-archives", 7, now)

    assert names(candidates) == ["nginx/access.log", "nginx/old/error.log"]


def test_directories_named_like_destination_are_pruned(source_dir, make_log, now):
    make_log("archives/stale.log", 30)
    make_log("app/archives/deeper.log", 30)
    make_log("app/kept.log", 30)

    candidates = select_candidates(source_dir, "archives", 7, now)

    assert names(candidates) == ["app/kept.log"]


def test_file_exactly_at_cutoff_is_not_selected(source_dir, make_log, now):
    make_log("edge.log", 7)
    make_log("past.log", 7.001)

    assert names(select_candidates(source_dir, "logs-archives", 7, now)) == ["past.log"]


def test_symlinks_are_not_selected(tmp_path, source_dir, make_log, now):
    target = make_log("real.log", 30)
    os.symlink(target, source_dir / "link.log")

    outside = tmp_path / "outside"
    outside.mkdir()
    set_age(outside, 30, now)
    (outside / "elsewhere.log").write_text("x")
    set_age(outside / "elsewhere.log", 30, now)
    os.symlink(outside, source_dir / "linked-dir")

    assert names(select_candidates(source_dir, "logs-archives", 7, now)) == ["real.log"]


def test_selection_is_idempotent(source_dir, make_log, now):
    for i in range(5):
        make_log(f"svc{i}/app.log", 10 + i)
    make_log("fresh.log", 0)

    first = select_candidates(source_dir, "logs-archives", 7, now)
    second = select_candidates(source_dir, "logs-archives", 7, now)

    assert first == second
    assert len(first) == 5


def test_unlistable_directory_raises_permission_denied(source_dir, make_log, now, monkeypatch):
    make_log("locked/secret.log", 30)
    real_scandir = os.scandir

    def scandir(path="."):
        if os.fspath(path).endswith("locked"):
            raise PermissionError(13, "Permission denied", os.fspath(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", scandir)

    with pytest.raises(PermissionDenied):
        select_candidates(source_dir, "logs-archives", 7, now)
