"""Unit tests for the run log."""

import os
import shutil
import unittest
import tempfile
from pathlib import Path
from datetime import datetime, timezone, timedelta

from logarchive.archive import RunRecord, RunLogWriteFailed
from logarchive.archive.run_log import (
    append_run_record,
    format_run_record,
    parse_run_record,
    read_run_records,
)


class TestRunLog(unittest.TestCase):
    """Test cases for appending and reading run records."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.log_path = Path(self.temp_dir) / "archive.log"
        self.record = RunRecord(
            timestamp=datetime(2026, 10, 19, 2, 0, 5, tzinfo=timezone(timedelta(hours=2))),
            source_dir=Path("/var/log"),
            bundle_path=Path("/var/log-archives/logs_archive_20261019_020005.tar.gz"),
            size_bytes=2048,
            file_count=3,
            delete_originals=True,
            retain_logs_days=7,
            retain_archives_days=30,
        )

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir)

    def test_format(self):
        """Test the on-disk line layout."""
        self.assertEqual(
            format_run_record(self.record),
            '[2026-10-19T02:00:05+02:00] source="/var/log" '
            'archive="/var/log-archives/logs_archive_20261019_020005.tar.gz" '
            'size_bytes=2048 files=3 delete_originals=true keep_days=7 keep_arch_days=30',
        )

    def test_zero_file_record_has_empty_archive(self):
        """Test that runs without a bundle log an empty archive field."""
        record = self.record.model_copy(update={"bundle_path": None, "size_bytes": 0, "file_count": 0})
        line = format_run_record(record)

        self.assertIn('archive=""', line)
        self.assertIsNone(parse_run_record(line).bundle_path)

    def test_append_and_read(self):
        """Test that appended records read back in order."""
        append_run_record(self.log_path, self.record)
        second = self.record.model_copy(update={"file_count": 0, "bundle_path": None, "size_bytes": 0})
        append_run_record(self.log_path, second)

        records = read_run_records(self.log_path)

        self.assertEqual(len(records), 2)
        self.assertEqual(records[0], self.record)
        self.assertEqual(records[1].file_count, 0)
        self.assertEqual(len(self.log_path.read_text().splitlines()), 2)

    def test_append_never_truncates(self):
        """Test that existing content survives an append."""
        self.log_path.write_text("hand-written note\n")
        append_run_record(self.log_path, self.record)

        lines = self.log_path.read_text().splitlines()
        self.assertEqual(lines[0], "hand-written note")
        self.assertEqual(len(lines), 2)

    def test_unrecognised_lines_are_skipped(self):
        """Test reading a log that also holds lines from other tools."""
        self.log_path.write_text(
            "garbage\n\n" + format_run_record(self.record) + "\n"
        )
        self.assertEqual(read_run_records(self.log_path), [self.record])

    def test_missing_log_reads_empty(self):
        """Test reading a log that does not exist yet."""
        self.assertEqual(read_run_records(self.log_path), [])

    def test_parse_rejects_other_lines(self):
        """Test that parsing a foreign line raises ValueError."""
        with self.assertRaises(ValueError):
            parse_run_record("[2026-10-19] something else")

    def test_append_failure_raises(self):
        """Test that an unwritable log raises RunLogWriteFailed."""
        os.mkdir(self.log_path)
        with self.assertRaises(RunLogWriteFailed):
            append_run_record(self.log_path, self.record)


if __name__ == '__main__':
    unittest.main()
