"""
Project-wide constants or “settings” that are unlikely to change at runtime.
"""

# Already-compressed formats are never re-archived
EXEMPT_EXTENSIONS = (".gz", ".xz", ".bz2", ".zip", ".tar", ".tgz", ".zst")

BUNDLE_PREFIX = "logs_archive_"
BUNDLE_SUFFIX = ".tar.gz"
BUNDLE_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
BUNDLE_NAME_PATTERN = r"^logs_archive_\d{8}_\d{6}(?:_\d+)?\.tar\.gz$"

STAGING_SUFFIX = ".partial"
RUN_LOG_NAME = "archive.log"
DEST_DIR_SUFFIX = "-archives"

SECONDS_PER_DAY = 86400

DEFAULT_RETAIN_LOGS_DAYS = 7
DEFAULT_RETAIN_ARCHIVES_DAYS = 30
