"""
logarchive: scheduled archival of aging log files into timestamped bundles.
"""

__version__ = "0.1.0"
