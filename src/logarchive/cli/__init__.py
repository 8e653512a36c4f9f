"""
Initialize the CLI package. Contains shared CLI utilities and configuration.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(log_level: str) -> None:
    """Configure root logging for a CLI invocation."""
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    # Replaces the handler installed when main_cli was imported
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, force=True)
