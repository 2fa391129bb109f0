import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    "Central extractor configuration"

    # Smoothing (kept as text, the CLI reports a malformed value as a usage error)
    DEFAULT_WINDOW_SIZE = os.getenv("AX3_WINDOW_SIZE", "50")

    # Summary statistics file (appended to when set)
    SUMMARY_FILE = os.getenv("AX3_SUMMARY_FILE")

    # Per-record diagnostics (magic, declared length, checksum)
    STRICT_VALIDATION = os.getenv("AX3_STRICT", "0").lower() in ("1", "true", "yes")

    # Default logging level name when no -v/-d flag is given
    LOG_LEVEL = os.getenv("AX3_LOG_LEVEL", "WARNING").upper()
