"""Plain-text writer for extracted channel series."""

import logging
from numbers import Integral
from pathlib import Path
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)

SEPARATOR = ", "


def align_series(values: Sequence, timestamps: Sequence[str]) -> list[str]:
    """
    Returns the timestamps matching a (possibly smoothed) value series.

    Smoothing shortens the series from the front, so the leading surplus of
    timestamps is dropped.
    """
    difference = len(timestamps) - len(values)
    if difference < 0:
        raise ValueError(f"More values ({len(values)}) than timestamps ({len(timestamps)})")

    return list(timestamps[difference:])


def format_value(value) -> str:
    """Integers as-is, floats in the shortest '%g' form. Never locale dependent."""
    if isinstance(value, (Integral, np.integer)):
        return str(int(value))

    return f"{float(value):g}"


def save_series_to_file(values: Sequence, timestamps: Sequence[str], file_path: str | Path, column: str) -> int:
    """
    Writes a two-column series file.

    Args:
        values (Sequence): Channel values, raw or smoothed.
        timestamps (Sequence[str]): Formatted timestamps, at least as many as values.
        file_path (str | Path): Destination file, overwritten if present.
        column (str): Value column name, 'temp' or 'light'.

    Returns:
        int: Number of data lines written.
    """
    aligned = align_series(values, timestamps)

    with open(file_path, "w", encoding="ascii", newline="\n") as f:
        f.write(f"timestamp{SEPARATOR}{column}\n")
        for timestamp, value in zip(aligned, values):
            f.write(f"{timestamp}{SEPARATOR}{format_value(value)}\n")

    logger.info("Wrote %d rows to %s", len(aligned), file_path)

    return len(aligned)
