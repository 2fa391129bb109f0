"""
Per-subject summary statistics.

Appends one row per recording to a shared CSV file: the overall mean and standard
deviation of the channel, followed by the mean and standard deviation for each hour
of the day (0-23). Hours without samples are written as nan.
"""

import logging
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd

from vendors.axivity.timestamps import CwaTimestamp

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24


def subject_id_from_path(file_path: str | Path) -> str:
    """Subject identifier: the file name up to the first underscore."""
    return Path(file_path).name.split("_", 1)[0]


def summarise_individual(
    subject_id: str,
    cwa_timestamps: Sequence[CwaTimestamp],
    values: Sequence,
    summary_path: str | Path,
) -> pd.DataFrame:
    """
    Computes and appends the summary row for one subject.

    Args:
        subject_id (str): Identifier written in the first column.
        cwa_timestamps (Sequence[CwaTimestamp]): Decoded timestamps, index aligned with values.
        values (Sequence): Raw (unsmoothed) channel values.
        summary_path (str | Path): CSV file to append to. Created if missing.

    Returns:
        pd.DataFrame: The single summary row that was appended.
    """
    if len(cwa_timestamps) != len(values):
        raise ValueError(f"{len(cwa_timestamps)} timestamps for {len(values)} values")

    df = pd.DataFrame(
        {
            "hour": [ts.hour for ts in cwa_timestamps],
            "value": np.asarray(values, dtype=np.float64),
        }
    )

    # Sample standard deviation, matching ddof=1 in pandas
    hourly = df.groupby("hour")["value"].agg(["mean", "std"]).reindex(range(HOURS_PER_DAY))

    row = {"subject": subject_id, "mean": df["value"].mean(), "sd": df["value"].std()}
    for hour in range(HOURS_PER_DAY):
        row[f"h{hour}_mean"] = hourly.loc[hour, "mean"]
        row[f"h{hour}_sd"] = hourly.loc[hour, "std"]

    summary = pd.DataFrame([row])
    summary.to_csv(summary_path, mode="a", header=False, index=False, na_rep="nan")

    logger.info("Appended summary for subject %s to %s", subject_id, summary_path)

    return summary
