import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from core.signal_processing import central_moving_average
from core.summary_statistics import subject_id_from_path, summarise_individual
from vendors.axivity.decoder import HeaderRecord, format_header_details
from vendors.axivity.importer import ChannelMode, ExtractedSeries, load_cwa_file
from vendors.axivity.writer import save_series_to_file

logger = logging.getLogger(__name__)


@dataclass
class ProcessingResult:
    """Everything produced by one run of the pipeline."""

    header: HeaderRecord
    extracted: ExtractedSeries
    output_values: np.ndarray
    rows_written: int


def process_cwa_file(
    input_path: str | Path,
    output_path: str | Path,
    mode: ChannelMode,
    window_size: int | None = None,
    strict: bool = False,
    truncate: bool = True,
    summary_path: str | Path | None = None,
    show_header: bool = False,
) -> ProcessingResult:
    """
    Drives the extraction pipeline for one AX3 recording.

    The pipeline follows this order:
    1. **Ingest:** Decodes the header and the chosen channel from every data record.
    2. **Smoothing:** Optionally applies the centered moving average.
    3. **Export:** Writes the 'timestamp, value' series file.
    4. **Summary:** Optionally appends per-hour statistics of the raw series.

    Smoothing runs before anything is written, so a window that does not fit the
    series leaves no partial output file behind. The summary row is appended only
    once the series file has been written, so a failed run never leaves one in the
    shared statistics file.

    Args:
        input_path (str | Path): Path to the .cwa recording.
        output_path (str | Path): Path of the series file to create.
        mode (ChannelMode): Temperature or light.
        window_size (int | None, optional): Moving-average window. None disables smoothing.
        strict (bool, optional): Warn about per-record integrity anomalies.
        truncate (bool, optional): Store Celsius values truncated to integers.
        summary_path (str | Path | None, optional): Summary statistics CSV to append to.
        show_header (bool, optional): Print the decoded header right after ingest.

    Returns:
        ProcessingResult: Header, raw series and the values that were written.

    Raises:
        ShortReadError: If the header record is incomplete.
        WindowSizeError: If the window does not fit the series.
        OSError: If the recording cannot be read or the output cannot be written.
    """
    # Ingest data
    header, extracted = load_cwa_file(str(input_path), mode, strict=strict, truncate=truncate)
    logger.info("Session %d, device %d: %d records", header.session_id, header.device_id, len(extracted))

    if show_header:
        print(format_header_details(header))

    # Optional smoothing
    output_values = extracted.values
    if window_size is not None:
        output_values = central_moving_average(extracted.values, window_size)
        logger.info("Smoothed with window %d: %d -> %d samples", window_size, len(extracted), len(output_values))

    # Export
    rows = save_series_to_file(output_values, extracted.timestamps, output_path, extracted.mode.value)

    # Summary statistics run on the raw, unsmoothed series
    if summary_path is not None:
        summarise_individual(
            subject_id_from_path(input_path),
            extracted.cwa_timestamps,
            extracted.values,
            summary_path,
        )

    return ProcessingResult(header=header, extracted=extracted, output_values=output_values, rows_written=rows)
