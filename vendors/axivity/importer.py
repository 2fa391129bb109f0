"""
Axivity AX3 Channel Importer

Reads the secondary sensor channel (temperature or light) out of a .cwa recording.
The header is decoded once, then data records are consumed sequentially until the
stream runs out. A trailing chunk shorter than a full record ends the stream without
producing a sample.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Iterator

import numpy as np
import pandas as pd

from vendors.axivity.decoder import (
    DATA_RECORD_SIZE,
    HEADER_SIZE,
    DataRecord,
    HeaderRecord,
    ShortReadError,
    decode_data_record,
    decode_header,
)
from vendors.axivity.timestamps import CwaTimestamp

logger = logging.getLogger(__name__)

# Thermistor calibration: celsius = (raw * 150 - 20500) / 1000
TEMPERATURE_SCALE = 150.0
TEMPERATURE_OFFSET = 20500
TEMPERATURE_DIVISOR = 1000.0


class ChannelMode(str, Enum):
    """Secondary channel to extract. The value doubles as the output column name."""

    TEMPERATURE = "temp"
    LIGHT = "light"


def raw_to_celsius(raw: int) -> float:
    """Converts a signed raw thermistor reading to degrees Celsius."""
    return (raw * TEMPERATURE_SCALE - TEMPERATURE_OFFSET) / TEMPERATURE_DIVISOR


@dataclass
class ExtractedSeries:
    """Index-aligned channel values and timestamps, in record arrival order."""

    mode: ChannelMode
    values: np.ndarray
    timestamps: list[str] = field(default_factory=list)
    cwa_timestamps: list[CwaTimestamp] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)

    def to_frame(self) -> pd.DataFrame:
        """Returns the series as a DataFrame with 'timestamp' and channel columns."""
        return pd.DataFrame({"timestamp": self.timestamps, self.mode.value: self.values})


def read_header(stream: BinaryIO) -> HeaderRecord:
    """
    Reads and decodes the header record from the start of a stream.

    Raises:
        ShortReadError: If fewer than 1024 bytes are available.
    """
    buffer = stream.read(HEADER_SIZE)
    if len(buffer) < HEADER_SIZE:
        raise ShortReadError(f"expected {HEADER_SIZE} header bytes, got {len(buffer)}")

    return decode_header(buffer)


class ExtractionStream:
    """
    Pulls one channel out of the data records of an open stream.

    The stream must be positioned right after the header record.
    """

    def __init__(self, stream: BinaryIO, mode: ChannelMode, strict: bool = False, truncate: bool = True) -> None:
        """
        Args:
            stream (BinaryIO): Binary stream positioned at the first data record.
            mode (ChannelMode): Channel to extract for the whole run.
            strict (bool): Log a warning for records with integrity anomalies.
            truncate (bool): Store Celsius values truncated toward zero (integers)
                             instead of keeping the fractional part.
        """
        self.stream = stream
        self.mode = ChannelMode(mode)
        self.strict = strict
        self.truncate = truncate

        self.records_read = 0
        self.anomalies = 0

    def records(self) -> Iterator[DataRecord]:
        """Yields decoded data records until the stream is exhausted."""
        while True:
            chunk = self.stream.read(DATA_RECORD_SIZE)
            if len(chunk) < DATA_RECORD_SIZE:
                if chunk:
                    logger.debug("Dropping %d trailing bytes after %d records", len(chunk), self.records_read)
                return

            record = decode_data_record(chunk)
            self.records_read += 1

            if self.strict:
                self._check(record)

            yield record

    def _check(self, record: DataRecord) -> None:
        problems = record.diagnostics()
        if problems:
            self.anomalies += 1
            logger.warning("Record %d (sequence %d): %s", self.records_read, record.sequence_id, "; ".join(problems))

    def channel_value(self, record: DataRecord) -> float | int:
        """Extracts the configured channel from a record."""
        if self.mode is ChannelMode.LIGHT:
            # Sensor is obstructed on the worn devices, so no lux conversion
            return record.light

        celsius = raw_to_celsius(record.temperature)

        return int(celsius) if self.truncate else celsius

    def extract(self) -> ExtractedSeries:
        """
        Consumes the remaining stream.

        Returns:
            ExtractedSeries: One value and one timestamp per complete data record.
        """
        values = []
        timestamps = []
        cwa_timestamps = []

        for record in self.records():
            ts = record.cwa_timestamp

            values.append(self.channel_value(record))
            cwa_timestamps.append(ts)
            timestamps.append(ts.format())

        dtype = np.int64 if self.mode is ChannelMode.LIGHT or self.truncate else np.float64

        logger.info("Extracted %d %s samples", len(values), self.mode.value)
        if self.anomalies:
            logger.warning("%d of %d records failed integrity checks", self.anomalies, self.records_read)

        return ExtractedSeries(
            mode=self.mode,
            values=np.array(values, dtype=dtype),
            timestamps=timestamps,
            cwa_timestamps=cwa_timestamps,
        )


def load_cwa_file(
    file_path: str,
    mode: ChannelMode,
    strict: bool = False,
    truncate: bool = True,
) -> tuple[HeaderRecord, ExtractedSeries]:
    """
    Loads one secondary channel from an AX3 .cwa file.

    Args:
        file_path (str): The absolute or relative path to the source file.
        mode (ChannelMode): Temperature or light.
        strict (bool, optional): Report per-record integrity anomalies as warnings.
        truncate (bool, optional): Truncate Celsius values to integers. Defaults to True.

    Returns:
        tuple[HeaderRecord, ExtractedSeries]: The decoded header and the extracted series.
    """
    with open(file_path, "rb") as f:
        header = read_header(f)

        if strict:
            for problem in header.diagnostics():
                logger.warning("Header: %s", problem)

        series = ExtractionStream(f, mode, strict=strict, truncate=truncate).extract()

    return header, series
