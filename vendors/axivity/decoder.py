"""
Axivity AX3 CWA Record Decoder

This module handles the low-level decoding of the fixed-size records found in a .cwa
recording: one 1024-byte header record ("MD") followed by a stream of 512-byte data
records ("AX"). Each layout is described as a decode table of (field, offset, format)
entries and resolved by a single generic routine, so field positions never depend on
in-memory structure packing. All multi-byte values are little-endian.

Decoding performs no semantic validation. Magic bytes, declared lengths and checksums
can be inspected on demand through the records' diagnostics() methods.
"""

import struct
from dataclasses import dataclass
from enum import IntFlag

import numpy as np

from vendors.axivity.timestamps import CwaTimestamp


HEADER_SIZE = 1024
DATA_RECORD_SIZE = 512

HEADER_MAGIC = 0x444D  # "MD"
DATA_MAGIC = 0x5841  # "AX"

# Declared lengths exclude the 4-byte magic + length prefix
HEADER_PACKET_LENGTH = HEADER_SIZE - 4
DATA_PACKET_LENGTH = DATA_RECORD_SIZE - 4

UNKNOWN_TIME_ZONE = -1  # 0xFFFF


class ShortReadError(ValueError):
    """Raised when a buffer is shorter than the record it should hold."""


class EventFlags(IntFlag):
    """Event bits reported since the previous data record."""

    RESUME_LOGGING = 0x01
    SINGLE_TAP = 0x02
    DOUBLE_TAP = 0x04


HEADER_LAYOUT = (
    ("packet_header", 0, "<H"),
    ("packet_length", 2, "<H"),
    ("device_id", 5, "<H"),
    ("session_id", 7, "<I"),
    ("logging_start_time", 13, "<I"),
    ("logging_end_time", 17, "<I"),
    ("logging_capacity", 21, "<I"),
    ("sampling_rate", 36, "<B"),
    ("last_change_time", 37, "<I"),
    ("firmware_revision", 41, "<B"),
    ("time_zone", 42, "<h"),
    ("annotation", 64, "448s"),
    ("scratch", 512, "512s"),
)

DATA_LAYOUT = (
    ("packet_header", 0, "<H"),
    ("packet_length", 2, "<H"),
    ("device_fractional", 4, "<H"),
    ("session_id", 6, "<I"),
    ("sequence_id", 10, "<I"),
    ("timestamp", 14, "<I"),
    ("light", 18, "<H"),
    ("temperature", 20, "<h"),
    ("events", 22, "<B"),
    ("battery", 23, "<B"),
    ("sample_rate", 24, "<B"),
    ("num_axes_bps", 25, "<B"),
    ("timestamp_offset", 26, "<h"),
    ("sample_count", 28, "<H"),
    ("raw_sample_data", 30, "480s"),
    ("checksum", 510, "<H"),
)


def decode_layout(buffer: bytes, layout: tuple, size: int) -> dict:
    """
    Extracts every field of a decode table from a raw buffer.

    Args:
        buffer (bytes): Raw record bytes. Only the first `size` bytes are used.
        layout (tuple): Entries of (field name, byte offset, struct format).
        size (int): The fixed record size the layout describes.

    Returns:
        dict: Field name to decoded value.

    Raises:
        ShortReadError: If the buffer holds fewer than `size` bytes.
    """
    if len(buffer) < size:
        raise ShortReadError(f"Expected {size} bytes, got {len(buffer)}")

    return {name: struct.unpack_from(fmt, buffer, offset)[0] for name, offset, fmt in layout}


def data_record_checksum(buffer: bytes) -> int:
    """16-bit word-wise sum of a whole data record. Zero for an intact record."""
    words = np.frombuffer(buffer[:DATA_RECORD_SIZE], dtype="<u2")

    return int(words.sum(dtype=np.uint64) & 0xFFFF)


@dataclass(frozen=True)
class HeaderRecord:
    """The one-time header record at the start of a .cwa file."""

    packet_header: int
    packet_length: int
    device_id: int
    session_id: int
    logging_start_time: int
    logging_end_time: int
    logging_capacity: int
    sampling_rate: int
    last_change_time: int
    firmware_revision: int
    time_zone: int
    annotation: bytes
    scratch: bytes

    @classmethod
    def from_bytes(cls, buffer: bytes) -> "HeaderRecord":
        """Decodes the first 1024 bytes of `buffer`."""
        return cls(**decode_layout(buffer, HEADER_LAYOUT, HEADER_SIZE))

    @property
    def logging_start(self) -> CwaTimestamp:
        return CwaTimestamp.from_packed(self.logging_start_time)

    @property
    def logging_end(self) -> CwaTimestamp:
        return CwaTimestamp.from_packed(self.logging_end_time)

    @property
    def last_change(self) -> CwaTimestamp:
        return CwaTimestamp.from_packed(self.last_change_time)

    @property
    def time_zone_known(self) -> bool:
        return self.time_zone != UNKNOWN_TIME_ZONE

    def annotation_text(self) -> str:
        """Annotation scratch area as text, space and NUL padding removed."""
        return self.annotation.decode("latin-1").rstrip(" \x00\xff")

    def diagnostics(self) -> list[str]:
        """Lists integrity anomalies. An empty list means nothing looked wrong."""
        problems = []
        if self.packet_header != HEADER_MAGIC:
            problems.append(f"header magic 0x{self.packet_header:04X} != 0x{HEADER_MAGIC:04X}")
        if self.packet_length != HEADER_PACKET_LENGTH:
            problems.append(f"header length {self.packet_length} != {HEADER_PACKET_LENGTH}")

        return problems


@dataclass(frozen=True)
class DataRecord:
    """
    One 512-byte data block.

    `device_fractional` is kept raw: with its top bit set it carries a 15-bit fraction
    of a second, otherwise a 15-bit device id. `raw_sample_data` is left packed.
    """

    packet_header: int
    packet_length: int
    device_fractional: int
    session_id: int
    sequence_id: int
    timestamp: int
    light: int
    temperature: int
    events: int
    battery: int
    sample_rate: int
    num_axes_bps: int
    timestamp_offset: int
    sample_count: int
    raw_sample_data: bytes
    checksum: int
    computed_checksum: int = 0

    @classmethod
    def from_bytes(cls, buffer: bytes) -> "DataRecord":
        """Decodes the first 512 bytes of `buffer`."""
        fields = decode_layout(buffer, DATA_LAYOUT, DATA_RECORD_SIZE)

        return cls(**fields, computed_checksum=data_record_checksum(buffer))

    @property
    def cwa_timestamp(self) -> CwaTimestamp:
        return CwaTimestamp.from_packed(self.timestamp)

    @property
    def sample_rate_hz(self) -> float:
        """Sample rate encoded in the low nibble of the rate code."""
        return 3200 / (1 << (15 - (self.sample_rate & 0x0F)))

    @property
    def num_axes(self) -> int:
        return self.num_axes_bps >> 4

    @property
    def packing_format(self) -> int:
        return self.num_axes_bps & 0x0F

    @property
    def event_flags(self) -> EventFlags:
        return EventFlags(self.events & 0x07)

    def diagnostics(self) -> list[str]:
        """Lists integrity anomalies. An empty list means nothing looked wrong."""
        problems = []
        if self.packet_header != DATA_MAGIC:
            problems.append(f"data magic 0x{self.packet_header:04X} != 0x{DATA_MAGIC:04X}")
        if self.packet_length != DATA_PACKET_LENGTH:
            problems.append(f"data length {self.packet_length} != {DATA_PACKET_LENGTH}")
        if self.computed_checksum != 0:
            problems.append(f"checksum sum 0x{self.computed_checksum:04X} != 0")

        return problems


def decode_header(buffer: bytes) -> HeaderRecord:
    return HeaderRecord.from_bytes(buffer)


def decode_data_record(buffer: bytes) -> DataRecord:
    return DataRecord.from_bytes(buffer)


def format_header_details(header: HeaderRecord) -> str:
    """
    Renders the header fields as an aligned, human-readable block.

    Args:
        header (HeaderRecord): A decoded header record.

    Returns:
        str: Multi-line text, one field per line.
    """
    magic = struct.pack("<H", header.packet_header).decode("latin-1")
    time_zone = f"{header.time_zone} min" if header.time_zone_known else "unknown"
    capacity = "unlimited" if header.logging_capacity == 0 else str(header.logging_capacity)

    rows = [
        ("Packet Header", magic),
        ("Packet Length", header.packet_length),
        ("Device ID", header.device_id),
        ("Session ID", header.session_id),
        ("Logging Start Time", header.logging_start),
        ("Logging End Time", header.logging_end),
        ("Logging Capacity", capacity),
        ("Sampling Rate", header.sampling_rate),
        ("Last Change Time", header.last_change),
        ("Firmware Revision", header.firmware_revision),
        ("Time Zone", time_zone),
    ]

    lines = ["Header Details".center(40, "-")]
    lines.extend(f"{label + ':':<20} {value}" for label, value in rows)

    return "\n".join(lines)
