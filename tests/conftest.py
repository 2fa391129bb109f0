"""
Shared fixtures: builders for synthetic AX3 header and data records.
"""

import struct

import pytest

HEADER_SIZE = 1024
DATA_RECORD_SIZE = 512


def build_header(
    device_id=42,
    session_id=1234,
    logging_start_time=0,
    logging_end_time=0,
    logging_capacity=0,
    sampling_rate=0x4A,
    last_change_time=0,
    firmware_revision=47,
    time_zone=-1,
    annotation=b"",
    magic=0x444D,
    packet_length=1020,
):
    buf = bytearray(HEADER_SIZE)
    struct.pack_into("<HH", buf, 0, magic, packet_length)
    struct.pack_into("<HI", buf, 5, device_id, session_id)
    struct.pack_into("<III", buf, 13, logging_start_time, logging_end_time, logging_capacity)
    struct.pack_into("<BIBh", buf, 36, sampling_rate, last_change_time, firmware_revision, time_zone)
    buf[64:512] = annotation.ljust(448, b" ")[:448]
    buf[512:1024] = b"\xff" * 512

    return bytes(buf)


def build_data_record(
    temperature=0,
    light=0,
    timestamp=0,
    sequence_id=0,
    session_id=1234,
    device_fractional=0x8000,
    events=0,
    battery=200,
    sample_rate=0x4A,
    num_axes_bps=0x32,
    timestamp_offset=0,
    sample_count=80,
    magic=0x5841,
    packet_length=508,
    valid_checksum=True,
):
    buf = bytearray(DATA_RECORD_SIZE)
    struct.pack_into(
        "<HHHIII", buf, 0, magic, packet_length, device_fractional, session_id, sequence_id, timestamp
    )
    struct.pack_into(
        "<HhBBBBhH",
        buf,
        18,
        light,
        temperature,
        events,
        battery,
        sample_rate,
        num_axes_bps,
        timestamp_offset,
        sample_count,
    )
    buf[30:510] = bytes((i * 7) & 0xFF for i in range(480))

    words = struct.unpack("<255H", bytes(buf[:510]))
    checksum = (-sum(words)) & 0xFFFF
    if not valid_checksum:
        checksum = (checksum + 1) & 0xFFFF
    struct.pack_into("<H", buf, 510, checksum)

    return bytes(buf)


@pytest.fixture
def header_builder():
    return build_header


@pytest.fixture
def record_builder():
    return build_data_record


@pytest.fixture
def cwa_file(tmp_path):
    """Factory writing a header, the given records and an optional tail to disk."""

    def _make(records, tail=b"", header=None, name="1234567_90001_0_0.cwa"):
        path = tmp_path / name
        body = header if header is not None else build_header()
        body += b"".join(build_data_record(**fields) for fields in records)
        path.write_bytes(body + tail)
        return path

    return _make
