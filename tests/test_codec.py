import asyncio

import pytest

from zagent import CodecConst, ZagentHeaderError, DataLengthBufferTooSmall, DataLengthOverflow
from zagent.io import (
    encode_request,
    encode_uvarint,
    decode_uvarint,
    parse_header,
    parse_length,
    classify_supported,
    decode_header,
    decode_length,
    decode_payload,
)


def stream(data: bytes) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    reader.feed_eof()
    return reader


# ============================
# VARINT
# ============================

@pytest.mark.parametrize("value", [
    0, 1, 127, 128, 300, 16383, 16384,
    2**32 - 1, 2**32, 2**56 - 1, 2**56, 2**63 - 1, 2**63, 2**64 - 1,
])
def test_uvarint_round_trip(value):
    encoded = encode_uvarint(value)
    assert decode_uvarint(encoded) == (value, len(encoded))


def test_uvarint_known_encodings():
    assert encode_uvarint(0) == b"\x00"
    assert encode_uvarint(300) == b"\xac\x02"
    assert encode_uvarint(2**64 - 1) == b"\xff" * 9 + b"\x01"


def test_uvarint_rejects_out_of_range_values():
    with pytest.raises(ValueError):
        encode_uvarint(-1)
    with pytest.raises(ValueError):
        encode_uvarint(2**64)


def test_uvarint_ignores_trailing_bytes():
    assert decode_uvarint(b"\x05\xff\xff") == (5, 1)


@pytest.mark.parametrize("buf", [b"", b"\x80", b"\xff\xff\xff"])
def test_uvarint_buffer_too_small(buf):
    with pytest.raises(DataLengthBufferTooSmall):
        decode_uvarint(buf)


@pytest.mark.parametrize("buf", [
    b"\xff" * 9 + b"\x02",   # tenth byte carries more than one bit
    b"\xff" * 10 + b"\x01",  # more than ten bytes
])
def test_uvarint_overflow(buf):
    with pytest.raises(DataLengthOverflow):
        decode_uvarint(buf)


# ============================
# LENGTH FIELD
# ============================

def test_parse_length_single_byte():
    assert parse_length(b"\x05" + bytes(7)) == (5, 1)


def test_parse_length_multi_byte():
    assert parse_length(b"\xac\x02" + bytes(6)) == (300, 2)


def test_parse_length_empty_field():
    with pytest.raises(DataLengthBufferTooSmall):
        parse_length(b"")


def test_parse_length_truncated_field():
    with pytest.raises(DataLengthBufferTooSmall):
        parse_length(b"\x80\x80")


def test_parse_length_never_terminates():
    with pytest.raises(DataLengthOverflow):
        parse_length(b"\xff" * CodecConst.LENGTH_SIZE)


def test_parse_length_only_reads_eight_bytes():
    # The terminator in the ninth byte belongs to the payload
    with pytest.raises(DataLengthOverflow):
        parse_length(b"\x80" * 8 + b"\x01")


def test_length_errors_are_framing_errors():
    from zagent import ZagentFramingError
    assert issubclass(DataLengthBufferTooSmall, ZagentFramingError)
    assert issubclass(DataLengthOverflow, ZagentFramingError)
    assert str(DataLengthBufferTooSmall()) == "DataLength buffer too small"
    assert str(DataLengthOverflow()) == "DataLength is too large"


# ============================
# HEADER / REQUEST / PAYLOAD
# ============================

def test_encode_request_is_the_raw_key():
    assert encode_request("agent.ping") == b"agent.ping"
    assert encode_request("vfs.fs.size[/,free]") == b"vfs.fs.size[/,free]"


def test_parse_header_accepts_magic():
    assert parse_header(b"ZBXD\x01") == b"ZBXD\x01"


@pytest.mark.parametrize("buf", [b"", b"ZBX", b"ZBXD"])
def test_parse_header_short(buf):
    with pytest.raises(ZagentHeaderError, match="Short header"):
        parse_header(buf)


@pytest.mark.parametrize("buf", [b"ZBXD\x02", b"HTTP/", b"\x00" * 5])
def test_parse_header_bad_magic(buf):
    with pytest.raises(ZagentHeaderError, match="Bad magic"):
        parse_header(buf)


@pytest.mark.parametrize("payload, supported", [
    (b"ZBX_NOTSUPPORTED", False),
    (b"1", True),
    (b"", True),
    (b"ZBX_NOTSUPPORTED\x00Unsupported item key.", True),
    (b"zbx_notsupported", True),
])
def test_classify_supported(payload, supported):
    assert classify_supported(payload) is supported


# ============================
# STREAM DECODERS
# ============================

@pytest.mark.asyncio
async def test_decoders_read_in_order():
    reader = stream(b"ZBXD\x01" + b"\x0b" + bytes(7) + b"Zabbix 7.0!")
    assert await decode_header(reader) == b"ZBXD\x01"
    length, field = await decode_length(reader)
    assert length == 11
    assert field == b"\x0b" + bytes(7)
    assert await decode_payload(reader) == b"Zabbix 7.0!"


@pytest.mark.asyncio
async def test_decode_header_short_stream():
    with pytest.raises(ZagentHeaderError):
        await decode_header(stream(b"ZB"))


@pytest.mark.asyncio
async def test_decode_length_empty_stream():
    with pytest.raises(DataLengthBufferTooSmall):
        await decode_length(stream(b""))


@pytest.mark.asyncio
async def test_decode_payload_empty_stream():
    assert await decode_payload(stream(b"")) == b""
