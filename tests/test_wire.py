import pytest

from sfu_ws.errors import DecodeError, EncodeError
from sfu_ws.message import Frame
from sfu_ws.wire import HEADER_SIZE, decode, encode, pack_frame, unpack_frame


def test_text_payload_is_utf8_after_little_endian_header():
    assert pack_frame(7, "hello") == b"\x07\x00\x00\x00hello"


def test_bytes_payload_passes_through():
    assert pack_frame(0x01020304, b"\x00\xff") == b"\x04\x03\x02\x01\x00\xff"


@pytest.mark.parametrize("payload", [bytearray(b"abc"), memoryview(b"abc")])
def test_bytes_like_payloads(payload):
    assert pack_frame(1, payload) == b"\x01\x00\x00\x00abc"


def test_non_ascii_text():
    data = pack_frame(2, "héllo ✓")
    assert data[HEADER_SIZE:] == "héllo ✓".encode("utf-8")
    assert unpack_frame(data).text() == "héllo ✓"


@pytest.mark.parametrize("payload", [123, None, {"a": 1}, ["x"], 1.5])
def test_unsupported_payload_type(payload):
    with pytest.raises(EncodeError):
        pack_frame(1, payload)


@pytest.mark.parametrize("recipient", [2 ** 32, -1, -(2 ** 31), "7", 1.0, True])
def test_recipient_out_of_range_or_wrong_type(recipient):
    with pytest.raises(EncodeError):
        pack_frame(recipient, b"")


def test_high_recipient_ids_survive_round_trip():
    assert pack_frame(2 ** 31, b"") == b"\x00\x00\x00\x80"
    assert pack_frame(0xFFFFFFFF, b"") == b"\xff\xff\xff\xff"
    for recipient in (2 ** 31 - 1, 2 ** 31, 2 ** 31 + 5, 0xFFFFFFFF):
        assert unpack_frame(pack_frame(recipient, b"x")) == Frame(recipient, b"x")


@pytest.mark.parametrize("recipient", [0, 1, 7, 2 ** 31 - 1, 2 ** 31, 2 ** 32 - 1])
@pytest.mark.parametrize("payload", [b"", b"\x00\x01\x02", "text", "日本語"])
def test_round_trip(recipient, payload):
    expected = payload.encode("utf-8") if isinstance(payload, str) else payload
    assert unpack_frame(pack_frame(recipient, payload)) == Frame(recipient, expected)


@pytest.mark.parametrize("data", [b"", b"\x01", b"\x01\x02", b"\x01\x02\x03"])
def test_decode_truncated_header(data):
    with pytest.raises(DecodeError):
        unpack_frame(data)


def test_header_only_is_empty_payload():
    frame = unpack_frame(b"\x09\x00\x00\x00")
    assert frame == Frame(9, b"")


def test_codec_aliases():
    assert encode is pack_frame
    assert decode is unpack_frame
