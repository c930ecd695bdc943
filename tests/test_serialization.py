import msgpack
import numpy as np
import pytest

from rpimocap.frame import Frame, LineSegment, Marker
from rpimocap.geometry import Line3D
from rpimocap.serialization import (
    decode_timestamp,
    encode_timestamp,
    pack_frame,
    pack_points,
    unpack_frame,
    unpack_points,
)


def test_timestamp_zero_is_32_bit_zero():
    assert encode_timestamp(0) == b"\x00\x00\x00\x00"


def test_whole_seconds_use_32_bit_form():
    seconds = 1_500_000_000
    body = encode_timestamp(seconds * 1_000_000_000)
    assert len(body) == 4
    assert int.from_bytes(body, "big") == seconds


def test_fractional_seconds_use_64_bit_form():
    assert len(encode_timestamp(1_500_000_000_123_456_789)) == 8


def test_negative_time_uses_96_bit_form():
    assert len(encode_timestamp(-1)) == 12


@pytest.mark.parametrize(
    "nanoseconds",
    [0, 1, 999_999_999, 1_000_000_000, 1_500_000_000_123_456_789, -1, -5_000_000_001, 2**34 * 1_000_000_000 + 7],
)
def test_timestamp_round_trip(nanoseconds):
    assert decode_timestamp(encode_timestamp(nanoseconds)) == nanoseconds


def test_timestamp_matches_library_encoding():
    nanoseconds = 1_600_000_000_987_654_321
    expected = msgpack.Timestamp.from_unix_nano(nanoseconds).to_bytes()
    assert encode_timestamp(nanoseconds) == expected


@pytest.mark.parametrize("length", [0, 3, 5, 16])
def test_decode_timestamp_rejects_bad_length(length):
    with pytest.raises(ValueError):
        decode_timestamp(b"\x00" * length)


def test_points_wire_format_uses_single_floats():
    assert pack_points([(1.0, 2.0)]) == b"\x91\x92\xca\x3f\x80\x00\x00\xca\x40\x00\x00\x00"


def test_points_round_trip():
    points = [(1.5, 2.25), (-3.0, 0.125), (320.0, 240.0)]
    assert unpack_points(pack_points(points)) == points


def test_points_accept_arrays():
    points = [np.array([4.5, 8.0], dtype=np.float32)]
    assert unpack_points(pack_points(points)) == [(4.5, 8.0)]


def test_empty_points_round_trip():
    assert unpack_points(pack_points([])) == []


def test_unpack_points_rejects_wrong_arity():
    with pytest.raises(ValueError):
        unpack_points(msgpack.packb([[1.0, 2.0, 3.0]]))


def test_unpack_points_rejects_non_array():
    with pytest.raises(ValueError):
        unpack_points(msgpack.packb({"x": 1.0}))


def _sample_frame():
    return Frame(
        time=1_500_000_000_250_000_000,
        lines=[LineSegment(line=Line3D(origin=[0.0, 1.0, 2.0], direction=[0.5, 0.25, -1.0]), length_cm=75.5)],
        markers=[Marker(id=3, position=[1.5, -2.0, 100.0]), Marker(id=0, position=[0.0, 0.0, 0.0])],
    )


def test_frame_round_trip():
    frame = _sample_frame()
    decoded = unpack_frame(pack_frame(frame))
    assert decoded.time == frame.time
    assert decoded.markers == frame.markers
    assert len(decoded.lines) == 1
    assert decoded.lines[0].line == frame.lines[0].line
    assert decoded.lines[0].length_cm == frame.lines[0].length_cm


def test_frame_map_keys():
    raw = msgpack.unpackb(pack_frame(_sample_frame()), raw=False)
    assert set(raw) == {"m_time", "m_markers", "m_lines"}
    assert set(raw["m_markers"][0]) == {"id", "position"}
    assert set(raw["m_lines"][0]) == {"lengthcm", "line"}
    assert len(raw["m_lines"][0]["line"]) == 6


def test_frame_time_is_timestamp_extension():
    frame = _sample_frame()
    raw = msgpack.unpackb(pack_frame(frame), raw=False)
    assert raw["m_time"].to_unix_nano() == frame.time


def test_frame_missing_entries_take_defaults():
    decoded = unpack_frame(msgpack.packb({}))
    assert decoded.time == 0
    assert decoded.markers == []
    assert decoded.lines == []


def test_frame_rejects_bad_position():
    payload = msgpack.packb({"m_markers": [{"id": 1, "position": [1.0, 2.0]}]})
    with pytest.raises(ValueError):
        unpack_frame(payload)


def test_frame_rejects_bad_line():
    payload = msgpack.packb({"m_lines": [{"lengthcm": 1.0, "line": [1.0, 2.0, 3.0]}]})
    with pytest.raises(ValueError):
        unpack_frame(payload)


def test_frame_rejects_non_timestamp_time():
    with pytest.raises(ValueError):
        unpack_frame(msgpack.packb({"m_time": 5}))


def test_frame_rejects_non_map():
    with pytest.raises(ValueError):
        unpack_frame(msgpack.packb([1, 2, 3]))