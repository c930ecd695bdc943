"""MessagePack encoding of detected points and frames.

Floats travel as single precision and timestamps as the MessagePack
timestamp extension (type -1) in its 32, 64 or 96 bit form.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable
from typing import Any

import msgpack

from rpimocap.frame import Frame, LineSegment, Marker
from rpimocap.geometry import Line3D

_NS_PER_SECOND = 1_000_000_000
_SECONDS_MASK_34 = 0x00000003FFFFFFFF


def encode_timestamp(nanoseconds: int) -> bytes:
    """Body of a timestamp extension for nanoseconds since the epoch."""
    seconds, nanos = divmod(int(nanoseconds), _NS_PER_SECOND)
    if seconds >> 34 == 0:
        data64 = (nanos << 34) | seconds
        if data64 & 0xFFFFFFFF00000000 == 0:
            return struct.pack(">I", data64)
        return struct.pack(">Q", data64)
    return struct.pack(">Iq", nanos, seconds)


def decode_timestamp(data: bytes) -> int:
    """Nanoseconds since the epoch from a timestamp extension body."""
    body = bytes(data)
    if len(body) == 4:
        (seconds,) = struct.unpack(">I", body)
        return seconds * _NS_PER_SECOND
    if len(body) == 8:
        (value,) = struct.unpack(">Q", body)
        nanos = value >> 34
        seconds = value & _SECONDS_MASK_34
        return seconds * _NS_PER_SECOND + nanos
    if len(body) == 12:
        nanos, seconds = struct.unpack(">Iq", body)
        return seconds * _NS_PER_SECOND + nanos
    raise ValueError(f"invalid timestamp length: {len(body)}")


def _pack(obj: Any) -> bytes:
    return msgpack.packb(obj, use_single_float=True)


def _unpack(payload: bytes) -> Any:
    try:
        return msgpack.unpackb(payload, raw=False)
    except ValueError:
        raise
    except Exception as exc:  # malformed input surfaces as various msgpack errors
        raise ValueError(f"invalid payload: {exc}") from exc


def _numbers(value: Any, count: int, what: str) -> list[float]:
    if not isinstance(value, (list, tuple)) or len(value) != count:
        raise ValueError(f"{what} must be an array of {count} numbers")
    if not all(isinstance(item, (int, float)) and not isinstance(item, bool) for item in value):
        raise ValueError(f"{what} must hold only numbers")
    return [float(item) for item in value]


def pack_points(points: Iterable) -> bytes:
    """Encode 2D image points as an array of [x, y] arrays."""
    return _pack([[float(x), float(y)] for x, y in points])


def unpack_points(payload: bytes) -> list[tuple[float, float]]:
    """Decode what pack_points produced."""
    data = _unpack(payload)
    if not isinstance(data, list):
        raise ValueError("points payload must be an array")
    result = []
    for item in data:
        x, y = _numbers(item, 2, "point")
        result.append((x, y))
    return result


def _line_to_wire(line: Line3D) -> list[float]:
    return [float(v) for v in line.origin] + [float(v) for v in line.direction]


def _line_from_wire(value: Any) -> Line3D:
    numbers = _numbers(value, 6, "line")
    return Line3D(origin=numbers[:3], direction=numbers[3:])


def pack_frame(frame: Frame) -> bytes:
    """Encode a frame as a map of its time, markers and lines."""
    data = {
        "m_time": msgpack.Timestamp.from_bytes(encode_timestamp(frame.time)),
        "m_markers": [
            {"id": int(marker.id), "position": [float(v) for v in marker.position]}
            for marker in frame.markers
        ],
        "m_lines": [
            {"lengthcm": float(segment.length_cm), "line": _line_to_wire(segment.line)}
            for segment in frame.lines
        ],
    }
    return _pack(data)


def _marker_from_wire(value: Any) -> Marker:
    if not isinstance(value, dict):
        raise ValueError("marker must be a map")
    marker = Marker()
    if "id" in value:
        marker_id = value["id"]
        if not isinstance(marker_id, int) or isinstance(marker_id, bool) or marker_id < 0:
            raise ValueError("marker id must be a non-negative integer")
        marker.id = marker_id
    if "position" in value:
        marker.position = Marker(position=_numbers(value["position"], 3, "position")).position
    return marker


def _segment_from_wire(value: Any) -> LineSegment:
    if not isinstance(value, dict):
        raise ValueError("line segment must be a map")
    if "line" in value:
        line = _line_from_wire(value["line"])
    else:
        line = Line3D(origin=[0.0, 0.0, 0.0], direction=[0.0, 0.0, 0.0])
    segment = LineSegment(line=line)
    if "lengthcm" in value:
        (segment.length_cm,) = _numbers([value["lengthcm"]], 1, "lengthcm")
    return segment


def unpack_frame(payload: bytes) -> Frame:
    """Decode what pack_frame produced; absent entries keep their defaults."""
    data = _unpack(payload)
    if not isinstance(data, dict):
        raise ValueError("frame payload must be a map")

    time = 0
    if "m_time" in data:
        stamp = data["m_time"]
        if not isinstance(stamp, msgpack.Timestamp):
            raise ValueError("frame time must be a timestamp")
        time = decode_timestamp(stamp.to_bytes())

    markers_raw = data.get("m_markers", [])
    lines_raw = data.get("m_lines", [])
    if not isinstance(markers_raw, list) or not isinstance(lines_raw, list):
        raise ValueError("frame markers and lines must be arrays")

    return Frame(
        time=time,
        lines=[_segment_from_wire(item) for item in lines_raw],
        markers=[_marker_from_wire(item) for item in markers_raw],
    )