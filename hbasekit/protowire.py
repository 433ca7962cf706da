"""Protocol buffers wire-format encoding for filter and comparator messages."""

from __future__ import annotations

import struct

VARINT = 0
FIXED64 = 1
LENGTH_DELIMITED = 2
FIXED32 = 5

_MAX_VARINT_LEN = 10


def encode_varint(value: int) -> bytes:
    """Encode an integer as a base-128 varint; negatives use 64-bit two's complement."""
    value = int(value)
    if value < -(1 << 63) or value >= 1 << 64:
        raise ValueError(f"value {value} does not fit in 64 bits")
    if value < 0:
        value += 1 << 64
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _tag(number: int, wire_type: int) -> bytes:
    if number < 1:
        raise ValueError(f"invalid field number {number}")
    return encode_varint((number << 3) | wire_type)


def varint_field(number: int, value: int | None) -> bytes:
    """Encode an integer or enum field; None leaves the field out."""
    if value is None:
        return b""
    return _tag(number, VARINT) + encode_varint(int(value))


def bool_field(number: int, value: bool | None) -> bytes:
    """Encode a bool field; None leaves the field out."""
    if value is None:
        return b""
    return _tag(number, VARINT) + encode_varint(1 if value else 0)


def float_field(number: int, value: float | None) -> bytes:
    """Encode a 32-bit float field; None leaves the field out."""
    if value is None:
        return b""
    return _tag(number, FIXED32) + struct.pack("<f", value)


def bytes_field(number: int, value: bytes | str | None) -> bytes:
    """Encode a bytes, string or embedded message field; None leaves the field out."""
    if value is None:
        return b""
    if isinstance(value, str):
        value = value.encode("utf-8")
    value = bytes(value)
    return _tag(number, LENGTH_DELIMITED) + encode_varint(len(value)) + value


def _read_varint(data: bytes, pos: int) -> tuple[int, int]:
    value = 0
    for shift_index in range(_MAX_VARINT_LEN):
        if pos >= len(data):
            raise ValueError("truncated varint")
        byte = data[pos]
        pos += 1
        value |= (byte & 0x7F) << (7 * shift_index)
        if byte < 0x80:
            return value, pos
    raise ValueError("varint is too long")


def _take(data: bytes, pos: int, length: int) -> tuple[bytes, int]:
    end = pos + length
    if end > len(data):
        raise ValueError("truncated field")
    return data[pos:end], end


def decode_fields(data: bytes) -> list[tuple[int, int, int | bytes]]:
    """Split an encoded message into (field number, wire type, value) tuples."""
    data = bytes(data)
    fields: list[tuple[int, int, int | bytes]] = []
    pos = 0
    while pos < len(data):
        key, pos = _read_varint(data, pos)
        number, wire_type = key >> 3, key & 0x07
        if number == 0:
            raise ValueError("invalid field number 0")
        value: int | bytes
        if wire_type == VARINT:
            value, pos = _read_varint(data, pos)
        elif wire_type == LENGTH_DELIMITED:
            length, pos = _read_varint(data, pos)
            value, pos = _take(data, pos, length)
        elif wire_type == FIXED32:
            value, pos = _take(data, pos, 4)
        elif wire_type == FIXED64:
            value, pos = _take(data, pos, 8)
        else:
            raise ValueError(f"unsupported wire type {wire_type}")
        fields.append((number, wire_type, value))
    return fields