"""Snappy block compression codec for cell blocks."""

from __future__ import annotations

from .codec import Codec

# Buffer length (256 KiB) of the server-side codec minus snappy overhead.
_SNAPPY_CHUNK_LEN = 256 * 1024 * 5 // 6 - 32

_MAX_BLOCK_SIZE = 65536
_MIN_NON_LITERAL_BLOCK_SIZE = 17
_MAX_DECODED_LEN = 0xFFFFFFFF

_CORRUPT = "snappy: corrupt input"
_TOO_LARGE = "snappy: decoded block is too large"


class SnappyError(ValueError):
    """Raised when a snappy block cannot be decoded."""


def _encode_uvarint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _read_uvarint(data: bytes) -> tuple[int, int]:
    value = 0
    shift = 0
    for pos, byte in enumerate(data[:10]):
        if byte < 0x80:
            if pos == 9 and byte > 1:
                raise SnappyError(_CORRUPT)
            return value | (byte << shift), pos + 1
        value |= (byte & 0x7F) << shift
        shift += 7
    raise SnappyError(_CORRUPT)


def _emit_literal(out: bytearray, literal: bytes) -> None:
    n = len(literal) - 1
    if n < 60:
        out.append(n << 2)
    else:
        size = (n.bit_length() + 7) // 8
        out.append((59 + size) << 2)
        out += n.to_bytes(size, "little")
    out += literal


def _emit_copy2(out: bytearray, offset: int, length: int) -> None:
    out.append(2 | ((length - 1) << 2))
    out += offset.to_bytes(2, "little")


def _emit_copy(out: bytearray, offset: int, length: int) -> None:
    while length >= 68:
        _emit_copy2(out, offset, 64)
        length -= 64
    if length > 64:
        _emit_copy2(out, offset, 60)
        length -= 60
    if length >= 12 or offset >= 2048:
        _emit_copy2(out, offset, length)
    else:
        out.append(1 | ((length - 4) << 2) | ((offset >> 8) << 5))
        out.append(offset & 0xFF)


def _encode_fragment(block: bytes, out: bytearray) -> None:
    size = len(block)
    if size < _MIN_NON_LITERAL_BLOCK_SIZE:
        _emit_literal(out, block)
        return
    last_seen: dict[bytes, int] = {}
    literal_start = 0
    pos = 0
    while pos <= size - 4:
        window = block[pos : pos + 4]
        candidate = last_seen.get(window)
        last_seen[window] = pos
        if candidate is None:
            pos += 1
            continue
        length = 4
        while pos + length < size and block[candidate + length] == block[pos + length]:
            length += 1
        if literal_start < pos:
            _emit_literal(out, block[literal_start:pos])
        _emit_copy(out, pos - candidate, length)
        pos += length
        literal_start = pos
    if literal_start < size:
        _emit_literal(out, block[literal_start:])


def compress_block(data: bytes) -> bytes:
    """Compress ``data`` into a single snappy block (length preamble included)."""
    data = bytes(data)
    out = bytearray(_encode_uvarint(len(data)))
    for start in range(0, len(data), _MAX_BLOCK_SIZE):
        _encode_fragment(data[start : start + _MAX_BLOCK_SIZE], out)
    return bytes(out)


def decompress_block(data: bytes) -> bytes:
    """Decompress a snappy block, raising SnappyError on malformed input."""
    data = bytes(data)
    expected, pos = _read_uvarint(data)
    if expected > _MAX_DECODED_LEN:
        raise SnappyError(_TOO_LARGE)
    out = bytearray()
    size = len(data)
    while pos < size:
        tag = data[pos]
        kind = tag & 0x03
        if kind == 0:
            x = tag >> 2
            pos += 1
            if x >= 60:
                extra = x - 59
                if pos + extra > size:
                    raise SnappyError(_CORRUPT)
                x = int.from_bytes(data[pos : pos + extra], "little")
                pos += extra
            length = x + 1
            if length > expected - len(out) or length > size - pos:
                raise SnappyError(_CORRUPT)
            out += data[pos : pos + length]
            pos += length
            continue
        if kind == 1:
            if pos + 2 > size:
                raise SnappyError(_CORRUPT)
            length = 4 + ((tag >> 2) & 0x07)
            offset = ((tag & 0xE0) << 3) | data[pos + 1]
            pos += 2
        elif kind == 2:
            if pos + 3 > size:
                raise SnappyError(_CORRUPT)
            length = 1 + (tag >> 2)
            offset = int.from_bytes(data[pos + 1 : pos + 3], "little")
            pos += 3
        else:
            if pos + 5 > size:
                raise SnappyError(_CORRUPT)
            length = 1 + (tag >> 2)
            offset = int.from_bytes(data[pos + 1 : pos + 5], "little")
            pos += 5
        produced = len(out)
        if offset <= 0 or offset > produced or length > expected - produced:
            raise SnappyError(_CORRUPT)
        start = produced - offset
        if offset >= length:
            out += out[start : start + length]
        else:
            for k in range(length):
                out.append(out[start + k])
    if len(out) != expected:
        raise SnappyError(_CORRUPT)
    return bytes(out)


class SnappyCodec(Codec):
    """Codec matching the server's org.apache.hadoop.io.compress.SnappyCodec."""

    def encode(self, src: bytes, dst: bytes = b"") -> tuple[bytes, int]:
        chunk = compress_block(src or b"")
        return bytes(dst or b"") + chunk, len(chunk)

    def decode(self, src: bytes, dst: bytes = b"") -> tuple[bytes, int]:
        chunk = decompress_block(src or b"")
        return bytes(dst or b"") + chunk, len(chunk)

    def chunk_len(self) -> int:
        return _SNAPPY_CHUNK_LEN

    def cell_block_compressor_class(self) -> str:
        return "org.apache.hadoop.io.compress.SnappyCodec"