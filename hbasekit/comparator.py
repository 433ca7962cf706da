"""Comparators used by compare-style filters, encoded as server comparator messages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum

from .protowire import bytes_field, varint_field

COMPARATOR_PATH = "org.apache.hadoop.hbase.filter."


class BitwiseOp(IntEnum):
    """Bitwise operation applied by a BitComparator."""

    AND = 1
    OR = 2
    XOR = 3


@dataclass(frozen=True)
class PBComparator:
    """A comparator ready for the wire: its server class name and serialized body."""

    name: str
    serialized_comparator: bytes | None = None

    def serialize(self) -> bytes:
        return bytes_field(1, self.name) + bytes_field(2, self.serialized_comparator)


class Comparator(ABC):
    """Something that can be turned into a PBComparator."""

    @abstractmethod
    def construct_pb_comparator(self) -> PBComparator:
        """Build the wire representation of this comparator."""


def _pb_comparator(kind: str, payload: bytes) -> PBComparator:
    return PBComparator(COMPARATOR_PATH + kind, payload)


def _required(name: str, value):
    if value is None:
        raise ValueError(f"required field {name} not set")
    return value


@dataclass
class ByteArrayComparable:
    """The byte value compared against."""

    value: bytes | None = None

    def serialize(self) -> bytes:
        return bytes_field(1, self.value)


def _comparable_field(comparable: ByteArrayComparable | None) -> bytes:
    return bytes_field(1, _required("comparable", comparable).serialize())


@dataclass
class BinaryComparator(Comparator):
    comparable: ByteArrayComparable

    def construct_pb_comparator(self) -> PBComparator:
        return _pb_comparator("BinaryComparator", _comparable_field(self.comparable))


@dataclass
class LongComparator(Comparator):
    comparable: ByteArrayComparable

    def construct_pb_comparator(self) -> PBComparator:
        return _pb_comparator("LongComparator", _comparable_field(self.comparable))


@dataclass
class BinaryPrefixComparator(Comparator):
    comparable: ByteArrayComparable

    def construct_pb_comparator(self) -> PBComparator:
        return _pb_comparator("BinaryPrefixComparator", _comparable_field(self.comparable))


@dataclass
class BitComparator(Comparator):
    bitwise_op: int
    comparable: ByteArrayComparable

    def construct_pb_comparator(self) -> PBComparator:
        if self.bitwise_op is None or not 1 <= int(self.bitwise_op) <= 3:
            raise ValueError("invalid bitwise operator specified")
        payload = _comparable_field(self.comparable) + varint_field(2, int(self.bitwise_op))
        return _pb_comparator("BitComparator", payload)


@dataclass
class NullComparator(Comparator):
    def construct_pb_comparator(self) -> PBComparator:
        return _pb_comparator("NullComparator", b"")


@dataclass
class RegexStringComparator(Comparator):
    pattern: str
    pattern_flags: int
    charset: str
    engine: str | None = None

    def construct_pb_comparator(self) -> PBComparator:
        payload = (
            bytes_field(1, _required("pattern", self.pattern))
            + varint_field(2, _required("pattern_flags", self.pattern_flags))
            + bytes_field(3, _required("charset", self.charset))
            + bytes_field(4, self.engine)
        )
        return _pb_comparator("RegexStringComparator", payload)


@dataclass
class SubstringComparator(Comparator):
    substr: str

    def construct_pb_comparator(self) -> PBComparator:
        payload = bytes_field(1, _required("substr", self.substr))
        return _pb_comparator("SubstringComparator", payload)