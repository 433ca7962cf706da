"""Server-side filters, encoded as the filter messages region servers expect."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum

from .comparator import Comparator, PBComparator
from .protowire import bool_field, bytes_field, varint_field

FILTER_PATH = "org.apache.hadoop.hbase.filter."


class ListOperator(IntEnum):
    """How the filters of a FilterList are combined."""

    MUST_PASS_ALL = 1
    MUST_PASS_ONE = 2


class CompareType(IntEnum):
    """Comparison applied by compare-style filters."""

    LESS = 0
    LESS_OR_EQUAL = 1
    EQUAL = 2
    NOT_EQUAL = 3
    GREATER_OR_EQUAL = 4
    GREATER = 5
    NO_OP = 6


@dataclass(frozen=True)
class PBFilter:
    """A filter ready for the wire: its server class name and serialized body."""

    name: str
    serialized_filter: bytes | None = None

    def serialize(self) -> bytes:
        return bytes_field(1, self.name) + bytes_field(2, self.serialized_filter)


class Filter(ABC):
    """Something that can be turned into a PBFilter."""

    @abstractmethod
    def construct_pb_filter(self) -> PBFilter:
        """Build the wire representation of this filter."""


def _pb_filter(kind: str, payload: bytes) -> PBFilter:
    return PBFilter(FILTER_PATH + kind, payload)


def _required(name: str, value):
    if value is None:
        raise ValueError(f"required field {name} not set")
    return value


def _repeated_bytes(number: int, values) -> bytes:
    return b"".join(bytes_field(number, value) for value in values or ())


@dataclass
class BytesBytesPair:
    """A pair of byte strings, as used by FuzzyRowFilter."""

    first: bytes
    second: bytes


def _encode_pair(pair: BytesBytesPair) -> bytes:
    return bytes_field(1, _required("first", pair.first)) + bytes_field(
        2, _required("second", pair.second)
    )


class FilterList(Filter):
    """Combines several filters with a ListOperator."""

    def __init__(self, operator: int, *filters: Filter) -> None:
        self.operator = operator
        self.filters: list[PBFilter] = []
        self.add_filters(*filters)

    def __repr__(self) -> str:
        return f"FilterList(operator={self.operator!r}, filters={self.filters!r})"

    def add_filters(self, *filters: Filter) -> None:
        """Build each filter's wire form and append it to the list."""
        self.filters.extend(f.construct_pb_filter() for f in filters)

    def construct_pb_filter(self) -> PBFilter:
        if self.operator is None or not 1 <= int(self.operator) <= 2:
            raise ValueError("invalid operator specified")
        payload = varint_field(1, int(self.operator)) + b"".join(
            bytes_field(2, f.serialize()) for f in self.filters
        )
        return _pb_filter("FilterList", payload)


@dataclass
class ColumnCountGetFilter(Filter):
    limit: int

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("ColumnCountGetFilter", varint_field(1, _required("limit", self.limit)))


@dataclass
class ColumnPaginationFilter(Filter):
    limit: int
    offset: int | None = None
    column_offset: bytes | None = None

    def construct_pb_filter(self) -> PBFilter:
        payload = (
            varint_field(1, _required("limit", self.limit))
            + varint_field(2, self.offset)
            + bytes_field(3, self.column_offset)
        )
        return _pb_filter("ColumnPaginationFilter", payload)


@dataclass
class ColumnPrefixFilter(Filter):
    prefix: bytes

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("ColumnPrefixFilter", bytes_field(1, _required("prefix", self.prefix)))


@dataclass
class ColumnRangeFilter(Filter):
    min_column: bytes | None
    max_column: bytes | None
    min_column_inclusive: bool | None = None
    max_column_inclusive: bool | None = None

    def construct_pb_filter(self) -> PBFilter:
        payload = (
            bytes_field(1, self.min_column)
            + bool_field(2, self.min_column_inclusive)
            + bytes_field(3, self.max_column)
            + bool_field(4, self.max_column_inclusive)
        )
        return _pb_filter("ColumnRangeFilter", payload)


class CompareFilter(Filter):
    """A comparison operator together with the comparator it applies."""

    def __init__(self, compare_op: int, comparator: Comparator) -> None:
        self.compare_op = compare_op
        self.comparator: PBComparator = comparator.construct_pb_comparator()

    def __repr__(self) -> str:
        return f"CompareFilter(compare_op={self.compare_op!r}, comparator={self.comparator!r})"

    def _message(self) -> bytes:
        return varint_field(1, _required("compare_op", self.compare_op)) + bytes_field(
            2, self.comparator.serialize()
        )

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("CompareFilter", self._message())


def _compare_field(compare_filter: CompareFilter | None) -> bytes:
    return bytes_field(1, _required("compare_filter", compare_filter)._message())


@dataclass
class DependentColumnFilter(Filter):
    compare_filter: CompareFilter
    column_family: bytes | None = None
    column_qualifier: bytes | None = None
    drop_dependent_column: bool | None = None

    def construct_pb_filter(self) -> PBFilter:
        payload = (
            _compare_field(self.compare_filter)
            + bytes_field(2, self.column_family)
            + bytes_field(3, self.column_qualifier)
            + bool_field(4, self.drop_dependent_column)
        )
        return _pb_filter("DependentColumnFilter", payload)


@dataclass
class FamilyFilter(Filter):
    compare_filter: CompareFilter

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("FamilyFilter", _compare_field(self.compare_filter))


class Wrapper(Filter):
    """Wraps another filter."""

    def __init__(self, wrapped_filter: Filter) -> None:
        self.filter: PBFilter = wrapped_filter.construct_pb_filter()

    def __repr__(self) -> str:
        return f"Wrapper(filter={self.filter!r})"

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("FilterWrapper", bytes_field(1, self.filter.serialize()))


@dataclass
class FirstKeyOnlyFilter(Filter):
    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("FirstKeyOnlyFilter", b"")


@dataclass
class FirstKeyValueMatchingQualifiersFilter(Filter):
    qualifiers: list[bytes] = field(default_factory=list)

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter(
            "FirstKeyValueMatchingQualifiersFilter", _repeated_bytes(1, self.qualifiers)
        )


@dataclass
class FuzzyRowFilter(Filter):
    pairs: list[BytesBytesPair] = field(default_factory=list)

    def construct_pb_filter(self) -> PBFilter:
        payload = b"".join(bytes_field(1, _encode_pair(pair)) for pair in self.pairs)
        return _pb_filter("FuzzyRowFilter", payload)


@dataclass
class InclusiveStopFilter(Filter):
    stop_row_key: bytes | None = None

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("InclusiveStopFilter", bytes_field(1, self.stop_row_key))


@dataclass
class KeyOnlyFilter(Filter):
    len_as_val: bool

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("KeyOnlyFilter", bool_field(1, _required("len_as_val", self.len_as_val)))


@dataclass
class MultipleColumnPrefixFilter(Filter):
    sorted_prefixes: list[bytes] = field(default_factory=list)

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("MultipleColumnPrefixFilter", _repeated_bytes(1, self.sorted_prefixes))