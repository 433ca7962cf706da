"""Row, value and composite filters, encoded as the filter messages region servers expect."""

from __future__ import annotations

from dataclasses import dataclass, field

from .comparator import Comparator, PBComparator
from .filters import CompareFilter, Filter, PBFilter
from .protowire import bool_field, bytes_field, encode_varint, float_field, varint_field

FILTER_PATH = "org.apache.hadoop.hbase.filter."


def _pb_filter(kind: str, payload: bytes) -> PBFilter:
    return PBFilter(FILTER_PATH + kind, payload)


def _required(name: str, value):
    if value is None:
        raise ValueError(f"required field {name} not set")
    return value


def _compare_field(compare_filter: CompareFilter | None) -> bytes:
    message = _required("compare_filter", compare_filter).construct_pb_filter().serialized_filter
    return bytes_field(1, message or b"")


@dataclass
class PageFilter(Filter):
    page_size: int

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("PageFilter", varint_field(1, _required("page_size", self.page_size)))


@dataclass
class PrefixFilter(Filter):
    prefix: bytes | None = None

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("PrefixFilter", bytes_field(1, self.prefix))


@dataclass
class QualifierFilter(Filter):
    compare_filter: CompareFilter

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("QualifierFilter", _compare_field(self.compare_filter))


@dataclass
class RandomRowFilter(Filter):
    chance: float

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("RandomRowFilter", float_field(1, _required("chance", self.chance)))


@dataclass
class RowFilter(Filter):
    compare_filter: CompareFilter

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("RowFilter", _compare_field(self.compare_filter))


class SingleColumnValueFilter(Filter):
    """Filters rows by comparing the value of one column."""

    def __init__(
        self,
        column_family: bytes | None,
        column_qualifier: bytes | None,
        compare_op: int,
        comparator: Comparator,
        filter_if_missing: bool | None = None,
        latest_version_only: bool | None = None,
    ) -> None:
        self.column_family = column_family
        self.column_qualifier = column_qualifier
        self.compare_op = compare_op
        self.comparator: PBComparator = comparator.construct_pb_comparator()
        self.filter_if_missing = filter_if_missing
        self.latest_version_only = latest_version_only

    def __repr__(self) -> str:
        return (
            f"SingleColumnValueFilter(column_family={self.column_family!r}, "
            f"column_qualifier={self.column_qualifier!r}, compare_op={self.compare_op!r}, "
            f"comparator={self.comparator!r}, filter_if_missing={self.filter_if_missing!r}, "
            f"latest_version_only={self.latest_version_only!r})"
        )

    def _message(self) -> bytes:
        return (
            bytes_field(1, self.column_family)
            + bytes_field(2, self.column_qualifier)
            + varint_field(3, int(_required("compare_op", self.compare_op)))
            + bytes_field(4, _required("comparator", self.comparator).serialize())
            + bool_field(5, self.filter_if_missing)
            + bool_field(6, self.latest_version_only)
        )

    def construct_pb(self) -> bytes:
        """Validate the compare operation and return the serialized filter message."""
        if self.compare_op is None or not 0 <= int(self.compare_op) <= 6:
            raise ValueError("invalid compare operation specified")
        return self._message()

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("SingleColumnValueFilter", self._message())


@dataclass
class SingleColumnValueExcludeFilter(Filter):
    single_column_value_filter: SingleColumnValueFilter

    def construct_pb_filter(self) -> PBFilter:
        inner = _required("single_column_value_filter", self.single_column_value_filter)
        return _pb_filter("SingleColumnValueExcludeFilter", bytes_field(1, inner._message()))


class SkipFilter(Filter):
    """Skips whole rows when any cell fails the wrapped filter."""

    def __init__(self, skipping_filter: Filter) -> None:
        self.filter: PBFilter = skipping_filter.construct_pb_filter()

    def __repr__(self) -> str:
        return f"SkipFilter(filter={self.filter!r})"

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("SkipFilter", bytes_field(1, self.filter.serialize()))


@dataclass
class TimestampsFilter(Filter):
    timestamps: list[int] = field(default_factory=list)
    can_hint: bool | None = None

    def construct_pb_filter(self) -> PBFilter:
        payload = b""
        if self.timestamps:
            payload = bytes_field(1, b"".join(encode_varint(ts) for ts in self.timestamps))
        payload += bool_field(2, self.can_hint)
        return _pb_filter("TimestampsFilter", payload)


@dataclass
class ValueFilter(Filter):
    compare_filter: CompareFilter

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("ValueFilter", _compare_field(self.compare_filter))


class WhileMatchFilter(Filter):
    """Stops the scan as soon as the wrapped filter rejects a row."""

    def __init__(self, matching_filter: Filter) -> None:
        self.filter: PBFilter = matching_filter.construct_pb_filter()

    def __repr__(self) -> str:
        return f"WhileMatchFilter(filter={self.filter!r})"

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("WhileMatchFilter", bytes_field(1, self.filter.serialize()))


@dataclass
class AllFilter(Filter):
    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("FilterAllFilter", b"")


@dataclass
class RowRange(Filter):
    start_row: bytes | None
    stop_row: bytes | None
    start_row_inclusive: bool | None = None
    stop_row_inclusive: bool | None = None

    def _message(self) -> bytes:
        return (
            bytes_field(1, self.start_row)
            + bool_field(2, self.start_row_inclusive)
            + bytes_field(3, self.stop_row)
            + bool_field(4, self.stop_row_inclusive)
        )

    def construct_pb_filter(self) -> PBFilter:
        return _pb_filter("RowRange", self._message())


@dataclass
class MultiRowRangeFilter(Filter):
    row_range_list: list[RowRange] = field(default_factory=list)

    def construct_pb_filter(self) -> PBFilter:
        payload = b"".join(bytes_field(1, rr._message()) for rr in self.row_range_list)
        return _pb_filter("MultiRowRangeFilter", payload)