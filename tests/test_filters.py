import pytest

from hbasekit.comparator import BinaryComparator, ByteArrayComparable, BitComparator
from hbasekit.filters import (
    FILTER_PATH,
    BytesBytesPair,
    ColumnCountGetFilter,
    ColumnPaginationFilter,
    ColumnPrefixFilter,
    ColumnRangeFilter,
    CompareFilter,
    CompareType,
    DependentColumnFilter,
    FamilyFilter,
    FilterList,
    FirstKeyOnlyFilter,
    FirstKeyValueMatchingQualifiersFilter,
    FuzzyRowFilter,
    InclusiveStopFilter,
    KeyOnlyFilter,
    ListOperator,
    MultipleColumnPrefixFilter,
    PBFilter,
    Wrapper,
)
from hbasekit.protowire import LENGTH_DELIMITED, VARINT, decode_fields


def _compare_filter():
    return CompareFilter(CompareType.EQUAL, BinaryComparator(ByteArrayComparable(b"v")))


def test_column_count_get_filter():
    pb = ColumnCountGetFilter(5).construct_pb_filter()
    assert pb.name == FILTER_PATH + "ColumnCountGetFilter"
    assert decode_fields(pb.serialized_filter) == [(1, VARINT, 5)]


def test_column_pagination_filter_fields():
    pb = ColumnPaginationFilter(10, 2, b"col").construct_pb_filter()
    assert decode_fields(pb.serialized_filter) == [
        (1, VARINT, 10),
        (2, VARINT, 2),
        (3, LENGTH_DELIMITED, b"col"),
    ]


def test_column_pagination_filter_without_offset_column():
    pb = ColumnPaginationFilter(10, 2, None).construct_pb_filter()
    assert [f[0] for f in decode_fields(pb.serialized_filter)] == [1, 2]


def test_column_prefix_filter():
    pb = ColumnPrefixFilter(b"pre").construct_pb_filter()
    assert decode_fields(pb.serialized_filter) == [(1, LENGTH_DELIMITED, b"pre")]


def test_column_prefix_filter_requires_prefix():
    with pytest.raises(ValueError):
        ColumnPrefixFilter(None).construct_pb_filter()


def test_column_range_filter_field_order():
    pb = ColumnRangeFilter(b"a", b"z", True, False).construct_pb_filter()
    assert decode_fields(pb.serialized_filter) == [
        (1, LENGTH_DELIMITED, b"a"),
        (2, VARINT, 1),
        (3, LENGTH_DELIMITED, b"z"),
        (4, VARINT, 0),
    ]


def test_compare_filter_embeds_comparator():
    cf = _compare_filter()
    pb = cf.construct_pb_filter()
    assert pb.name == FILTER_PATH + "CompareFilter"
    fields = decode_fields(pb.serialized_filter)
    assert fields[0] == (1, VARINT, int(CompareType.EQUAL))
    assert fields[1] == (2, LENGTH_DELIMITED, cf.comparator.serialize())


def test_compare_filter_propagates_comparator_error():
    with pytest.raises(ValueError):
        CompareFilter(CompareType.LESS, BitComparator(7, ByteArrayComparable(b"x")))


def test_dependent_column_filter():
    cf = _compare_filter()
    pb = DependentColumnFilter(cf, b"fam", b"qual", True).construct_pb_filter()
    fields = decode_fields(pb.serialized_filter)
    assert fields[0] == (1, LENGTH_DELIMITED, cf.construct_pb_filter().serialized_filter)
    assert fields[1:] == [
        (2, LENGTH_DELIMITED, b"fam"),
        (3, LENGTH_DELIMITED, b"qual"),
        (4, VARINT, 1),
    ]


def test_family_filter_embeds_compare_filter():
    cf = _compare_filter()
    pb = FamilyFilter(cf).construct_pb_filter()
    assert pb.name == FILTER_PATH + "FamilyFilter"
    assert decode_fields(pb.serialized_filter) == [
        (1, LENGTH_DELIMITED, cf.construct_pb_filter().serialized_filter)
    ]


def test_family_filter_requires_compare_filter():
    with pytest.raises(ValueError):
        FamilyFilter(None).construct_pb_filter()


def test_filter_list_serializes_children():
    first, second = KeyOnlyFilter(True), FirstKeyOnlyFilter()
    pb = FilterList(ListOperator.MUST_PASS_ONE, first, second).construct_pb_filter()
    assert pb.name == FILTER_PATH + "FilterList"
    assert decode_fields(pb.serialized_filter) == [
        (1, VARINT, int(ListOperator.MUST_PASS_ONE)),
        (2, LENGTH_DELIMITED, first.construct_pb_filter().serialize()),
        (2, LENGTH_DELIMITED, second.construct_pb_filter().serialize()),
    ]


def test_filter_list_add_filters():
    flist = FilterList(ListOperator.MUST_PASS_ALL)
    flist.add_filters(KeyOnlyFilter(False), InclusiveStopFilter(b"stop"))
    assert flist.filters == [
        KeyOnlyFilter(False).construct_pb_filter(),
        InclusiveStopFilter(b"stop").construct_pb_filter(),
    ]


@pytest.mark.parametrize("operator", [0, 3])
def test_filter_list_invalid_operator(operator):
    with pytest.raises(ValueError, match="invalid operator"):
        FilterList(operator).construct_pb_filter()


def test_wrapper_wraps_filter():
    inner = KeyOnlyFilter(True)
    pb = Wrapper(inner).construct_pb_filter()
    assert pb.name == FILTER_PATH + "FilterWrapper"
    assert decode_fields(pb.serialized_filter) == [
        (1, LENGTH_DELIMITED, inner.construct_pb_filter().serialize())
    ]


def test_first_key_only_filter_has_empty_body():
    pb = FirstKeyOnlyFilter().construct_pb_filter()
    assert pb.serialized_filter == b""
    assert decode_fields(pb.serialize()) == [
        (1, LENGTH_DELIMITED, (FILTER_PATH + "FirstKeyOnlyFilter").encode()),
        (2, LENGTH_DELIMITED, b""),
    ]


def test_first_key_value_matching_qualifiers():
    pb = FirstKeyValueMatchingQualifiersFilter([b"a", b"b"]).construct_pb_filter()
    assert decode_fields(pb.serialized_filter) == [
        (1, LENGTH_DELIMITED, b"a"),
        (1, LENGTH_DELIMITED, b"b"),
    ]


def test_fuzzy_row_filter_pairs():
    pb = FuzzyRowFilter([BytesBytesPair(b"row", b"\x00\x01\x00")]).construct_pb_filter()
    [(number, wire_type, inner)] = decode_fields(pb.serialized_filter)
    assert (number, wire_type) == (1, LENGTH_DELIMITED)
    assert decode_fields(inner) == [
        (1, LENGTH_DELIMITED, b"row"),
        (2, LENGTH_DELIMITED, b"\x00\x01\x00"),
    ]


def test_fuzzy_row_filter_requires_pair_members():
    with pytest.raises(ValueError):
        FuzzyRowFilter([BytesBytesPair(None, b"x")]).construct_pb_filter()


def test_inclusive_stop_filter_optional_key():
    assert InclusiveStopFilter().construct_pb_filter().serialized_filter == b""
    pb = InclusiveStopFilter(b"end").construct_pb_filter()
    assert decode_fields(pb.serialized_filter) == [(1, LENGTH_DELIMITED, b"end")]


def test_key_only_filter():
    pb = KeyOnlyFilter(True).construct_pb_filter()
    assert pb.name == FILTER_PATH + "KeyOnlyFilter"
    assert decode_fields(pb.serialized_filter) == [(1, VARINT, 1)]


def test_multiple_column_prefix_filter():
    pb = MultipleColumnPrefixFilter([b"p1", b"p2"]).construct_pb_filter()
    assert decode_fields(pb.serialized_filter) == [
        (1, LENGTH_DELIMITED, b"p1"),
        (1, LENGTH_DELIMITED, b"p2"),
    ]


def test_pb_filter_serialize_round_trip():
    pb = PBFilter("name", b"body")
    assert decode_fields(pb.serialize()) == [
        (1, LENGTH_DELIMITED, b"name"),
        (2, LENGTH_DELIMITED, b"body"),
    ]