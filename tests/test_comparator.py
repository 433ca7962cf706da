import pytest

from hbasekit.comparator import (
    COMPARATOR_PATH,
    BinaryComparator,
    BinaryPrefixComparator,
    BitComparator,
    BitwiseOp,
    ByteArrayComparable,
    LongComparator,
    NullComparator,
    PBComparator,
    RegexStringComparator,
    SubstringComparator,
)
from hbasekit.protowire import LENGTH_DELIMITED, VARINT, decode_fields


def _comparable_value(serialized):
    [(number, wire_type, inner)] = decode_fields(serialized)[:1]
    assert (number, wire_type) == (1, LENGTH_DELIMITED)
    return decode_fields(inner)


@pytest.mark.parametrize(
    "cls, kind",
    [
        (BinaryComparator, "BinaryComparator"),
        (LongComparator, "LongComparator"),
        (BinaryPrefixComparator, "BinaryPrefixComparator"),
    ],
)
def test_comparable_comparators(cls, kind):
    pb = cls(ByteArrayComparable(b"value")).construct_pb_comparator()
    assert pb.name == COMPARATOR_PATH + kind
    assert _comparable_value(pb.serialized_comparator) == [(1, LENGTH_DELIMITED, b"value")]


def test_comparable_without_value_is_empty():
    assert ByteArrayComparable().serialize() == b""


def test_missing_comparable_raises():
    with pytest.raises(ValueError):
        BinaryComparator(None).construct_pb_comparator()


def test_bit_comparator_fields():
    pb = BitComparator(BitwiseOp.XOR, ByteArrayComparable(b"\x0f")).construct_pb_comparator()
    assert pb.name == COMPARATOR_PATH + "BitComparator"
    fields = decode_fields(pb.serialized_comparator)
    assert decode_fields(fields[0][2]) == [(1, LENGTH_DELIMITED, b"\x0f")]
    assert fields[1] == (2, VARINT, int(BitwiseOp.XOR))


@pytest.mark.parametrize("op", [0, 4, -1])
def test_bit_comparator_invalid_op(op):
    with pytest.raises(ValueError, match="invalid bitwise operator"):
        BitComparator(op, ByteArrayComparable(b"x")).construct_pb_comparator()


def test_null_comparator_has_empty_body():
    pb = NullComparator().construct_pb_comparator()
    assert pb.name == COMPARATOR_PATH + "NullComparator"
    assert pb.serialized_comparator == b""


def test_regex_comparator_fields():
    pb = RegexStringComparator("a.*b", 2, "UTF-8", "JAVA").construct_pb_comparator()
    assert decode_fields(pb.serialized_comparator) == [
        (1, LENGTH_DELIMITED, b"a.*b"),
        (2, VARINT, 2),
        (3, LENGTH_DELIMITED, b"UTF-8"),
        (4, LENGTH_DELIMITED, b"JAVA"),
    ]


def test_regex_comparator_without_engine():
    pb = RegexStringComparator("x", 0, "UTF-8").construct_pb_comparator()
    assert [f[0] for f in decode_fields(pb.serialized_comparator)] == [1, 2, 3]


def test_substring_comparator():
    pb = SubstringComparator("needle").construct_pb_comparator()
    assert pb.name == COMPARATOR_PATH + "SubstringComparator"
    assert decode_fields(pb.serialized_comparator) == [(1, LENGTH_DELIMITED, b"needle")]


def test_pb_comparator_serialize_round_trip():
    pb = SubstringComparator("abc").construct_pb_comparator()
    assert decode_fields(pb.serialize()) == [
        (1, LENGTH_DELIMITED, pb.name.encode()),
        (2, LENGTH_DELIMITED, pb.serialized_comparator),
    ]


def test_pb_comparator_without_body():
    assert decode_fields(PBComparator("x").serialize()) == [(1, LENGTH_DELIMITED, b"x")]