# hbasekit

Building blocks for an HBase client in Python.

- **Region caches** (`hbasekit.caches`): `KeyRegionCache` keeps `RegionInfo`
  objects ordered by region name. It finds the region that serves a row,
  resolves overlapping regions by age (region `id`), and marks replaced or
  removed regions dead. `ClientRegionCache` tracks which `RegionClient`
  serves which regions. `region_search_key` and `is_region_overlap` are the
  helpers behind them.
- **Compression** (`hbasekit.codec`, `hbasekit.snappy`): the abstract `Codec`
  interface, `new_codec("snappy")`, and a pure-Python snappy block codec,
  `SnappyCodec`, whose compressor class name is
  `org.apache.hadoop.io.compress.SnappyCodec`. `compress_block` and
  `decompress_block` work on single snappy blocks; malformed input raises
  `SnappyError`. An unknown codec name raises `ValueError`.
- **Filters and comparators** (`hbasekit.filters`, `hbasekit.row_filters`,
  `hbasekit.comparator`): dataclasses for the server-side filters and
  comparators. `construct_pb_filter()` / `construct_pb_comparator()` return a
  `PBFilter` / `PBComparator` holding the server class name and the encoded
  body; `serialize()` gives the protobuf wire bytes.
- **Wire helpers** (`hbasekit.protowire`): `encode_varint`, `varint_field`,
  `bool_field`, `float_field`, `bytes_field` and `decode_fields` for the
  protobuf wire format.

## Installation

```
pip install hbasekit
```

## Examples

Compressing a cell block:

```python
from hbasekit.codec import new_codec

codec = new_codec("snappy")
out, size = codec.encode(b"test", b"")
assert out == b"\x04\x0ctest" and size == 6

decoded, size = codec.decode(out, b"")
assert decoded == b"test" and size == 4
```

Building a filter:

```python
from hbasekit.filters import FilterList, ListOperator, CompareFilter, CompareType
from hbasekit.row_filters import PrefixFilter, RowFilter
from hbasekit.comparator import BinaryComparator, ByteArrayComparable

row = RowFilter(CompareFilter(CompareType.GREATER_OR_EQUAL,
                              BinaryComparator(ByteArrayComparable(b"row10"))))
flt = FilterList(ListOperator.MUST_PASS_ALL, PrefixFilter(b"row"), row)

pb = flt.construct_pb_filter()
print(pb.name)            # org.apache.hadoop.hbase.filter.FilterList
wire = pb.serialize()     # protobuf bytes of the Filter message
```

Invalid settings are reported when the wire form is built: a `FilterList`
with an operator outside 1–2, or a `BitComparator` with an operation outside
1–3, raises `ValueError`.

Looking up regions:

```python
from hbasekit.caches import KeyRegionCache, RegionInfo, region_search_key

cache = KeyRegionCache()
region = RegionInfo(id=1, namespace=b"", table=b"test",
                    name=b"test,,1234567890042.56f833d5569a27c7a43fbf547b4924a4.",
                    start_key=b"", stop_key=b"foo")
overlaps, replaced = cache.put(region)
assert replaced and overlaps == []

name, found = cache.get(region_search_key(b"test", b"bar"))
assert found is region
```

## What it does not do

hbasekit does not connect to anything. There is no client that sends RPCs
to region servers or the master, no ZooKeeper lookup of the meta region, no
scanner and no admin operations. `RegionClient` is only a record of a server
address with a `close()` flag; the caches and encoders are meant to be used by
a client that supplies the network side itself.

## Running the tests

```
pip install -e ".[test]"
pytest
```