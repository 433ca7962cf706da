import pytest

from hbasekit.codec import Codec, new_codec


def test_new_codec_snappy_reports_compressor_class():
    codec = new_codec("snappy")
    assert codec.cell_block_compressor_class() == "org.apache.hadoop.io.compress.SnappyCodec"


def test_new_codec_snappy_is_a_codec():
    codec = new_codec("snappy")
    assert isinstance(codec, Codec)
    assert codec.chunk_len() == 256 * 1024 * 5 // 6 - 32


def test_new_codec_unknown_raises():
    with pytest.raises(ValueError):
        new_codec("lz4")


def test_codec_is_abstract():
    with pytest.raises(TypeError):
        Codec()


def test_new_codec_round_trip():
    codec = new_codec("snappy")
    payload = b"row-key-" * 500
    encoded, size = codec.encode(payload)
    assert size == len(encoded)
    decoded, decoded_size = codec.decode(encoded)
    assert decoded == payload
    assert decoded_size == len(payload)


def test_new_codec_encodes_known_bytes():
    codec = new_codec("snappy")
    assert codec.encode(b"test") == (b"\x04\x0ctest", 6)