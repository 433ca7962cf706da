"""Compression codecs used for cell blocks exchanged with region servers."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Codec(ABC):
    """Encodes and decodes chunks of a Hadoop sequence-file style stream."""

    @abstractmethod
    def encode(self, src: bytes, dst: bytes = b"") -> tuple[bytes, int]:
        """Compress ``src`` and return ``dst`` with the chunk appended, plus the chunk size."""

    @abstractmethod
    def decode(self, src: bytes, dst: bytes = b"") -> tuple[bytes, int]:
        """Decompress ``src`` and return ``dst`` with the chunk appended, plus the chunk size."""

    @abstractmethod
    def chunk_len(self) -> int:
        """Return the maximum size of an uncompressed chunk for this codec."""

    @abstractmethod
    def cell_block_compressor_class(self) -> str:
        """Return the Java class name of the matching compressor on the server side."""


def new_codec(name: str) -> Codec:
    """Instantiate the codec called ``name``; only "snappy" is supported."""
    if name == "snappy":
        from .snappy import SnappyCodec

        return SnappyCodec()
    raise ValueError(f"unknown compression codec: {name!r}")