"""HBase client building blocks: region caches, a snappy codec and filter encoding."""

__version__ = "0.1.0"

__all__ = ["caches", "codec", "snappy", "protowire", "comparator", "filters", "row_filters"]