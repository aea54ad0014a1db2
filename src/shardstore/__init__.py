"""
Shardstore: a local-disk blob store with sharded directory layout.

Callers hand over byte streams and get an opaque identifier back; blobs are
read, listed, and removed by that identifier.
"""

__version__ = "0.1.0"
