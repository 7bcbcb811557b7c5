# kbsync/chunking/__init__.py
from kbsync.chunking.chunk import Chunk
from kbsync.chunking.overlap import OverlapSplitter

__all__ = ["Chunk", "OverlapSplitter"]
