# kbsync/vector_db/__init__.py
from kbsync.vector_db.memory import InMemoryVectorStore
from kbsync.vector_db.qdrant import QdrantVectorStore

__all__ = ["InMemoryVectorStore", "QdrantVectorStore"]
