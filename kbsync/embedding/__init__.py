# kbsync/embedding/__init__.py
from kbsync.embedding.base import Embedder
from kbsync.embedding.local import LocalEmbedder, LocalEmbedderConfig
from kbsync.embedding.ollama import OllamaEmbedder

__all__ = ["Embedder", "LocalEmbedder", "LocalEmbedderConfig", "OllamaEmbedder"]
