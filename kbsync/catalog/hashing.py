# kbsync/catalog/hashing.py
"""
Content fingerprints.

SHA-256 over the raw bytes, as a lowercase hex digest. Read failures are raised as
HashError; there is no empty-content fallback, since a silent "" digest would make
an unreadable file look unchanged forever.
"""

from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path

from kbsync.core.exceptions import HashError

_READ_SIZE = 1024 * 1024


def hash_bytes(data: bytes) -> str:
    """Hash a byte string. Total: b"" hashes to the SHA-256 of empty input."""
    return hashlib.sha256(data).hexdigest()


def hash_file(path: str | Path) -> str:
    """
    Hash a file's content in streamed blocks.

    Raises:
        HashError: The file could not be opened or read.
    """
    digest = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for block in iter(lambda: f.read(_READ_SIZE), b""):
                digest.update(block)
    except OSError as e:
        raise HashError(str(path), e) from e
    return digest.hexdigest()


async def hash_file_async(path: str | Path) -> str:
    """hash_file() in a worker thread."""
    return await asyncio.to_thread(hash_file, path)


__all__ = ["hash_bytes", "hash_file", "hash_file_async"]
