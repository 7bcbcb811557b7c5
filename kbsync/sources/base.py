# kbsync/sources/base.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SourceFile:
    """
    A file as listed by a document source.

    external_id is the source's stable identifier (the Drive file id); it
    survives renames. Local files have none.
    """

    name: str
    external_id: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None
    modified_time: Optional[str] = None


__all__ = ["SourceFile"]
