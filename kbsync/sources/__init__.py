# kbsync/sources/__init__.py
"""Document sources: where the watched directory's files come from."""

from kbsync.sources.base import SourceFile
from kbsync.sources.drive import GoogleDriveSource
from kbsync.sources.local import LocalDirectorySource

__all__ = ["SourceFile", "LocalDirectorySource", "GoogleDriveSource"]
