# kbsync/sources/drive.py
"""
Google Drive folder source.

Lists the files directly inside one Drive folder with a service account and
downloads them into the watched directory. Google Docs are exported as .docx;
everything else is downloaded as-is. The Drive file id becomes the record's
external id, so a file renamed on Drive keeps its catalog record.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Callable, List, Optional

from kbsync.core.exceptions import SourceError
from kbsync.loaders.factory import is_supported_file_type
from kbsync.logging.logger import get_logger
from kbsync.logging.tags import SOURCE
from kbsync.sources.base import SourceFile

logger = get_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/drive.readonly"]

FOLDER_MIME = "application/vnd.google-apps.folder"
GOOGLE_DOC_MIME = "application/vnd.google-apps.document"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_LIST_FIELDS = "nextPageToken, files(id, name, mimeType, size, modifiedTime)"


class GoogleDriveSource:
    """
    Usage:
        source = GoogleDriveSource(folder_id="1AbC...", credentials_file="service-credentials.json")
        for descriptor in source.list():
            source.fetch(descriptor, "knowledgebase")
    """

    # The folder is the source of truth; local files it no longer lists are pruned.
    authoritative = True

    def __init__(
        self,
        folder_id: str,
        credentials_file: str | Path = "service-credentials.json",
        supported: Callable[[str], bool] = is_supported_file_type,
        service: Any = None,
    ) -> None:
        self.folder_id = folder_id
        self.credentials_file = Path(credentials_file)
        self._supported = supported
        self._service = service

    @property
    def service(self) -> Any:
        if self._service is None:
            self._service = self._build_service()
        return self._service

    def _build_service(self) -> Any:
        try:
            from google.oauth2 import service_account
            from googleapiclient.discovery import build
        except ImportError:
            raise RuntimeError(
                "google-api-python-client is required for Drive sources. "
                "Install with: pip install 'kbsync[drive]'"
            )

        if not self.credentials_file.is_file():
            raise SourceError(f"Service account credentials not found: {self.credentials_file}")

        creds = service_account.Credentials.from_service_account_file(
            str(self.credentials_file), scopes=SCOPES
        )
        return build("drive", "v3", credentials=creds, cache_discovery=False)

    def list(self) -> List[SourceFile]:
        query = f"'{self.folder_id}' in parents and trashed=false"
        files: List[SourceFile] = []
        page_token: Optional[str] = None

        while True:
            try:
                response = (
                    self.service.files()
                    .list(
                        q=query,
                        pageSize=1000,
                        fields=_LIST_FIELDS,
                        pageToken=page_token,
                        supportsAllDrives=True,
                        includeItemsFromAllDrives=True,
                    )
                    .execute()
                )
            except Exception as e:
                raise SourceError(f"Cannot list Drive folder {self.folder_id}: {e}") from e

            for item in response.get("files", []):
                descriptor = self._to_source_file(item)
                if descriptor is not None:
                    files.append(descriptor)

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        logger.info(f"{SOURCE} Drive folder lists {len(files)} supported files")
        return files

    def _to_source_file(self, item: dict) -> Optional[SourceFile]:
        mime_type = item.get("mimeType", "")
        name = item.get("name", "")
        if mime_type == FOLDER_MIME:
            return None
        if mime_type == GOOGLE_DOC_MIME:
            name = f"{name}.docx"
        if not self._supported(name):
            logger.debug(f"{SOURCE} Skipping unsupported Drive file {name}")
            return None
        size = item.get("size")
        return SourceFile(
            name=name,
            external_id=item["id"],
            mime_type=mime_type,
            size=int(size) if size is not None else None,
            modified_time=item.get("modifiedTime"),
        )

    def fetch(self, descriptor: SourceFile, dest_dir: str | Path) -> Path:
        """Download into dest_dir via a temp file, replacing any existing copy."""
        from googleapiclient.http import MediaIoBaseDownload

        if not descriptor.external_id:
            raise SourceError(f"Drive descriptor for {descriptor.name} has no file id")

        dest = Path(dest_dir) / descriptor.name
        dest.parent.mkdir(parents=True, exist_ok=True)

        files = self.service.files()
        if descriptor.mime_type == GOOGLE_DOC_MIME:
            request = files.export_media(fileId=descriptor.external_id, mimeType=DOCX_MIME)
        else:
            request = files.get_media(fileId=descriptor.external_id, supportsAllDrives=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{descriptor.name}.", dir=dest.parent)
        try:
            with os.fdopen(fd, "wb") as fh:
                downloader = MediaIoBaseDownload(fh, request)
                done = False
                while not done:
                    _, done = downloader.next_chunk()
            os.replace(tmp_name, dest)
        except Exception as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise SourceError(f"Failed to download {descriptor.name}: {e}") from e

        logger.debug(f"{SOURCE} Downloaded {descriptor.name}")
        return dest


__all__ = ["GoogleDriveSource", "SCOPES"]
