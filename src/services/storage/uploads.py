"""Local file storage for uploaded product and brand images."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Annotated
from uuid import uuid4

from fastapi import Depends
from starlette.datastructures import UploadFile

from src.config import settings

logger = logging.getLogger(__name__)


class UploadStorage:
    """Writes uploads into a directory served as static files."""

    def __init__(self, directory: Path, url_prefix: str) -> None:
        self.directory = directory
        self.url_prefix = url_prefix.rstrip("/")

    def _stored_name(self, upload: UploadFile) -> str:
        original = Path(upload.filename or "upload").name
        return f"{int(time.time() * 1000)}-{uuid4().hex[:8]}-{original}"

    def _write(self, filename: str, content: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / filename).write_bytes(content)

    async def save(self, upload: UploadFile) -> str:
        """Persist one upload and return its public path."""
        filename = self._stored_name(upload)
        content = await upload.read()
        await asyncio.to_thread(self._write, filename, content)
        logger.debug(
            "Stored upload", extra={"upload_name": filename, "size": len(content)}
        )
        return f"{self.url_prefix}/{filename}"

    async def save_all(self, uploads: Iterable[UploadFile]) -> list[str]:
        """Persist uploads in order and return their public paths."""
        return [await self.save(upload) for upload in uploads]


def uploaded_files(form, field: str) -> list[UploadFile]:
    """Files submitted under ``field``, skipping empty file inputs."""
    if not hasattr(form, "getlist"):
        return []
    return [
        item
        for item in form.getlist(field)
        if isinstance(item, UploadFile) and item.filename
    ]


def get_upload_storage() -> UploadStorage:
    """FastAPI dependency returning storage rooted at the configured directory."""
    return UploadStorage(Path(settings.UPLOADS_DIR), settings.UPLOADS_URL_PREFIX)


UploadStorageDependency = Annotated[UploadStorage, Depends(get_upload_storage)]
