"""
Local staging of uploaded images.

An uploaded image is written to the upload directory before it is pushed to
object storage. The staged copy only lives inside `UploadStager.stage()`:
it is removed when the block exits, whether the upload and persistence steps
succeeded or raised.
"""

import re
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

import aiofiles
import aiofiles.os
from starlette.datastructures import UploadFile

from nutrition_service.core.errors import ValidationError
from nutrition_service.core.logger import logger

CHUNK_SIZE = 64 * 1024
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(original: str) -> str:
    """Strip any path and replace characters that are unsafe in a storage key"""
    name = Path(original or "").name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "image"


@dataclass(frozen=True)
class StagedUpload:
    path: Path
    filename: str
    content_type: str
    size: int


class UploadStager:
    """Writes uploads to `upload_dir` under `<epoch-ms>-<original name>`."""

    def __init__(self, upload_dir: str, max_bytes: int):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes

    def _staged_name(self, original: str) -> str:
        return f"{int(time.time() * 1000)}-{safe_filename(original)}"

    @asynccontextmanager
    async def stage(self, upload: UploadFile) -> AsyncIterator[StagedUpload]:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        filename = self._staged_name(upload.filename)
        path = self.upload_dir / filename

        try:
            size = await self._write(upload, path)
            logger.debug(
                f"Staged upload {filename}",
                metadata={"event": "upload_staged", "filename": filename, "size": size},
            )
            yield StagedUpload(
                path=path,
                filename=filename,
                content_type=upload.content_type or "application/octet-stream",
                size=size,
            )
        finally:
            await self._remove(path)

    async def _write(self, upload: UploadFile, path: Path) -> int:
        size = 0
        await upload.seek(0)
        async with aiofiles.open(path, "wb") as f:
            while True:
                chunk = await upload.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_bytes:
                    raise ValidationError("File too large", field="images")
                await f.write(chunk)
        return size

    async def _remove(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
            logger.debug(f"Removed staged upload {path.name}",
                          metadata={"event": "upload_removed", "filename": path.name})
        except FileNotFoundError:
            logger.debug(f"Staged upload already gone: {path.name}")
        except OSError as e:
            logger.warning(
                f"Failed to remove staged upload {path.name}",
                error=e,
                metadata={"event": "upload_cleanup_failed", "path": str(path)},
            )
