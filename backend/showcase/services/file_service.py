"""
Showcase API: File Intake Service
====================================

What:  Stores the single image attached to a record write and returns its URL.
How:   Names the file `<epoch milliseconds>_<original filename>`, writes it
       into the uploads directory with async I/O, and returns
       `/uploads/<name>`, which the static mount in main.py serves.
Who:   Called by the CRUD create and update handlers.
When:  Before the record is written, whenever the request carries a file.

Not handled:
    No content-type sniffing, no size limit, no collision handling beyond
    millisecond resolution, no cleanup of files whose record is deleted.
    Directory components of the client filename are dropped so the file
    always lands inside the uploads directory.

Directory Structure:
    uploads/
    ├── 1718000000000_logo.png
    └── 1718000012345_team photo.jpg
"""

import logging
import time
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Optional, Tuple

import aiofiles
from fastapi import Request
from starlette.datastructures import UploadFile

from showcase.config import settings
from showcase.exceptions import FileStorageError

logger = logging.getLogger(__name__)

# Form field that may carry the attachment
IMAGE_FIELD = "image"

# URL prefix the uploads directory is mounted at
UPLOADS_URL_PREFIX = "/uploads"

# Bytes copied per read when streaming an upload to disk
CHUNK_SIZE = 1024 * 1024


class FileIntake:
    """
    Writes uploaded files to local disk.

    Lifecycle of an uploaded file:
        1. CRUD handler pulls the `image` part out of the multipart form
        2. FileIntake.store() builds the storage name and writes the bytes
        3. The returned URL is stored on the record as `imageUrl`
        4. GET /uploads/<name> serves it back unchanged
    """

    def __init__(self, upload_dir: Optional[str] = None):
        """
        Args:
            upload_dir: Override the uploads directory (used in tests).
                        If None, uses settings.upload_dir.
        """
        self.upload_dir = Path(upload_dir or settings.upload_dir).resolve()
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("FileIntake initialized with upload_dir=%s", self.upload_dir)

    @staticmethod
    def _base_name(filename: str) -> str:
        # Browsers send bare names, but some clients send a full path
        name = PureWindowsPath(PurePosixPath(filename).name).name
        return name or "upload"

    def generate_storage_name(self, filename: str) -> str:
        """
        Build the on-disk name: current epoch milliseconds, underscore, original name.

        Example: "logo.png" → "1718000000000_logo.png"
        """
        return f"{int(time.time() * 1000)}_{self._base_name(filename)}"

    def url_for(self, storage_name: str) -> str:
        return f"{UPLOADS_URL_PREFIX}/{storage_name}"

    @staticmethod
    def _storage_error(absolute_path: Path, e: OSError) -> FileStorageError:
        logger.error("Failed to store upload at %s: %s", absolute_path, str(e))
        return FileStorageError(
            message=f"Failed to save uploaded file: {e.strerror or e}",
            context={"path": str(absolute_path), "os_error": str(e)},
        )

    async def save_bytes(self, filename: str, content: bytes) -> Tuple[Path, str]:
        """
        Write content under a generated name.

        Returns:
            Tuple of (absolute_path, public_url).

        Raises:
            FileStorageError if the write fails.
        """
        storage_name = self.generate_storage_name(filename)
        absolute_path = self.upload_dir / storage_name

        try:
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            raise self._storage_error(absolute_path, e)

        logger.info("File stored: %s (%d bytes)", storage_name, len(content))
        return absolute_path, self.url_for(storage_name)

    async def store(self, upload: UploadFile) -> str:
        """
        Persist an uploaded file and return the URL recorded as `imageUrl`.

        The upload is copied to disk in CHUNK_SIZE pieces, so its size is not
        bounded by memory. It is always closed afterwards.

        Raises:
            FileStorageError if the write fails.
        """
        storage_name = self.generate_storage_name(upload.filename or "")
        absolute_path = self.upload_dir / storage_name
        size = 0

        try:
            async with aiofiles.open(absolute_path, "wb") as f:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    await f.write(chunk)
                    size += len(chunk)
        except OSError as e:
            raise self._storage_error(absolute_path, e)
        finally:
            await upload.close()

        logger.info("File stored: %s (%d bytes)", storage_name, size)
        return self.url_for(storage_name)


def get_file_intake(request: Request) -> FileIntake:
    """FastAPI dependency returning the application's FileIntake."""
    return request.app.state.file_intake
