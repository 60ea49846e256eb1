"""
Local file storage for company profile photos.

Files are written under a fixed directory with a generated name so that
concurrent uploads of the same original filename never overwrite each other.
"""

import logging
import os
import random
import time
from typing import BinaryIO, Optional

from fastapi import Request

from jobboard.core.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
CHUNK_SIZE = 64 * 1024


class UploadTooLargeError(Exception):
    """Raised when an uploaded file exceeds the configured size limit."""

    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes
        super().__init__(f"File exceeds the maximum upload size of {max_bytes} bytes")


class LocalStorage:
    """Local filesystem storage backend"""

    def __init__(self, base_dir: str = "uploads", max_bytes: int = DEFAULT_MAX_BYTES):
        self.base_dir = base_dir
        self.max_bytes = max_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalStorage":
        return cls(base_dir=settings.UPLOAD_DIR, max_bytes=settings.MAX_UPLOAD_SIZE)

    def generate_filename(self, original_filename: str, field_name: str) -> str:
        """Build `{field}-{millis}-{random}{ext}`, keeping the original extension."""
        unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        extension = os.path.splitext(original_filename or "")[1]
        return f"{field_name}-{unique_suffix}{extension}"

    def store(
        self,
        file: Optional[BinaryIO],
        original_filename: Optional[str] = None,
        field_name: str = "file",
    ) -> Optional[str]:
        """
        Copy an uploaded file to disk.

        Args:
            file: Readable binary stream, or None when nothing was attached
            original_filename: Client-side filename (used for the extension only)
            field_name: Form field the file arrived under

        Returns:
            Path of the stored file, or None when no file was given

        Raises:
            UploadTooLargeError: If the file is larger than max_bytes
            OSError: If the file cannot be read or written; nothing is left behind
        """
        if file is None:
            return None

        os.makedirs(self.base_dir, exist_ok=True)
        file_path = os.path.join(self.base_dir, self.generate_filename(original_filename, field_name))
        written = 0

        try:
            with open(file_path, "wb") as buffer:
                while True:
                    chunk = file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise UploadTooLargeError(self.max_bytes)
                    buffer.write(chunk)
        except UploadTooLargeError:
            self.delete_file(file_path)
            logger.warning(f"Rejected upload '{original_filename}': larger than {self.max_bytes} bytes")
            raise
        except Exception:
            self.delete_file(file_path)
            raise

        logger.info(f"Stored upload '{original_filename}' as {file_path} ({written} bytes)")
        return file_path

    def delete_file(self, file_path: str) -> bool:
        """Delete file from local filesystem"""
        if os.path.exists(file_path):
            os.remove(file_path)
            return True
        return False

    @staticmethod
    def public_name(file_path: str) -> str:
        """Stored filename as it appears under the /uploads mount."""
        return os.path.basename(file_path)


def get_storage(request: Request) -> LocalStorage:
    """Dependency returning the application's upload storage."""
    return request.app.state.storage
