"""Photo uploads for POIs, served back from the public uploads directory."""
import logging
import os
import re
import tempfile
import time
from pathlib import Path
from typing import BinaryIO, Optional

from graetzlmap.core.exceptions import UploadError, UploadTooLargeError

logger = logging.getLogger(__name__)

_SAFE_EXT = re.compile(r"^\.[A-Za-z0-9]{1,10}$")
CHUNK_SIZE = 64 * 1024


class UploadService:
    def __init__(self, uploads_dir: Path, url_prefix: str = "/uploads", max_size_mb: int = 10):
        self.uploads_dir = Path(uploads_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_size_mb = max_size_mb

    @property
    def max_bytes(self) -> int:
        return self.max_size_mb * 1024 * 1024

    def _target_name(self, original_name: str) -> str:
        ext = Path(original_name or "").suffix
        if not _SAFE_EXT.match(ext):
            ext = ""
        stem = f"poi_{int(time.time() * 1000)}"
        filename = f"{stem}{ext.lower()}"
        counter = 1
        while (self.uploads_dir / filename).exists():
            filename = f"{stem}_{counter}{ext.lower()}"
            counter += 1
        return filename

    def save(self, original_name: str, stream: BinaryIO, declared_size: Optional[int] = None) -> str:
        """
        Copy ``stream`` to ``poi_<epoch ms><ext>`` and return its public URL path.

        The stream is read in chunks and never past the size limit; a declared
        size over the limit is rejected before reading.

        Raises:
            UploadError: empty file
            UploadTooLargeError: over the configured limit
        """
        if declared_size is not None and declared_size > self.max_bytes:
            raise UploadTooLargeError(declared_size / (1024 * 1024), self.max_size_mb)

        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.uploads_dir, prefix=".upload_", suffix=".tmp")
        written = 0
        try:
            with os.fdopen(fd, "wb") as out:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise UploadTooLargeError(written / (1024 * 1024), self.max_size_mb)
                    out.write(chunk)
            if written == 0:
                raise UploadError("No file provided")

            filename = self._target_name(original_name)
            os.replace(tmp_name, self.uploads_dir / filename)
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info(f"Stored upload {filename} ({written} bytes)")
        return f"{self.url_prefix}/{filename}"
