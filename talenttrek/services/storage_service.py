"""
Object Storage Service - single-file uploads with a public URL.

Backed by a MongoDB GridFS bucket. upload() returns the URL the file is
served from (/files/{file_id}); open() streams it back for that route.
Any storage failure surfaces as UploadError so the caller can abort the
dependent write before it happens.
"""

import logging
from typing import Iterator, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from gridfs.errors import NoFile
from pymongo.errors import PyMongoError

from talenttrek.core.config import get_settings
from talenttrek.core.errors import UploadError
from talenttrek.db.mongodb import get_bucket

settings = get_settings()
logger = logging.getLogger(__name__)


def public_url(file_id: str) -> str:
    return f"{settings.public_base_url.rstrip('/')}/files/{file_id}"


class ObjectStorage:
    """
    GridFS-backed file storage.
    """

    def __init__(self, bucket=None):
        self._bucket = bucket

    @property
    def bucket(self):
        if self._bucket is None:
            self._bucket = get_bucket()
        return self._bucket

    def upload(self, filename: str, content: bytes, content_type: str) -> str:
        """
        Store one file.

        Returns:
            Public URL of the stored file
        """
        try:
            file_id = self.bucket.upload_from_stream(
                filename,
                content,
                metadata={"content_type": content_type}
            )
        except PyMongoError as e:
            logger.error("Upload of %s failed: %s", filename, e)
            raise UploadError(str(e)) from e
        logger.info("Stored %s (%d bytes) as %s", filename, len(content), file_id)
        return public_url(str(file_id))

    def open(self, file_id: str) -> Optional[Tuple[Iterator[bytes], str, str]]:
        """
        Open a stored file.

        Returns:
            (chunk iterator, filename, content_type) or None if missing
        """
        try:
            stream = self.bucket.open_download_stream(ObjectId(file_id))
        except (InvalidId, NoFile):
            return None
        meta = stream.metadata or {}
        content_type = meta.get("content_type", "application/octet-stream")

        def chunks():
            try:
                while True:
                    chunk = stream.readchunk()
                    if not chunk:
                        break
                    yield chunk
            finally:
                stream.close()

        return chunks(), stream.filename, content_type


_object_storage: ObjectStorage = None


def get_object_storage() -> ObjectStorage:
    """Get or create the object storage (singleton pattern)"""
    global _object_storage
    if _object_storage is None:
        _object_storage = ObjectStorage()
    return _object_storage
