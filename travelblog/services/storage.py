import logging
import os
import uuid
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import ClientError

from travelblog.core.config import settings

logger = logging.getLogger(__name__)


def unique_key(folder: str, file_name: str) -> str:
    """Storage key for an upload, e.g. "image/<uuid>.jpg"."""
    file_extension = os.path.splitext(file_name)[1].lower()
    return f"{folder}/{uuid.uuid4()}{file_extension}"


class S3Service:
    def __init__(self):
        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
            region_name=settings.AWS_REGION
        )
        self.bucket_name = settings.S3_BUCKET

    def upload_file(self, file_content: bytes, key: str, content_type: str = "image/jpeg") -> Optional[str]:
        """
        Upload a file to S3 under the given key.

        Returns:
            The key on success or None if the upload failed
        """
        try:
            # Public access is granted by the bucket policy, not object ACLs
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=file_content,
                ContentType=content_type
            )
            return key
        except ClientError as e:
            logger.error("Error uploading %s to S3: %s", key, e)
            return None

    def delete_file(self, key: str) -> bool:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            logger.error("Error deleting %s from S3: %s", key, e)
            return False

    def get_public_url(self, key: str) -> str:
        return f"{settings.S3_BASE_URL}/{key}"


class LocalStorageService:
    """Writes uploads below a directory that the app serves statically."""

    def __init__(self, root: Optional[str] = None, url_prefix: Optional[str] = None):
        self.root = Path(root or settings.UPLOAD_DIR)
        self.url_prefix = (url_prefix or settings.MEDIA_URL_PREFIX).rstrip("/")

    def upload_file(self, file_content: bytes, key: str, content_type: str = "image/jpeg") -> Optional[str]:
        target = self.root / key
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(file_content)
            return key
        except OSError as e:
            logger.error("Error writing %s: %s", target, e)
            return None

    def delete_file(self, key: str) -> bool:
        target = self.root / key
        try:
            target.unlink()
            return True
        except OSError as e:
            logger.error("Error deleting %s: %s", target, e)
            return False

    def get_public_url(self, key: str) -> str:
        return f"{self.url_prefix}/{key}"


_storage = None


def get_storage():
    """FastAPI dependency returning the configured storage backend."""
    global _storage
    if _storage is None:
        if settings.MEDIA_BACKEND == "s3":
            _storage = S3Service()
        else:
            _storage = LocalStorageService()
        logger.info("Media storage backend: %s", settings.MEDIA_BACKEND)
    return _storage
