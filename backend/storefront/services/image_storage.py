"""Image uploads to an S3-compatible object store.

Works with any S3 endpoint (Supabase Storage S3 gateway, Cloudflare R2,
AWS S3). Images land under ``<folder>/<uuid>.<ext>`` in the configured
bucket and are served from a public base URL.

Deleting a product or service never removes its image; use
``ImageStorage.delete`` explicitly.
"""

import logging
import uuid
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from storefront.config import StorageSettings
from storefront.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}
MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB
CACHE_CONTROL = "max-age=3600"


def validate_image(content_type: Optional[str], size: int) -> None:
    """
    Check an upload against the type allow-list and size ceiling.

    Raises:
      - ValidationError for a disallowed type or a file over 5MB
    """
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Invalid file type. Please upload an image (JPEG, PNG, WEBP, or GIF).")
    if size > MAX_IMAGE_BYTES:
        raise ValidationError("File too large. Maximum size is 5MB.")


def build_object_name(filename: Optional[str], content_type: str, folder: str = "") -> str:
    """
    Collision-resistant object key: ``<folder>/<uuid4>.<ext>``.

    The extension comes from the uploaded filename when it has one,
    otherwise from the content type.
    """
    ext = ""
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].strip().lower()
    if not ext or not ext.isalnum():
        ext = ALLOWED_IMAGE_TYPES.get(content_type, "bin")
    name = f"{uuid.uuid4()}.{ext}"
    return f"{folder.strip('/')}/{name}" if folder.strip("/") else name


class ImageStorage:
    """Interface for the image bucket. Subclasses talk to a real store."""

    folder = ""
    public_base_url = ""

    def upload(self, data: bytes, key: str, content_type: str) -> str:
        """Store ``data`` at ``key`` and return its public URL."""
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url.rstrip('/')}/{key}"

    def key_for_url(self, url: str) -> Optional[str]:
        """Object key for a public URL from this bucket, or None if it isn't ours."""
        base = self.public_base_url.rstrip("/") + "/"
        if not url or not url.startswith(base):
            return None
        key = url[len(base):].split("?", 1)[0]
        return key or None

    def delete(self, url: str) -> None:
        """
        Delete the object behind a public URL.

        Raises:
          - ValidationError if the URL does not point into this bucket
          - StorageError if the store rejects the delete
        """
        key = self.key_for_url(url)
        if key is None:
            raise ValidationError("Could not parse image path from URL")
        self.remove(key)


class S3ImageStorage(ImageStorage):
    """
    Image bucket backed by boto3's S3 client.

    Reads connection details from StorageSettings:
      - endpoint_url, access_key_id, secret_access_key, region
      - bucket, folder
      - public_base_url (defaults to ``<endpoint_url>/<bucket>``)
    """

    def __init__(self, settings: StorageSettings, client=None):
        self.bucket = settings.bucket
        self.folder = settings.folder
        self.public_base_url = settings.public_base_url or f"{settings.endpoint_url.rstrip('/')}/{settings.bucket}"
        if client is None:
            session = boto3.session.Session()
            client = session.client(
                service_name="s3",
                endpoint_url=settings.endpoint_url,
                aws_access_key_id=settings.access_key_id,
                aws_secret_access_key=settings.secret_access_key,
                region_name=settings.region,
            )
        self.client = client

    def upload(self, data: bytes, key: str, content_type: str) -> str:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                CacheControl=CACHE_CONTROL,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload {key} to bucket {self.bucket}: {e}")
            raise StorageError("Failed to upload file") from e
        logger.info(f"Uploaded {key} ({len(data)} bytes) to bucket {self.bucket}")
        return self.public_url(key)

    def remove(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete {key} from bucket {self.bucket}: {e}")
            raise StorageError("Failed to delete image") from e
        logger.info(f"Deleted {key} from bucket {self.bucket}")


def create_image_storage(settings: StorageSettings) -> Optional[ImageStorage]:
    """Build the S3 storage, or None when credentials aren't configured."""
    if not settings.is_configured:
        logger.warning(
            "Object storage credentials not configured. Image uploads are disabled. "
            "Set STORAGE_ENDPOINT_URL, STORAGE_ACCESS_KEY_ID, STORAGE_SECRET_ACCESS_KEY."
        )
        return None
    return S3ImageStorage(settings)
