"""Image storage used by post and avatar uploads.

The rest of the app only sees ``store(data, content_type) -> path`` and treats
the returned path as opaque.
"""
import logging
import os
import time
import uuid
from abc import ABC, abstractmethod
import cloudinary
from cloudinary import uploader
from cloudinary.exceptions import Error as CloudinaryError
from fastapi import UploadFile
from photoshare.core import config
from photoshare.core.errors import InvalidArgument, PayloadTooLarge, Internal

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


def validate_image(data: bytes, content_type: str):
    if not data:
        raise InvalidArgument("No file provided")
    if content_type not in config.ALLOWED_IMAGE_TYPES:
        raise InvalidArgument("Invalid image format. Only JPEG, PNG, GIF and WebP files are allowed")
    if len(data) > config.MAX_UPLOAD_SIZE:
        raise PayloadTooLarge("File too large (max 5MB)")


def read_upload(file: UploadFile) -> bytes:
    """Reads at most one byte past the size cap."""
    if file.size is not None and file.size > config.MAX_UPLOAD_SIZE:
        raise PayloadTooLarge("File too large (max 5MB)")
    file.file.seek(0)
    return file.file.read(config.MAX_UPLOAD_SIZE + 1)


class BlobStore(ABC):
    def store(self, data: bytes, content_type: str, folder: str = "post_images") -> str:
        validate_image(data, content_type)
        return self._put(data, content_type, folder)

    @abstractmethod
    def _put(self, data: bytes, content_type: str, folder: str) -> str:
        ...


class CloudinaryBlobStore(BlobStore):
    def __init__(self, cloud_name, api_key, api_secret):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True
        )

    def _put(self, data, content_type, folder):
        try:
            upload_result = uploader.upload(
                data,
                folder=folder,
                public_id=f"{int(time.time())}_{uuid.uuid4().hex[:8]}",
                resource_type="image",
                overwrite=False,
                quality="auto:good"
            )
        except CloudinaryError as e:
            logging.error(f"Cloudinary Error: {str(e)}")
            raise Internal("Image upload failed")
        return upload_result["secure_url"]


class LocalBlobStore(BlobStore):
    """Writes uploads under a directory served as static files."""

    def __init__(self, root, url_prefix=config.UPLOAD_URL_PREFIX):
        self.root = root
        self.url_prefix = url_prefix.rstrip("/")
        os.makedirs(self.root, exist_ok=True)

    def _put(self, data, content_type, folder):
        file_name = f"{int(time.time() * 1000)}-{uuid.uuid4().hex}.{EXTENSIONS[content_type]}"
        target_dir = os.path.join(self.root, folder)
        os.makedirs(target_dir, exist_ok=True)
        try:
            with open(os.path.join(target_dir, file_name), "wb") as fh:
                fh.write(data)
        except OSError as e:
            logging.error(f"Failed to write upload {file_name}: {e}")
            raise Internal("Image upload failed")
        return f"{self.url_prefix}/{folder}/{file_name}"


_blob_store = None


def get_blob_store() -> BlobStore:
    global _blob_store
    if _blob_store is None:
        if config.CLOUDINARY_CLOUD_NAME and config.CLOUDINARY_API_KEY and config.CLOUDINARY_API_SECRET:
            _blob_store = CloudinaryBlobStore(
                config.CLOUDINARY_CLOUD_NAME,
                config.CLOUDINARY_API_KEY,
                config.CLOUDINARY_API_SECRET,
            )
        else:
            _blob_store = LocalBlobStore(config.UPLOAD_DIR)
    return _blob_store
