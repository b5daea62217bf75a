"""Blob store client for issue media (Supabase Storage REST API)"""

import secrets
import string
import time
from typing import Optional

import requests

from ..core.config import Settings, get_settings
from ..core.logging import get_logger
from ..errors import UploadError
from ..storage.submission_validator import file_extension

logger = get_logger(__name__)


def make_object_name(suggested_name: str) -> str:
    """`<epoch-ms>-<random>.<ext>`; the original file name is not kept"""
    ext = file_extension(suggested_name) or "bin"
    suffix = "".join(secrets.choice(string.ascii_lowercase + string.digits) for _ in range(11))
    return f"{int(time.time() * 1000)}-{suffix}.{ext}"


class BlobStore:
    """Uploads media and returns public URLs"""

    def __init__(self, settings: Optional[Settings] = None, http: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.http = http or requests.Session()

    def public_url(self, object_name: str) -> str:
        base = self.settings.supabase_url.rstrip("/")
        return f"{base}/storage/v1/object/public/{self.settings.supabase_bucket}/{object_name}"

    def upload(self, data: bytes, suggested_name: str, content_type: Optional[str] = None) -> str:
        """Store bytes under a fresh object name and return the public URL"""
        if not self.settings.blob_store_configured:
            raise UploadError("Blob store is not configured (SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY)")

        object_name = make_object_name(suggested_name)
        base = self.settings.supabase_url.rstrip("/")
        url = f"{base}/storage/v1/object/{self.settings.supabase_bucket}/{object_name}"

        try:
            response = self.http.post(
                url,
                headers={
                    "Authorization": f"Bearer {self.settings.supabase_service_role_key}",
                    "Content-Type": content_type or "application/octet-stream",
                },
                data=data,
                timeout=self.settings.upload_timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"[UPLOAD] Failed to upload {suggested_name}: {e}")
            raise UploadError(f"Upload of '{suggested_name}' failed: {e}") from e

        return self.public_url(object_name)


_blob_store: Optional[BlobStore] = None


def get_blob_store() -> BlobStore:
    global _blob_store
    if _blob_store is None:
        _blob_store = BlobStore()
    return _blob_store
