"""
Cloudinary client for signed document uploads.

Uploads never raise: every failure (missing credentials, HTTP error, an error
reported by the API, a transport error) comes back as
{"success": False, "error": "..."}.
"""

from __future__ import annotations

import hashlib
import time
from typing import Any

import requests

from land_registry.domains.documents import DocumentFile
from land_registry.domains.errors import ConfigurationError, UploadError
from land_registry.utils.config import (
    cloudinary_api_key,
    cloudinary_api_secret,
    cloudinary_cloud_name,
    request_timeout,
)
from land_registry.utils.logger import get_logger

logger = get_logger("cloudinary")

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/auto/upload"
DEFAULT_FOLDER = "land-management"
DOCUMENT_TYPES = ("supporting", "contract")


def generate_signature(params_to_sign: str, api_secret: str) -> str:
    """SHA-1 hex digest of the sorted parameter string followed by the secret."""
    return hashlib.sha1((params_to_sign + api_secret).encode("utf-8")).hexdigest()


def document_folder(document_type: str, owner_id: str) -> str:
    """
    Target folder for a user's documents.

    >>> document_folder("contract", "user-123")
    'land-management/contract-documents/user-123'
    """
    if document_type not in DOCUMENT_TYPES:
        raise ValueError(f"Unknown document type '{document_type}'. Expected one of: {', '.join(DOCUMENT_TYPES)}")
    return f"{DEFAULT_FOLDER}/{document_type}-documents/{owner_id}"


def _credentials(
    cloud_name: str | None,
    api_key: str | None,
    api_secret: str | None,
) -> tuple[str, str, str]:
    try:
        return (
            cloud_name or cloudinary_cloud_name(),
            api_key or cloudinary_api_key(),
            api_secret or cloudinary_api_secret(),
        )
    except ConfigurationError as e:
        raise ConfigurationError("Missing Cloudinary configuration") from e


def upload_to_cloudinary(
    file: DocumentFile,
    folder: str = DEFAULT_FOLDER,
    *,
    cloud_name: str | None = None,
    api_key: str | None = None,
    api_secret: str | None = None,
    timeout: int | None = None,
) -> dict[str, Any]:
    """
    Upload a file to Cloudinary with a signed request.

    Credentials default to the CLOUDINARY_* environment variables.

    Returns:
        {"success": True, "url": secure_url} or {"success": False, "error": message}.
    """
    try:
        cloud_name, api_key, api_secret = _credentials(cloud_name, api_key, api_secret)

        timestamp = int(time.time())
        signature = generate_signature(f"folder={folder}&timestamp={timestamp}", api_secret)

        logger.info("Uploading %s (%d bytes) to Cloudinary folder %s", file.name, file.size, folder)
        response = requests.post(
            CLOUDINARY_UPLOAD_URL.format(cloud_name=cloud_name),
            data={
                "folder": folder,
                "timestamp": str(timestamp),
                "api_key": api_key,
                "signature": signature,
            },
            files={"file": (file.name, file.content, file.media_type or "application/octet-stream")},
            timeout=timeout or request_timeout(),
        )

        if not response.ok:
            raise UploadError(f"Upload failed: {response.reason or response.status_code}")

        data = response.json()
        err = data.get("error")
        if err:
            message = err.get("message") if isinstance(err, dict) else str(err)
            raise UploadError(message or "Upload failed")

        url = data.get("secure_url")
        if not url:
            raise UploadError("Upload failed: no secure_url in response")
        return {"success": True, "url": url}
    except Exception as e:
        logger.warning("Cloudinary upload of %s failed: %s", file.name, e)
        return {"success": False, "error": str(e) or "Upload failed"}


def upload_document_to_cloudinary(
    file: DocumentFile,
    owner_id: str,
    document_type: str,
    **kwargs: Any,
) -> dict[str, Any]:
    """Upload a supporting or contract document into the owner's folder."""
    return upload_to_cloudinary(file, document_folder(document_type, owner_id), **kwargs)
