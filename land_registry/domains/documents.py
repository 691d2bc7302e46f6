"""
Supporting and contract documents: the file value passed to uploaders, plus
the media type and size rules applied before any upload.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any

MAX_DOCUMENT_BYTES = 5 * 1024 * 1024

# Media type -> accepted extensions
ALLOWED_DOCUMENT_TYPES: dict[str, tuple[str, ...]] = {
    "application/pdf": ("pdf",),
    "image/jpeg": ("jpg", "jpeg"),
    "image/png": ("png",),
}
ALLOWED_EXTENSIONS: tuple[str, ...] = tuple(
    ext for exts in ALLOWED_DOCUMENT_TYPES.values() for ext in exts
)

# Value for an HTML/Streamlit file picker
ACCEPT_ATTRIBUTE = ",".join(f".{ext}" for ext in ALLOWED_EXTENSIONS)

INVALID_TYPE_MESSAGE = "Only PDF, JPEG, and PNG files are allowed"
TOO_LARGE_MESSAGE = "File size must be less than 5MB"


@dataclass(frozen=True)
class DocumentFile:
    """An in-memory file staged for upload."""

    name: str
    content: bytes
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        """Lower-case extension without the dot ("" when the name has none)."""
        suffix = Path(self.name).suffix
        return suffix[1:].lower() if suffix else ""

    @property
    def media_type(self) -> str:
        """Declared content type, or one guessed from the file name."""
        if self.content_type:
            return self.content_type.split(";", 1)[0].strip().lower()
        guessed, _ = mimetypes.guess_type(self.name)
        return guessed or ""

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "DocumentFile":
        p = Path(path)
        return cls(name=p.name, content=p.read_bytes(), content_type=content_type or "")

    @classmethod
    def from_upload(cls, uploaded: Any) -> "DocumentFile":
        """Build from a Streamlit UploadedFile (anything with name, type, getvalue())."""
        return cls(
            name=str(uploaded.name),
            content=bytes(uploaded.getvalue()),
            content_type=str(getattr(uploaded, "type", "") or ""),
        )


def is_allowed_type(document: DocumentFile) -> bool:
    return document.media_type in ALLOWED_DOCUMENT_TYPES


def validate_document(document: DocumentFile | None, label: str = "Document") -> str | None:
    """
    Check a staged document against the upload rules.

    Returns:
        The error message to show next to the field, or None when valid.
    """
    if document is None:
        return f"{label} is required"
    if not is_allowed_type(document):
        return INVALID_TYPE_MESSAGE
    if document.size > MAX_DOCUMENT_BYTES:
        return TOO_LARGE_MESSAGE
    return None
