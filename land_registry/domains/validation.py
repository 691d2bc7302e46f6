"""
Form validation for land registration and transfer initiation.

Each validator is a pure function returning (validated_form, field_errors):
exactly one of the two is meaningful. A non-empty field_errors dict means the
form must not be submitted.
"""

from __future__ import annotations

import math
from typing import Any

from land_registry.domains.documents import DocumentFile, validate_document

MIN_RECIPIENT_NAME_LENGTH = 3

OWNERSHIP_TYPES: tuple[str, ...] = ("Individual", "Joint", "Corporate", "Government")
LAND_STATUSES: tuple[str, ...] = ("Pending", "Under Review", "Approved")
TRANSFER_STATUSES: tuple[str, ...] = ("Pending", "Approved", "Rejected")


def _positive_int(raw: Any) -> int | None:
    """Parse select/text input into a positive int; None if not one."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float):
        if not raw.is_integer():
            return None
        raw = int(raw)
    try:
        value = int(str(raw).strip())
    except ValueError:
        return None
    return value if value > 0 else None


def _positive_number(raw: Any) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(str(raw).strip())
    except ValueError:
        return None
    return value if math.isfinite(value) and value > 0 else None


def _is_blank(raw: Any) -> bool:
    return raw is None or str(raw).strip() == ""


def validate_transfer_form(
    values: dict[str, Any],
    document: DocumentFile | None,
    lands: list[dict[str, Any]],
) -> tuple[dict[str, Any] | None, dict[str, str]]:
    """
    Validate the transfer form.

    Args:
        values: Raw field values with "parcel_id" and "recipient_name".
        document: The staged contract document, if any.
        lands: The current user's lands; parcel_id must be one of theirs.

    Returns:
        ({"parcel_id", "recipient_name", "contract_document"}, {}) when valid,
        otherwise (None, {field: message}).
    """
    errors: dict[str, str] = {}

    raw_parcel = values.get("parcel_id")
    parcel_id = _positive_int(raw_parcel)
    if _is_blank(raw_parcel):
        errors["parcel_id"] = "Parcel ID is required"
    elif parcel_id is None:
        errors["parcel_id"] = "Parcel ID must be a positive number"
    elif parcel_id not in {_positive_int(land.get("parcel_id")) for land in lands}:
        errors["parcel_id"] = "Select a parcel you own"

    recipient_name = str(values.get("recipient_name") or "").strip()
    if not recipient_name:
        errors["recipient_name"] = "Recipient name is required"
    elif len(recipient_name) < MIN_RECIPIENT_NAME_LENGTH:
        errors["recipient_name"] = (
            f"Recipient name must be at least {MIN_RECIPIENT_NAME_LENGTH} characters"
        )

    doc_error = validate_document(document, "Contract document")
    if doc_error:
        errors["contract_document"] = doc_error

    if errors:
        return None, errors
    return {
        "parcel_id": parcel_id,
        "recipient_name": recipient_name,
        "contract_document": document,
    }, {}


def validate_land_form(
    values: dict[str, Any],
    document: DocumentFile | None,
) -> tuple[dict[str, Any] | None, dict[str, str]]:
    """Validate the land registration form (parcel_id, size, ownership_type, supporting document)."""
    errors: dict[str, str] = {}

    raw_parcel = values.get("parcel_id")
    parcel_id = _positive_int(raw_parcel)
    if _is_blank(raw_parcel):
        errors["parcel_id"] = "Parcel ID is required"
    elif parcel_id is None:
        errors["parcel_id"] = "Parcel ID must be a positive number"

    raw_size = values.get("size")
    size = _positive_number(raw_size)
    if _is_blank(raw_size):
        errors["size"] = "Land size is required"
    elif size is None:
        errors["size"] = "Land size must be a positive number"

    ownership_type = str(values.get("ownership_type") or "").strip()
    if not ownership_type:
        errors["ownership_type"] = "Ownership type is required"
    elif ownership_type not in OWNERSHIP_TYPES:
        errors["ownership_type"] = f"Ownership type must be one of: {', '.join(OWNERSHIP_TYPES)}"

    doc_error = validate_document(document, "Supporting document")
    if doc_error:
        errors["supporting_document"] = doc_error

    if errors:
        return None, errors
    return {
        "parcel_id": parcel_id,
        "size": size,
        "ownership_type": ownership_type,
        "supporting_document": document,
    }, {}


def _format_size(size: Any) -> str:
    if isinstance(size, float) and size.is_integer():
        return str(int(size))
    return str(size)


def parcel_options(lands: list[dict[str, Any]]) -> list[tuple[int, str]]:
    """(parcel_id, label) pairs for the transfer form's parcel select."""
    out: list[tuple[int, str]] = []
    for land in lands:
        parcel_id = _positive_int(land.get("parcel_id"))
        if parcel_id is None:
            continue
        out.append((parcel_id, f"Parcel ID: {parcel_id} - Size: {_format_size(land.get('size'))} sq m"))
    return out
