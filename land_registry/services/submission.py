"""
Upload-then-create form submission.

A submission checks for a signed-in user, validates the form, uploads the
staged document and only then creates the remote record. Every outcome is
reported once through the notifier; submit() itself never raises.

States: IDLE -> VALIDATING -> UPLOADING_DOCUMENT -> CREATING_RECORD -> SUCCEEDED,
or FAILED from any of them. The uploaded document is not removed when record
creation fails.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from land_registry.domains.documents import DocumentFile, validate_document
from land_registry.domains.errors import (
    AuthenticationError,
    RecordCreationError,
    UploadError,
    ValidationError,
)
from land_registry.services.notifications import LoggingNotifier, Notifier
from land_registry.services.stores.auth_store import AuthStore
from land_registry.utils.logger import get_logger

logger = get_logger("submission")

AUTH_ERROR_TITLE = "Authentication error"
VALIDATION_ERROR_TITLE = "Validation error"
IN_PROGRESS_MESSAGE = "A submission is already in progress"


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    UPLOADING_DOCUMENT = "uploading_document"
    CREATING_RECORD = "creating_record"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_BUSY_STATES = (SubmissionState.UPLOADING_DOCUMENT, SubmissionState.CREATING_RECORD)


class DocumentSubmission:
    """Base class for forms whose record needs an uploaded document first.

    Subclasses set the class attributes and implement _validate,
    _upload_document and _create_record.
    """

    fields: tuple[str, ...] = ()
    document_field = "document"
    document_label = "Document"
    auth_message = "You must be logged in"
    failure_title = "Submission failed"
    success_title = "Submitted"
    success_message = "Your request has been submitted successfully"
    creation_error: type[RecordCreationError] = RecordCreationError

    def __init__(self, auth_store: AuthStore, notifier: Notifier | None = None) -> None:
        self._auth = auth_store
        self._notifier = notifier or LoggingNotifier()
        self.state = SubmissionState.IDLE
        self.values: dict[str, Any] = {}
        self.document: DocumentFile | None = None
        self.errors: dict[str, str] = {}
        self.last_error: str | None = None
        self._reset_form()

    @property
    def busy(self) -> bool:
        """True while the upload or the create call is outstanding."""
        return self.state in _BUSY_STATES

    def set_field(self, name: str, value: Any) -> None:
        if name not in self.fields:
            raise KeyError(f"Unknown field '{name}'")
        self.values[name] = value
        self.errors.pop(name, None)

    def attach_document(self, file: DocumentFile | None) -> str | None:
        """Stage a document and check it right away. Returns the field error, if any."""
        self.document = file
        error = validate_document(file, self.document_label) if file is not None else None
        if error:
            self.errors[self.document_field] = error
        else:
            self.errors.pop(self.document_field, None)
        return error

    def reset(self) -> None:
        """Discard input and return to IDLE (the form's cancel action)."""
        if self.busy:
            return
        self._reset_form()
        self.state = SubmissionState.IDLE
        self.last_error = None

    def _reset_form(self) -> None:
        self.values = {name: None for name in self.fields}
        self.document = None
        self.errors = {}

    def submit(self) -> dict[str, Any]:
        """
        Run the whole workflow once.

        Returns:
            {"success": True, "data": record} or {"success": False, "error": message}.
        """
        if self.busy:
            return {"success": False, "error": IN_PROGRESS_MESSAGE}
        self.last_error = None

        try:
            user = self._auth.user
            if not user:
                raise AuthenticationError(self.auth_message)

            self.state = SubmissionState.VALIDATING
            form, errors = self._validate()
            if errors:
                field = next(iter(errors))
                raise ValidationError(field, errors[field], errors)

            self.state = SubmissionState.UPLOADING_DOCUMENT
            url = self._upload(form, user)

            self.state = SubmissionState.CREATING_RECORD
            record = self._create(form, url, user)
        except AuthenticationError as e:
            return self._failed(AUTH_ERROR_TITLE, e)
        except ValidationError as e:
            self.errors = dict(e.errors)
            return self._failed(VALIDATION_ERROR_TITLE, e)
        except (UploadError, RecordCreationError) as e:
            return self._failed(self.failure_title, e)

        self._reset_form()
        self.state = SubmissionState.SUCCEEDED
        logger.info("%s: %s", self.success_title, record.get("id") if isinstance(record, dict) else record)
        self._notifier.success(self.success_title, self.success_message)
        return {"success": True, "data": record}

    def _upload(self, form: dict[str, Any], user: dict[str, Any]) -> str:
        try:
            result = self._upload_document(form, user)
        except Exception as e:
            raise UploadError(str(e) or "Upload failed") from e
        if not result.get("success"):
            raise UploadError(result.get("error") or "Upload failed")
        if not result.get("url"):
            raise UploadError("Upload failed: no document URL returned")
        return result["url"]

    def _create(self, form: dict[str, Any], url: str, user: dict[str, Any]) -> Any:
        try:
            result = self._create_record(form, url, user)
        except Exception as e:
            raise self.creation_error(str(e) or self.failure_title) from e
        if not result.get("success"):
            raise self.creation_error(result.get("error") or self.failure_title)
        return result.get("data")

    def _failed(self, title: str, error: Exception) -> dict[str, Any]:
        message = str(error)
        self.state = SubmissionState.FAILED
        self.last_error = message
        logger.warning("%s: %s", title, message)
        self._notifier.error(title, message)
        return {"success": False, "error": message}

    def _validate(self) -> tuple[dict[str, Any] | None, dict[str, str]]:
        raise NotImplementedError

    def _upload_document(self, form: dict[str, Any], user: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    def _create_record(self, form: dict[str, Any], url: str, user: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError
