"""Error taxonomy for the land registry client.

Only ConfigurationError is fatal (raised at startup). The others are raised
inside the submission workflows and folded into notifications; they never
escape a workflow's submit().
"""

from __future__ import annotations


class LandRegistryError(Exception):
    """Base class for all land registry errors."""


class ConfigurationError(LandRegistryError):
    """Raised when required configuration is missing or invalid."""


class AuthenticationError(LandRegistryError):
    """Raised when an operation needs a signed-in user and there is none."""


class ValidationError(LandRegistryError):
    """Raised when form input is rejected before any remote call.

    `field` names the first offending field; `errors` maps every offending
    field to its message.
    """

    def __init__(self, field: str, message: str, errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.errors = dict(errors) if errors else {field: message}


class UploadError(LandRegistryError):
    """Raised when a document upload fails or the uploader raises."""


class RecordCreationError(LandRegistryError):
    """Raised when the remote record cannot be created after a successful upload."""


class TransferCreationError(RecordCreationError):
    """Transfer record creation failed."""


class LandRegistrationError(RecordCreationError):
    """Land record creation failed."""
