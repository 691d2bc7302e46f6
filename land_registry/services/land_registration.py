"""
Land registration: upload the proof of ownership, then create a Pending land record.
"""

from __future__ import annotations

from typing import Any

from land_registry.domains.errors import LandRegistrationError
from land_registry.domains.validation import validate_land_form
from land_registry.services.notifications import Notifier
from land_registry.services.stores.auth_store import AuthStore
from land_registry.services.stores.land_store import LandStore
from land_registry.services.submission import DocumentSubmission


class LandRegistration(DocumentSubmission):
    fields = ("parcel_id", "size", "ownership_type")
    document_field = "supporting_document"
    document_label = "Supporting document"
    auth_message = "You must be logged in to register land"
    failure_title = "Registration failed"
    success_title = "Land registered"
    success_message = "Your land has been submitted for review"
    creation_error = LandRegistrationError

    def __init__(
        self,
        auth_store: AuthStore,
        land_store: LandStore,
        notifier: Notifier | None = None,
    ) -> None:
        self._lands = land_store
        super().__init__(auth_store, notifier)

    def _validate(self) -> tuple[dict[str, Any] | None, dict[str, str]]:
        return validate_land_form(self.values, self.document)

    def _upload_document(self, form: dict[str, Any], user: dict[str, Any]) -> dict[str, Any]:
        return self._lands.upload_supporting_document(form["supporting_document"], user["id"])

    def _create_record(self, form: dict[str, Any], url: str, user: dict[str, Any]) -> dict[str, Any]:
        return self._lands.register_land({
            "parcel_id": form["parcel_id"],
            "size": form["size"],
            "ownership_type": form["ownership_type"],
            "supporting_document_url": url,
            "status": "Pending",
            "owner_id": user["id"],
        })
