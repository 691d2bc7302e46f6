"""
Transfer initiation: upload the signed contract, then create a Pending transfer.
"""

from __future__ import annotations

from typing import Any

from land_registry.domains.errors import TransferCreationError
from land_registry.domains.validation import parcel_options, validate_transfer_form
from land_registry.services.notifications import Notifier
from land_registry.services.stores.auth_store import AuthStore
from land_registry.services.stores.land_store import LandStore
from land_registry.services.stores.transfer_store import TransferStore
from land_registry.services.submission import DocumentSubmission


class TransferSubmission(DocumentSubmission):
    fields = ("parcel_id", "recipient_name")
    document_field = "contract_document"
    document_label = "Contract document"
    auth_message = "You must be logged in to initiate a transfer"
    failure_title = "Transfer failed"
    success_title = "Transfer initiated"
    success_message = "Your transfer request has been submitted successfully"
    creation_error = TransferCreationError

    def __init__(
        self,
        auth_store: AuthStore,
        land_store: LandStore,
        transfer_store: TransferStore,
        notifier: Notifier | None = None,
    ) -> None:
        self._lands = land_store
        self._transfers = transfer_store
        super().__init__(auth_store, notifier)

    def parcel_options(self) -> list[tuple[int, str]]:
        """Parcels the signed-in user can transfer, as (parcel_id, label)."""
        return parcel_options(self._lands.lands)

    def _validate(self) -> tuple[dict[str, Any] | None, dict[str, str]]:
        return validate_transfer_form(self.values, self.document, self._lands.lands)

    def _upload_document(self, form: dict[str, Any], user: dict[str, Any]) -> dict[str, Any]:
        return self._transfers.upload_contract_document(form["contract_document"], user["id"])

    def _create_record(self, form: dict[str, Any], url: str, user: dict[str, Any]) -> dict[str, Any]:
        return self._transfers.create_transfer({
            "parcel_id": form["parcel_id"],
            "recipient_name": form["recipient_name"],
            "contract_document_url": url,
            "status": "Pending",
        })
