"""Transfer store: ownership transfers on the signed-in user's parcels."""

from __future__ import annotations

from typing import Any

from land_registry.domains.documents import DocumentFile
from land_registry.infrastructure.cloudinary_client import upload_document_to_cloudinary
from land_registry.infrastructure.supabase_client import DocumentUploader, SupabaseClient
from land_registry.services.stores.base import Store, logger

TRANSFERS_TABLE = "transfers"

# transfers.parcel_id references lands.parcel_id; the inner embed keeps only
# transfers whose parcel matches the owner filter.
_OWNED_TRANSFERS_SELECT = "*,lands!inner(owner_id)"


class TransferStore(Store):
    name = "transfer"

    def __init__(self, client: SupabaseClient, uploader: DocumentUploader | None = None) -> None:
        super().__init__()
        self._client = client
        self._uploader = uploader or upload_document_to_cloudinary
        self.transfers: list[dict[str, Any]] = []

    def fetch_user_transfers(self, user_id: str) -> dict[str, Any]:
        self._begin()
        try:
            res = self._client.select(
                TRANSFERS_TABLE,
                {"lands.owner_id": user_id},
                order="created_at.desc",
                columns=_OWNED_TRANSFERS_SELECT,
            )
            if res["error"]:
                return self._fail(res["error"])
            self.transfers = [
                {k: v for k, v in row.items() if k != "lands"} for row in res["data"]
            ]
            return {"success": True, "data": self.transfers}
        except Exception as e:
            return self._raised(e)
        finally:
            self._finish()

    def create_transfer(self, transfer_data: dict[str, Any]) -> dict[str, Any]:
        self._begin()
        try:
            res = self._client.insert(TRANSFERS_TABLE, transfer_data)
            if res["error"]:
                return self._fail(res["error"])
            self.transfers = [res["data"], *self.transfers]
            return {"success": True, "data": res["data"]}
        except Exception as e:
            return self._raised(e)
        finally:
            self._finish()

    def update_transfer(self, transfer_id: Any, updates: dict[str, Any]) -> dict[str, Any]:
        self._begin()
        try:
            res = self._client.update(TRANSFERS_TABLE, transfer_id, updates)
            if res["error"]:
                return self._fail(res["error"])
            self.transfers = [
                res["data"] if t.get("id") == transfer_id else t for t in self.transfers
            ]
            return {"success": True, "data": res["data"]}
        except Exception as e:
            return self._raised(e)
        finally:
            self._finish()

    def delete_transfer(self, transfer_id: Any) -> dict[str, Any]:
        self._begin()
        try:
            res = self._client.delete(TRANSFERS_TABLE, transfer_id)
            if res["error"]:
                return self._fail(res["error"])
            self.transfers = [t for t in self.transfers if t.get("id") != transfer_id]
            return {"success": True}
        except Exception as e:
            return self._raised(e)
        finally:
            self._finish()

    def upload_contract_document(self, file: DocumentFile, owner_id: str) -> dict[str, Any]:
        """Upload a signed contract. Does not touch `loading`."""
        try:
            result = self._uploader(file, owner_id, "contract")
        except Exception as e:
            logger.exception("%s upload raised: %s", self.name, e)
            result = {"success": False, "error": str(e)}
        if not result.get("success"):
            self.error = result.get("error") or "Upload failed"
            self._notify()
            return {"success": False, "error": self.error}
        return result
