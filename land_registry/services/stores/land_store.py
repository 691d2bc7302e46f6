"""Land store: the signed-in user's parcels."""

from __future__ import annotations

from typing import Any

from land_registry.domains.documents import DocumentFile
from land_registry.infrastructure.cloudinary_client import upload_document_to_cloudinary
from land_registry.infrastructure.supabase_client import DocumentUploader, SupabaseClient
from land_registry.services.stores.base import Store, logger

LANDS_TABLE = "lands"


class LandStore(Store):
    name = "land"

    def __init__(self, client: SupabaseClient, uploader: DocumentUploader | None = None) -> None:
        super().__init__()
        self._client = client
        self._uploader = uploader or upload_document_to_cloudinary
        self.lands: list[dict[str, Any]] = []

    def fetch_user_lands(self, user_id: str) -> dict[str, Any]:
        self._begin()
        try:
            res = self._client.select(LANDS_TABLE, {"owner_id": user_id}, order="created_at.desc")
            if res["error"]:
                return self._fail(res["error"])
            self.lands = list(res["data"])
            return {"success": True, "data": self.lands}
        except Exception as e:
            return self._raised(e)
        finally:
            self._finish()

    def register_land(self, land_data: dict[str, Any]) -> dict[str, Any]:
        self._begin()
        try:
            res = self._client.insert(LANDS_TABLE, land_data)
            if res["error"]:
                return self._fail(res["error"])
            self.lands = [res["data"], *self.lands]
            return {"success": True, "data": res["data"]}
        except Exception as e:
            return self._raised(e)
        finally:
            self._finish()

    def update_land(self, land_id: Any, updates: dict[str, Any]) -> dict[str, Any]:
        self._begin()
        try:
            res = self._client.update(LANDS_TABLE, land_id, updates)
            if res["error"]:
                return self._fail(res["error"])
            self.lands = [res["data"] if land.get("id") == land_id else land for land in self.lands]
            return {"success": True, "data": res["data"]}
        except Exception as e:
            return self._raised(e)
        finally:
            self._finish()

    def delete_land(self, land_id: Any) -> dict[str, Any]:
        self._begin()
        try:
            res = self._client.delete(LANDS_TABLE, land_id)
            if res["error"]:
                return self._fail(res["error"])
            self.lands = [land for land in self.lands if land.get("id") != land_id]
            return {"success": True}
        except Exception as e:
            return self._raised(e)
        finally:
            self._finish()

    def upload_supporting_document(self, file: DocumentFile, owner_id: str) -> dict[str, Any]:
        """Upload a supporting document. Does not touch `loading`."""
        try:
            result = self._uploader(file, owner_id, "supporting")
        except Exception as e:
            logger.exception("%s upload raised: %s", self.name, e)
            result = {"success": False, "error": str(e)}
        if not result.get("success"):
            self.error = result.get("error") or "Upload failed"
            self._notify()
            return {"success": False, "error": self.error}
        return result

    def get_land(self, parcel_id: int) -> dict[str, Any] | None:
        for land in self.lands:
            if land.get("parcel_id") == parcel_id:
                return land
        return None
