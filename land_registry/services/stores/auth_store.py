"""Authentication store: the signed-in user mirrored from Supabase auth."""

from __future__ import annotations

from typing import Any

from land_registry.infrastructure.supabase_client import SupabaseClient
from land_registry.services.stores.base import Store, logger


def _to_user(raw: dict[str, Any], full_name: str | None = None) -> dict[str, Any]:
    metadata = raw.get("user_metadata") or {}
    return {
        "id": raw.get("id"),
        "email": raw.get("email"),
        "full_name": full_name or metadata.get("full_name"),
    }


class AuthStore(Store):
    name = "auth"

    def __init__(self, client: SupabaseClient) -> None:
        super().__init__()
        self._client = client
        self.user: dict[str, Any] | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def sign_up(self, email: str, password: str, full_name: str) -> dict[str, Any]:
        self._begin()
        try:
            res = self._client.sign_up(email, password, {"full_name": full_name})
            if res["error"]:
                return self._fail(res["error"])
            raw = res["data"]["user"]
            if raw:
                self.user = _to_user(raw, full_name)
            return {"success": True, "data": self.user}
        except Exception as e:
            return self._raised(e)
        finally:
            self._finish()

    def sign_in(self, email: str, password: str) -> dict[str, Any]:
        self._begin()
        try:
            res = self._client.sign_in_with_password(email, password)
            if res["error"]:
                return self._fail(res["error"])
            raw = res["data"]["user"]
            if raw:
                self.user = _to_user(raw)
            logger.info("Signed in user %s", (self.user or {}).get("id"))
            return {"success": True, "data": self.user}
        except Exception as e:
            return self._raised(e)
        finally:
            self._finish()

    def sign_out(self) -> dict[str, Any]:
        self._begin()
        try:
            res = self._client.sign_out()
            if res["error"]:
                return self._fail(res["error"])
            self.user = None
            return {"success": True}
        except Exception as e:
            return self._raised(e)
        finally:
            self._finish()

    def get_current_user(self) -> dict[str, Any] | None:
        """
        Rehydrate the user from the current session.

        Lookup failures are logged and leave the store unchanged; they are not
        user-facing.
        """
        try:
            res = self._client.get_user()
        except Exception as e:
            logger.exception("Error getting current user: %s", e)
            return self.user
        if res["error"]:
            logger.warning("Error getting current user: %s", res["error"])
            return self.user
        raw = res["data"]["user"]
        if raw:
            self.user = _to_user(raw)
            self._notify()
        elif self.user is not None:
            logger.info("Session ended for user %s", self.user.get("id"))
            self.user = None
            self._notify()
        return self.user
