"""
Supabase REST client: GoTrue auth, PostgREST rows and Storage objects.

A thin wrapper over `requests`. Every call returns {"data": ..., "error": ...}
where error is None on success or a human-readable message. Transport errors
and error responses are logged and folded into `error`, never raised.
"""

from __future__ import annotations

import time
from typing import Any, Callable
from urllib.parse import quote

import requests

from land_registry.domains.documents import DocumentFile
from land_registry.utils.config import Settings, request_timeout, supabase_anon_key, supabase_url
from land_registry.utils.logger import get_logger

logger = get_logger("supabase")

# (file, owner_id, document_type) -> {"success": bool, "url" | "error": str}
DocumentUploader = Callable[[DocumentFile, str, str], dict[str, Any]]

_ERROR_KEYS = ("message", "msg", "error_description", "error")


def _error_message(response: requests.Response) -> str:
    """Pull the message out of a PostgREST / GoTrue / Storage error body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in _ERROR_KEYS:
            val = body.get(key)
            if isinstance(val, str) and val.strip():
                return val.strip()
    text = (response.text or "").strip()
    return text[:500] if text else f"Request failed with status {response.status_code}"


def _predicate(value: Any) -> str:
    """
    Encode a filter value as a PostgREST predicate.

    Plain values mean equality; (operator, value) tuples pass the operator
    through, with list values rendered as ("in", [1, 2]) -> "in.(1,2)".
    """
    if isinstance(value, tuple) and len(value) == 2:
        op, operand = value
        if isinstance(operand, (list, tuple, set)):
            operand = "(" + ",".join(str(v) for v in operand) + ")"
        return f"{op}.{operand}"
    return f"eq.{value}"


def _session_user(payload: dict[str, Any]) -> dict[str, Any] | None:
    # signup returns the bare user when email confirmation is on
    if "user" in payload:
        return payload.get("user")
    return payload if payload.get("id") else None


class SupabaseClient:
    """
    Minimal Supabase client bound to one project.

    Holds the signed-in session's access token; row and storage calls are made
    with it so row-level security applies, falling back to the anon key.
    """

    def __init__(
        self,
        url: str | None = None,
        anon_key: str | None = None,
        timeout: int | None = None,
    ) -> None:
        self._url = (url or supabase_url()).rstrip("/")
        self._anon_key = anon_key or supabase_anon_key()
        self._timeout = timeout or request_timeout()
        self._access_token: str | None = None
        self._refresh_token: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabaseClient":
        return cls(settings.supabase_url, settings.supabase_anon_key, settings.request_timeout)

    @property
    def url(self) -> str:
        return self._url

    @property
    def access_token(self) -> str | None:
        return self._access_token

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {self._access_token or self._anon_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
        retry_on_expiry: bool = True,
    ) -> dict[str, Any]:
        try:
            r = requests.request(
                method,
                f"{self._url}{path}",
                params=params,
                json=json,
                data=data,
                headers=self._headers(headers),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("Supabase %s %s failed: %s", method, path, e)
            return {"data": None, "error": str(e) or type(e).__name__}

        if r.status_code == 401 and retry_on_expiry and self._refresh_token:
            # access token expired: refresh once and replay the call
            if not self.refresh_session()["error"]:
                return self._request(
                    method, path, params=params, json=json, data=data, headers=headers, retry_on_expiry=False,
                )

        if not r.ok:
            message = _error_message(r)
            logger.warning("Supabase %s %s returned %s: %s", method, path, r.status_code, message)
            return {"data": None, "error": message}

        if not r.content:
            return {"data": None, "error": None}
        try:
            return {"data": r.json(), "error": None}
        except ValueError:
            return {"data": r.text, "error": None}

    def _store_session(self, payload: dict[str, Any]) -> dict[str, Any] | None:
        token = payload.get("access_token")
        if not token:
            return None
        self._access_token = token
        self._refresh_token = payload.get("refresh_token")
        return {
            "access_token": token,
            "refresh_token": self._refresh_token,
            "expires_in": payload.get("expires_in"),
        }

    # --- Auth ---

    def sign_up(self, email: str, password: str, metadata: dict[str, Any] | None = None) -> dict[str, Any]:
        res = self._request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": metadata or {}},
        )
        if res["error"]:
            return res
        payload = res["data"] or {}
        session = self._store_session(payload)
        return {"data": {"user": _session_user(payload), "session": session}, "error": None}

    def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        res = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if res["error"]:
            return res
        payload = res["data"] or {}
        session = self._store_session(payload)
        return {"data": {"user": payload.get("user"), "session": session}, "error": None}

    def refresh_session(self) -> dict[str, Any]:
        """Exchange the refresh token for a new session. A rejected token ends the session."""
        if not self._refresh_token:
            return {"data": None, "error": "No session to refresh"}
        res = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": self._refresh_token},
            retry_on_expiry=False,
        )
        if res["error"]:
            self._access_token = None
            self._refresh_token = None
            return res
        logger.info("Supabase session refreshed")
        return {"data": {"session": self._store_session(res["data"] or {})}, "error": None}

    def sign_out(self) -> dict[str, Any]:
        if not self._access_token:
            return {"data": None, "error": None}
        res = self._request("POST", "/auth/v1/logout")
        if res["error"]:
            return res
        self._access_token = None
        self._refresh_token = None
        return {"data": None, "error": None}

    def get_user(self) -> dict[str, Any]:
        """Return the user for the current session ({"user": None} when signed out)."""
        if not self._access_token:
            return {"data": {"user": None}, "error": None}
        res = self._request("GET", "/auth/v1/user")
        if res["error"]:
            if not self._access_token:
                # the refresh was rejected, so there is no session any more
                return {"data": {"user": None}, "error": None}
            return res
        return {"data": {"user": res["data"]}, "error": None}

    # --- Rows ---

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        *,
        order: str | None = None,
        columns: str = "*",
    ) -> dict[str, Any]:
        """
        Select rows from a table.

        Args:
            table: Table name.
            filters: Column -> value (equality) or (operator, value).
            order: PostgREST order clause, e.g. "created_at.desc".
            columns: Select clause, may embed related tables.
        """
        params: dict[str, Any] = {"select": columns}
        for column, value in (filters or {}).items():
            params[column] = _predicate(value)
        if order:
            params["order"] = order
        res = self._request("GET", f"/rest/v1/{table}", params=params)
        if res["error"]:
            return res
        return {"data": res["data"] or [], "error": None}

    def _single(self, res: dict[str, Any]) -> dict[str, Any]:
        if res["error"]:
            return res
        rows = res["data"] or []
        if isinstance(rows, dict):
            return {"data": rows, "error": None}
        if len(rows) != 1:
            return {"data": None, "error": "JSON object requested, multiple (or no) rows returned"}
        return {"data": rows[0], "error": None}

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored."""
        res = self._request(
            "POST",
            f"/rest/v1/{table}",
            params={"select": "*"},
            json=[row],
            headers={"Prefer": "return=representation"},
        )
        return self._single(res)

    def update(self, table: str, row_id: Any, changes: dict[str, Any]) -> dict[str, Any]:
        res = self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params={"id": _predicate(row_id), "select": "*"},
            json=changes,
            headers={"Prefer": "return=representation"},
        )
        return self._single(res)

    def delete(self, table: str, row_id: Any) -> dict[str, Any]:
        return self._request("DELETE", f"/rest/v1/{table}", params={"id": _predicate(row_id)})

    # --- Storage ---

    def upload(self, bucket: str, path: str, file: DocumentFile) -> dict[str, Any]:
        res = self._request(
            "POST",
            f"/storage/v1/object/{bucket}/{quote(path)}",
            data=file.content,
            headers={
                "Content-Type": file.media_type or "application/octet-stream",
                "x-upsert": "false",
            },
        )
        if res["error"]:
            return res
        return {"data": {"path": path}, "error": None}

    def get_public_url(self, bucket: str, path: str) -> dict[str, Any]:
        """Public URL for an object; no request is made."""
        return {
            "data": {"public_url": f"{self._url}/storage/v1/object/public/{bucket}/{quote(path)}"},
            "error": None,
        }


def storage_uploader(client: SupabaseClient, bucket: str) -> DocumentUploader:
    """
    Build a document uploader backed by a Supabase Storage bucket.

    Objects are stored as <type>-documents/<owner>-<epoch ms>.<ext> and the
    public URL is returned, mirroring the Cloudinary uploader's result shape.
    """

    def upload(file: DocumentFile, owner_id: str, document_type: str) -> dict[str, Any]:
        ext = file.extension or "bin"
        path = f"{document_type}-documents/{owner_id}-{int(time.time() * 1000)}.{ext}"
        res = client.upload(bucket, path, file)
        if res["error"]:
            return {"success": False, "error": res["error"]}
        return {"success": True, "url": client.get_public_url(bucket, path)["data"]["public_url"]}

    return upload
