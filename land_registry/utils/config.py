"""Environment configuration for the registry client (python-dotenv backed).

Other modules go through the accessors here instead of `os.environ`.
load_settings() runs once at startup and reports every missing variable in a
single ConfigurationError.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from land_registry.domains.errors import ConfigurationError

DOCUMENT_STORAGE_BACKENDS = ("cloudinary", "supabase")


def _project_root() -> Path:
    # land_registry/utils/config.py -> repository root
    return Path(__file__).resolve().parents[2]


def load_config() -> None:
    """Read <repo>/.env into the process environment; its values win over exported ones."""
    load_dotenv(_project_root() / ".env", override=True)


def _env(key: str) -> str:
    load_config()
    return os.getenv(key, "").strip()


def get_required(key: str) -> str:
    """
    Value of `key`, which must be set to something other than whitespace.

    Raises:
        ConfigurationError: naming the variable, when it is unset or blank.
    """
    val = _env(key)
    if not val:
        raise ConfigurationError(f"Missing required environment variable: {key} (add it to .env)")
    return val


def get_optional(key: str, default: str = "") -> str:
    return _env(key) or default


def get_optional_int(key: str, default: int) -> int:
    """Integer value of `key`; unset or non-numeric values give `default`."""
    raw = _env(key)
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


# --- Public config accessors ---

def supabase_url() -> str:
    """Required: base URL of the Supabase project (https://<ref>.supabase.co)."""
    return get_required("SUPABASE_URL").rstrip("/")


def supabase_anon_key() -> str:
    """Required: Supabase anon (public) API key."""
    return get_required("SUPABASE_ANON_KEY")


def cloudinary_cloud_name() -> str:
    return get_required("CLOUDINARY_CLOUD_NAME")


def cloudinary_api_key() -> str:
    return get_required("CLOUDINARY_API_KEY")


def cloudinary_api_secret() -> str:
    return get_required("CLOUDINARY_API_SECRET")


def document_storage() -> str:
    """Optional: where documents are uploaded. Default cloudinary; or supabase."""
    return get_optional("DOCUMENT_STORAGE", "cloudinary").lower()


def document_bucket() -> str:
    """Optional: Supabase Storage bucket used when DOCUMENT_STORAGE=supabase."""
    return get_optional("SUPABASE_DOCUMENT_BUCKET", "land-documents")


def request_timeout() -> int:
    """Optional: HTTP timeout in seconds for remote calls. Default 30."""
    return get_optional_int("REQUEST_TIMEOUT", 30)


def project_root() -> Path:
    return _project_root()


@dataclass(frozen=True)
class Settings:
    """Startup configuration passed explicitly to the clients."""

    supabase_url: str
    supabase_anon_key: str
    document_storage: str = "cloudinary"
    document_bucket: str = "land-documents"
    cloudinary_cloud_name: str | None = None
    cloudinary_api_key: str | None = None
    cloudinary_api_secret: str | None = None
    request_timeout: int = 30


def load_settings() -> Settings:
    """
    Build Settings from the environment, failing fast on missing values.

    Cloudinary credentials are only required when documents are stored there.

    Raises:
        ConfigurationError: Naming every missing or invalid variable.
    """
    load_config()
    storage = document_storage()
    if storage not in DOCUMENT_STORAGE_BACKENDS:
        raise ConfigurationError(
            f"Invalid DOCUMENT_STORAGE '{storage}'. "
            f"Expected one of: {', '.join(DOCUMENT_STORAGE_BACKENDS)}."
        )

    required = ["SUPABASE_URL", "SUPABASE_ANON_KEY"]
    if storage == "cloudinary":
        required += ["CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"]
    missing = [key for key in required if not os.getenv(key, "").strip()]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Set them in .env or export them."
        )

    if storage == "cloudinary":
        cloud_name, api_key, api_secret = (
            cloudinary_cloud_name(),
            cloudinary_api_key(),
            cloudinary_api_secret(),
        )
    else:
        cloud_name = api_key = api_secret = None

    return Settings(
        supabase_url=supabase_url(),
        supabase_anon_key=supabase_anon_key(),
        document_storage=storage,
        document_bucket=document_bucket(),
        cloudinary_cloud_name=cloud_name,
        cloudinary_api_key=api_key,
        cloudinary_api_secret=api_secret,
        request_timeout=request_timeout(),
    )
