"""
Per-user session wiring: one Supabase client, the three stores and both forms.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial

from land_registry.infrastructure.cloudinary_client import upload_document_to_cloudinary
from land_registry.infrastructure.supabase_client import (
    DocumentUploader,
    SupabaseClient,
    storage_uploader,
)
from land_registry.services.land_registration import LandRegistration
from land_registry.services.notifications import Notifier
from land_registry.services.stores import AuthStore, LandStore, TransferStore
from land_registry.services.transfer_submission import TransferSubmission
from land_registry.utils.config import Settings
from land_registry.utils.logger import get_logger, mask_secret

logger = get_logger("session")


@dataclass
class RegistrySession:
    client: SupabaseClient
    auth: AuthStore
    lands: LandStore
    transfers: TransferStore
    registration: LandRegistration
    transfer_form: TransferSubmission

    def refresh(self) -> None:
        """Reload the signed-in user's lands and transfers."""
        user = self.auth.user
        if not user:
            return
        self.lands.fetch_user_lands(user["id"])
        self.transfers.fetch_user_transfers(user["id"])


def make_uploader(settings: Settings, client: SupabaseClient) -> DocumentUploader:
    """Document uploader for the configured storage backend."""
    if settings.document_storage == "supabase":
        return storage_uploader(client, settings.document_bucket)
    return partial(
        upload_document_to_cloudinary,
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        timeout=settings.request_timeout,
    )


def create_session(settings: Settings, notifier: Notifier | None = None) -> RegistrySession:
    client = SupabaseClient.from_settings(settings)
    uploader = make_uploader(settings, client)
    logger.info(
        "Supabase project %s (anon key %s); documents stored in %s",
        settings.supabase_url,
        mask_secret(settings.supabase_anon_key),
        settings.document_storage,
    )

    auth = AuthStore(client)
    lands = LandStore(client, uploader)
    transfers = TransferStore(client, uploader)
    return RegistrySession(
        client=client,
        auth=auth,
        lands=lands,
        transfers=transfers,
        registration=LandRegistration(auth, lands, notifier),
        transfer_form=TransferSubmission(auth, lands, transfers, notifier),
    )
