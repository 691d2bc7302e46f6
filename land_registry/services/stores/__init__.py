"""Domain stores: in-memory state mirrored from the remote store."""

from land_registry.services.stores.auth_store import AuthStore
from land_registry.services.stores.base import Store
from land_registry.services.stores.land_store import LandStore
from land_registry.services.stores.transfer_store import TransferStore

__all__ = ["AuthStore", "LandStore", "Store", "TransferStore"]
