from .collection_source import CollectionSource
from .credential_store import CredentialStore
from .notifier import Notifier

__all__ = [
    "CollectionSource",
    "CredentialStore",
    "Notifier",
]
