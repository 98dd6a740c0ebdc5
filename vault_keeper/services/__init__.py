"""Business logic for the vault."""

from .base_service import SessionManagedService
from .card_service import CardService
from .customer_service import CustomerService
from .file_service import FileService
from .object_store import InMemoryObjectStore, LocalObjectStore, ObjectStore
from .password_service import PasswordService
from .session_service import SessionService
from .vault_record_service import VaultRecordService

__all__ = [
    "SessionManagedService",
    "CardService",
    "CustomerService",
    "FileService",
    "InMemoryObjectStore",
    "LocalObjectStore",
    "ObjectStore",
    "PasswordService",
    "SessionService",
    "VaultRecordService",
]
