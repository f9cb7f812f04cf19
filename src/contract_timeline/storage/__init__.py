"""Persistence for the Contract Timeline Analyzer."""

from .contract_store import ACTIVE_CONTRACT_KEY, CONTRACTS_KEY, ContractStore
from .database import DatabaseManager, get_database_url
from .exceptions import StorageError
from .kv_storage import InMemoryKeyValueStorage, SqlKeyValueStorage
from .models import Base, KeyValueEntryModel

__all__ = [
    "ACTIVE_CONTRACT_KEY",
    "CONTRACTS_KEY",
    "ContractStore",
    "DatabaseManager",
    "get_database_url",
    "StorageError",
    "InMemoryKeyValueStorage",
    "SqlKeyValueStorage",
    "Base",
    "KeyValueEntryModel",
]
