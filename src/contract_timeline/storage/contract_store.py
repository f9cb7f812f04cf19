"""Persisted collection of analyzed contracts."""

import logging
import threading
from typing import List, Optional

from ..interfaces.storage import IKeyValueStorage
from ..models.contract import Contract
from ..parsers.serialization import ContractSerializer
from .exceptions import StorageError


logger = logging.getLogger(__name__)

CONTRACTS_KEY = "contracts"
ACTIVE_CONTRACT_KEY = "active_contract"


class ContractStore:
    """
    In-memory list of analyzed contracts mirrored to durable storage.

    Holds at most one active contract. Every mutation writes the contract
    list and the active id back to storage. Writes are best effort: a
    storage failure is logged and the in-memory change is kept.

    Construct one store and pass it to every consumer. Mutations are
    serialized with a lock so the store may be shared across threads.
    """

    def __init__(
        self,
        storage: IKeyValueStorage,
        contracts_key: str = CONTRACTS_KEY,
        active_contract_key: str = ACTIVE_CONTRACT_KEY,
    ):
        self._storage = storage
        self._contracts_key = contracts_key
        self._active_contract_key = active_contract_key
        self._contracts: List[Contract] = []
        self._active_id: Optional[str] = None
        self._lock = threading.RLock()

    @property
    def contracts(self) -> List[Contract]:
        """Snapshot of all contracts in upload order."""
        with self._lock:
            return list(self._contracts)

    @property
    def active_contract(self) -> Optional[Contract]:
        with self._lock:
            if self._active_id is None:
                return None
            return self._find(self._active_id)

    def get(self, contract_id: str) -> Optional[Contract]:
        """Find a contract by id."""
        with self._lock:
            return self._find(contract_id)

    def __len__(self) -> int:
        return len(self._contracts)

    def __contains__(self, contract_id: object) -> bool:
        return isinstance(contract_id, str) and self.get(contract_id) is not None

    # =========================================================================
    # Persistence
    # =========================================================================

    def load(self) -> None:
        """
        Rehydrate the store from durable storage.

        Missing or corrupt data leaves the store empty; an active id that
        matches no contract leaves the active contract unset. Never raises.
        """
        with self._lock:
            self._contracts = []
            self._active_id = None

            try:
                raw_contracts = self._storage.get(self._contracts_key)
                raw_active_id = self._storage.get(self._active_contract_key)
            except StorageError as e:
                logger.error(f"Error loading contracts from storage: {e}")
                return

            if not raw_contracts:
                logger.info("No stored contracts found")
                return

            try:
                contracts = ContractSerializer.deserialize_many(raw_contracts)
            except ValueError as e:
                logger.error(f"Stored contracts are corrupt, starting empty: {e}")
                return

            self._contracts = contracts
            if raw_active_id and self._find(raw_active_id) is not None:
                self._active_id = raw_active_id
            elif raw_active_id:
                logger.warning(f"Stored active contract {raw_active_id} not found, leaving unset")

            logger.info(f"Loaded {len(self._contracts)} contracts from storage")

    def _persist(self) -> None:
        try:
            self._storage.set(
                self._contracts_key, ContractSerializer.serialize_many(self._contracts)
            )
            if self._active_id is not None:
                self._storage.set(self._active_contract_key, self._active_id)
            else:
                self._storage.delete(self._active_contract_key)
        except StorageError as e:
            logger.error(f"Error saving contracts to storage: {e}")

    # =========================================================================
    # Mutations
    # =========================================================================

    def add(self, contract: Contract) -> None:
        """Append a contract and make it the active one."""
        with self._lock:
            if self._find(contract.contract_id) is not None:
                raise ValueError(f"Contract {contract.contract_id} is already stored")
            self._contracts.append(contract)
            self._active_id = contract.contract_id
            self._persist()
        logger.info(f"Added contract {contract.contract_id} ({contract.filename})")

    def remove(self, contract_id: str) -> None:
        """Delete a contract. Unknown ids are ignored."""
        with self._lock:
            if self._find(contract_id) is None:
                logger.debug(f"Remove ignored, contract {contract_id} not found")
                return
            self._contracts = [c for c in self._contracts if c.contract_id != contract_id]
            if self._active_id == contract_id:
                self._active_id = None
            self._persist()
        logger.info(f"Removed contract {contract_id}")

    def set_active(self, contract: Optional[Contract]) -> None:
        """
        Select the active contract, or clear the selection with None.

        Raises:
            KeyError: If the contract is not in the store.
        """
        with self._lock:
            if contract is None:
                self._active_id = None
            else:
                if self._find(contract.contract_id) is None:
                    raise KeyError(contract.contract_id)
                self._active_id = contract.contract_id
            self._persist()

    def _find(self, contract_id: str) -> Optional[Contract]:
        for contract in self._contracts:
            if contract.contract_id == contract_id:
                return contract
        return None
