"""Durable key-value storage interface for the Contract Timeline Analyzer."""

from abc import ABC, abstractmethod
from typing import Optional


class IKeyValueStorage(ABC):
    """
    Abstract interface for a string-keyed persistence sink.

    Implementations raise StorageError on read or write failures.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        pass
