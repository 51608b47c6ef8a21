"""
Record store interface and the in-memory implementation.
A collection is a named list of records; writes replace the whole collection.
"""

import copy
from abc import ABC, abstractmethod
from typing import Dict, List

from .types import Record


class IRecordStore(ABC):
    """Abstract interface for named record collections."""

    # Name matching the CRM_STORE_PROVIDER value that selects the implementation
    provider = "unknown"

    @abstractmethod
    def get(self, module: str) -> List[Record]:
        """Return the records of a collection (empty list when absent)."""
        pass

    @abstractmethod
    def put(self, module: str, records: List[Record]) -> None:
        """Replace the whole collection."""
        pass

    @abstractmethod
    def remove_all(self, module: str) -> None:
        """Drop a collection."""
        pass

    @abstractmethod
    def collections(self) -> List[str]:
        """Names of the collections currently stored."""
        pass

    def health_check(self) -> bool:
        return True

    def count(self, module: str) -> int:
        return len(self.get(module))


class InMemoryRecordStore(IRecordStore):
    """Dictionary-backed store. Records are copied in and out so callers never share state with it."""

    provider = "memory"

    def __init__(self):
        self._collections: Dict[str, List[Record]] = {}

    def get(self, module: str) -> List[Record]:
        return copy.deepcopy(self._collections.get(module, []))

    def put(self, module: str, records: List[Record]) -> None:
        self._collections[module] = copy.deepcopy(list(records))

    def remove_all(self, module: str) -> None:
        self._collections.pop(module, None)

    def collections(self) -> List[str]:
        return sorted(self._collections)
