"""Marker repository - in-memory implementation."""

import copy
from typing import Optional

from ecoquest.models.domain import MarkerCollection
from ecoquest.repositories.base import MarkerRepository


class InMemoryMarkerRepository(MarkerRepository):
    """
    Repository holding the collection in memory.

    Current implementation: a deep-copied collection per load/save, so
    callers never share state the way they would not share a file.
    Rationale: fast, isolated stores for tests and throwaway instances.
    """

    def __init__(self, collection: Optional[MarkerCollection] = None):
        self._collection = copy.deepcopy(collection) if collection else MarkerCollection()
        self.fail_writes = False
        self.save_count = 0

    def load(self) -> MarkerCollection:
        """Return a private copy of the stored collection."""
        return copy.deepcopy(self._collection)

    def save(self, collection: MarkerCollection) -> bool:
        """Store a copy of the collection unless write failures are simulated."""
        if self.fail_writes:
            return False
        self._collection = copy.deepcopy(collection)
        self.save_count += 1
        return True
