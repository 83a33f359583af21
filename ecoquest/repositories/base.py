"""Base repository interface."""

from abc import ABC, abstractmethod

from ecoquest.models.domain import MarkerCollection


class MarkerRepository(ABC):
    """
    Base marker repository interface.

    Abstracts data access - could be a JSON file, memory, a database, etc.
    The whole collection is the unit of access: callers load it, mutate
    their own copy, and save it back.
    """

    @abstractmethod
    def load(self) -> MarkerCollection:
        """Load the full collection. Never raises; returns empty on read failure."""
        pass

    @abstractmethod
    def save(self, collection: MarkerCollection) -> bool:
        """Replace the stored collection. Returns False if it could not be written."""
        pass
