"""
Reminder Store Interface
Key/value slot holding the full reminder list
"""
from abc import ABC, abstractmethod
from typing import List

from app.domain.models.reminder import Reminder


class ReminderStoreError(Exception):
    """Raised when the backing store cannot be read or written"""
    pass


class ReminderStore(ABC):
    """
    Abstract reminder store.

    Callers always read everything, filter in memory and write everything
    back; there is no partial update.
    """

    STORAGE_KEY = "salesCentral_reminders"

    @abstractmethod
    async def get_all(self) -> List[Reminder]:
        """Return all stored reminders. Raises ReminderStoreError on failure."""
        pass

    @abstractmethod
    async def save_all(self, reminders: List[Reminder]) -> None:
        """Replace the stored list. Raises ReminderStoreError on failure."""
        pass

    async def close(self) -> None:
        """Release any connection held by the store"""
        pass
