"""
Reminder Service
Append, lookup and retention over a ReminderStore.

Storage failures never reach the conversation: reads degrade to an
empty list and writes are skipped, both logged.
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from app.domain.interfaces.reminder_store import ReminderStore, ReminderStoreError
from app.domain.models.reminder import Reminder, ReminderDirective

logger = logging.getLogger(__name__)


class ReminderService:
    """Read-all / filter / write-all operations on stored reminders"""

    RETENTION_DAYS = 3

    def __init__(self, store: ReminderStore, retention_days: int = RETENTION_DAYS):
        self.store = store
        self.retention_days = retention_days

    async def _load(self) -> Optional[List[Reminder]]:
        try:
            return await self.store.get_all()
        except ReminderStoreError as e:
            logger.error(f"Failed to read reminders: {e}")
            return None

    async def _save(self, reminders: List[Reminder]) -> bool:
        try:
            await self.store.save_all(reminders)
            return True
        except ReminderStoreError as e:
            logger.error(f"Failed to save reminders: {e}")
            return False

    async def all(self) -> List[Reminder]:
        return await self._load() or []

    async def add(self, directive: ReminderDirective, created: Optional[datetime] = None) -> Optional[Reminder]:
        """
        Store a reminder parsed from a REMINDER_SET directive.

        Returns:
            The stored reminder, or None if the store could not be updated
        """
        reminders = await self._load()
        if reminders is None:
            return None

        reminder = Reminder.from_directive(directive, created=created)
        reminders.append(reminder)
        if not await self._save(reminders):
            return None

        logger.info(
            f"Reminder set: {reminder.id} lead={reminder.lead_id} due={reminder.due_date.isoformat()}"
        )
        return reminder

    async def for_date(self, target: date) -> List[Reminder]:
        """Reminders due exactly on `target`, in stored order"""
        return [r for r in await self.all() if r.due_date == target]

    async def prune(self, today: Optional[date] = None) -> int:
        """
        Delete reminders due more than `retention_days` before today.

        Returns:
            Number of reminders removed
        """
        today = today or date.today()
        cutoff = today - timedelta(days=self.retention_days)

        reminders = await self._load()
        if reminders is None:
            return 0

        kept = [r for r in reminders if r.due_date >= cutoff]
        removed = len(reminders) - len(kept)
        if removed and await self._save(kept):
            logger.info(f"Pruned {removed} reminders due before {cutoff.isoformat()}")
            return removed
        return 0
