"""
Context Assembler
Builds the situational context sent with each turn.

The payload always carries portfolio counts and the full lead catalog;
reminders are added only when the user asks about reminders or focus.
"""
import re
import json
import logging
from datetime import date, timedelta
from typing import List, Optional

from app.domain.interfaces.lead_catalog import LeadCatalog
from app.domain.models.context_payload import ContextPayload
from app.domain.models.conversation import ChatSession
from app.domain.models.reminder import Reminder
from app.domain.services.prompt_manager import PromptManager
from app.domain.services.reminder_service import ReminderService

logger = logging.getLogger(__name__)


REMINDER_INTENT_PATTERN = re.compile(r"remind|focus|follow.*up", re.IGNORECASE)
TOMORROW_PATTERN = re.compile(r"tomorrow", re.IGNORECASE)


class ContextAssembler:
    """Assembles the trailing user content for a turn"""

    def __init__(
        self,
        catalog: LeadCatalog,
        reminder_service: ReminderService,
        prompt_manager: Optional[PromptManager] = None,
    ):
        self.catalog = catalog
        self.reminder_service = reminder_service
        self.prompt_manager = prompt_manager or PromptManager()

    @staticmethod
    def is_reminder_query(user_text: str) -> bool:
        """True when the text asks about reminders, focus or follow-ups"""
        return bool(REMINDER_INTENT_PATTERN.search(user_text or ""))

    @staticmethod
    def target_date(user_text: str, today: date) -> date:
        """'tomorrow' means today + 1; anything else means today"""
        if TOMORROW_PATTERN.search(user_text or ""):
            return today + timedelta(days=1)
        return today

    def catalog_json(self) -> str:
        """Full catalog in canonical form, keyed by lead id"""
        return json.dumps(
            {lead.id: lead.to_catalog_dict() for lead in self.catalog.all()},
            indent=2,
            ensure_ascii=False,
        )

    async def assemble(self, user_text: str, session: ChatSession, today: Optional[date] = None) -> ContextPayload:
        """
        Args:
            user_text: Current user input
            session: Session holding the current-lead context
            today: Current date (defaults to date.today())

        Returns:
            ContextPayload with rendered content
        """
        today = today or date.today()
        leads = self.catalog.all()
        total = len(leads)
        rm_action_count = sum(1 for lead in leads if lead.needs_rm_action)

        current_lead = self.catalog.get(session.current_lead_id) if session.current_lead_id else None

        reminders: List[Reminder] = []
        reminder_date: Optional[date] = None
        if self.is_reminder_query(user_text):
            reminder_date = self.target_date(user_text, today)
            reminders = await self.reminder_service.for_date(reminder_date)
            logger.info(f"Reminder query for {reminder_date.isoformat()}: {len(reminders)} found")

        reminders_json = ""
        if reminders:
            reminders_json = json.dumps([r.to_wire() for r in reminders], indent=2, ensure_ascii=False)

        content = self.prompt_manager.render_turn_context(
            total_leads=total,
            rm_action_count=rm_action_count,
            other_team_count=total - rm_action_count,
            current_lead=current_lead,
            reminders_json=reminders_json,
            reminder_label="TODAY" if reminder_date == today else "TOMORROW",
            catalog_json=self.catalog_json(),
            user_text=user_text,
        )

        return ContextPayload(
            content=content,
            total_leads=total,
            rm_action_count=rm_action_count,
            other_team_count=total - rm_action_count,
            current_lead_id=current_lead.id if current_lead else None,
            reminder_date=reminder_date,
            reminders=reminders,
        )
