"""
Context Payload Model
Situational context sent as the trailing user content of a turn
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from app.domain.models.reminder import Reminder


class ContextPayload(BaseModel):
    """Assembled per-turn context: rendered content plus the facts behind it"""
    content: str = Field(..., description="Rendered trailing user content")
    total_leads: int = Field(..., ge=0)
    rm_action_count: int = Field(..., ge=0, description="Leads needing RM action")
    other_team_count: int = Field(..., ge=0, description="Leads with other teams")
    current_lead_id: Optional[str] = None
    reminder_date: Optional[date] = Field(None, description="Date reminders were looked up for")
    reminders: List[Reminder] = Field(default_factory=list)

    @property
    def has_reminders(self) -> bool:
        return len(self.reminders) > 0
