"""
Reminder Domain Models
Off-system commitments the RM asked to be reminded about
"""
import re
from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DUE_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_calendar_date(value: Any) -> Any:
    """Accept only YYYY-MM-DD strings (or date objects) for calendar dates"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DUE_DATE_PATTERN.match(value.strip()):
        raise ValueError(f"expected a YYYY-MM-DD date, got {value!r}")
    return date.fromisoformat(value.strip())


class ReminderDirective(BaseModel):
    """
    Payload of a `REMINDER_SET:` directive.

    Date parsing ("tomorrow", "Friday") happens in the generation backend;
    here we only check the calendar-date format.
    """
    model_config = ConfigDict(populate_by_name=True)

    lead_id: str = Field(..., alias="leadId", min_length=1)
    actor: str = Field(..., min_length=1)
    actor_phone: str = Field(..., alias="actorPhone")
    commitment: str = Field(..., min_length=1)
    due_date: date = Field(..., alias="dueDate")

    @field_validator("due_date", mode="before")
    @classmethod
    def validate_due_date(cls, v):
        return _parse_calendar_date(v)


class Reminder(BaseModel):
    """Stored reminder. Write-once, delete-only."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    lead_id: str = Field(..., alias="leadId")
    actor: str
    actor_phone: str = Field(..., alias="actorPhone")
    commitment: str
    due_date: date = Field(..., alias="dueDate")
    created_date: date = Field(..., alias="createdDate")

    @field_validator("due_date", "created_date", mode="before")
    @classmethod
    def validate_dates(cls, v):
        return _parse_calendar_date(v)

    @classmethod
    def from_directive(
        cls,
        directive: ReminderDirective,
        created: Optional[datetime] = None
    ) -> "Reminder":
        """Build a stored reminder from a parsed directive"""
        created = created or datetime.now()
        return cls(
            id=f"rem_{int(created.timestamp() * 1000)}",
            lead_id=directive.lead_id,
            actor=directive.actor,
            actor_phone=directive.actor_phone,
            commitment=directive.commitment,
            due_date=directive.due_date,
            created_date=created.date(),
        )

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict using the storage key names"""
        return self.model_dump(mode="json", by_alias=True)
