"""
Conversation Domain Models
Messages and the per-session chat context
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from datetime import datetime
from enum import Enum
import uuid

from app.domain.models.assistant_action import ActionDirective


class MessageRole(str, Enum):
    """Message role in conversation"""
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """Single message in conversation. Immutable once appended."""
    model_config = ConfigDict(frozen=True)

    role: MessageRole
    text: str
    timestamp: datetime = Field(default_factory=datetime.now)
    lead_id: Optional[str] = Field(None, description="Lead the message is about")
    actions: List[ActionDirective] = Field(default_factory=list)

    def to_history_entry(self) -> Dict[str, str]:
        """Backend history shape: {role, content}"""
        return {"role": self.role.value, "content": self.text}


class ChatSession(BaseModel):
    """
    Conversation context for a single RM session.

    Holds the ordered message log, the pending-turn flag and the lead
    currently under discussion. Nothing here survives the session.
    """
    session_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    current_lead_id: Optional[str] = Field(None, description="Lead carried across turns")
    messages: List[Message] = Field(default_factory=list)
    pending_turn: bool = Field(default=False, description="A turn is in flight")
    standing_instructions: Optional[str] = Field(
        None, description="Per-session override of the backend instruction text"
    )
    started_at: datetime = Field(default_factory=datetime.now)

    def append(self, message: Message) -> Message:
        """Append a message to the log"""
        self.messages.append(message)
        return message

    def recent(self, limit: int) -> List[Message]:
        """Last `limit` messages, oldest first"""
        if limit <= 0:
            return []
        return self.messages[-limit:]

    @property
    def turn_count(self) -> int:
        """Number of user messages so far"""
        return sum(1 for m in self.messages if m.role == MessageRole.USER)

    @property
    def last_message(self) -> Optional[Message]:
        return self.messages[-1] if self.messages else None
