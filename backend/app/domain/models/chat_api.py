"""
Chat API Models
Request and response bodies for the HTTP surface
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any

from app.domain.models.assistant_action import ActionOutcome
from app.domain.models.conversation import ChatSession, Message


class StartSessionRequest(BaseModel):
    """Optional settings for a new session"""
    standing_instructions: Optional[str] = Field(
        None, description="Override for the backend instruction text"
    )


class SessionResponse(BaseModel):
    """Full view of a session"""
    session_id: str
    current_lead_id: Optional[str] = None
    pending_turn: bool = False
    messages: List[Message] = Field(default_factory=list)

    @classmethod
    def from_session(cls, session: ChatSession) -> "SessionResponse":
        return cls(
            session_id=session.session_id,
            current_lead_id=session.current_lead_id,
            pending_turn=session.pending_turn,
            messages=list(session.messages),
        )


class SendMessageRequest(BaseModel):
    """User input for one turn"""
    text: str = Field(..., min_length=1, description="User message")


class TurnResponse(BaseModel):
    """Finalized assistant turn"""
    message: Message
    current_lead_id: Optional[str] = None


class ActionResponse(BaseModel):
    """Result of clicking an action button"""
    outcome: ActionOutcome
    message: Optional[Message] = None
    current_lead_id: Optional[str] = None


class LeadSuggestionResponse(BaseModel):
    """Autocomplete results for `#` lookup"""
    query: str
    leads: List[Dict[str, Any]] = Field(default_factory=list)


class ApplySuggestionRequest(BaseModel):
    text: str
    lead_id: str = Field(..., min_length=1)


class ApplySuggestionResponse(BaseModel):
    text: str
