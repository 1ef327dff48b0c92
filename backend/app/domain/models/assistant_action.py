"""
Assistant Action Domain Models
Action directives emitted by the assistant and the outcome of clicking one
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from enum import Enum


class ActionKind(str, Enum):
    """Kinds of action buttons the assistant can attach to a reply"""
    CALL = "call"          # Dial the payload phone number
    DRAFT = "draft"        # Ask the assistant to draft a message
    CONFIRM = "confirm"    # Mark a step as done
    NUDGE = "nudge"        # Point the RM to Sales Central


class ActionDirective(BaseModel):
    """
    A single `ACTION: [kind|label|payload]` directive.

    Derived from generated text every turn and never persisted.
    """
    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    label: str = Field(..., description="Button label shown to the RM")
    payload: str = Field(..., description="Phone number or lookup key")

    def to_wire(self) -> str:
        """Render back to directive text"""
        return f"ACTION: [{self.kind.value}|{self.label}|{self.payload}]"


class ActionOutcome(BaseModel):
    """
    What the presentation layer should do after an action is clicked.

    At most one of the fields is set; an empty outcome means nothing to do.
    """
    dial_uri: Optional[str] = Field(None, description="tel: URI for call actions")
    follow_up_prompt: Optional[str] = Field(
        None, description="User prompt to send as a new turn (draft actions)"
    )
    assistant_message: Optional[str] = Field(
        None, description="Canned assistant reply (confirm/nudge actions)"
    )
