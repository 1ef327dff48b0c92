"""
Action Handler
What happens when the RM clicks an action button.
"""
import logging
from typing import Dict

from app.domain.models.assistant_action import ActionDirective, ActionKind, ActionOutcome

logger = logging.getLogger(__name__)


DRAFT_TYPES: Dict[str, str] = {
    "doc_request": "document request",
    "query_response": "query response",
    "sanction_script": "acceptance script",
    "negotiation": "negotiation points",
    "followup": "follow-up message",
    "intro": "introduction message",
    "resanction": "re-sanction plan",
}

CONFIRM_MESSAGES: Dict[str, str] = {
    "docs_received": "Great! Documents received. Now upload them and submit in Sales Central.",
    "customer_accepted": "Awesome! Customer accepted. Move to LD Pending in Sales Central.",
    "decision_received": "Got it! Decision recorded. Update the status in Sales Central.",
    "docs_signed": "Perfect! Documents signed. Should move to disbursal soon!",
}
DEFAULT_CONFIRM_MESSAGE = "Action marked! Update in Sales Central to proceed."

NUDGE_MESSAGES: Dict[str, str] = {
    "resolve_query": "Open Sales Central to upload documents and resolve the query.",
    "start_application": "Open Sales Central to start the application.",
    "submit_application": "Open Sales Central to submit the application.",
    "upload_docs": "Open Sales Central to upload the documents.",
    "complete_application": "Open Sales Central to complete the application.",
}
DEFAULT_NUDGE_MESSAGE = "Open Sales Central to complete this action."


class ActionHandler:
    """Maps a clicked action to a presentation outcome"""

    def handle(self, action: ActionDirective) -> ActionOutcome:
        logger.info(f"Action clicked: {action.kind.value} ({action.payload})")

        if action.kind == ActionKind.CALL:
            number = "".join(action.payload.split())
            return ActionOutcome(dial_uri=f"tel:{number}")

        if action.kind == ActionKind.DRAFT:
            message_type = DRAFT_TYPES.get(action.payload, "message")
            return ActionOutcome(follow_up_prompt=f"Can you draft a {message_type} for this lead?")

        if action.kind == ActionKind.CONFIRM:
            return ActionOutcome(
                assistant_message=CONFIRM_MESSAGES.get(action.payload, DEFAULT_CONFIRM_MESSAGE)
            )

        return ActionOutcome(
            assistant_message=NUDGE_MESSAGES.get(action.payload, DEFAULT_NUDGE_MESSAGE)
        )
