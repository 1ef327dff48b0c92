"""
Chat Endpoints
Session lifecycle, user turns and action clicks
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.v1.dependencies import AppServices, get_services
from app.domain.models.assistant_action import ActionDirective
from app.domain.models.chat_api import (
    ActionResponse,
    SendMessageRequest,
    SessionResponse,
    StartSessionRequest,
    TurnResponse,
)
from app.domain.models.conversation import ChatSession
from app.domain.services.conversation_engine import TurnInProgressError
from app.domain.services.session_manager import SessionNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])


def _get_session(services: AppServices, session_id: str) -> ChatSession:
    try:
        return services.session_manager.get_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")


@router.post("/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def start_session(
    request: Optional[StartSessionRequest] = None,
    services: AppServices = Depends(get_services),
):
    """
    Start a chat session.

    Stale reminders are pruned and the greeting is the first message.
    """
    instructions = request.standing_instructions if request else None
    session = await services.session_manager.create_session(standing_instructions=instructions)
    return SessionResponse.from_session(session)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, services: AppServices = Depends(get_services)):
    """Current message log and lead context"""
    return SessionResponse.from_session(_get_session(services, session_id))


@router.post("/sessions/{session_id}/messages", response_model=TurnResponse)
async def send_message(
    session_id: str,
    request: SendMessageRequest,
    services: AppServices = Depends(get_services),
):
    """
    Run one turn.

    Returns 409 while a previous turn for the session is still pending.
    """
    session = _get_session(services, session_id)
    try:
        reply = await services.engine.handle_user_input(session, request.text)
    except TurnInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    return TurnResponse(message=reply, current_lead_id=session.current_lead_id)


@router.post("/sessions/{session_id}/actions", response_model=ActionResponse)
async def click_action(
    session_id: str,
    action: ActionDirective,
    services: AppServices = Depends(get_services),
):
    """Apply a clicked action button to the session"""
    session = _get_session(services, session_id)
    try:
        outcome, message = await services.engine.handle_action(session, action)
    except TurnInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ActionResponse(outcome=outcome, message=message, current_lead_id=session.current_lead_id)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def end_session(session_id: str, services: AppServices = Depends(get_services)):
    """End and discard a session"""
    try:
        await services.session_manager.end_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
