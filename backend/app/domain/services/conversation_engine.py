"""
Conversation Engine
Drives turn-taking for an RM chat session.

Per turn: resolve lead -> assemble context -> generate -> extract
directives -> append the finalized assistant message. A session has at
most one turn in flight.
"""
import asyncio
import logging
from datetime import date
from typing import Awaitable, Callable, List, Optional, Tuple

from app.domain.interfaces.lead_catalog import LeadCatalog
from app.domain.interfaces.llm_provider import LLMProvider
from app.domain.models.assistant_action import ActionDirective, ActionOutcome
from app.domain.models.conversation import ChatSession, Message, MessageRole
from app.domain.models.generation import GenerationError, GenerationResult
from app.domain.services.action_handler import ActionHandler
from app.domain.services.context_assembler import ContextAssembler
from app.domain.services.directive_extractor import DirectiveExtractor
from app.domain.services.lead_resolver import LeadResolver
from app.domain.services.llm_guardrails import LLMGuardrails
from app.domain.services.prompt_manager import PromptManager
from app.domain.services.reminder_service import ReminderService

logger = logging.getLogger(__name__)


class TurnInProgressError(Exception):
    """Raised when input arrives while a turn is still pending"""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"A turn is already in progress for session {session_id}")


class ConversationEngine:
    """
    Owns the turn lifecycle for chat sessions.

    The engine itself is stateless across sessions; all conversation
    state lives on the ChatSession passed to each call.
    """

    HISTORY_WINDOW = 6
    GREETING = "Hey there! I'm here to help you stay on top of your leads. What would you like to check first?"

    def __init__(
        self,
        llm_provider: LLMProvider,
        catalog: LeadCatalog,
        reminder_service: ReminderService,
        prompt_manager: Optional[PromptManager] = None,
        guardrails: Optional[LLMGuardrails] = None,
        display_delay_seconds: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        today: Callable[[], date] = date.today,
    ):
        """
        Args:
            llm_provider: Initialized generation backend
            catalog: Lead catalog
            reminder_service: Reminder persistence
            prompt_manager: Standing instructions and context templates
            guardrails: Failure-to-text mapping
            display_delay_seconds: Typing pause before a reply is shown
            sleep: Awaitable used for the typing pause
            today: Current-date provider
        """
        self.llm_provider = llm_provider
        self.catalog = catalog
        self.reminder_service = reminder_service
        self.prompt_manager = prompt_manager or PromptManager()
        self.guardrails = guardrails or LLMGuardrails()
        self.display_delay_seconds = display_delay_seconds
        self._sleep = sleep
        self._today = today

        self.resolver = LeadResolver(catalog)
        self.assembler = ContextAssembler(catalog, reminder_service, self.prompt_manager)
        self.extractor = DirectiveExtractor()
        self.action_handler = ActionHandler()

    async def start_session(self, standing_instructions: Optional[str] = None, greet: bool = True) -> ChatSession:
        """
        Start a session: prune stale reminders, then open with a greeting.
        """
        removed = await self.reminder_service.prune(self._today())
        session = ChatSession(standing_instructions=standing_instructions)
        if greet:
            session.append(Message(role=MessageRole.ASSISTANT, text=self.GREETING))

        logger.info(f"Started chat session {session.session_id} (pruned {removed} reminders)")
        return session

    def history_window(self, session: ChatSession) -> List[dict]:
        """Most recent messages as backend history, oldest first"""
        return [m.to_history_entry() for m in session.recent(self.HISTORY_WINDOW)]

    def _instructions(self, session: ChatSession) -> str:
        return session.standing_instructions or self.prompt_manager.standing_instructions()

    def _begin_turn(self, session: ChatSession) -> None:
        if session.pending_turn:
            raise TurnInProgressError(session.session_id)
        session.pending_turn = True

    async def _pace(self) -> None:
        if self.display_delay_seconds > 0:
            await self._sleep(self.display_delay_seconds)

    async def _generate(self, session: ChatSession, history: List[dict], content: str) -> GenerationResult:
        try:
            return await self.llm_provider.generate(self._instructions(session), history, content)
        except Exception as e:
            logger.error(f"Generation provider {self.llm_provider.name} raised: {e}", exc_info=True)
            return GenerationResult.failure(GenerationError.unavailable(str(e)))

    async def handle_user_input(self, session: ChatSession, user_text: str) -> Message:
        """
        Process one user turn.

        Args:
            session: Chat session
            user_text: Raw user input

        Returns:
            The assistant message appended to the session

        Raises:
            ValueError: Empty input
            TurnInProgressError: Another turn is still pending
        """
        if not user_text or not user_text.strip():
            raise ValueError("User text must not be empty")

        self._begin_turn(session)
        try:
            # History is taken before the new message; the message itself
            # travels inside the assembled context
            history = self.history_window(session)
            session.append(Message(role=MessageRole.USER, text=user_text))

            session.current_lead_id = self.resolver.resolve(user_text, session.current_lead_id)
            payload = await self.assembler.assemble(user_text, session, today=self._today())

            result = await self._generate(session, history, payload.content)

            actions: List[ActionDirective] = []
            if result.ok:
                extraction = self.extractor.extract(result.text)
                if extraction.reminder is not None:
                    extraction.stored_reminder = await self.reminder_service.add(extraction.reminder)
                text = extraction.display_text
                actions = extraction.actions
            else:
                text = self.guardrails.fallback_response(result.error)

            await self._pace()
            reply = session.append(Message(
                role=MessageRole.ASSISTANT,
                text=text,
                lead_id=session.current_lead_id,
                actions=actions,
            ))

            logger.info(
                f"Turn complete: session={session.session_id}, lead={session.current_lead_id}, "
                f"actions={len(actions)}, ok={result.ok}"
            )
            return reply
        finally:
            session.pending_turn = False

    async def post_assistant_message(
        self,
        session: ChatSession,
        text: str,
        lead_id: Optional[str] = None,
    ) -> Message:
        """Append a canned assistant message after the typing pause"""
        self._begin_turn(session)
        try:
            await self._pace()
            if lead_id:
                session.current_lead_id = lead_id
            return session.append(Message(role=MessageRole.ASSISTANT, text=text, lead_id=lead_id))
        finally:
            session.pending_turn = False

    async def handle_action(
        self,
        session: ChatSession,
        action: ActionDirective,
    ) -> Tuple[ActionOutcome, Optional[Message]]:
        """
        Apply a clicked action to the session.

        Returns:
            (outcome, assistant message appended as a result, if any)
        """
        outcome = self.action_handler.handle(action)

        if outcome.follow_up_prompt:
            return outcome, await self.handle_user_input(session, outcome.follow_up_prompt)

        if outcome.assistant_message:
            return outcome, await self.post_assistant_message(session, outcome.assistant_message)

        return outcome, None
