"""
Unit tests for session models (ChatSession, Message) and SessionManager
"""
import pytest
from app.domain.models.conversation import ChatSession, Message, MessageRole
from app.domain.services.conversation_engine import ConversationEngine
from app.domain.services.reminder_service import ReminderService
from app.domain.services.session_manager import SessionManager, SessionNotFoundError
from app.infrastructure.leads.static_catalog import StaticLeadCatalog
from app.infrastructure.storage.reminder_store import InMemoryReminderStore
from unittest.mock import MagicMock


class TestMessage:
    """Tests for Message"""

    def test_history_entry(self):
        message = Message(role=MessageRole.USER, text="What's up with L013?")
        assert message.to_history_entry() == {"role": "user", "content": "What's up with L013?"}

    def test_message_is_immutable(self):
        """Test appended messages cannot be edited"""
        message = Message(role=MessageRole.ASSISTANT, text="Hi")
        with pytest.raises(Exception):
            message.text = "changed"

    def test_timestamps_differ_per_message(self):
        """Test each message gets its own timestamp"""
        first = Message(role=MessageRole.USER, text="a")
        second = Message(role=MessageRole.USER, text="b")
        assert second.timestamp >= first.timestamp


class TestChatSession:
    """Tests for ChatSession"""

    def test_defaults(self):
        session = ChatSession()

        assert session.session_id
        assert session.messages == []
        assert session.current_lead_id is None
        assert session.pending_turn is False

    def test_unique_ids(self):
        assert ChatSession().session_id != ChatSession().session_id

    def test_recent_returns_tail_in_order(self):
        """Test recent() keeps oldest-first order"""
        session = ChatSession()
        for i in range(8):
            role = MessageRole.USER if i % 2 == 0 else MessageRole.ASSISTANT
            session.append(Message(role=role, text=str(i)))

        assert [m.text for m in session.recent(6)] == ["2", "3", "4", "5", "6", "7"]
        assert session.recent(0) == []
        assert len(session.recent(20)) == 8

    def test_turn_count_and_last_message(self):
        session = ChatSession()
        assert session.last_message is None

        session.append(Message(role=MessageRole.ASSISTANT, text="Hey"))
        session.append(Message(role=MessageRole.USER, text="hi"))

        assert session.turn_count == 1
        assert session.last_message.text == "hi"


@pytest.fixture
def manager():
    engine = ConversationEngine(
        llm_provider=MagicMock(),
        catalog=StaticLeadCatalog.from_yaml(),
        reminder_service=ReminderService(InMemoryReminderStore()),
        display_delay_seconds=0,
    )
    return SessionManager(engine)


class TestSessionManager:
    """Tests for SessionManager"""

    @pytest.mark.asyncio
    async def test_create_and_get(self, manager):
        session = await manager.create_session()

        assert manager.get_session(session.session_id) is session
        assert manager.list_sessions() == [session.session_id]
        assert session.messages[0].text == ConversationEngine.GREETING

    @pytest.mark.asyncio
    async def test_create_with_instructions(self, manager):
        session = await manager.create_session(standing_instructions="Short answers only.")
        assert session.standing_instructions == "Short answers only."

    def test_get_unknown(self, manager):
        with pytest.raises(SessionNotFoundError):
            manager.get_session("missing")

    @pytest.mark.asyncio
    async def test_end_session(self, manager):
        """Test ended sessions are discarded"""
        session = await manager.create_session()
        await manager.end_session(session.session_id)

        with pytest.raises(SessionNotFoundError):
            manager.get_session(session.session_id)

    @pytest.mark.asyncio
    async def test_end_unknown(self, manager):
        with pytest.raises(SessionNotFoundError):
            await manager.end_session("missing")

    @pytest.mark.asyncio
    async def test_shutdown_clears_sessions(self, manager):
        await manager.create_session()
        await manager.create_session()

        await manager.shutdown()

        assert manager.list_sessions() == []
