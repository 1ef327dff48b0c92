"""
API Dependencies
Service container built at startup and the FastAPI dependencies that expose it
"""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request, status

from app.core.config import ConfigManager, Settings
from app.domain.interfaces.lead_catalog import LeadCatalog
from app.domain.interfaces.llm_provider import LLMProvider
from app.domain.services.conversation_engine import ConversationEngine
from app.domain.services.lead_resolver import LeadResolver
from app.domain.services.prompt_manager import PromptManager
from app.domain.services.reminder_service import ReminderService
from app.domain.services.session_manager import SessionManager
from app.infrastructure.leads.static_catalog import StaticLeadCatalog
from app.infrastructure.llm.factory import LLMFactory
from app.infrastructure.storage.reminder_store import create_reminder_store

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Everything the endpoints need, wired once per process"""
    catalog: LeadCatalog
    reminder_service: ReminderService
    llm_provider: LLMProvider
    engine: ConversationEngine
    session_manager: SessionManager
    resolver: LeadResolver

    @classmethod
    def build(
        cls,
        catalog: LeadCatalog,
        reminder_service: ReminderService,
        llm_provider: LLMProvider,
        prompt_manager: Optional[PromptManager] = None,
        display_delay_seconds: float = 1.0,
    ) -> "AppServices":
        engine = ConversationEngine(
            llm_provider=llm_provider,
            catalog=catalog,
            reminder_service=reminder_service,
            prompt_manager=prompt_manager,
            display_delay_seconds=display_delay_seconds,
        )
        return cls(
            catalog=catalog,
            reminder_service=reminder_service,
            llm_provider=llm_provider,
            engine=engine,
            session_manager=SessionManager(engine),
            resolver=LeadResolver(catalog),
        )


async def build_services(settings: Settings, config: ConfigManager) -> AppServices:
    """
    Wire services from settings and provider config.

    The LLM provider is initialized here so configuration errors surface
    at startup rather than on the first turn.
    """
    catalog = StaticLeadCatalog.from_yaml(settings.leads_path)

    store = create_reminder_store(
        settings.reminder_store,
        path=settings.reminder_store_path,
        redis_url=settings.redis_url,
    )
    reminder_service = ReminderService(store, retention_days=settings.reminder_retention_days)

    provider_name = config.get_active_provider("llm")
    llm_provider = LLMFactory.create(provider_name)
    await llm_provider.initialize(config.get_provider_config("llm"))
    logger.info(f"LLM provider initialized: {llm_provider.name}")

    return AppServices.build(
        catalog=catalog,
        reminder_service=reminder_service,
        llm_provider=llm_provider,
        prompt_manager=PromptManager(settings.standing_instructions_path),
        display_delay_seconds=settings.display_delay_seconds,
    )


def get_services(request: Request) -> AppServices:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is starting up"
        )
    return services
