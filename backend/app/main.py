"""
FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.dependencies import AppServices, build_services
from app.api.v1.routes import api_router
from app.core.config import ConfigManager, get_settings

load_dotenv()

logger = logging.getLogger(__name__)


def create_app(services: Optional[AppServices] = None) -> FastAPI:
    """
    Build the application.

    Args:
        services: Pre-wired services. When omitted they are built from
            settings and config/*.yaml during startup.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan - startup and shutdown events.

        Startup:
        - Validates provider configuration
        - Loads the lead catalog, reminder store and LLM provider

        Shutdown:
        - Discards live sessions
        - Releases the LLM provider client and reminder store
        """
        # ========================
        # STARTUP
        # ========================
        logger.info("Starting RM Lead Copilot...")

        if services is not None:
            app.state.services = services
        else:
            config = ConfigManager(env=settings.environment)
            strict_validation = settings.environment == "production"

            try:
                from app.core.validation import validate_providers_on_startup
                validate_providers_on_startup(
                    llm_provider=config.get_active_provider("llm"),
                    reminder_store=settings.reminder_store,
                    strict=strict_validation,
                )
            except RuntimeError as e:
                if strict_validation:
                    logger.error(f"Startup failed: {e}")
                    raise
                logger.warning(f"Configuration warnings (non-fatal in {settings.environment}): {e}")

            app.state.services = await build_services(settings, config)

        logger.info(f"RM Lead Copilot started with {len(app.state.services.catalog)} leads")

        yield  # Application is running

        # ========================
        # SHUTDOWN
        # ========================
        logger.info("Shutting down RM Lead Copilot...")

        try:
            await app.state.services.session_manager.shutdown()
            await app.state.services.llm_provider.cleanup()
            await app.state.services.reminder_service.store.close()
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")

        logger.info("RM Lead Copilot shutdown complete")

    app = FastAPI(
        title="RM Lead Copilot",
        description="Chat assistant that helps relationship managers work their lead portfolio",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/")
    async def root():
        return {"message": "RM Lead Copilot API", "status": "running"}

    return app


logging.basicConfig(level=get_settings().log_level.upper())

app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
