"""FastAPI-Einstiegspunkt für den Schul-Chat-Relay (HTTP-Host-Deployment)."""
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from school_chat.core.config import RelayConfig, Settings
from school_chat.core.logging_setup import setup_logging
from school_chat.core.relay import UpstreamClient
from school_chat.core.upstream import GeminiClient
from school_chat.routers import relay as relay_router

STATIC_DIR = os.path.join(os.path.dirname(__file__), "static")

logger = logging.getLogger(__name__)


def create_app(config: Optional[RelayConfig] = None, upstream: Optional[UpstreamClient] = None) -> FastAPI:
    """Baut die App. Ohne Argumente kommen Key und Client aus den Settings;
    Tests reichen eigene RelayConfig/Upstream-Stubs herein."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialisiert Konfiguration und Gemini-Client beim Start.

        Ein fehlender Key ist kein Startfehler; der Relay antwortet dann mit
        einem Konfigurationshinweis.
        """
        relay_config = config
        if relay_config is None:
            settings = Settings()
            setup_logging(settings.log_level, settings.log_file or None)
            relay_config = settings.to_relay_config()

        app.state.relay_config = relay_config
        app.state.upstream = upstream or GeminiClient(relay_config.api_base, relay_config.timeout)

        logger.info(f"School chat relay initialised (model={relay_config.model})")
        if not relay_config.has_credential:
            logger.warning("GEMINI_KEY is not set, chat replies will show a configuration hint.")
        yield

    app = FastAPI(
        title="School Chat Relay",
        version="1.0.0",
        description="Thin relay between the school website chat widget and Gemini.",
        lifespan=lifespan,
    )

    # Test-Frontend für das Chat-Widget
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.get("/test-chat", include_in_schema=False)
    async def get_test_chat():
        return FileResponse(os.path.join(STATIC_DIR, "chat.html"))

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": "relay"}

    app.include_router(relay_router.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("school_chat.main:app", host="0.0.0.0", port=Settings().service_port)
