"""FastAPI application entry point for TypeWise AI."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from typewise.config import get_settings, setup_logging
from typewise.routers.auth_router import router as auth_router
from typewise.routers.export_router import router as export_router
from typewise.routers.history_router import router as history_router
from typewise.routers.message_router import router as message_router
from typewise.routers.page_router import router as page_router

# Initialise logging early
setup_logging()
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    application = FastAPI(
        title="TypeWise AI",
        description=(
            "Generates professional career messages (emails, LinkedIn messages, "
            "resume bullets, cover-letter paragraphs, cold outreach) from a goal, "
            "key points and tone, and keeps a per-user history of results."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # CORS — allow all origins during development
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    application.include_router(message_router)
    application.include_router(history_router)
    application.include_router(export_router)
    application.include_router(auth_router)
    application.include_router(page_router)

    @application.on_event("startup")
    async def _startup() -> None:
        logger.info(
            "TypeWise starting — model=%s supabase=%s default_max_tokens=%d",
            settings.openai_model,
            "on" if settings.supabase_enabled else "off (local JSON history)",
            settings.default_max_output_tokens,
        )

    return application


app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "typewise.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=True,
    )
