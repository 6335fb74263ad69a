"""
Spear - FastAPI Application Entry Point
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spear.agents.orchestrator import Orchestrator
from spear.api import code, health
from spear.core.config import ProviderConfig, settings
from spear.core.exceptions import register_exception_handlers
from spear.core.logging import RequestLoggingMiddleware, setup_logging
from spear.services.providers import create_conversational_provider, create_structured_provider

# Initialize logging
logger = setup_logging(
    log_level="DEBUG" if settings.debug else settings.log_level,
    log_dir=settings.log_dir or None,
    json_logs=settings.log_json,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown events."""
    # Startup
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Allowed origins: {settings.allowed_origins}")

    provider_config = ProviderConfig.from_settings(settings)
    structured = create_structured_provider(settings, provider_config)
    conversational = create_conversational_provider(provider_config)
    app.state.orchestrator = Orchestrator(structured, conversational, settings)
    logger.info("Orchestrator initialized")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await structured.close()
    await conversational.close()
    logger.info("Cleanup complete")


app = FastAPI(
    title=settings.app_name,
    description="AI-powered HTML, CSS and JavaScript generation and editing",
    version="0.1.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(code.router, tags=["Code"])

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
