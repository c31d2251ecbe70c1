"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from typing import Any, Dict
from urllib.parse import urlparse

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from travelfunnel.api.dependencies import get_lead_store, get_settings
from travelfunnel.api.endpoints import checkout_api, quotes_api
from travelfunnel.error_handler import register_exception_handlers
from travelfunnel.utils.config_loader import Settings, validate_startup

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Travel Funnel API",
    description="Travel-insurance quotes and checkout (payment, policy issuance, eSIM) for the storefront",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # storefront is served from a different origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(quotes_api, prefix="/api/v1")
app.include_router(checkout_api, prefix="/api/v1")


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return {"status": "ok", "integrations_mode": settings.integrations_mode}


# ============================================================================
# STARTUP/SHUTDOWN EVENTS
# ============================================================================
@app.on_event("startup")
async def startup_event():
    """Validate configuration and prepare the lead store"""
    logger.info("Starting Travel Funnel API...")
    settings = get_settings()
    validate_startup(settings)
    logger.info("Integrations mode: %s", settings.integrations_mode)

    if settings.database_url:
        try:
            parsed = urlparse(settings.database_url)
            logger.info(
                "DATABASE_URL target: scheme=%s host=%s port=%s db=%s",
                parsed.scheme, parsed.hostname, parsed.port or 5432, (parsed.path or "").lstrip("/"),
            )
        except ValueError as e:
            logger.warning("Could not parse DATABASE_URL for startup logging: %s", e)

    try:
        get_lead_store(settings).create_tables()
        logger.info("Lead table initialized")
    except Exception as e:
        logger.error(f"Error initializing database: {str(e)}")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down Travel Funnel API...")
