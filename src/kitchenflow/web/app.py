"""
KitchenFlow Web API - FastAPI application.

Uses Supabase Auth bearer tokens for authentication.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kitchenflow import __version__
from kitchenflow.config import settings
from kitchenflow.web.recipe_import_routes import router as recipe_import_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="KitchenFlow", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recipe_import_router)


@app.on_event("startup")
async def startup_event():
    """Log configuration on startup."""
    logger.info(f"KitchenFlow {__version__} starting up ({settings.kitchenflow_env})")
    logger.info(f"  LLM model: {settings.llm_model}")
    logger.info(f"  Supabase configured: {bool(settings.supabase_url)}")


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}
