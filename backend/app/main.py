"""FastAPI Application Entry Point.

Configures the app, CORS, request logging, and includes all route modules.
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from figma2html import config
from figma2html.logging_config import get_api_logger, get_service_logger

logger = logging.getLogger("figma2html.app")
api_logger = get_api_logger()
get_service_logger()

if not config.FIGMA_CLIENT_ID or not config.FIGMA_CLIENT_SECRET:
    logger.warning(
        "FIGMA_CLIENT_ID / FIGMA_CLIENT_SECRET not set, /auth/figma/callback will fail. "
        "Set them in the environment to enable the Figma OAuth flow."
    )

app = FastAPI(title="Figma to HTML API", version="1.0.0")

# Frontend origin plus optional comma-separated extras
CORS_ORIGINS = [config.FRONTEND_URL] + [
    o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    api_logger.info(
        f"{request.method} {request.url.path} "
        f"origin={request.headers.get('origin')} referer={request.headers.get('referer')}"
    )
    return await call_next(request)


# Include routers
from .routes.figma_oauth import router as figma_oauth_router  # noqa: E402
from .routes.figma_file import router as figma_file_router  # noqa: E402

app.include_router(figma_oauth_router)
app.include_router(figma_file_router)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "ok", "message": "Server is running"}
