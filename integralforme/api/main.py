"""Integralforme API — FastAPI Application Entrypoint.

Run with:
    uvicorn integralforme.api.main:app --port 8000 --reload
"""

import logging
from contextlib import asynccontextmanager

import requests
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from integralforme.api.middleware.rate_limit import RateLimitMiddleware
from integralforme.api.routers import calendar, daily, translate
from integralforme.shared.config import load_config, load_settings
from integralforme.shared.credentials import resolve_store_credential
from integralforme.shared.services.gateway import DailyPuzzleGateway
from integralforme.shared.services.translator import TranslationProxy

config = load_config()

# ── Logging ──
logging.basicConfig(
    level=config.logging.get("level", "INFO"),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: resolve settings and credentials once, share one HTTP session ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the upstream clients on startup; close the HTTP session on shutdown."""
    settings = load_settings(config)
    api_key = resolve_store_credential(settings)
    session = requests.Session()

    app.state.settings = settings
    app.state.gateway = DailyPuzzleGateway(
        host=settings.store_host,
        api_key=api_key,
        session=session,
        timeout=settings.timeout_seconds,
    )
    app.state.translator = TranslationProxy(
        base_url=settings.translate_url,
        api_key=settings.translate_api_key,
        session=session,
        timeout=settings.timeout_seconds,
        default_source=settings.default_source,
        default_target=settings.default_target,
    )
    logger.info(
        "Puzzle store %s (%s), translator %s",
        settings.store_host,
        "authenticated" if api_key else "unauthenticated",
        settings.translate_url,
    )

    yield

    session.close()
    logger.info("Upstream HTTP session closed.")


# ── FastAPI app ──
app = FastAPI(
    title=config.project.get("title", "Integralforme API"),
    description=config.project.get("description", ""),
    version=str(config.project.get("version", "0.1.0")),
    lifespan=lifespan,
)

# ── CORS ──
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.get("allow_origins", ["*"]),
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# ── Rate Limiting (translation proxy by default) ──
if config.rate_limit.get("enabled", True):
    app.add_middleware(
        RateLimitMiddleware,
        rate_limit=config.rate_limit.get("requests", 30),
        window_seconds=config.rate_limit.get("window_seconds", 60),
        protected_paths=config.rate_limit.get("protected_paths", ["/api/translate"]),
        trust_forwarded=config.rate_limit.get("trust_forwarded", False),
    )


# ── Error bodies: always {"error": "..."} ──
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


# ── Register routers ──
app.include_router(daily.router)
app.include_router(translate.router)
app.include_router(calendar.router)


# ── Health check ──
@app.get("/health", tags=["Health"])
async def health_check():
    """Simple liveness probe."""
    return {"status": "ok", "service": "integralforme-api"}
