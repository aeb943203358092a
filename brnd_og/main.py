from __future__ import annotations

import logging
import sys

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pythonjsonlogger.json import JsonFormatter
from slowapi.errors import RateLimitExceeded

from . import __version__
from .config import settings
from .rate_limit import limiter, normalize_quota_headers, rate_limit_exceeded_handler
from .api import routes_brand, routes_podium

# ---------------------------------------------------------------------------
# Structured logging
# ---------------------------------------------------------------------------

def _configure_logging() -> None:
    """Configure structured JSON logging when log_format=json (default)."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    if settings.log_format == "json":
        handler.setFormatter(
            JsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s",
                rename_fields={"asctime": "timestamp", "levelname": "level"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)

_configure_logging()

app = FastAPI(
    title="BRND Open Graph Images",
    version=__version__,
    description=(
        "Dynamically rendered share cards for BRND: a brand card with its "
        "score and rankings, and a podium card for a voter's top-3 brands."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.middleware("http")
async def quota_headers(request: Request, call_next):
    return normalize_quota_headers(await call_next(request))


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(routes_brand.router)
app.include_router(routes_podium.router)


@app.get("/", tags=["meta"])
def root() -> dict:
    return {"status": "ok", "service": "brnd-og", "version": __version__}


@app.get("/health", tags=["meta"])
def health() -> dict:
    return {"status": "healthy"}


@app.get("/healthz", tags=["meta"])
def healthz() -> dict:
    """Lightweight health check for load balancer probes."""
    return {"status": "ok"}
