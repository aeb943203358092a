"""
rate_limit.py — Per-client throttling of the image endpoints
=============================================================
Uses slowapi with in-memory fixed-window counters keyed by client IP.
Expired windows are dropped by the storage backend. Responses carry
X-RateLimit-* headers; an exhausted window answers 429 with Retry-After.
"""
from __future__ import annotations

import logging
import math

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from .config import Settings, settings

logger = logging.getLogger("brnd.ratelimit")


def client_ip(request: Request) -> str:
    """Peer address, then the first X-Forwarded-For hop, then 'unknown'."""
    if request.client and request.client.host:
        return request.client.host
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or "unknown"
    return "unknown"


# Both image endpoints draw from one counter per client.
IMAGE_LIMIT_SCOPE = "images"


def image_rate_limit() -> str:
    """Read on every request so the limit follows the current settings."""
    return settings.image_rate_limit


def build_limiter(config: Settings) -> Limiter:
    return Limiter(
        key_func=client_ip,
        storage_uri="memory://",
        strategy="fixed-window",
        headers_enabled=True,
        enabled=config.rate_limit_enabled,
    )


limiter = build_limiter(settings)


def normalize_quota_headers(response: Response) -> Response:
    """
    Whole epoch seconds in X-RateLimit-Reset; Retry-After only on a 429.

    The storage reports window ends as fractional timestamps, which
    slowapi copies into the header unchanged.
    """
    reset = response.headers.get("X-RateLimit-Reset")
    if reset:
        response.headers["X-RateLimit-Reset"] = str(math.ceil(float(reset)))
    if response.status_code != 429 and "Retry-After" in response.headers:
        del response.headers["Retry-After"]
    return response


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    logger.warning("Rate limit exceeded for %s on %s (%s)", client_ip(request), request.url.path, exc.detail)
    response = PlainTextResponse("Rate limit exceeded", status_code=429)
    response = request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)
    return normalize_quota_headers(response)
