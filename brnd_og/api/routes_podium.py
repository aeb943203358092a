import logging
import re

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse, Response

from ..config import settings
from ..rate_limit import IMAGE_LIMIT_SCOPE, image_rate_limit, limiter
from ..rendering import get_font_registry, render_podium_card
from ..repository import get_podium

logger = logging.getLogger("brnd.routes")

router = APIRouter(prefix="/podium", tags=["images"])

MAX_HASH_LENGTH = 100
_HASH_RE = re.compile(r"[A-Za-z0-9_-]+")

PODIUM_HEADERS = {
    "Cache-Control": "public, max-age=31536000, s-maxage=31536000, immutable",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'; img-src 'self' data: https:; style-src 'unsafe-inline'",
}


def is_valid_transaction_hash(value: str) -> bool:
    return bool(value) and len(value) <= MAX_HASH_LENGTH and bool(_HASH_RE.fullmatch(value))


def fallback_image() -> RedirectResponse:
    return RedirectResponse(settings.fallback_image_url, status_code=302)


@router.get("/{transaction_hash}", response_class=Response)
@limiter.shared_limit(image_rate_limit, scope=IMAGE_LIMIT_SCOPE)
def podium_image(request: Request, transaction_hash: str) -> Response:
    """
    Open Graph card for the podium voted under *transaction_hash*.

    Every failure (malformed hash, unknown podium, rendering error)
    redirects to the default share image.
    """
    if not is_valid_transaction_hash(transaction_hash):
        logger.warning("Rejected podium hash %.120r", transaction_hash)
        return fallback_image()

    try:
        podium = get_podium(transaction_hash)
        if podium is None:
            return fallback_image()

        png = render_podium_card(podium, get_font_registry())
    except Exception:
        logger.exception("Failed to generate podium image for %s", transaction_hash)
        return fallback_image()

    return Response(content=png, media_type="image/png", headers=PODIUM_HEADERS)
