import logging
import re
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from ..rate_limit import IMAGE_LIMIT_SCOPE, image_rate_limit, limiter
from ..rendering import get_font_registry, render_brand_card
from ..repository import get_brand, get_total_brands

logger = logging.getLogger("brnd.routes")

router = APIRouter(prefix="/brand", tags=["images"])

BRAND_CACHE_CONTROL = "public, max-age=3600, s-maxage=86400, stale-while-revalidate"

# Signed 64-bit range; ids outside it cannot exist in the table.
MIN_BRAND_ID = -(2 ** 63)
MAX_BRAND_ID = 2 ** 63 - 1

_LEADING_INT_RE = re.compile(r"\s*([+-]?[0-9]+)")


def parse_brand_id(value: str) -> Optional[int]:
    """Leading integer of *value* ("12abc" -> 12), or None when it has none."""
    match = _LEADING_INT_RE.match(value)
    if match is None:
        return None
    return int(match.group(1))


@router.get("/{brand_id}", response_class=Response)
@limiter.shared_limit(image_rate_limit, scope=IMAGE_LIMIT_SCOPE)
def brand_image(request: Request, brand_id: str) -> Response:
    """
    Open Graph card for a single brand.

    The id is read from its leading digits. 400 when there are none,
    404 when the brand (or the brand count) cannot be loaded, 500 when
    rendering fails.
    """
    parsed_id = parse_brand_id(brand_id)
    if parsed_id is None:
        return PlainTextResponse("Invalid brand ID", status_code=400)
    if not MIN_BRAND_ID <= parsed_id <= MAX_BRAND_ID:
        return PlainTextResponse("Brand not found", status_code=404)

    try:
        brand = get_brand(parsed_id)
        total_brands = get_total_brands()
        if brand is None or not total_brands:
            return PlainTextResponse("Brand not found", status_code=404)

        png = render_brand_card(brand, total_brands, get_font_registry())
    except Exception:
        logger.exception("Failed to generate brand image for %s", brand_id)
        return PlainTextResponse("Failed to generate brand image", status_code=500)

    return Response(content=png, media_type="image/png", headers={"Cache-Control": BRAND_CACHE_CONTROL})
