"""Entitlement checks and the restricted-access product preview."""

import random
from typing import Optional

from fastapi import Header

from api.config import get_settings
from config.constants import PREVIEW_IMAGE_URL, PREVIEW_PRODUCT_COUNT


def has_full_access(authorization: Optional[str] = Header(None)) -> bool:
    """
    Decide whether the caller may see real price trends.

    With enforcement off every caller has full access. Otherwise the
    request must carry `Authorization: Bearer <token>` with a listed token.
    """
    settings = get_settings()
    if not settings.enforce_entitlements:
        return True
    if not authorization or not authorization.lower().startswith("bearer "):
        return False
    token = authorization[len("bearer "):].strip()
    return token in settings.entitled_tokens


def create_preview_products(count: int = PREVIEW_PRODUCT_COUNT,
                            rng: Optional[random.Random] = None) -> list[dict]:
    """
    Build placeholder products shown behind the paywall.

    Prices are random so the preview cannot be mistaken for real data.
    """
    rng = rng or random.Random()
    products = []
    for i in range(1, count + 1):
        prev_price = round(rng.uniform(1, 100), 2)
        market_price = round(rng.uniform(1, 100), 2)
        products.append({
            "id": i,
            "productId": i,
            "name": "Locked Card",
            "cleanName": "Locked Card",
            "subTypeName": None,
            "productType": "card",
            "rarity": None,
            "groupId": None,
            "setName": None,
            "category": None,
            "imageUrl": PREVIEW_IMAGE_URL,
            "url": None,
            "marketPrice": market_price,
            "prevMarketPrice": prev_price,
            "diffMarketPrice": round((market_price - prev_price) / prev_price, 4),
            "dollarDiffMarketPrice": round(market_price - prev_price, 2),
            "updatedAt": None,
        })
    return products
