"""Turn raw model output into typed records.

All functions here are pure: no network, no storage. The only
non-determinism is freshly generated ids and, for receipts without a
date, the current day.
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from urllib.parse import quote
from collections.abc import Sequence
from datetime import date
from typing import Any

from .models import (
    Category,
    DiscountInfo,
    ReceiptAnalysisResult,
    ReceiptData,
    Store,
    SuggestedDiscount,
)

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)

# The only repair: a comma right before a closing bracket or brace.
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")

_PLACEHOLDER_IMAGE = "https://picsum.photos/seed/{seed}/400/300"


def strip_fence(text: str) -> str:
    """Remove a surrounding ``` or ```json fence, if any."""
    cleaned = text.strip()
    match = _FENCE_RE.match(cleaned)
    if match and match.group(1):
        cleaned = match.group(1).strip()
    return cleaned


def repair_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def extract_json(text: str | None) -> Any | None:
    """Parse JSON out of a model response.

    Returns None when the text cannot be parsed even after removing
    trailing commas. Never raises.
    """
    if not isinstance(text, str):
        logger.warning("Model response is not text: %r", text)
        return None

    cleaned = strip_fence(text)
    try:
        return json.loads(cleaned)
    except (ValueError, RecursionError) as e:
        logger.warning("Failed to parse JSON response: %s; original text: %r", e, text)

    try:
        return json.loads(repair_trailing_commas(cleaned))
    except (ValueError, RecursionError) as e:
        logger.warning(
            "Failed to parse JSON response after removing trailing commas: %s; "
            "original text: %r",
            e,
            text,
        )
        return None


def new_id() -> str:
    return str(uuid.uuid4())


def _str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return _str(value)


def _number(value: Any) -> float | None:
    """Accept real numbers only; bools and numeric strings count as absent."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _str_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(_str(v) for v in value if v is not None)


def _discount(raw: Any) -> DiscountInfo | None:
    if not isinstance(raw, dict):
        return None
    return DiscountInfo(
        id=_str(raw.get("id")) or new_id(),
        description=_str(raw.get("description")),
        conditions=_str(raw.get("conditions")),
    )


def normalize_store(raw: Any) -> Store | None:
    """Validate one store object. Non-objects yield None."""
    if not isinstance(raw, dict):
        return None

    discounts = raw.get("discounts")
    if not isinstance(discounts, list):
        discounts = []

    rating = _number(raw.get("rating"))
    if rating is not None and not 0 <= rating <= 5:
        rating = None

    raw_id = _str(raw.get("id"))
    name = _str(raw.get("name"))
    # Never seeded from a generated id.
    image_seed = quote(raw_id or name or "store", safe="")
    return Store(
        id=raw_id or new_id(),
        name=name,
        category=Category.coerce(raw.get("category")),
        address=_str(raw.get("address")),
        contact=_optional_str(raw.get("contact")),
        latitude=_number(raw.get("latitude")),
        longitude=_number(raw.get("longitude")),
        discounts=tuple(d for d in map(_discount, discounts) if d is not None),
        image_url=_optional_str(raw.get("imageUrl"))
        or _PLACEHOLDER_IMAGE.format(seed=image_seed),
        rating=rating,
        operating_hours=_optional_str(raw.get("operatingHours")),
    )


def normalize_stores(data: Any) -> list[Store]:
    """Validate a parsed store array. Anything but a list yields []."""
    if not isinstance(data, list):
        if data is not None:
            logger.warning("Store response is not an array: %r", data)
        return []
    return [s for s in map(normalize_store, data) if s is not None]


def _receipt(raw: dict, receipt_id: str, today: date | None) -> ReceiptData:
    day = _str(raw.get("date")).strip() or (today or date.today()).isoformat()
    return ReceiptData(
        id=receipt_id,
        store_name=_str(raw.get("storeName")),
        items=_str_list(raw.get("items")),
        discount_applied=_str(raw.get("discountApplied")),
        total_amount=_str(raw.get("totalAmount")),
        date=day,
        store_category=Category.coerce(raw.get("storeCategory")),
    )


def normalize_receipt(data: Any, today: date | None = None) -> ReceiptData | None:
    """Validate a parsed receipt object and give it a fresh id."""
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Receipt response is not an object: %r", data)
        return None
    return _receipt(data, new_id(), today)


def _benefits(value: Any) -> tuple[SuggestedDiscount, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(
        SuggestedDiscount(
            title=_str(item.get("title")),
            description=_str(item.get("description")),
        )
        for item in value
        if isinstance(item, dict)
    )


def normalize_analysis(
    data: Any, today: date | None = None
) -> ReceiptAnalysisResult | None:
    """Validate a parsed receipt-image analysis.

    The receipt keeps an empty id until it is saved to history.
    """
    if not isinstance(data, dict) or not isinstance(data.get("analyzedReceipt"), dict):
        if data is not None:
            logger.warning("Unexpected receipt analysis structure: %r", data)
        return None
    return ReceiptAnalysisResult(
        analyzed_receipt=_receipt(data["analyzedReceipt"], "", today),
        immediate_benefits=_benefits(data.get("immediateBenefits")),
        future_benefits=_benefits(data.get("futureBenefits")),
    )


def normalize_recommendations(data: Any, stores: Sequence[Store]) -> list[Store]:
    """Map recommended ids back to stores, in the model's order."""
    if not isinstance(data, list):
        if data is not None:
            logger.warning("Recommendation response is not an array: %r", data)
        return []
    by_id = {s.id: s for s in stores}
    result: list[Store] = []
    seen: set[str] = set()
    for store_id in data:
        if not isinstance(store_id, str) or store_id in seen:
            continue
        store = by_id.get(store_id)
        if store is not None:
            result.append(store)
            seen.add(store_id)
    return result


def parse_stores(text: str | None) -> list[Store]:
    return normalize_stores(extract_json(text))


def parse_receipt(text: str | None, today: date | None = None) -> ReceiptData | None:
    return normalize_receipt(extract_json(text), today)


def parse_analysis(
    text: str | None, today: date | None = None
) -> ReceiptAnalysisResult | None:
    return normalize_analysis(extract_json(text), today)


def parse_recommendations(text: str | None, stores: Sequence[Store]) -> list[Store]:
    return normalize_recommendations(extract_json(text), stores)
