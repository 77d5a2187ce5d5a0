"""Store filtering, search and proximity sorting."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import replace

from .models import Category, Location, Store

EARTH_RADIUS_KM = 6371.0

ALL_CATEGORIES = "all"


def haversine_km(a: Location, b: Location) -> float:
    """Great-circle distance between two coordinates in kilometres."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def store_distance(store: Store, origin: Location) -> float:
    """Distance from *origin*, or infinity when the store has no coordinate."""
    loc = store.location
    if loc is None:
        return math.inf
    return haversine_km(origin, loc)


def matches_search(store: Store, term: str) -> bool:
    needle = term.lower()
    return (
        needle in store.name.lower()
        or needle in store.address.lower()
        or any(needle in d.description.lower() for d in store.discounts)
    )


def filter_stores(
    stores: Sequence[Store],
    category: Category | str = ALL_CATEGORIES,
    search_term: str = "",
    nearby: bool = False,
    location: Location | None = None,
) -> list[Store]:
    """Produce the list to display.

    Filters by category, then by search term, then either sorts by
    distance from *location* (proximity mode) or strips any stale
    distance. The input sequence is never modified; stores that need a
    distance change are replaced by copies.
    """
    result = list(stores)

    if category != ALL_CATEGORIES:
        result = [s for s in result if s.category == category]

    if search_term:
        result = [s for s in result if matches_search(s, search_term)]

    if nearby and location is not None:
        result = [replace(s, distance=store_distance(s, location)) for s in result]
        # sorted() is stable, so equal distances keep catalog order.
        result = sorted(result, key=lambda s: s.distance)
    else:
        result = [s if s.distance is None else replace(s, distance=None) for s in result]

    return result


def favorite_stores(stores: Iterable[Store], favorite_ids: Iterable[str]) -> list[Store]:
    """Favorited stores in catalog order."""
    ids = set(favorite_ids)
    return [s for s in stores if s.id in ids]


def category_counts(stores: Iterable[Store]) -> dict[Category, int]:
    counts = {c: 0 for c in Category}
    for store in stores:
        counts[store.category] += 1
    return counts
