from __future__ import annotations

from collections.abc import Iterable

from .models import Place


def filter_places(places: list[Place], active_features: Iterable[str]) -> list[Place]:
    """Keep the places that carry every active feature, in their original order."""
    required = set(active_features)
    if not required:
        return list(places)
    return [p for p in places if required.issubset(p.features)]


def toggle_feature(active_features: Iterable[str], feature: str) -> set[str]:
    """Return a new feature set with ``feature`` added, or removed if present."""
    updated = set(active_features)
    if feature in updated:
        updated.discard(feature)
    else:
        updated.add(feature)
    return updated
