from __future__ import annotations

import html
from collections.abc import Iterable
from datetime import datetime
from urllib.parse import quote

from .models import (
    FEATURE_ICONS,
    ActionType,
    CardAction,
    FeatureBadge,
    Place,
    PlaceCard,
    PlaceListView,
)
from .scoring import assess

MAP_SEARCH_URL = "https://www.google.com/maps/search/"
REPORT_PROMPT = "Report an issue for this place? This will flag it for review."
EMPTY_CACHE_MESSAGE = "No accessible places yet. Be the first to add helpful details!"
NO_MATCH_MESSAGE = "No places match selected filters."


def _escape(text: str | None) -> str:
    return html.escape(text or "")


def map_search_url(address: str) -> str:
    return MAP_SEARCH_URL + quote(address or "", safe="!~*'()")


def feature_label(tag: str) -> str:
    return tag.replace("_", " ", 1)


def format_added(created_at: datetime | None) -> str:
    if created_at is None:
        return "Recently"
    return f"{created_at.month}/{created_at.day}/{created_at.year}"


def render_card(place: Place) -> PlaceCard:
    assessment = assess(len(place.features), place.confirmations)
    return PlaceCard(
        id=place.id,
        name=_escape(place.name),
        type=_escape(place.type),
        address=_escape(place.address),
        notes=_escape(place.notes),
        badges=[
            FeatureBadge(tag=tag, icon=FEATURE_ICONS.get(tag, ""), label=feature_label(tag))
            for tag in place.features
        ],
        confidence_label=assessment.label,
        confidence_class=assessment.css_class,
        score=assessment.score,
        score_display=assessment.score_display,
        confirmations=place.confirmations,
        added=format_added(place.created_at),
        is_demo=place.is_demo,
        actions=[
            CardAction(action=ActionType.view, label="View on Map", url=map_search_url(place.address)),
            CardAction(action=ActionType.confirm, label="Confirm Accessibility"),
            CardAction(action=ActionType.report, label="Report Issue", prompt=REPORT_PROMPT),
        ],
    )


def render_list(
    places: list[Place], visible: list[Place], active_features: Iterable[str],
) -> PlaceListView:
    if not places:
        empty_message = EMPTY_CACHE_MESSAGE
    elif not visible:
        empty_message = NO_MATCH_MESSAGE
    else:
        empty_message = None
    return PlaceListView(
        cards=[render_card(p) for p in visible],
        total=len(places),
        active_features=sorted(active_features),
        empty_message=empty_message,
    )
