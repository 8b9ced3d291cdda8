from datetime import datetime, timezone

from accessmap.places.demo import demo_places
from accessmap.places.models import ActionType, Place
from accessmap.places.render import (
    EMPTY_CACHE_MESSAGE,
    NO_MATCH_MESSAGE,
    REPORT_PROMPT,
    format_added,
    map_search_url,
    render_card,
    render_list,
)


def test_card_escapes_user_text():
    place = Place(
        id="x1",
        name="<b>Cafe</b>",
        type="Office",
        address="1 & 2 Main St",
        notes='<script>alert("hi")</script>',
    )
    card = render_card(place)
    assert card.name == "&lt;b&gt;Cafe&lt;/b&gt;"
    assert card.address == "1 &amp; 2 Main St"
    assert "<script>" not in card.notes


def test_card_badges_and_unknown_tags():
    place = Place(id="x1", name="Cafe", features=["step_free", "braille"])
    card = render_card(place)
    assert [(b.tag, b.icon, b.label) for b in card.badges] == [
        ("step_free", "🚪", "step free"),
        ("braille", "", "braille"),
    ]


def test_card_scores_demo_place():
    library = demo_places()[1]  # 3 features, 6 confirmations
    card = render_card(library)
    assert card.confidence_label == "High confidence"
    assert card.confidence_class == "confidence-high"
    assert card.score == 5.0
    assert card.score_display == "5/5"
    assert card.confirmations == 6
    assert card.is_demo
    assert card.added == "8/21/2025"


def test_card_actions():
    card = render_card(Place(id="x1", name="Hall", address="Main St 5/B"))
    actions = {a.action: a for a in card.actions}
    assert actions[ActionType.view].url == "https://www.google.com/maps/search/Main%20St%205%2FB"
    assert actions[ActionType.report].prompt == REPORT_PROMPT
    assert actions[ActionType.confirm].url is None


def test_missing_timestamp_reads_recently():
    assert format_added(None) == "Recently"
    assert format_added(datetime(2025, 10, 3, tzinfo=timezone.utc)) == "10/3/2025"


def test_map_search_url_encodes_address():
    assert map_search_url("Library Road, North Wing") == (
        "https://www.google.com/maps/search/Library%20Road%2C%20North%20Wing"
    )


def test_list_empty_states():
    places = demo_places()
    assert render_list([], [], set()).empty_message == EMPTY_CACHE_MESSAGE
    view = render_list(places, [], {"parking", "restroom"})
    assert view.empty_message == NO_MATCH_MESSAGE
    assert view.active_features == ["parking", "restroom"]
    assert view.total == 4
    full = render_list(places, places, set())
    assert full.empty_message is None
    assert [c.id for c in full.cards] == ["demo-1", "demo-2", "demo-3", "demo-4"]
