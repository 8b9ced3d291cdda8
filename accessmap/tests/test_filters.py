from accessmap.places.demo import demo_places
from accessmap.places.filters import filter_places, toggle_feature
from accessmap.places.models import Place


def _ids(places):
    return [p.id for p in places]


def test_empty_filter_returns_everything_in_order():
    places = demo_places()
    assert _ids(filter_places(places, set())) == ["demo-1", "demo-2", "demo-3", "demo-4"]


def test_filter_requires_every_active_feature():
    places = demo_places()
    result = filter_places(places, {"wheelchair", "restroom"})
    assert _ids(result) == ["demo-1"]


def test_single_feature_filter_preserves_order():
    places = demo_places()
    assert _ids(filter_places(places, {"wheelchair"})) == ["demo-1", "demo-2"]
    assert _ids(filter_places(places, {"step_free"})) == ["demo-1", "demo-4"]


def test_filter_with_no_match():
    places = demo_places()
    assert filter_places(places, {"restroom", "parking"}) == []


def test_filter_handles_places_without_features():
    bare = Place(id="p1", name="Bare", features=None)
    assert bare.features == []
    assert filter_places([bare], set()) == [bare]
    assert filter_places([bare], {"lift"}) == []


def test_toggle_adds_then_removes():
    active = toggle_feature(set(), "lift")
    assert active == {"lift"}
    active = toggle_feature(active, "parking")
    assert active == {"lift", "parking"}
    assert toggle_feature(active, "lift") == {"parking"}


def test_toggle_does_not_mutate_input():
    original = {"lift"}
    toggle_feature(original, "lift")
    assert original == {"lift"}
