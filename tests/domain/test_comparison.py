from __future__ import annotations

import pytest

from mapwize_api.domain.comparison import (
    comparable_view,
    deep_equal,
    default_alias,
    equality_for,
    is_connector_equal,
    is_equal,
    is_layer_equal,
    is_place_equal,
    is_place_list_equal,
    is_universe_equal,
)
from mapwize_api.domain.types import ResourceKind
from tests.support.stores import make_record


def test_default_alias_collapses_non_word_runs_and_lowercases() -> None:
    assert default_alias("Meeting Room #1") == "meeting_room_1"
    assert default_alias("R&D -- Lab") == "r_d_lab"
    assert default_alias("already_fine") == "already_fine"
    assert default_alias(None) is None


def test_place_view_applies_defaults() -> None:
    view = comparable_view(ResourceKind.PLACE, make_record("Room A"))

    assert view == {
        "owner": "o1",
        "venueId": "v1",
        "name": "Room A",
        "alias": "room_a",
        "order": 0,
        "isPublished": False,
        "isSearchable": True,
        "isVisible": True,
        "isClickable": True,
        "style": {},
        "data": {},
        "translations": {},
        "universes": {},
    }


def test_view_keeps_explicit_values_over_defaults() -> None:
    record = make_record("Room A", alias="custom", isPublished=True, order=3, isVisible=None)

    view = comparable_view(ResourceKind.PLACE, record)

    assert view["alias"] == "custom"
    assert view["isPublished"] is True
    assert view["order"] == 3
    assert view["isVisible"] is None


def test_view_excludes_id_and_unknown_fields() -> None:
    record = make_record("Layer", _id="abc", updated="2024-01-01", syncAction="update")

    view = comparable_view(ResourceKind.LAYER, record)

    assert "_id" not in view
    assert "updated" not in view
    assert "syncAction" not in view


def test_changing_only_the_id_keeps_the_view() -> None:
    first = make_record("Room A", _id="1", floor=2)
    second = {**first, "_id": "2"}

    assert comparable_view(ResourceKind.PLACE, first) == comparable_view(
        ResourceKind.PLACE, second
    )
    assert is_place_equal(first, second)


def test_missing_is_published_equals_false() -> None:
    assert is_layer_equal(make_record("L"), make_record("L", isPublished=False))
    assert not is_layer_equal(make_record("L"), make_record("L", isPublished=True))


def test_missing_alias_equals_derived_alias() -> None:
    bare = make_record("Ground Floor")

    assert is_layer_equal(bare, make_record("Ground Floor", alias="ground_floor"))
    assert not is_layer_equal(bare, make_record("Ground Floor", alias="gf"))


def test_translations_are_order_independent_and_ignore_their_ids() -> None:
    english = {"language": "en", "title": "Desk", "subtitle": "Open space"}
    french = {"language": "fr", "title": "Bureau", "subtitle": "Open space"}
    first = make_record("Desk", translations=[{**english, "_id": "t1"}, french])
    second = make_record("Desk", translations=[french, {**english, "_id": "t9"}])

    assert is_place_equal(first, second)
    assert comparable_view(ResourceKind.PLACE, first)["translations"] == {
        "en": english,
        "fr": french,
    }


def test_translation_content_change_is_detected() -> None:
    first = make_record("Desk", translations=[{"language": "en", "title": "Desk"}])
    second = make_record("Desk", translations=[{"language": "en", "title": "Table"}])

    assert not is_place_list_equal(first, second)


def test_universe_membership_is_order_independent() -> None:
    first = make_record("Desk", universes=["u1", "u2"])
    second = make_record("Desk", universes=[{"_id": "u2", "name": "Staff"}, "u1"])

    assert is_place_equal(first, second)
    assert comparable_view(ResourceKind.PLACE, first)["universes"] == {"u1": True, "u2": True}
    assert not is_place_equal(first, make_record("Desk", universes=["u1"]))


def test_place_ids_order_is_significant() -> None:
    first = make_record("Favourites", placeIds=["p1", "p2"])
    second = make_record("Favourites", placeIds=["p2", "p1"])

    assert not is_place_list_equal(first, second)


def test_connector_defaults() -> None:
    bare = make_record("Lift 1", type="elevator")
    explicit = make_record(
        "Lift 1",
        type="elevator",
        isAccessible=True,
        waitTime=0,
        timePerFloor=0,
        isActive=True,
        icon=None,
    )

    assert is_connector_equal(bare, explicit)
    assert not is_connector_equal(bare, {**explicit, "waitTime": 30})


def test_universe_defaults() -> None:
    assert is_universe_equal(
        make_record("Staff"),
        make_record("Staff", alias="staff", description="", isPublished=False),
    )


def test_boolean_and_number_values_are_not_equal() -> None:
    assert not deep_equal(True, 1)
    assert not deep_equal({"a": [0]}, {"a": [False]})
    assert deep_equal({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]})
    assert not is_place_equal(make_record("A", order=1), make_record("A", order=True))


def test_nested_mapping_key_order_does_not_matter() -> None:
    first = make_record("A", geometry={"type": "Point", "coordinates": [1.0, 2.0]})
    second = make_record("A", geometry={"coordinates": [1.0, 2.0], "type": "Point"})

    assert is_equal(ResourceKind.PLACE, first, second)


def test_equality_for_binds_the_kind() -> None:
    predicate = equality_for(ResourceKind.BEACON)

    assert predicate(make_record("B1"), make_record("B1", properties={}))
    assert not predicate(make_record("B1"), make_record("B1", floor=1))


@pytest.mark.parametrize("kind", [ResourceKind.VENUE, ResourceKind.ROUTE_GRAPH])
def test_kinds_without_comparable_view_are_rejected(kind: ResourceKind) -> None:
    with pytest.raises(ValueError, match="no comparable view"):
        equality_for(kind)
