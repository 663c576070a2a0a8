"""Comparable views and equality predicates for venue objects.

A comparable view is the projection of a record that decides whether the
server copy needs an update:
- only the semantic fields of the kind are kept (never ``_id``)
- absent optional fields receive the same defaults the server applies
- set-like collections are keyed so their order does not matter
"""

from __future__ import annotations

import copy
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .types import ID_FIELD, NAME_FIELD, ResourceKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from .types import Record

type ComparableView = dict[str, object]
type EqualityPredicate = Callable[[Record, Record], bool]

TRANSLATIONS_FIELD = "translations"
UNIVERSES_FIELD = "universes"

_NON_WORD_RUN = re.compile(r"\W+", re.ASCII)


def default_alias(name: object) -> str | None:
    """Alias the server derives from a name: non-word runs to ``_``, lower-cased."""

    if not isinstance(name, str):
        return None
    return _NON_WORD_RUN.sub("_", name).lower()


@dataclass(frozen=True, slots=True)
class ComparableRules:
    """Field selection and defaults for one resource kind."""

    fields: tuple[str, ...]
    defaults: Mapping[str, object] = field(default_factory=dict)
    alias_from_name: bool = False
    keyed_translations: bool = False
    membership: bool = False


COMPARABLE_RULES: Mapping[ResourceKind, ComparableRules] = {
    ResourceKind.LAYER: ComparableRules(
        fields=("owner", "venueId", "name", "alias", "floor", "isPublished"),
        defaults={"isPublished": False},
        alias_from_name=True,
        membership=True,
    ),
    ResourceKind.PLACE: ComparableRules(
        fields=(
            "owner",
            "venueId",
            "placeTypeId",
            "name",
            "alias",
            "floor",
            "geometry",
            "marker",
            "entrance",
            "order",
            "isPublished",
            "isSearchable",
            "isVisible",
            "isClickable",
            "style",
            "data",
        ),
        defaults={
            "order": 0,
            "isPublished": False,
            "isSearchable": True,
            "isVisible": True,
            "isClickable": True,
            "style": {},
            "data": {},
        },
        alias_from_name=True,
        keyed_translations=True,
        membership=True,
    ),
    ResourceKind.PLACE_LIST: ComparableRules(
        fields=(
            "owner",
            "venueId",
            "name",
            "alias",
            "placeIds",
            "isPublished",
            "isSearchable",
            "data",
            "icon",
        ),
        defaults={"isPublished": False, "isSearchable": True, "data": {}},
        alias_from_name=True,
        keyed_translations=True,
        membership=True,
    ),
    ResourceKind.CONNECTOR: ComparableRules(
        fields=(
            "owner",
            "venueId",
            "name",
            "type",
            "direction",
            "isAccessible",
            "waitTime",
            "timePerFloor",
            "isActive",
            "icon",
        ),
        defaults={
            "isAccessible": True,
            "waitTime": 0,
            "timePerFloor": 0,
            "isActive": True,
            "icon": None,
        },
        membership=True,
    ),
    ResourceKind.BEACON: ComparableRules(
        fields=(
            "owner",
            "venueId",
            "name",
            "alias",
            "type",
            "location",
            "floor",
            "isPublished",
            "properties",
        ),
        defaults={"isPublished": False, "properties": {}},
        alias_from_name=True,
        membership=True,
    ),
    ResourceKind.UNIVERSE: ComparableRules(
        fields=("owner", "venueId", "name", "alias", "description", "isPublished"),
        defaults={"description": "", "isPublished": False},
        alias_from_name=True,
    ),
}


def comparable_rules(kind: ResourceKind) -> ComparableRules:
    try:
        return COMPARABLE_RULES[kind]
    except KeyError:
        raise ValueError(f"Resource kind {kind!r} has no comparable view") from None


def comparable_view(kind: ResourceKind, record: Record) -> ComparableView:
    """Project ``record`` onto the fields that define equality for ``kind``."""

    rules = comparable_rules(kind)
    view: ComparableView = {name: record[name] for name in rules.fields if name in record}

    for name, value in rules.defaults.items():
        if name not in view:
            view[name] = copy.deepcopy(value)
    if rules.alias_from_name and "alias" not in view:
        view["alias"] = default_alias(record.get(NAME_FIELD))

    if rules.keyed_translations:
        view[TRANSLATIONS_FIELD] = _keyed_translations(record.get(TRANSLATIONS_FIELD))
    if rules.membership:
        view[UNIVERSES_FIELD] = _membership_set(record.get(UNIVERSES_FIELD))
    return view


def _keyed_translations(translations: object) -> dict[object, dict[str, object]]:
    if not isinstance(translations, Sequence) or isinstance(translations, str):
        return {}
    keyed: dict[object, dict[str, object]] = {}
    for translation in translations:
        if not isinstance(translation, Mapping):
            continue
        content = {key: value for key, value in translation.items() if key != ID_FIELD}
        keyed[content.get("language")] = content
    return keyed


def _membership_set(members: object) -> dict[str, bool]:
    if not isinstance(members, Sequence) or isinstance(members, str):
        return {}
    keyed: dict[str, bool] = {}
    for member in members:
        member_id = member.get(ID_FIELD) if isinstance(member, Mapping) else member
        if member_id is not None:
            keyed[str(member_id)] = True
    return keyed


def deep_equal(left: object, right: object) -> bool:
    """Structural equality where ``True`` and ``1`` are different JSON values."""

    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(deep_equal(left[key], right[key]) for key in left)
    if isinstance(left, Sequence) and not isinstance(left, str):
        if not isinstance(right, Sequence) or isinstance(right, str):
            return False
        if len(left) != len(right):
            return False
        return all(deep_equal(a, b) for a, b in zip(left, right, strict=True))
    return left == right


def is_equal(kind: ResourceKind, left: Record, right: Record) -> bool:
    """Return ``True`` when both records have equal content, ``_id`` excluded."""

    return deep_equal(comparable_view(kind, left), comparable_view(kind, right))


def equality_for(kind: ResourceKind) -> EqualityPredicate:
    comparable_rules(kind)

    def predicate(left: Record, right: Record) -> bool:
        return is_equal(kind, left, right)

    return predicate


def is_layer_equal(left: Record, right: Record) -> bool:
    return is_equal(ResourceKind.LAYER, left, right)


def is_place_equal(left: Record, right: Record) -> bool:
    return is_equal(ResourceKind.PLACE, left, right)


def is_place_list_equal(left: Record, right: Record) -> bool:
    return is_equal(ResourceKind.PLACE_LIST, left, right)


def is_connector_equal(left: Record, right: Record) -> bool:
    return is_equal(ResourceKind.CONNECTOR, left, right)


def is_beacon_equal(left: Record, right: Record) -> bool:
    return is_equal(ResourceKind.BEACON, left, right)


def is_universe_equal(left: Record, right: Record) -> bool:
    return is_equal(ResourceKind.UNIVERSE, left, right)
