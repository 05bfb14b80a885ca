# tests/test_visibility.py

"""
Tests for the owner visibility filter.
"""

from types import SimpleNamespace

import pytest

from core.decision import ADMIN, NONE, OWNER, Decision, assigned
from core.visibility import (
    default_visibility,
    filter_visible,
    record_visible,
    visible_records,
)
from models.enums import Action, DenyReason, ResourceType, ScopedRole


ROWS = [
    {"id": 1, "visible_to_owner": True},
    {"id": 2, "visible_to_owner": False},
    {"id": 3},
    {"id": 4, "visible_to_owner": None},
    {"id": 5, "visible_to_owner": "true"},
]


def test_record_visible_needs_explicit_true():
    assert [r["id"] for r in ROWS if record_visible(r)] == [1]
    assert record_visible(SimpleNamespace(visible_to_owner=True))
    assert not record_visible(SimpleNamespace())


def test_owner_sees_only_visible_records():
    result = filter_visible(Decision.allow(relationship=OWNER), ROWS)
    assert [r["id"] for r in result] == [1]


@pytest.mark.parametrize("relationship", [ADMIN, assigned(ScopedRole.designer), assigned(ScopedRole.builder)])
def test_non_owner_sees_everything(relationship):
    assert filter_visible(Decision.allow(relationship=relationship), ROWS) == ROWS


def test_denied_read_returns_nothing():
    denied = Decision.deny(DenyReason.no_access, relationship=NONE)
    assert filter_visible(denied, ROWS) == []
    assert visible_records(denied, ResourceType.project, ROWS) == []


def test_types_without_flag_are_not_filtered():
    owner_view = Decision.allow(relationship=OWNER)
    assert visible_records(owner_view, ResourceType.project, ROWS) == ROWS
    assert [r["id"] for r in visible_records(owner_view, ResourceType.photo, ROWS)] == [1]


@pytest.mark.parametrize("relationship, requested, expected", [
    (OWNER, None, True),
    (OWNER, False, False),
    (assigned(ScopedRole.builder), None, False),
    (assigned(ScopedRole.builder), True, True),
    (ADMIN, None, False),
    (None, None, False),
])
def test_default_visibility(relationship, requested, expected):
    assert default_visibility(relationship, requested) is expected


def test_owner_photo_hidden_after_update_but_still_seen_by_designer(store, policy, actors):
    decision = policy.authorize(actors["owner"], Action.create, ResourceType.photo, 10)
    photo = store.insert_record("photos", {
        "object_id": 10,
        "uploaded_by": actors["owner"].id,
        "visible_to_owner": default_visibility(decision.relationship),
    })
    assert photo["visible_to_owner"] is True

    def listing(who):
        view = policy.authorize_list(actors[who], ResourceType.photo, 10)
        rows = store.list_records("photos", {"object_id": 10})
        return {r["id"] for r in visible_records(view, ResourceType.photo, rows)}

    assert photo["id"] in listing("owner")

    store.update_record("photos", photo["id"], {"visible_to_owner": False})

    assert photo["id"] not in listing("owner")
    assert photo["id"] in listing("designer")


def test_owner_listing_never_leaks(store, policy, actors):
    view = policy.authorize_list(actors["owner"], ResourceType.photo, 10)
    rows = visible_records(view, ResourceType.photo, store.list_records("photos", {"object_id": 10}))

    assert rows
    assert all(r["visible_to_owner"] is True for r in rows)


def test_filter_never_widens_a_denial(store, policy, actors):
    view = policy.authorize_list(actors["stranger_builder"], ResourceType.photo, 10)
    rows = store.list_records("photos", {"object_id": 10})
    assert visible_records(view, ResourceType.photo, rows) == []
