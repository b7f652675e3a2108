"""Domain Types — verifies identity wrappers, policy enum and snapshot immutability."""

import dataclasses
from datetime import datetime, timezone

import pytest

from persona.core.domain_types import (
    AnonymousViewerPolicy, InteractionWrites, ProfileKey, ProfileSnapshot,
    ViewerId, ViewerRecord,
)

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_identity_types_wrap_str():
    assert ProfileKey("p1") == "p1"
    assert ViewerId("u1") == "u1"


def test_anonymous_policy_has_two_values():
    assert {p.value for p in AnonymousViewerPolicy} == {"synthetic", "reject"}


def test_profile_snapshot_is_frozen():
    snapshot = ProfileSnapshot(ProfileKey("p1"), {}, 0, 0, T0, T0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.total_interactions = 1


def test_interaction_writes_first_visit_flag():
    record = ViewerRecord(ProfileKey("p1"), ViewerId("u1"), T0)
    assert InteractionWrites(1, 1, T0, record).is_first_visit
    assert not InteractionWrites(2, 1, T0).is_first_visit
