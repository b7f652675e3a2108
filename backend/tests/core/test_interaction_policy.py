"""Tests for plan_interaction and backoff_delay_ms — pure counting rule, no IO."""

from datetime import datetime, timedelta, timezone

import pytest

from persona.core.domain_types import (
    ProfileKey, ProfileSnapshot, ViewerId, ViewerRecord,
)
from persona.core.interaction_policy import backoff_delay_ms, plan_interaction

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
NOW = T0 + timedelta(hours=1)


def _profile(total=0, unique=0) -> ProfileSnapshot:
    return ProfileSnapshot(
        key=ProfileKey("p1"),
        payload={"name": "lamp"},
        total_interactions=total,
        unique_viewers=unique,
        created_at=T0,
        last_updated=T0,
    )


def test_first_visit_counts_viewer_and_view():
    writes = plan_interaction(_profile(), None, ViewerId("u1"), NOW)
    assert writes.total_interactions == 1
    assert writes.unique_viewers == 1
    assert writes.last_updated == NOW
    assert writes.is_first_visit


def test_first_visit_plans_witness_record():
    writes = plan_interaction(_profile(), None, ViewerId("u1"), NOW)
    assert writes.new_viewer == ViewerRecord(
        profile_key=ProfileKey("p1"), viewer_id=ViewerId("u1"), first_seen_at=NOW,
    )


def test_repeat_visit_counts_view_only():
    existing = ViewerRecord(ProfileKey("p1"), ViewerId("u1"), T0)
    writes = plan_interaction(
        _profile(total=4, unique=2), existing, ViewerId("u1"), NOW,
    )
    assert writes.total_interactions == 5
    assert writes.unique_viewers == 2
    assert writes.new_viewer is None
    assert not writes.is_first_visit


def test_last_updated_moves_on_repeat_visit():
    existing = ViewerRecord(ProfileKey("p1"), ViewerId("u1"), T0)
    writes = plan_interaction(_profile(total=1, unique=1), existing, ViewerId("u1"), NOW)
    assert writes.last_updated == NOW


def test_snapshot_is_not_mutated():
    profile = _profile(total=3, unique=1)
    plan_interaction(profile, None, ViewerId("u9"), NOW)
    assert profile.total_interactions == 3
    assert profile.unique_viewers == 1


def test_folding_plans_reproduces_lamp_scenario():
    profile = _profile()
    seen: dict[str, ViewerRecord] = {}
    observed = []
    for viewer in ("u1", "u1", "u2"):
        writes = plan_interaction(profile, seen.get(viewer), ViewerId(viewer), NOW)
        if writes.new_viewer:
            seen[viewer] = writes.new_viewer
        profile = ProfileSnapshot(
            key=profile.key, payload=profile.payload,
            total_interactions=writes.total_interactions,
            unique_viewers=writes.unique_viewers,
            created_at=profile.created_at, last_updated=writes.last_updated,
        )
        observed.append((profile.total_interactions, profile.unique_viewers))
    assert observed == [(1, 1), (2, 1), (3, 2)]


@pytest.mark.parametrize("attempt,expected", [(0, 20), (1, 40), (2, 80), (3, 160)])
def test_backoff_doubles_per_attempt(attempt, expected):
    assert backoff_delay_ms(attempt, 20, 10_000, 1.0) == expected


def test_backoff_is_capped():
    assert backoff_delay_ms(10, 20, 500, 1.0) == 500


def test_backoff_applies_jitter_multiplier():
    assert backoff_delay_ms(0, 100, 500, 0.75) == 75
    assert backoff_delay_ms(0, 100, 500, 1.25) == 125
