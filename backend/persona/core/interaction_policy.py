"""Interaction Policy — pure counting rule applied inside one store transaction.

Invariants:
    - total_interactions increases by exactly 1 per planned interaction
    - unique_viewers increases by 1 iff no ViewerRecord exists for the viewer
    - A new ViewerRecord is planned iff unique_viewers is incremented
    - No IO, no clock: `now` is supplied by the caller

Design Decisions:
    - Absolute counter values, not deltas: the store guards the UPDATE with the
      row version read alongside the snapshot, so values computed from that
      snapshot are only committed if nothing changed underneath
"""

from datetime import datetime

from persona.core.domain_types import (
    InteractionWrites, ProfileSnapshot, ViewerId, ViewerRecord,
)


def plan_interaction(
    profile: ProfileSnapshot,
    existing_viewer: ViewerRecord | None,
    viewer_id: ViewerId,
    now: datetime,
) -> InteractionWrites:
    """Decide the writes for one recorded interaction. Pure, no IO."""
    new_viewer = None
    unique_viewers = profile.unique_viewers
    if existing_viewer is None:
        new_viewer = ViewerRecord(
            profile_key=profile.key, viewer_id=viewer_id, first_seen_at=now,
        )
        unique_viewers += 1

    return InteractionWrites(
        total_interactions=profile.total_interactions + 1,
        unique_viewers=unique_viewers,
        last_updated=now,
        new_viewer=new_viewer,
    )


def backoff_delay_ms(
    attempt: int, base_delay_ms: int, max_delay_ms: int, jitter: float,
) -> float:
    """Exponential backoff for retry `attempt` (0-based), capped, scaled by jitter.

    `jitter` is a multiplier in [0.75, 1.25]; callers draw it at random.
    """
    delay = min(base_delay_ms * (2 ** attempt), max_delay_ms)
    return delay * jitter
