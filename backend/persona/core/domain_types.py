"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ProfileKey and ViewerId wrap str — never use bare strings in domain logic
    - ProfileSnapshot and ViewerRecord are immutable, detached from the ORM
    - Counters in a ProfileSnapshot are never negative
    - All valid policies encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers for identities: zero runtime cost, full type-checker support
    - Frozen dataclasses for snapshots: the core decides on values, never on live ORM rows
    - str Enums: serialize to JSON and read from env vars without custom encoders
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, NewType


# ─── Identity Types ──────────────────────────────────────────────

ProfileKey = NewType("ProfileKey", str)
ViewerId = NewType("ViewerId", str)

ANONYMOUS_PREFIX = "anon:"


# ─── Enums ───────────────────────────────────────────────────────

class AnonymousViewerPolicy(str, Enum):
    """What a load without an authenticated principal counts as."""
    SYNTHETIC = "synthetic"   # fresh identity per request: every load is a new viewer
    REJECT = "reject"         # refused with InvalidIdentityError


# ─── Snapshots ───────────────────────────────────────────────────

@dataclass(frozen=True)
class ProfileSnapshot:
    """Committed state of one profile document."""
    key: ProfileKey
    payload: dict[str, Any]
    total_interactions: int
    unique_viewers: int
    created_at: datetime
    last_updated: datetime
    owner_id: str | None = None


@dataclass(frozen=True)
class ViewerRecord:
    """Witness that a viewer has been counted against a profile."""
    profile_key: ProfileKey
    viewer_id: ViewerId
    first_seen_at: datetime


@dataclass(frozen=True)
class InteractionWrites:
    """Writes one interaction commits: absolute counter values plus an optional new witness."""
    total_interactions: int
    unique_viewers: int
    last_updated: datetime
    new_viewer: ViewerRecord | None = field(default=None)

    @property
    def is_first_visit(self) -> bool:
        return self.new_viewer is not None
