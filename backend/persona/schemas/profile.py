"""Profile Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - ProfileCreate.key (optional): 1-64 chars of [A-Za-z0-9_-]
    - ProfileCreate.payload: a JSON object, opaque to the service
    - Responses expose counters as read-only integers >= 0

Design Decisions:
    - payload kept as dict[str, Any]: descriptive fields are owned by clients
    - from_snapshot classmethods keep route handlers free of field mapping
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from persona.core.domain_types import ProfileSnapshot, ViewerRecord

PROFILE_KEY_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


class ProfileCreate(BaseModel):
    """Profile creation — optional caller-chosen key plus opaque payload."""
    key: str | None = Field(None, pattern=PROFILE_KEY_PATTERN)
    payload: dict[str, Any]


class ProfileCreated(BaseModel):
    """Creation response — the key and a shareable link to the profile."""
    key: str
    share_url: str


class ProfileResponse(BaseModel):
    """Full profile document including interaction counters."""
    key: str
    payload: dict[str, Any]
    owner_id: str | None = None
    total_interactions: int = Field(ge=0)
    unique_viewers: int = Field(ge=0)
    created_at: datetime
    last_updated: datetime

    @classmethod
    def from_snapshot(cls, snapshot: ProfileSnapshot) -> "ProfileResponse":
        return cls(
            key=snapshot.key,
            payload=snapshot.payload,
            owner_id=snapshot.owner_id,
            total_interactions=snapshot.total_interactions,
            unique_viewers=snapshot.unique_viewers,
            created_at=snapshot.created_at,
            last_updated=snapshot.last_updated,
        )


class ProfileStats(BaseModel):
    """Counters only — served without recording an interaction."""
    key: str
    total_interactions: int = Field(ge=0)
    unique_viewers: int = Field(ge=0)
    created_at: datetime
    last_updated: datetime

    @classmethod
    def from_snapshot(cls, snapshot: ProfileSnapshot) -> "ProfileStats":
        return cls(
            key=snapshot.key,
            total_interactions=snapshot.total_interactions,
            unique_viewers=snapshot.unique_viewers,
            created_at=snapshot.created_at,
            last_updated=snapshot.last_updated,
        )


class ViewerRecordResponse(BaseModel):
    """The caller's viewer record for a profile."""
    profile_key: str
    viewer_id: str
    first_seen_at: datetime

    @classmethod
    def from_record(cls, record: ViewerRecord) -> "ViewerRecordResponse":
        return cls(
            profile_key=record.profile_key,
            viewer_id=record.viewer_id,
            first_seen_at=record.first_seen_at,
        )


class ProfileList(BaseModel):
    """Profiles owned by the calling principal, newest first."""
    profiles: list[ProfileResponse]
