"""SQL Profile Store — ProfileStore implementation over the async SQLAlchemy session manager.

Invariants:
    - Every public method uses its own session (one transaction per call)
    - atomically() commits the viewer insert and the counter update together or not at all
    - A concurrent writer surfaces as StoreConflictError, never as a lost update:
        * profile UPDATE guarded by row_version -> StaleDataError
        * duplicate (profile_key, viewer_id) insert -> IntegrityError
        * lock timeout, serialization failure or deadlock -> DBAPIError
    - Returned objects are detached snapshots, never live ORM rows

Design Decisions:
    - Every interaction bumps row_version, so the version check alone covers
      the whole read set (profile + viewer record): a viewer row committed by
      someone else implies a newer profile version
    - Naive datetimes (SQLite drops tzinfo) normalized to UTC at the boundary
"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from persona.core.domain_types import (
    ProfileKey, ProfileSnapshot, ViewerId, ViewerRecord,
)
from persona.core.errors import (
    ErrorContext, ProfileAlreadyExistsError, ResourceNotFoundError,
    StoreConflictError,
)
from persona.core.repository_protocols import InteractionDecision
from persona.infrastructure.database import DatabaseSessionManager
from persona.models.profile import Profile
from persona.models.profile_viewer import ProfileViewer

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_snapshot(profile: Profile) -> ProfileSnapshot:
    return ProfileSnapshot(
        key=ProfileKey(profile.key),
        payload=dict(profile.payload or {}),
        total_interactions=profile.total_interactions,
        unique_viewers=profile.unique_viewers,
        created_at=_as_utc(profile.created_at),
        last_updated=_as_utc(profile.last_updated),
        owner_id=profile.owner_id,
    )


def _to_viewer_record(viewer: ProfileViewer) -> ViewerRecord:
    return ViewerRecord(
        profile_key=ProfileKey(viewer.profile_key),
        viewer_id=ViewerId(viewer.viewer_id),
        first_seen_at=_as_utc(viewer.first_seen_at),
    )


def _profile_not_found(key: str) -> ResourceNotFoundError:
    return ResourceNotFoundError(
        "Profile", key, ErrorContext(profile_key=key),
    )


# PostgreSQL: serialization_failure, deadlock_detected, lock_not_available
_TRANSIENT_SQLSTATES = {"40001", "40P01", "55P03"}


def _is_transient_conflict(exc: DBAPIError) -> bool:
    """Lock/serialization failures that a fresh attempt can resolve."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _TRANSIENT_SQLSTATES:
        return True
    return "database is locked" in str(orig)


def _conflict(key: str, viewer_id: str, cause: Exception) -> StoreConflictError:
    return StoreConflictError(
        f"Concurrent write on profile '{key}'",
        ErrorContext(
            profile_key=key, viewer_id=viewer_id,
            debug_info={"cause": type(cause).__name__},
        ),
    )


class SqlProfileStore:
    """Profile documents and viewer records in two relational tables."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def create(
        self, key: ProfileKey, payload: dict[str, Any], owner_id: str | None = None,
    ) -> ProfileSnapshot:
        now = datetime.now(timezone.utc)
        async with self._db.session() as db:
            profile = Profile(
                key=key,
                owner_id=owner_id,
                payload=payload,
                total_interactions=0,
                unique_viewers=0,
                created_at=now,
                last_updated=now,
            )
            db.add(profile)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                raise ProfileAlreadyExistsError(key)
            logger.info(
                f"Profile {key} created",
                extra={"profile_key": key},
            )
            return _to_snapshot(profile)

    async def get(self, key: ProfileKey) -> ProfileSnapshot:
        async with self._db.session() as db:
            profile = await db.get(Profile, key)
            if profile is None:
                raise _profile_not_found(key)
            return _to_snapshot(profile)

    async def atomically(
        self, key: ProfileKey, viewer_id: ViewerId, decide: InteractionDecision,
    ) -> ProfileSnapshot:
        """Read profile + viewer record, apply decide()'s writes, commit as one unit."""
        async with self._db.session() as db:
            try:
                profile = await db.get(Profile, key)
                if profile is None:
                    raise _profile_not_found(key)
                viewer = await db.get(ProfileViewer, (key, viewer_id))

                writes = decide(
                    _to_snapshot(profile),
                    _to_viewer_record(viewer) if viewer is not None else None,
                )

                if writes.new_viewer is not None:
                    db.add(ProfileViewer(
                        profile_key=writes.new_viewer.profile_key,
                        viewer_id=writes.new_viewer.viewer_id,
                        first_seen_at=writes.new_viewer.first_seen_at,
                    ))
                profile.total_interactions = writes.total_interactions
                profile.unique_viewers = writes.unique_viewers
                profile.last_updated = writes.last_updated

                await db.commit()
            except (StaleDataError, IntegrityError) as e:
                await db.rollback()
                raise _conflict(key, viewer_id, e)
            except DBAPIError as e:
                if not _is_transient_conflict(e):
                    raise
                await db.rollback()
                raise _conflict(key, viewer_id, e)
            return _to_snapshot(profile)

    async def list_by_owner(self, owner_id: str) -> list[ProfileSnapshot]:
        async with self._db.session() as db:
            result = await db.execute(
                select(Profile)
                .where(Profile.owner_id == owner_id)
                .order_by(Profile.created_at.desc(), Profile.key),
            )
            return [_to_snapshot(p) for p in result.scalars().all()]

    async def get_viewer(
        self, key: ProfileKey, viewer_id: ViewerId,
    ) -> ViewerRecord:
        async with self._db.session() as db:
            viewer = await db.get(ProfileViewer, (key, viewer_id))
            if viewer is not None:
                return _to_viewer_record(viewer)
            if await db.get(Profile, key) is None:
                raise _profile_not_found(key)
            raise ResourceNotFoundError(
                "Viewer record", f"{key}/{viewer_id}",
                ErrorContext(profile_key=key, viewer_id=viewer_id),
            )
