"""Interaction Recorder — counts a profile load exactly once per viewer, under concurrency.

Invariants:
    - Each attempt is one ProfileStore.atomically() transaction: read the viewer
      record, create it and bump unique_viewers if absent, always bump
      total_interactions and last_updated, commit
    - StoreConflictError: retried from a fresh read, max `max_retries` retries,
      exponential backoff with ±25% jitter
    - Retry budget exhausted: ContentionError (never silently dropped)
    - ResourceNotFoundError / InvalidIdentityError: terminal, never retried
    - No locks, no shared mutable state: instances are safe to share across tasks

Design Decisions:
    - Decision logic lives in core/interaction_policy.py (pure); this class only
      orchestrates IO and retries
    - Clock and jitter source injected for deterministic tests
"""

import asyncio
import logging
import random
from collections.abc import Callable
from datetime import datetime, timezone

from persona.core.domain_types import (
    InteractionWrites, ProfileKey, ProfileSnapshot, ViewerId, ViewerRecord,
)
from persona.core.errors import ContentionError, ErrorContext, StoreConflictError
from persona.core.interaction_policy import backoff_delay_ms, plan_interaction
from persona.core.repository_protocols import ProfileStore
from persona.core.viewer_identity import validate_viewer_id

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _jitter() -> float:
    return random.uniform(0.75, 1.25)


class InteractionRecorder:
    """Applies the counting policy against a ProfileStore with bounded optimistic retries."""

    def __init__(
        self,
        store: ProfileStore,
        max_retries: int = 5,
        base_delay_ms: int = 20,
        max_delay_ms: int = 500,
        clock: Callable[[], datetime] = _utcnow,
        jitter: Callable[[], float] = _jitter,
    ):
        self.store = store
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._clock = clock
        self._jitter = jitter

    async def record(
        self, profile_key: ProfileKey, viewer_id: str,
    ) -> ProfileSnapshot:
        """Record one interaction; returns the committed (post-increment) snapshot."""
        viewer = validate_viewer_id(viewer_id)
        first_visit = False

        def decide(
            profile: ProfileSnapshot, existing: ViewerRecord | None,
        ) -> InteractionWrites:
            nonlocal first_visit
            writes = plan_interaction(profile, existing, viewer, self._clock())
            first_visit = writes.is_first_visit
            return writes

        for attempt in range(self.max_retries + 1):
            try:
                snapshot = await self.store.atomically(profile_key, viewer, decide)
                self._log_success(profile_key, viewer, attempt, first_visit)
                return snapshot
            except StoreConflictError:
                await self._handle_conflict(profile_key, viewer, attempt)

        # Unreachable: _handle_conflict raises on the last attempt
        raise ContentionError(self.max_retries + 1)

    async def _handle_conflict(
        self, profile_key: ProfileKey, viewer: ViewerId, attempt: int,
    ) -> None:
        """Sleep before the next attempt, or raise ContentionError if none remain."""
        if attempt >= self.max_retries:
            logger.error(
                f"Interaction on {profile_key} abandoned after "
                f"{attempt + 1} attempts",
                extra={
                    "profile_key": profile_key, "viewer_id": viewer,
                    "attempt": attempt, "error_code": "INTERACTION_CONTENTION",
                },
            )
            raise ContentionError(
                attempt + 1,
                ErrorContext(
                    profile_key=profile_key, viewer_id=viewer, attempt=attempt,
                    retry_after_ms=self.max_delay_ms,
                ),
            )
        delay_ms = backoff_delay_ms(
            attempt, self.base_delay_ms, self.max_delay_ms, self._jitter(),
        )
        logger.warning(
            f"Write conflict on {profile_key}, retrying in {delay_ms:.0f}ms",
            extra={
                "profile_key": profile_key, "viewer_id": viewer,
                "attempt": attempt,
            },
        )
        await asyncio.sleep(delay_ms / 1000)

    def _log_success(
        self, profile_key: ProfileKey, viewer: ViewerId,
        attempt: int, first_visit: bool,
    ) -> None:
        logger.info(
            f"Interaction recorded on {profile_key}",
            extra={
                "profile_key": profile_key, "viewer_id": viewer,
                "attempt": attempt, "first_visit": first_visit,
            },
        )
