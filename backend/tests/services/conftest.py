"""Service test fixtures — seeded profiles, recorders, and a conflict-injecting store.

Invariants:
    - Recorders built here never sleep for long (millisecond backoff)
    - flaky_store forwards to the real store after raising the configured
      number of StoreConflictErrors

Design Decisions:
    - Conflict injection wraps the store instead of patching SQLAlchemy:
      retry policy is tested independently of database locking behaviour
"""

import pytest

from persona.core.domain_types import ProfileKey
from persona.core.errors import ErrorContext, StoreConflictError
from persona.services.interaction_recorder import InteractionRecorder


@pytest.fixture
async def seed_profile(store):
    """Profile `p1` with payload {name: lamp}, counters at zero."""
    return await store.create(ProfileKey("p1"), {"name": "lamp"}, owner_id="owner-1")


@pytest.fixture
def recorder(store):
    return InteractionRecorder(store, max_retries=3, base_delay_ms=0, max_delay_ms=0)


@pytest.fixture
def make_recorder():
    """Build a recorder over any store with test-friendly backoff."""

    def _make(store, max_retries=3, base_delay_ms=0, max_delay_ms=0, **kwargs):
        return InteractionRecorder(
            store, max_retries=max_retries,
            base_delay_ms=base_delay_ms, max_delay_ms=max_delay_ms,
            **kwargs,
        )

    return _make


class _FlakyStore:
    """Raises StoreConflictError for the first `conflicts` atomically() calls."""

    def __init__(self, inner, conflicts: int):
        self._inner = inner
        self.remaining_conflicts = conflicts
        self.attempts = 0

    async def atomically(self, key, viewer_id, decide):
        self.attempts += 1
        if self.remaining_conflicts > 0:
            self.remaining_conflicts -= 1
            raise StoreConflictError(
                "injected conflict", ErrorContext(profile_key=key),
            )
        return await self._inner.atomically(key, viewer_id, decide)

    def __getattr__(self, name):
        return getattr(self._inner, name)


@pytest.fixture
def flaky_store(store):
    """Factory: wrap the real store so it conflicts `n` times before succeeding."""

    def _make(conflicts: int) -> _FlakyStore:
        return _FlakyStore(store, conflicts)

    return _make
