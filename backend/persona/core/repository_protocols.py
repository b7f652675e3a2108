"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - `atomically` takes a pure, synchronous decision function: the store owns
      reads, commit and conflict detection; the core owns what gets written
"""

from collections.abc import Callable
from typing import Any, Protocol

from persona.core.domain_types import (
    InteractionWrites, ProfileKey, ProfileSnapshot, ViewerId, ViewerRecord,
)

InteractionDecision = Callable[
    [ProfileSnapshot, ViewerRecord | None], InteractionWrites,
]


class ProfileStore(Protocol):
    """Contract for profile persistence — implemented by shell.

    create raises ProfileAlreadyExistsError; get/atomically/get_viewer raise
    ResourceNotFoundError; atomically raises StoreConflictError when a
    concurrent transaction invalidated its reads (nothing is applied).
    """
    async def create(
        self, key: ProfileKey, payload: dict[str, Any], owner_id: str | None = None,
    ) -> ProfileSnapshot: ...
    async def get(self, key: ProfileKey) -> ProfileSnapshot: ...
    async def atomically(
        self, key: ProfileKey, viewer_id: ViewerId, decide: InteractionDecision,
    ) -> ProfileSnapshot: ...
    async def list_by_owner(self, owner_id: str) -> list[ProfileSnapshot]: ...
    async def get_viewer(
        self, key: ProfileKey, viewer_id: ViewerId,
    ) -> ViewerRecord: ...
