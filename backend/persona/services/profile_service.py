"""Profile Service — request-handler contract over the store and the interaction recorder.

Invariants:
    - create_profile never records an interaction (counters start at 0)
    - load_profile: lookup first (ResourceNotFoundError if absent), then exactly
      one recorded interaction, then the POST-increment snapshot is returned
    - Read-only operations (stats, owned listing, viewer record) never record
      an interaction

Design Decisions:
    - Store and recorder injected: process-wide instances live on app.state,
      built in the FastAPI lifespan
    - Generated keys are uuid4 hex: opaque, URL-safe, fits profiles.key
"""

import logging
from typing import Any
from uuid import uuid4

from persona.core.domain_types import (
    ProfileKey, ProfileSnapshot, ViewerId, ViewerRecord,
)
from persona.core.repository_protocols import ProfileStore
from persona.services.interaction_recorder import InteractionRecorder

logger = logging.getLogger(__name__)


def new_profile_key() -> ProfileKey:
    return ProfileKey(uuid4().hex)


class ProfileService:
    """Creation, loading (with interaction tracking) and read-only views of profiles."""

    def __init__(
        self,
        store: ProfileStore,
        recorder: InteractionRecorder,
        share_url_template: str = "{key}",
    ):
        self.store = store
        self.recorder = recorder
        self.share_url_template = share_url_template

    async def create_profile(
        self,
        payload: dict[str, Any],
        owner_id: str | None = None,
        key: str | None = None,
    ) -> ProfileSnapshot:
        profile_key = ProfileKey(key) if key else new_profile_key()
        return await self.store.create(profile_key, payload, owner_id)

    async def load_profile(
        self, key: str, viewer_id: ViewerId,
    ) -> ProfileSnapshot:
        """Lookup, record one interaction, return the post-increment profile."""
        profile_key = ProfileKey(key)
        await self.store.get(profile_key)
        return await self.recorder.record(profile_key, viewer_id)

    async def profile_stats(self, key: str) -> ProfileSnapshot:
        return await self.store.get(ProfileKey(key))

    async def list_owned_profiles(self, owner_id: str) -> list[ProfileSnapshot]:
        profiles = await self.store.list_by_owner(owner_id)
        logger.info(f"{len(profiles)} profiles listed for owner")
        return profiles

    async def viewer_record(self, key: str, viewer_id: ViewerId) -> ViewerRecord:
        return await self.store.get_viewer(ProfileKey(key), viewer_id)

    def share_url(self, key: str) -> str:
        return self.share_url_template.format(key=key)
