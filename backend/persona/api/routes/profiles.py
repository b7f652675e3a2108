"""Profile Routes — create, load (recording an interaction), and read-only views.

Invariants:
    - GET /{key} records exactly one interaction and returns post-increment counters
    - GET /{key}/stats, GET /{key}/viewers/me and GET "" never record interactions
    - POST "" and GET "" require an authenticated principal
    - Domain errors propagate to the global PersonaError handler unchanged

Design Decisions:
    - Thin handlers: all behaviour lives in ProfileService
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from persona.api.dependencies import (
    get_profile_service, get_viewer_id, require_principal,
)
from persona.core.domain_types import ViewerId
from persona.schemas.profile import (
    PROFILE_KEY_PATTERN, ProfileCreate, ProfileCreated, ProfileList,
    ProfileResponse, ProfileStats, ViewerRecordResponse,
)
from persona.services.profile_service import ProfileService

router = APIRouter(prefix="/api/v1/profiles", tags=["profiles"])

ProfileKeyPath = Annotated[str, Path(pattern=PROFILE_KEY_PATTERN)]


@router.post(
    "", response_model=ProfileCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_profile(
    body: ProfileCreate,
    owner_id: ViewerId = Depends(require_principal("create a profile")),
    service: ProfileService = Depends(get_profile_service),
):
    """Create a profile owned by the calling principal."""
    profile = await service.create_profile(
        body.payload, owner_id=owner_id, key=body.key,
    )
    return ProfileCreated(
        key=profile.key, share_url=service.share_url(profile.key),
    )


@router.get("", response_model=ProfileList)
async def list_owned_profiles(
    owner_id: ViewerId = Depends(require_principal("list owned profiles")),
    service: ProfileService = Depends(get_profile_service),
):
    """Profiles created by the calling principal. Records no interactions."""
    profiles = await service.list_owned_profiles(owner_id)
    return ProfileList(
        profiles=[ProfileResponse.from_snapshot(p) for p in profiles],
    )


@router.get("/{key}", response_model=ProfileResponse)
async def load_profile(
    key: ProfileKeyPath,
    viewer_id: ViewerId = Depends(get_viewer_id),
    service: ProfileService = Depends(get_profile_service),
):
    """Load a profile and record the interaction."""
    profile = await service.load_profile(key, viewer_id)
    return ProfileResponse.from_snapshot(profile)


@router.get("/{key}/stats", response_model=ProfileStats)
async def profile_stats(
    key: ProfileKeyPath,
    service: ProfileService = Depends(get_profile_service),
):
    """Interaction counters without recording an interaction."""
    profile = await service.profile_stats(key)
    return ProfileStats.from_snapshot(profile)


@router.get("/{key}/viewers/me", response_model=ViewerRecordResponse)
async def my_viewer_record(
    key: ProfileKeyPath,
    viewer_id: ViewerId = Depends(require_principal("read a viewer record")),
    service: ProfileService = Depends(get_profile_service),
):
    """When the calling principal was first counted against this profile."""
    record = await service.viewer_record(key, viewer_id)
    return ViewerRecordResponse.from_record(record)
