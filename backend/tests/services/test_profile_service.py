"""Profile Service — verifies creation, loading with interaction tracking, and read-only views.

Invariants:
    - create_profile: counters start at 0, key generated when not supplied
    - load_profile returns the post-increment snapshot
    - stats / owned listing / viewer record never count an interaction
"""

import pytest

from persona.core.domain_types import ViewerId
from persona.core.errors import ProfileAlreadyExistsError, ResourceNotFoundError
from persona.services.profile_service import ProfileService, new_profile_key


@pytest.fixture
def service(store, recorder):
    return ProfileService(
        store, recorder,
        share_url_template="https://invitepage.netlify.app/?roomId={key}",
    )


def test_new_profile_key_is_opaque_hex():
    key = new_profile_key()
    assert len(key) == 32
    assert int(key, 16) >= 0
    assert new_profile_key() != key


async def test_create_generates_key_when_missing(service):
    profile = await service.create_profile({"name": "lamp"}, owner_id="o1")
    assert len(profile.key) == 32
    assert (profile.total_interactions, profile.unique_viewers) == (0, 0)


async def test_create_keeps_explicit_key(service):
    profile = await service.create_profile({"name": "lamp"}, key="lamp-1")
    assert profile.key == "lamp-1"


async def test_create_duplicate_explicit_key_conflicts(service):
    await service.create_profile({}, key="lamp-1")
    with pytest.raises(ProfileAlreadyExistsError):
        await service.create_profile({}, key="lamp-1")


async def test_load_returns_post_increment_counters(service):
    await service.create_profile({"name": "lamp"}, key="p1")

    first = await service.load_profile("p1", ViewerId("u1"))
    second = await service.load_profile("p1", ViewerId("u2"))

    assert (first.total_interactions, first.unique_viewers) == (1, 1)
    assert (second.total_interactions, second.unique_viewers) == (2, 2)
    assert second.payload == {"name": "lamp"}


async def test_load_missing_profile_raises_not_found(service):
    with pytest.raises(ResourceNotFoundError):
        await service.load_profile("missing", ViewerId("u1"))


async def test_stats_do_not_count(service):
    await service.create_profile({}, key="p1")
    await service.load_profile("p1", ViewerId("u1"))

    await service.profile_stats("p1")
    stats = await service.profile_stats("p1")

    assert (stats.total_interactions, stats.unique_viewers) == (1, 1)


async def test_list_owned_profiles_does_not_count(service):
    await service.create_profile({}, owner_id="o1", key="p1")
    await service.create_profile({}, owner_id="o2", key="p2")

    owned = await service.list_owned_profiles("o1")

    assert [p.key for p in owned] == ["p1"]
    assert owned[0].total_interactions == 0


async def test_viewer_record_after_load(service):
    await service.create_profile({}, key="p1")
    await service.load_profile("p1", ViewerId("u1"))

    record = await service.viewer_record("p1", ViewerId("u1"))

    assert record.viewer_id == "u1"
    assert (await service.profile_stats("p1")).total_interactions == 1


def test_share_url_substitutes_key(service):
    assert service.share_url("abc") == "https://invitepage.netlify.app/?roomId=abc"
