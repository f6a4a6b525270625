"""End-to-end profile sync against the real routes and an in-memory store."""

from typing import Any

import pytest
from httpx import ASGITransport

from domain.entities.user import JoinedEvent
from domain.services.profile_sync_service import ProfileSyncService
from infrastructure.cache.profile_cache import InMemoryProfileCache
from infrastructure.http.user_api_client import UserApiClient
from tests.conftest import TEST_USER_ID

EMAIL = "test@example.com"


@pytest.fixture
def api_client(api_app: Any) -> UserApiClient:
    return UserApiClient(
        token="ignored-by-override",
        base_url="http://test/api/v1",
        timeout=5.0,
        transport=ASGITransport(app=api_app),
    )


@pytest.fixture
def cache() -> InMemoryProfileCache:
    return InMemoryProfileCache()


@pytest.fixture
def sync(api_client: UserApiClient, cache: InMemoryProfileCache) -> ProfileSyncService:
    return ProfileSyncService(api_client, cache, TEST_USER_ID, EMAIL)


class TestProfileSyncFlow:
    @pytest.mark.asyncio
    async def test_signup_setup_creates_the_record(
        self, sync: ProfileSyncService, api_client: UserApiClient, cache: InMemoryProfileCache
    ):
        await sync.setup_profile("Test Fan", ["metal"], location_suggestions=False)

        stored = await api_client.get(TEST_USER_ID)
        assert stored.name == "Test Fan"
        assert stored.email == EMAIL
        assert stored.preferences["genres"] == ["metal"]
        assert stored.preferences["locationSuggestions"] is False

        fresh = ProfileSyncService(api_client, cache, TEST_USER_ID, EMAIL)
        assert (await fresh.load()).name == "Test Fan"
        assert not fresh.is_default

    @pytest.mark.asyncio
    async def test_lookup_by_email_with_reserved_characters(
        self, api_client: UserApiClient, cache: InMemoryProfileCache
    ):
        email = "fan?club@example.com"
        await ProfileSyncService(api_client, cache, TEST_USER_ID, email).setup_profile(
            "Club", ["rock"]
        )

        stored = await api_client.get(email)

        assert stored.user_id == TEST_USER_ID
        assert stored.email == email

    @pytest.mark.asyncio
    async def test_first_edit_creates_the_record(
        self, sync: ProfileSyncService, api_client: UserApiClient
    ):
        profile = await sync.load()
        assert sync.is_default
        assert profile.name == "test"

        await sync.update_details(bio="Front row regular")

        stored = await api_client.get(TEST_USER_ID)
        assert stored.bio == "Front row regular"
        assert stored.email == EMAIL
        assert stored.preferences["emailNotifications"] is True

    @pytest.mark.asyncio
    async def test_edits_preserve_untouched_fields(
        self, sync: ProfileSyncService, api_client: UserApiClient
    ):
        await sync.update_details(bio="bio", location="Leeds", website="https://me.example")
        await sync.update_preferences(["rock", "jazz"], False, True, False)
        await sync.update_details(name="Renamed")

        stored = await api_client.get(EMAIL)
        assert stored.name == "Renamed"
        assert stored.location == "Leeds"
        assert stored.website == "https://me.example"
        assert stored.preferences["genres"] == ["rock", "jazz"]
        assert stored.preferences["emailNotifications"] is False

    @pytest.mark.asyncio
    async def test_join_and_leave_events(
        self, sync: ProfileSyncService, api_client: UserApiClient
    ):
        assert await sync.join_event(JoinedEvent(event_id=1, name="Basement Show"))
        assert await sync.join_event(JoinedEvent(event_id=2, name="Park Stage"))
        assert not await sync.join_event(JoinedEvent(event_id=1, name="Basement Show"))

        stored = await api_client.get(TEST_USER_ID)
        assert [e.event_id for e in stored.joined_events] == ["1", "2"]

        assert await sync.leave_event(1)
        stored = await api_client.get(TEST_USER_ID)
        assert [e.event_id for e in stored.joined_events] == ["2"]

    @pytest.mark.asyncio
    async def test_fresh_session_reads_cache_then_store(
        self,
        sync: ProfileSyncService,
        api_client: UserApiClient,
        cache: InMemoryProfileCache,
    ):
        await sync.update_details(bio="cached bio")

        second = ProfileSyncService(api_client, cache, TEST_USER_ID, EMAIL)
        assert (await second.load()).bio == "cached bio"

        third = ProfileSyncService(api_client, InMemoryProfileCache(), TEST_USER_ID, EMAIL)
        assert (await third.load()).bio == "cached bio"
        assert not third.is_default

    @pytest.mark.asyncio
    async def test_delete_account(
        self,
        sync: ProfileSyncService,
        api_client: UserApiClient,
        cache: InMemoryProfileCache,
    ):
        await sync.update_details(bio="to be removed")

        await sync.delete_account()

        assert await cache.get(TEST_USER_ID) is None
        assert sync.snapshot is None
        profile = await sync.load()
        assert sync.is_default
        assert profile.bio is None
