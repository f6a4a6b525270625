"""Unit tests for the profile cache implementations."""

from pathlib import Path

from domain.entities.user import JoinedEvent, UserProfile
from infrastructure.cache.profile_cache import InMemoryProfileCache, JsonFileProfileCache


def _profile(user_id: str = "sub-1") -> UserProfile:
    return UserProfile(
        user_id=user_id,
        name="sam",
        email="sam@example.com",
        preferences={"genres": ["indie"]},
        joined_events=[JoinedEvent(event_id="8", name="Gig", joined_at="2024-01-01T00:00:00.000Z")],
        created_at="2024-01-01T00:00:00.000Z",
    )


class TestInMemoryProfileCache:
    async def test_miss_returns_none(self):
        assert await InMemoryProfileCache().get("nobody") is None

    async def test_put_then_get(self):
        cache = InMemoryProfileCache()
        await cache.put(_profile())

        assert await cache.get("sub-1") == _profile()

    async def test_returned_copies_are_independent(self):
        cache = InMemoryProfileCache()
        await cache.put(_profile())

        first = await cache.get("sub-1")
        first.preferences["genres"].append("pop")

        assert (await cache.get("sub-1")).preferences == {"genres": ["indie"]}

    async def test_invalidate(self):
        cache = InMemoryProfileCache()
        await cache.put(_profile())
        await cache.invalidate("sub-1")
        await cache.invalidate("never-there")

        assert await cache.get("sub-1") is None


class TestJsonFileProfileCache:
    async def test_round_trips_through_disk(self, tmp_path: Path):
        cache = JsonFileProfileCache(tmp_path / "profiles")
        await cache.put(_profile())

        # A new instance sees the entry, as after a restart
        reopened = JsonFileProfileCache(tmp_path / "profiles")
        assert await reopened.get("sub-1") == _profile()

    async def test_miss_returns_none(self, tmp_path: Path):
        assert await JsonFileProfileCache(tmp_path).get("sub-1") is None

    async def test_put_overwrites(self, tmp_path: Path):
        cache = JsonFileProfileCache(tmp_path)
        await cache.put(_profile())
        await cache.put(_profile().with_changes(name="renamed"))

        assert (await cache.get("sub-1")).name == "renamed"

    async def test_invalidate_removes_file(self, tmp_path: Path):
        cache = JsonFileProfileCache(tmp_path)
        await cache.put(_profile())
        await cache.invalidate("sub-1")

        assert await cache.get("sub-1") is None
        assert list(tmp_path.glob("*.json")) == []

    async def test_corrupt_entry_is_a_miss(self, tmp_path: Path):
        cache = JsonFileProfileCache(tmp_path)
        await cache.put(_profile())
        [path] = tmp_path.glob("*.json")
        path.write_bytes(b"{not json")

        assert await cache.get("sub-1") is None
        assert not path.exists()

    async def test_unsafe_key_stays_inside_directory(self, tmp_path: Path):
        cache = JsonFileProfileCache(tmp_path / "c")
        await cache.put(_profile("../escape"))

        assert (await cache.get("../escape")).user_id == "../escape"
        assert not (tmp_path / "escape.json").exists()
        assert len(list((tmp_path / "c").glob("*.json"))) == 1

    async def test_similar_keys_do_not_collide(self, tmp_path: Path):
        cache = JsonFileProfileCache(tmp_path)
        await cache.put(_profile("a/b").with_changes(name="slash"))
        await cache.put(_profile("a_b").with_changes(name="underscore"))

        assert (await cache.get("a/b")).name == "slash"
        assert (await cache.get("a_b")).name == "underscore"
        assert len(list(tmp_path.glob("*.json"))) == 2
