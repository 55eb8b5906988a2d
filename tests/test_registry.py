# Area: Registry Tests
"""Tests for the player registry, leaderboard and pair registry."""

import asyncio

import pytest

from victordle._registry import PairRegistry, PlayerRegistry
from victordle.errors import AmbiguousUsernameError, PlayerNotFoundError


class TestPlayerUpsert:
    """Tests for PlayerRegistry.upsert()."""

    def test_creates_with_zero_score(self, memory_store, clock):
        registry = PlayerRegistry(memory_store)
        asyncio.run(registry.upsert("u1", "victor"))
        player = asyncio.run(registry.get("u1"))
        assert player.username == "victor"
        assert player.score == 0
        assert player.created_at == clock.now
        assert player.last_active == clock.now

    def test_upsert_is_idempotent_for_score(self, memory_store, clock):
        registry = PlayerRegistry(memory_store)

        async def run():
            await registry.upsert("u1", "victor")
            await registry.increment_score("u1", 10)
            clock.advance(60)
            await registry.upsert("u1", "victor2")
            return await registry.get("u1")

        player = asyncio.run(run())
        assert player.score == 10
        assert player.username == "victor2"
        assert player.last_active == player.created_at + 60

    def test_unknown_player_is_none(self, memory_store):
        assert asyncio.run(PlayerRegistry(memory_store).get("ghost")) is None


class TestIncrementScore:
    """Tests for score increments by id and by username."""

    def test_increment_by_id(self, memory_store):
        registry = PlayerRegistry(memory_store)

        async def run():
            await registry.upsert("u1", "victor")
            await asyncio.gather(*(registry.increment_score("u1", 10) for _ in range(3)))
            return await registry.get("u1")

        assert asyncio.run(run()).score == 30

    def test_increment_unknown_id_raises(self, memory_store):
        with pytest.raises(PlayerNotFoundError):
            asyncio.run(PlayerRegistry(memory_store).increment_score("ghost", 1))

    def test_negative_delta_rejected(self, memory_store):
        with pytest.raises(ValueError):
            asyncio.run(PlayerRegistry(memory_store).increment_score("u1", -1))

    def test_increment_by_username(self, memory_store):
        registry = PlayerRegistry(memory_store)

        async def run():
            await registry.upsert("u1", "victor")
            await registry.upsert("u2", "other")
            credited = await registry.increment_score_by_username("victor", 10)
            return credited, await registry.get("u1"), await registry.get("u2")

        credited, u1, u2 = asyncio.run(run())
        assert credited == "u1"
        assert u1.score == 10
        assert u2.score == 0

    def test_username_without_match_raises(self, memory_store):
        with pytest.raises(PlayerNotFoundError) as exc_info:
            asyncio.run(PlayerRegistry(memory_store).increment_score_by_username("nobody", 1))
        assert exc_info.value.by == "username"

    def test_ambiguous_username_raises(self, memory_store):
        registry = PlayerRegistry(memory_store)

        async def run():
            await registry.upsert("u1", "victor")
            await registry.upsert("u2", "victor")
            await registry.increment_score_by_username("victor", 10)

        with pytest.raises(AmbiguousUsernameError) as exc_info:
            asyncio.run(run())
        assert sorted(exc_info.value.player_ids) == ["u1", "u2"]


class TestLeaderboard:
    """Tests for top_players() and subscribe_to_leaderboard()."""

    def test_top_players_by_score(self, memory_store):
        registry = PlayerRegistry(memory_store)

        async def run():
            for pid, score in (("u1", 5), ("u2", 20), ("u3", 10)):
                await registry.upsert(pid, pid)
                await registry.increment_score(pid, score)
            return await registry.top_players(limit=2)

        assert [p.id for p in asyncio.run(run())] == ["u2", "u3"]

    def test_subscription_follows_scores(self, memory_store):
        boards = []

        async def run():
            registry = PlayerRegistry(memory_store)
            await registry.upsert("u1", "a")
            await registry.upsert("u2", "b")
            dispose = await registry.subscribe_to_leaderboard(boards.append)
            await asyncio.sleep(0.02)
            await registry.increment_score("u2", 10)
            await asyncio.sleep(0.02)
            dispose()

        asyncio.run(run())
        assert boards[-1][0].id == "u2"
        assert boards[-1][0].score == 10


class TestPairRegistry:
    """Tests for in-person pairing challenges."""

    def test_create_and_get(self, memory_store, clock):
        pairs = PairRegistry(memory_store)

        async def run():
            await pairs.create_pair("u1", "u2")
            return await pairs.get_current_pair("u1")

        pair = asyncio.run(run())
        assert pair.target_id == "u2"
        assert pair.timestamp == clock.now
        assert pair.completed is False

    def test_scanning_target_completes(self, memory_store):
        pairs = PairRegistry(memory_store)

        async def run():
            await pairs.create_pair("u1", "u2")
            ok = await pairs.verify_and_complete_pair("u1", "u2")
            again = await pairs.verify_and_complete_pair("u1", "u2")
            return ok, again, await pairs.get_current_pair("u1")

        ok, again, pair = asyncio.run(run())
        assert ok is True
        assert again is False
        assert pair.completed is True

    def test_scanning_wrong_target_fails(self, memory_store):
        pairs = PairRegistry(memory_store)

        async def run():
            await pairs.create_pair("u1", "u2")
            return await pairs.verify_and_complete_pair("u1", "u3")

        assert asyncio.run(run()) is False

    def test_no_pair_fails_and_remove(self, memory_store):
        pairs = PairRegistry(memory_store)

        async def run():
            missing = await pairs.verify_and_complete_pair("u1", "u2")
            await pairs.create_pair("u1", "u2")
            await pairs.remove_pair("u1")
            return missing, await pairs.get_current_pair("u1")

        assert asyncio.run(run()) == (False, None)
