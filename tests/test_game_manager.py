# Area: Session Tests
"""Tests for game session creation and the turn submission protocol."""

import asyncio
import random

import pytest

from conftest import fast_config
from victordle._registry import PlayerRegistry
from victordle._session import GameManager, GuessOutcome
from victordle.config import ExhaustedRewardPolicy
from victordle.errors import GameFinishedError, InvalidGuessError, NotYourTurnError
from victordle.models import GameStatus, GuessColor

G, X = GuessColor.GREEN, GuessColor.GRAY

MISSES = ["CLASS", "GHOST", "PLANT", "BRAVE", "CRANE", "FLAME"]


def make_manager(store, **config_overrides):
    config = fast_config(**config_overrides)
    registry = PlayerRegistry(store, config.players_collection)
    return GameManager(store, registry, config, words=["CHESS"], rng=random.Random(1)), registry


async def new_game(games, registry):
    await registry.upsert("u1", "victor")
    await registry.upsert("u2", "rival")
    return await games.create_game("match_1", "u1", "u2")


class TestCreateGame:
    """Tests for GameManager.create_game()."""

    def test_initial_session(self, memory_store, clock):
        games, registry = make_manager(memory_store)
        session = asyncio.run(new_game(games, registry))
        assert session.word == "CHESS"
        assert session.current_turn == "u1"
        assert session.status == GameStatus.WAITING
        assert session.last_move_timestamp == clock.now
        assert session.players["u1"].username == "victor"
        assert session.players["u2"].guesses == []
        assert session.players["u2"].score == 0

    def test_stored_and_readable(self, memory_store):
        games, registry = make_manager(memory_store)

        async def run():
            created = await new_game(games, registry)
            return created, await games.get_game("match_1")

        created, loaded = asyncio.run(run())
        assert loaded == created

    def test_unknown_players_have_blank_names(self, memory_store):
        games, _ = make_manager(memory_store)
        session = asyncio.run(games.create_game("match_1", "x", "y"))
        assert session.players["x"].username == ""

    def test_missing_game_is_none(self, memory_store):
        games, _ = make_manager(memory_store)
        assert asyncio.run(games.get_game("nope")) is None

    def test_bad_word_list_rejected(self, memory_store):
        registry = PlayerRegistry(memory_store)
        with pytest.raises(ValueError):
            GameManager(memory_store, registry, words=["CHESS", "TOOLONG"])
        with pytest.raises(ValueError):
            GameManager(memory_store, registry, words=[])


class TestSubmitGuess:
    """Tests for the turn submission protocol."""

    def test_miss_passes_turn_and_activates(self, memory_store):
        games, registry = make_manager(memory_store)

        async def run():
            session = await new_game(games, registry)
            result = await games.submit_guess(session, "u1", "class")
            return result, await games.get_game("match_1")

        result, stored = asyncio.run(run())
        assert result.outcome == GuessOutcome.CONTINUE
        assert result.guess.word == "CLASS"
        assert result.guess.colors == [G, X, X, G, G]
        assert stored.current_turn == "u2"
        assert stored.status == GameStatus.ACTIVE
        assert [g.word for g in stored.guesses_of("u1")] == ["CLASS"]
        assert stored == result.session

    def test_not_your_turn_rejected(self, memory_store):
        games, registry = make_manager(memory_store)

        async def run():
            session = await new_game(games, registry)
            await games.submit_guess(session, "u2", "CLASS")

        with pytest.raises(NotYourTurnError):
            asyncio.run(run())

    @pytest.mark.parametrize("word", ["CLAS", "CLASSY", "CL4SS", ""])
    def test_malformed_word_rejected(self, memory_store, word):
        games, registry = make_manager(memory_store)

        async def run():
            session = await new_game(games, registry)
            await games.submit_guess(session, "u1", word)

        with pytest.raises(InvalidGuessError):
            asyncio.run(run())

    def test_win_finishes_and_awards_bonus(self, memory_store):
        games, registry = make_manager(memory_store)

        async def run():
            session = await new_game(games, registry)
            session = (await games.submit_guess(session, "u1", "CLASS")).session
            result = await games.submit_guess(session, "u2", "CHESS")
            return result, await registry.get("u1"), await registry.get("u2")

        result, u1, u2 = asyncio.run(run())
        assert result.outcome == GuessOutcome.WON
        assert result.session.status == GameStatus.FINISHED
        assert result.session.current_turn == "u2"
        assert u2.score == 10
        assert u1.score == 0

    def test_six_misses_finish_and_block_further_guesses(self, memory_store):
        games, registry = make_manager(memory_store)

        async def run():
            session = await new_game(games, registry)
            results = []
            for i in range(6):
                results.append(await games.submit_guess(session, "u1", MISSES[i]))
                session = results[-1].session
                if i < 5:
                    session = (await games.submit_guess(session, "u2", MISSES[i])).session
            stored = await games.get_game("match_1")
            with pytest.raises(GameFinishedError):
                await games.submit_guess(stored, "u2", "CHESS")
            with pytest.raises(GameFinishedError):
                await games.submit_guess(stored, "u1", "CHESS")
            return results, stored, await registry.get("u1")

        results, stored, u1 = asyncio.run(run())
        assert [r.outcome for r in results[:5]] == [GuessOutcome.CONTINUE] * 5
        assert results[5].outcome == GuessOutcome.EXHAUSTED
        assert stored.status == GameStatus.FINISHED
        assert len(stored.guesses_of("u1")) == 6
        assert u1.score == 0

    def test_consolation_policy_rewards_both(self, memory_store):
        games, registry = make_manager(
            memory_store,
            max_guesses=1,
            exhausted_reward_policy=ExhaustedRewardPolicy.CONSOLATION,
            consolation_points=2,
        )

        async def run():
            session = await new_game(games, registry)
            result = await games.submit_guess(session, "u1", "CLASS")
            return result, await registry.get("u1"), await registry.get("u2")

        result, u1, u2 = asyncio.run(run())
        assert result.outcome == GuessOutcome.EXHAUSTED
        assert (u1.score, u2.score) == (2, 2)

    def test_turn_pointer_always_a_participant(self, memory_store):
        games, registry = make_manager(memory_store)

        async def run():
            session = await new_game(games, registry)
            turns = [session.current_turn]
            for word in MISSES[:4]:
                session = (await games.submit_guess(session, session.current_turn, word)).session
                turns.append(session.current_turn)
            return turns

        turns = asyncio.run(run())
        assert turns == ["u1", "u2", "u1", "u2", "u1"]


class TestPassTurn:
    """Tests for pass_turn() after a timeout."""

    def test_pass_turn_flips(self, memory_store, clock):
        games, registry = make_manager(memory_store)

        async def run():
            session = await new_game(games, registry)
            clock.advance(10)
            updates = await games.pass_turn(session)
            return updates, await games.get_game("match_1")

        updates, stored = asyncio.run(run())
        assert updates["currentTurn"] == "u2"
        assert stored.current_turn == "u2"
        assert stored.last_move_timestamp == clock.now
        assert stored.guesses_of("u1") == []

    def test_pass_turn_on_finished_game_is_noop(self, memory_store):
        games, registry = make_manager(memory_store)

        async def run():
            session = await new_game(games, registry)
            finished = (await games.submit_guess(session, "u1", "CHESS")).session
            return await games.pass_turn(finished), await games.get_game("match_1")

        updates, stored = asyncio.run(run())
        assert updates is None
        assert stored.current_turn == "u1"


class TestSubscribeToGame:
    """Tests for subscribe_to_game()."""

    def test_not_invoked_before_creation(self, memory_store):
        games, registry = make_manager(memory_store)
        seen = []

        async def run():
            dispose = await games.subscribe_to_game("match_1", seen.append)
            await asyncio.sleep(0.02)
            before = len(seen)
            session = await new_game(games, registry)
            await asyncio.sleep(0.02)
            await games.submit_guess(session, "u1", "CLASS")
            await asyncio.sleep(0.02)
            dispose()
            return before

        before = asyncio.run(run())
        assert before == 0
        assert [s.current_turn for s in seen] == ["u1", "u2"]
