from __future__ import annotations

import asyncio

import pytest

from helpers import make_module

from blitz_quiz.game.scoring import ScoringRules
from blitz_quiz.game.session import GameSession, SessionPhase
from blitz_quiz.game.timer import CountdownTimer

TICK = 0.01


def test_timer_ticks_with_token():
    ticks: list[int] = []

    async def scenario():
        timer = CountdownTimer(ticks.append, interval=TICK)
        timer.start(7)
        await asyncio.sleep(TICK * 10)
        timer.cancel()
        count = len(ticks)
        await asyncio.sleep(TICK * 3)
        return timer, count

    timer, count = asyncio.run(scenario())
    assert count >= 1
    assert len(ticks) == count
    assert set(ticks) == {7}
    assert timer.running is False
    assert timer.token is None


def test_restart_cancels_previous_countdown():
    ticks: list[int] = []

    async def scenario():
        timer = CountdownTimer(ticks.append, interval=TICK)
        timer.start(0)
        timer.start(1)
        await asyncio.sleep(TICK * 10)
        timer.cancel()

    asyncio.run(scenario())
    assert ticks
    assert set(ticks) == {1}


def test_start_requires_running_loop():
    timer = CountdownTimer(lambda token: None, interval=TICK)
    with pytest.raises(RuntimeError):
        timer.start(0)


def test_cancel_without_start_is_noop():
    timer = CountdownTimer(lambda token: None)
    timer.cancel()
    assert timer.running is False


def _fast_rules() -> ScoringRules:
    return ScoringRules(seconds_per_question=3, base_points=1000, max_time_bonus=500)


def test_session_times_out_on_its_own():
    async def scenario():
        session = GameSession(
            make_module((1, 2)), rules=_fast_rules(), tick_interval=TICK
        )
        session.start()
        assert session.countdown_running
        await asyncio.sleep(TICK * 20)
        return session

    session = asyncio.run(scenario())
    assert session.phase is SessionPhase.FEEDBACK
    assert session.time_left == 0
    assert session.selected_index is None
    assert session.points_earned == 0
    assert session.countdown_running is False


def test_answer_stops_countdown():
    async def scenario():
        session = GameSession(
            make_module((1, 2)), rules=_fast_rules(), tick_interval=TICK
        )
        session.start()
        session.select_answer(1)
        frozen = session.time_left
        await asyncio.sleep(TICK * 20)
        return session, frozen

    session, frozen = asyncio.run(scenario())
    assert session.countdown_running is False
    assert session.time_left == frozen == 3
    assert session.points_earned == 1500
    assert session.phase is SessionPhase.FEEDBACK


def test_advance_restarts_countdown_for_next_question():
    async def scenario():
        session = GameSession(
            make_module((1, 2)), rules=_fast_rules(), tick_interval=TICK
        )
        session.start()
        session.select_answer(1)
        session.advance()
        assert session.time_left == 3
        assert session.countdown_running
        await asyncio.sleep(TICK * 20)
        return session

    session = asyncio.run(scenario())
    assert session.question_index == 1
    assert session.phase is SessionPhase.FEEDBACK
    assert session.score == 1500


def test_stale_tick_is_dropped():
    session = GameSession(make_module((1, 2)), auto_countdown=False)
    session.start()
    session.select_answer(1)
    session.advance()
    session._on_timer_tick(0)
    assert session.time_left == 15


def test_close_cancels_countdown():
    async def scenario():
        session = GameSession(
            make_module((1,)), rules=_fast_rules(), tick_interval=TICK
        )
        session.start()
        session.close()
        await asyncio.sleep(TICK * 20)
        return session

    session = asyncio.run(scenario())
    assert session.phase is SessionPhase.ACTIVE
    assert session.time_left == 3


def test_failing_tick_handler_keeps_counting():
    ticks: list[int] = []

    def on_tick(token: int) -> None:
        ticks.append(token)
        if len(ticks) == 1:
            raise RuntimeError("listener blew up")

    async def scenario():
        timer = CountdownTimer(on_tick, interval=TICK)
        timer.start(3)
        await asyncio.sleep(TICK * 10)
        running = timer.running
        timer.cancel()
        return running

    assert asyncio.run(scenario()) is True
    assert len(ticks) >= 2


def test_failing_listener_does_not_stall_timeout():
    def broken_listener(snapshot) -> None:
        raise RuntimeError("render failed")

    async def scenario():
        session = GameSession(
            make_module((1,)), rules=_fast_rules(), tick_interval=TICK
        )
        session.subscribe(broken_listener)
        with pytest.raises(RuntimeError):
            session.start()
        await asyncio.sleep(TICK * 20)
        return session

    session = asyncio.run(scenario())
    assert session.phase is SessionPhase.FEEDBACK
    assert session.time_left == 0
    assert session.countdown_running is False
