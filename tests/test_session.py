"""
Tests for snakegame.session - lifecycle transitions and the controller.
"""

import random

from snakegame.config import UP, DOWN, LEFT, RIGHT, Config
from snakegame.game import RunState
from snakegame.session import (
    Idle,
    Countdown,
    Playing,
    GameOver,
    TimerSchedule,
    SessionController,
    set_player_name,
    can_start,
    start_game,
    advance_countdown,
    on_tick,
    on_direction_input,
    reset_to_playing,
    return_to_idle,
    timer_schedule,
)


def playing(snake=((10, 10),), food=(0, 0), direction=RIGHT, score=0, speed_ms=150, name="ana"):
    run = RunState(snake=tuple(snake), food=food, direction=direction, pending=direction,
                   score=score, speed_ms=speed_ms)
    return Playing(player_name=name, run=run)


def assert_fresh_run(run):
    assert run.snake == ((10, 10),)
    assert run.direction == RIGHT
    assert run.score == 0
    assert run.speed_ms == 150
    assert run.alive is True
    assert run.food not in run.snake


class TestPlayerName:

    def test_name_is_trimmed(self):
        assert set_player_name(Idle(), "  ana \n") == Idle("ana")

    def test_blank_name_cannot_start(self):
        state = set_player_name(Idle(), "   ")
        assert not can_start(state)
        assert start_game(state) is state

    def test_name_ignored_outside_idle(self):
        state = Countdown("ana", 2)
        assert set_player_name(state, "bob") is state


class TestCountdown:

    def test_start_enters_countdown_at_three(self):
        assert start_game(Idle("ana")) == Countdown("ana", 3)

    def test_start_uses_configured_seconds(self):
        assert start_game(Idle("ana"), Config(countdown_seconds=5)) == Countdown("ana", 5)

    def test_start_ignored_while_counting(self):
        state = Countdown("ana", 2)
        assert start_game(state) is state

    def test_three_advances_start_a_run(self):
        rng = random.Random(0)
        state = start_game(Idle("ana"))
        state = advance_countdown(state, rng)
        assert state == Countdown("ana", 2)
        state = advance_countdown(state, rng)
        assert state == Countdown("ana", 1)
        state = advance_countdown(state, rng)
        assert isinstance(state, Playing)
        assert state.player_name == "ana"
        assert_fresh_run(state.run)

    def test_advance_ignored_outside_countdown(self):
        for state in (Idle("ana"), playing(), GameOver("ana", 3, playing().run)):
            assert advance_countdown(state) is state


class TestPlaying:

    def test_tick_moves_the_snake(self):
        state = on_tick(playing(), random.Random(0))
        assert isinstance(state, Playing)
        assert state.run.snake == ((11, 10),)

    def test_death_goes_to_game_over(self):
        state = playing(snake=[(19, 4)], score=7)
        after = on_tick(state)
        assert isinstance(after, GameOver)
        assert after.player_name == "ana"
        assert after.final_score == 7
        assert after.run.snake == ((19, 4),)

    def test_tick_ignored_outside_playing(self):
        for state in (Idle("ana"), Countdown("ana", 2), GameOver("ana", 1, playing().run)):
            assert on_tick(state) is state

    def test_direction_change_is_staged(self):
        state = on_direction_input(playing(), UP)
        assert state.run.pending == UP
        assert state.run.direction == RIGHT
        assert state.run.snake == ((10, 10),)

    def test_reversal_is_ignored(self):
        state = playing()
        assert on_direction_input(state, LEFT) is state

    def test_quick_double_turn_cannot_reverse(self):
        """UP then LEFT within one tick while heading RIGHT keeps UP."""
        state = on_direction_input(playing(), UP)
        state = on_direction_input(state, LEFT)
        assert state.run.pending == UP
        state = on_tick(state, random.Random(0))
        assert state.run.snake[0] == (10, 9)

    def test_reversal_after_staged_turn_is_a_no_op(self):
        staged = on_direction_input(playing(), DOWN)
        assert on_direction_input(staged, LEFT) is staged

    def test_staged_turn_can_be_replaced_by_another_legal_turn(self):
        state = on_direction_input(playing(), UP)
        state = on_direction_input(state, DOWN)
        assert state.run.pending == DOWN
        state = on_direction_input(state, RIGHT)
        assert state.run.pending == RIGHT

    def test_unknown_input_is_ignored(self):
        state = playing()
        assert on_direction_input(state, "UP") is state
        assert on_direction_input(state, None) is state

    def test_direction_ignored_outside_playing(self):
        state = Idle("ana")
        assert on_direction_input(state, DOWN) is state


class TestGameOver:

    def test_reset_replays_without_countdown(self):
        over = GameOver("ana", 12, playing(snake=[(19, 4)]).run)
        state = reset_to_playing(over, random.Random(0))
        assert isinstance(state, Playing)
        assert state.player_name == "ana"
        assert_fresh_run(state.run)

    def test_reset_ignored_outside_game_over(self):
        state = Idle("ana")
        assert reset_to_playing(state) is state

    def test_return_to_idle_keeps_name(self):
        over = GameOver("ana", 2, playing().run)
        assert return_to_idle(over) == Idle("ana")

    def test_return_to_idle_can_clear_name(self):
        over = GameOver("ana", 2, playing().run)
        assert return_to_idle(over, Config(clear_name_on_idle=True)) == Idle("")

    def test_start_ignored_from_game_over(self):
        over = GameOver("ana", 2, playing().run)
        assert start_game(over) is over


class TestTimerSchedule:

    def test_only_countdown_timer_in_countdown(self):
        assert timer_schedule(Countdown("ana", 3)) == TimerSchedule(countdown_ms=1000, tick_ms=0)

    def test_tick_timer_follows_speed(self):
        assert timer_schedule(playing(speed_ms=120)) == TimerSchedule(countdown_ms=0, tick_ms=120)

    def test_everything_stopped_otherwise(self):
        assert timer_schedule(Idle("ana")) == TimerSchedule(0, 0)
        assert timer_schedule(GameOver("ana", 0, playing().run)) == TimerSchedule(0, 0)


class TestSessionController:

    def test_full_session(self):
        session = SessionController(Config(seed=3))
        session.set_player_name(" ana ")
        assert session.can_start()
        session.start_game()
        assert session.timers().countdown_ms == 1000
        for _ in range(3):
            session.advance_countdown()
        assert isinstance(session.state, Playing)
        assert session.timers() == TimerSchedule(tick_ms=150)

        session.on_direction_input(UP)
        while isinstance(session.state, Playing):
            session.on_tick()
        assert isinstance(session.state, GameOver)
        assert session.timers() == TimerSchedule()

        session.reset_to_playing()
        assert isinstance(session.state, Playing)
        assert session.state.player_name == "ana"

    def test_listeners_see_changes_only(self):
        session = SessionController(rng=random.Random(0))
        seen = []
        unsubscribe = session.subscribe(seen.append)

        session.on_tick()                  # ignored in Idle
        assert seen == []

        session.set_player_name("ana")
        session.start_game()
        assert seen == [Idle("ana"), Countdown("ana", 3)]

        unsubscribe()
        session.advance_countdown()
        assert len(seen) == 2

    def test_same_seed_same_food(self):
        a = SessionController(Config(seed=42), state=Countdown("ana", 1))
        b = SessionController(Config(seed=42), state=Countdown("ana", 1))
        assert a.advance_countdown().run.food == b.advance_countdown().run.food

    def test_wall_run_then_back_to_idle(self):
        session = SessionController(state=playing(snake=[(19, 10)]))
        session.on_tick()
        assert session.state == GameOver("ana", 0, session.state.run)
        session.return_to_idle()
        assert session.state == Idle("ana")
        assert session.can_start()
