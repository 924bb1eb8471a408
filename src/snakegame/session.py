# session.py

from dataclasses import dataclass, replace
from typing import Callable, List, NamedTuple, Optional, Union
import logging
import random
import threading

from .config import Direction, Config, CFG
from .game import RunState, new_run_state, tick, is_opposite

logger = logging.getLogger(__name__)


# ---------- States ----------
@dataclass(frozen=True)
class Idle:
    player_name: str = ""

@dataclass(frozen=True)
class Countdown:
    player_name: str
    seconds_left: int

@dataclass(frozen=True)
class Playing:
    player_name: str
    run: RunState

@dataclass(frozen=True)
class GameOver:
    player_name: str
    final_score: int
    run: RunState   # last board, drawn under the overlay

SessionState = Union[Idle, Countdown, Playing, GameOver]


def _ignored(state: SessionState, op: str) -> SessionState:
    logger.debug("%s ignored in %s", op, type(state).__name__)
    return state


# ---------- Transitions ----------
def set_player_name(state: SessionState, name: str) -> SessionState:
    if not isinstance(state, Idle):
        return _ignored(state, "set_player_name")
    return Idle(player_name=(name or "").strip())

def can_start(state: SessionState) -> bool:
    return isinstance(state, Idle) and bool(state.player_name)

def start_game(state: SessionState, cfg: Config = CFG) -> SessionState:
    if not can_start(state):
        return _ignored(state, "start_game")
    logger.info("countdown started for %r", state.player_name)
    return Countdown(player_name=state.player_name, seconds_left=cfg.countdown_seconds)

def _begin_run(player_name: str, rng: Optional[random.Random], cfg: Config) -> Playing:
    run = new_run_state(rng, cfg)
    logger.info("run started for %r, food at %s", player_name, run.food)
    return Playing(player_name=player_name, run=run)

def advance_countdown(state: SessionState, rng: Optional[random.Random] = None,
                      cfg: Config = CFG) -> SessionState:
    if not isinstance(state, Countdown):
        return _ignored(state, "advance_countdown")
    if state.seconds_left <= 1:
        return _begin_run(state.player_name, rng, cfg)
    return replace(state, seconds_left=state.seconds_left - 1)

def on_tick(state: SessionState, rng: Optional[random.Random] = None,
            cfg: Config = CFG) -> SessionState:
    if not isinstance(state, Playing):
        return _ignored(state, "on_tick")
    run = tick(state.run, rng, cfg)
    if not run.alive:
        logger.info("game over for %r with score %d", state.player_name, run.score)
        return GameOver(player_name=state.player_name, final_score=run.score, run=run)
    return replace(state, run=run)

def on_direction_input(state: SessionState, requested) -> SessionState:
    if not isinstance(state, Playing):
        return _ignored(state, "on_direction_input")
    if not isinstance(requested, Direction):
        logger.debug("unknown direction input %r", requested)
        return state
    if is_opposite(requested, state.run.direction):
        return _ignored(state, "reversal")
    if requested == state.run.pending:
        return state
    return replace(state, run=replace(state.run, pending=requested))

def reset_to_playing(state: SessionState, rng: Optional[random.Random] = None,
                     cfg: Config = CFG) -> SessionState:
    if not isinstance(state, GameOver):
        return _ignored(state, "reset_to_playing")
    return _begin_run(state.player_name, rng, cfg)

def return_to_idle(state: SessionState, cfg: Config = CFG) -> SessionState:
    if not isinstance(state, GameOver):
        return _ignored(state, "return_to_idle")
    return Idle(player_name="" if cfg.clear_name_on_idle else state.player_name)


# ---------- Timers ----------
class TimerSchedule(NamedTuple):
    """Interval in ms each host timer should run at; 0 means stopped."""
    countdown_ms: int = 0
    tick_ms: int = 0

def timer_schedule(state: SessionState, cfg: Config = CFG) -> TimerSchedule:
    if isinstance(state, Countdown):
        return TimerSchedule(countdown_ms=cfg.countdown_interval_ms)
    if isinstance(state, Playing):
        return TimerSchedule(tick_ms=state.run.speed_ms)
    return TimerSchedule()


# ---------- Controller ----------
Listener = Callable[[SessionState], None]

class SessionController:
    """
    Holds the live SessionState and applies transitions to it one at a time.

    Listeners registered with subscribe() are called with the new state
    after every transition that changed it.
    """

    def __init__(self, cfg: Config = CFG, rng: Optional[random.Random] = None,
                 state: Optional[SessionState] = None):
        self.cfg = cfg
        self.rng = rng if rng is not None else random.Random(cfg.seed)
        self._state: SessionState = state if state is not None else Idle()
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _apply(self, fn, *args) -> SessionState:
        with self._lock:
            prev = self._state
            new = fn(prev, *args)
            self._state = new
        if new is not prev:
            for listener in list(self._listeners):
                listener(new)
        return new

    def can_start(self) -> bool:
        return can_start(self._state)

    def timers(self) -> TimerSchedule:
        return timer_schedule(self._state, self.cfg)

    def set_player_name(self, name: str) -> SessionState:
        return self._apply(set_player_name, name)

    def start_game(self) -> SessionState:
        return self._apply(start_game, self.cfg)

    def advance_countdown(self) -> SessionState:
        return self._apply(advance_countdown, self.rng, self.cfg)

    def on_tick(self) -> SessionState:
        return self._apply(on_tick, self.rng, self.cfg)

    def on_direction_input(self, requested) -> SessionState:
        return self._apply(on_direction_input, requested)

    def reset_to_playing(self) -> SessionState:
        return self._apply(reset_to_playing, self.rng, self.cfg)

    def return_to_idle(self) -> SessionState:
        return self._apply(return_to_idle, self.cfg)
