# src/snakegame/__init__.py
"""Single-player snake: run simulation, session lifecycle and a pygame host."""

from snakegame.config import Config, CFG, Direction, GRID_SIZE
from snakegame.game import RunState, GridFullError, tick, change_direction, place_food, new_run_state
from snakegame.session import (
    SessionController, SessionState, Idle, Countdown, Playing, GameOver,
)

__all__ = [
    "Config", "CFG", "Direction", "GRID_SIZE",
    "RunState", "GridFullError", "tick", "change_direction", "place_food", "new_run_state",
    "SessionController", "SessionState", "Idle", "Countdown", "Playing", "GameOver",
]
