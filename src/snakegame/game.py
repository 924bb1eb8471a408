# game.py
from dataclasses import dataclass, replace
from typing import Tuple, Optional
import logging
import random

from .config import GRID_SIZE, START_POS, RIGHT, Direction, Config, CFG

logger = logging.getLogger(__name__)

Position = Tuple[int, int]
Snake = Tuple[Position, ...]


class GridFullError(RuntimeError):
    """Raised when every cell of the grid is covered by the snake."""


# ---------- Helpers ----------
def _rng(rng: Optional[random.Random]):
    return rng if rng is not None else random

def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE

def is_opposite(a: Direction, b: Direction) -> bool:
    (ax, ay), (bx, by) = a.value, b.value
    return ax == -bx and ay == -by

def place_food(snake: Snake, rng: Optional[random.Random] = None, cfg: Config = CFG) -> Position:
    """
    Pick a uniformly random free cell for the next food.

    Rejection-samples the whole grid; after ``cfg.food_max_attempts`` misses
    it picks from the enumerated free cells instead, so a nearly full board
    still terminates. Raises GridFullError when no cell is free.
    """
    rnd = _rng(rng)
    occupied = set(snake)
    for _ in range(cfg.food_max_attempts):
        fx = rnd.randrange(GRID_SIZE)
        fy = rnd.randrange(GRID_SIZE)
        if (fx, fy) not in occupied:
            return (fx, fy)

    free = [(x, y) for y in range(GRID_SIZE) for x in range(GRID_SIZE) if (x, y) not in occupied]
    if not free:
        raise GridFullError(f"no free cell left for food (snake length {len(snake)})")
    return rnd.choice(free)

def change_direction(current: Direction, requested: Direction) -> Direction:
    """Return the requested direction unless it would reverse the snake."""
    if is_opposite(requested, current):
        return current
    return requested

# ---------- State ----------
@dataclass(frozen=True)
class RunState:
    snake: Snake                  # head at index 0
    food: Position
    direction: Direction          # direction used by the last tick
    pending: Direction            # staged, committed on the next tick
    score: int = 0
    speed_ms: int = CFG.initial_speed_ms   # current step interval
    alive: bool = True

    @property
    def head(self) -> Position:
        return self.snake[0]

def new_run_state(rng: Optional[random.Random] = None, cfg: Config = CFG) -> RunState:
    snake = (START_POS,)
    food = place_food(snake, rng, cfg)
    return RunState(
        snake=snake,
        food=food,
        direction=RIGHT,
        pending=RIGHT,
        score=0,
        speed_ms=cfg.initial_speed_ms,
        alive=True,
    )

# ---------- Update ----------
def tick(state: RunState, rng: Optional[random.Random] = None, cfg: Config = CFG) -> RunState:
    """
    Advance the run by one grid step and return the new state.
    A dead run is returned as is. The input is never modified.
    """
    if not state.alive:
        return state

    # Commit direction once per tick
    direction = state.pending

    hx, hy = state.head
    dx, dy = direction.value
    nx, ny = hx + dx, hy + dy

    # Wall collision
    if not in_bounds(nx, ny):
        logger.debug("wall hit at %s", (nx, ny))
        return replace(state, direction=direction, alive=False)

    new_head = (nx, ny)

    # Self collision, against the pre-move body
    if new_head in state.snake:
        logger.debug("self collision at %s", new_head)
        return replace(state, direction=direction, alive=False)

    # Move / grow
    if new_head == state.food:
        snake = (new_head,) + state.snake
        score = state.score + 1
        speed_ms = state.speed_ms
        if score % cfg.foods_per_speedup == 0:
            speed_ms = max(cfg.min_speed_ms, speed_ms - cfg.speed_step_ms)
            if speed_ms != state.speed_ms:
                logger.debug("score %d: speed %d -> %d ms", score, state.speed_ms, speed_ms)
        try:
            food = place_food(snake, rng, cfg)
        except GridFullError:
            logger.info("board filled at score %d", score)
            return replace(state, snake=snake, direction=direction, score=score,
                           speed_ms=speed_ms, alive=False)
        return replace(state, snake=snake, food=food, direction=direction,
                       score=score, speed_ms=speed_ms)

    snake = (new_head,) + state.snake[:-1]
    return replace(state, snake=snake, direction=direction)
