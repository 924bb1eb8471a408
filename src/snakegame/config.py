from dataclasses import dataclass
from enum import Enum
from typing import Optional

# ----- Window & grid -----
GRID_SIZE = 20
CELL_SIZE = 20
BOARD_PX = GRID_SIZE * CELL_SIZE
HUD_H = 40
WIDTH, HEIGHT = BOARD_PX, BOARD_PX + HUD_H

# ----- Colors -----
BG    = (20, 20, 24)
BOARD = (245, 245, 245)
GREEN = (22, 163, 74)
RED   = (220, 38, 38)
TEXT  = (220, 220, 230)
MUTED = (120, 120, 130)

# ----- Directions (dx, dy) -----
class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

UP, DOWN, LEFT, RIGHT = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT

START_POS = (10, 10)

# ----- Tunables -----
@dataclass
class Config:
    seed: Optional[int] = None
    initial_speed_ms: int = 150
    min_speed_ms: int = 50
    speed_step_ms: int = 10
    foods_per_speedup: int = 5
    countdown_seconds: int = 3
    countdown_interval_ms: int = 1000
    food_max_attempts: int = 1000   # random draws before scanning free cells
    clear_name_on_idle: bool = False

    def __post_init__(self):
        if self.min_speed_ms <= 0:
            raise ValueError(f"min_speed_ms must be positive, got {self.min_speed_ms}")
        if self.initial_speed_ms < self.min_speed_ms:
            raise ValueError(
                f"initial_speed_ms ({self.initial_speed_ms}) is below "
                f"min_speed_ms ({self.min_speed_ms})"
            )
        if self.speed_step_ms < 0:
            raise ValueError(f"speed_step_ms must not be negative, got {self.speed_step_ms}")
        if self.foods_per_speedup < 1:
            raise ValueError(f"foods_per_speedup must be >= 1, got {self.foods_per_speedup}")
        if self.countdown_seconds < 1:
            raise ValueError(f"countdown_seconds must be >= 1, got {self.countdown_seconds}")
        if self.countdown_interval_ms <= 0:
            raise ValueError(
                f"countdown_interval_ms must be positive, got {self.countdown_interval_ms}"
            )
        if self.food_max_attempts < 1:
            raise ValueError(f"food_max_attempts must be >= 1, got {self.food_max_attempts}")

CFG = Config()
