# main.py
import argparse
import logging
from typing import Tuple, Optional

import pygame # type: ignore

from .config import (
    WIDTH, HEIGHT, CELL_SIZE, BOARD_PX, HUD_H,
    BG, BOARD, GREEN, RED, TEXT, MUTED,
    UP, DOWN, LEFT, RIGHT, Direction,
    Config,
)
from .game import RunState
from .session import (
    SessionController, SessionState, TimerSchedule,
    Idle, Countdown, Playing, GameOver,
)

logger = logging.getLogger(__name__)

COUNTDOWN_EVENT = pygame.USEREVENT + 1
TICK_EVENT = pygame.USEREVENT + 2

MAX_NAME_LEN = 20

KEY_TO_DIRECTION = {
    pygame.K_UP: UP, pygame.K_w: UP,
    pygame.K_DOWN: DOWN, pygame.K_s: DOWN,
    pygame.K_LEFT: LEFT, pygame.K_a: LEFT,
    pygame.K_RIGHT: RIGHT, pygame.K_d: RIGHT,
}

def direction_for_key(key: int) -> Optional[Direction]:
    return KEY_TO_DIRECTION.get(key)

# ---------- Timers ----------
class TimerScheduler:
    """
    Keeps the two pygame timers in line with the session state.
    A timer is only touched when its interval changes, so a speed-up re-arms
    the tick timer and leaving a state stops the timer it owned.
    """

    def __init__(self):
        self.armed = TimerSchedule()

    def sync(self, schedule: TimerSchedule) -> None:
        if schedule.countdown_ms != self.armed.countdown_ms:
            pygame.time.set_timer(COUNTDOWN_EVENT, schedule.countdown_ms)
        if schedule.tick_ms != self.armed.tick_ms:
            logger.debug("tick timer %d -> %d ms", self.armed.tick_ms, schedule.tick_ms)
            pygame.time.set_timer(TICK_EVENT, schedule.tick_ms)
        self.armed = schedule

    def stop(self) -> None:
        self.sync(TimerSchedule())

# ---------- Draw ----------
def draw_text(screen: pygame.Surface, font: pygame.font.Font, text: str,
              center: Tuple[int, int], color=TEXT) -> None:
    surf = font.render(text, True, color)
    screen.blit(surf, surf.get_rect(center=center))

def draw_cell(screen: pygame.Surface, gx: int, gy: int, color: Tuple[int, int, int]) -> None:
    rect = pygame.Rect(gx * CELL_SIZE, HUD_H + gy * CELL_SIZE, CELL_SIZE, CELL_SIZE)
    pygame.draw.rect(screen, color, rect)

def draw_game(screen: pygame.Surface, font: pygame.font.Font, player_name: str, run: RunState) -> None:
    screen.fill(BG)
    pygame.draw.rect(screen, BOARD, pygame.Rect(0, HUD_H, BOARD_PX, BOARD_PX))
    # food
    draw_cell(screen, run.food[0], run.food[1], RED)
    # snake
    for x, y in run.snake:
        draw_cell(screen, x, y, GREEN)
    # hud
    txt = font.render(f"Player: {player_name}   Score: {run.score}", True, TEXT)
    screen.blit(txt, (8, 12))

def draw_game_over(screen: pygame.Surface, font: pygame.font.Font, player_name: str, score: int) -> None:
    # Dim with translucent overlay
    overlay = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, 140))  # RGBA
    screen.blit(overlay, (0, 0))

    cx, cy = WIDTH // 2, HEIGHT // 2
    draw_text(screen, font, "GAME OVER", (cx, cy - 30), (240, 240, 250))
    draw_text(screen, font, f"{player_name}'s score: {score}", (cx, cy))
    draw_text(screen, font, "R: play again    Tab: change player", (cx, cy + 30))

def draw_idle(screen: pygame.Surface, font: pygame.font.Font, big_font: pygame.font.Font,
              name_buffer: str, state: SessionState, can_start: bool) -> None:
    screen.fill(BG)
    cx, cy = WIDTH // 2, HEIGHT // 2
    draw_text(screen, big_font, "Snake", (cx, cy - 90))

    box = pygame.Rect(0, 0, 240, 32)
    box.center = (cx, cy - 20)
    pygame.draw.rect(screen, TEXT, box, 2)
    draw_text(screen, font, name_buffer or "Enter your name", box.center,
              TEXT if name_buffer else MUTED)

    if isinstance(state, Countdown):
        draw_text(screen, big_font, str(state.seconds_left), (cx, cy + 50))
    else:
        draw_text(screen, font, "Press Enter to start", (cx, cy + 30), TEXT if can_start else MUTED)
    draw_text(screen, font, "Use the arrow keys to steer", (cx, HEIGHT - 24), MUTED)

def render(screen, font, big_font, state: SessionState, name_buffer: str, can_start: bool) -> None:
    if isinstance(state, Playing):
        draw_game(screen, font, state.player_name, state.run)
    elif isinstance(state, GameOver):
        draw_game(screen, font, state.player_name, state.run)
        draw_game_over(screen, font, state.player_name, state.final_score)
    else:
        draw_idle(screen, font, big_font, name_buffer, state, can_start)

# ---------- Input ----------
def handle_event(event: pygame.event.Event, session: SessionController, name_buffer: str) -> Tuple[bool, str]:
    """Route one pygame event to the session. Returns (keep running, name buffer)."""
    state = session.state
    if event.type == pygame.QUIT:
        return False, name_buffer
    if event.type == COUNTDOWN_EVENT:
        session.advance_countdown()
    elif event.type == TICK_EVENT:
        session.on_tick()
    elif event.type == pygame.TEXTINPUT and isinstance(state, Idle):
        name_buffer = (name_buffer + event.text)[:MAX_NAME_LEN]
        session.set_player_name(name_buffer)
    elif event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False, name_buffer
        if isinstance(state, Idle):
            if event.key == pygame.K_BACKSPACE:
                name_buffer = name_buffer[:-1]
                session.set_player_name(name_buffer)
            elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                session.start_game()
        elif isinstance(state, Playing):
            direction = direction_for_key(event.key)
            if direction is not None:
                session.on_direction_input(direction)
        elif isinstance(state, GameOver):
            if event.key == pygame.K_r:
                session.reset_to_playing()
            elif event.key == pygame.K_TAB:
                new_state = session.return_to_idle()
                name_buffer = new_state.player_name
    return True, name_buffer

# ---------- CLI ----------
def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Single-player snake")
    parser.add_argument("--seed", type=int, default=None, help="seed food placement")
    parser.add_argument("--player", type=str, default="", help="prefill the player name")
    parser.add_argument(
        "--clear-name-on-idle",
        action="store_true",
        help="forget the player name when returning to the start screen",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cfg = Config(seed=args.seed, clear_name_on_idle=args.clear_name_on_idle)

    pygame.init()
    font = pygame.font.SysFont(None, 24)
    big_font = pygame.font.SysFont(None, 56)
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption("Snake")
    clock = pygame.time.Clock()

    session = SessionController(cfg)
    timers = TimerScheduler()
    session.subscribe(lambda state: timers.sync(session.timers()))

    name_buffer = args.player.strip()[:MAX_NAME_LEN]
    session.set_player_name(name_buffer)

    running = True
    while running:
        for event in pygame.event.get():
            running, name_buffer = handle_event(event, session, name_buffer)
            if not running:
                break

        render(screen, font, big_font, session.state, name_buffer, session.can_start())
        pygame.display.flip()
        clock.tick(60)

    timers.stop()
    pygame.quit()

if __name__ == "__main__":
    main()
