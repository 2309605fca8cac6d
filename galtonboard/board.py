"""Galton board simulation: falling balls, pins, chutes and a histogram."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field

from .framebuffer import FrameBuffer

SCREEN_WIDTH = 128
SCREEN_HEIGHT = 64
BALL_SIZE = 2
NUM_BINS = 5
BIN_WIDTH = SCREEN_WIDTH // NUM_BINS
MAX_BALLS = 10
PIN_ROWS = 5
PIN_RADIUS = 2
PIN_SPACING = 24
PIN_COUNT = PIN_ROWS * (PIN_ROWS + 1) // 2
MAX_TOTAL_BALLS = 100
NUM_CHUTES = 5
DEBOUNCE_DELAY_MS = 200
CHUTE_HEIGHT = 4
BALL_INTERVAL_US = 800_000
FRAME_DELAY_MS = 16
PINS_START_Y = 20
CHAR_ADVANCE = 6


@dataclass
class Ball:
    """A ball's position, velocity and state."""

    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    active: bool = False
    bin: int = -1


@dataclass(frozen=True)
class Pin:
    """A fixed peg the balls bounce off."""

    x: float
    y: float


def make_pins() -> list[Pin]:
    """Lay out the pins in a triangle, one more pin on each lower row."""
    pins = []
    for row in range(PIN_ROWS):
        pins_in_row = row + 1
        row_y = PINS_START_Y + row * (SCREEN_HEIGHT - PINS_START_Y - 10) // PIN_ROWS
        total_width = (pins_in_row - 1) * PIN_SPACING
        start_x = (SCREEN_WIDTH - total_width) // 2
        pins.extend(Pin(start_x + i * PIN_SPACING, row_y) for i in range(pins_in_row))
    return pins


def display_message(buffer: FrameBuffer, message: str, line: int) -> None:
    """Clear the buffer and write a message on the given text line."""
    buffer.clear()
    buffer.draw_string(5, line * 8, message)


@dataclass
class ButtonDebouncer:
    """Accepts a button press only when enough time passed since the last one."""

    delay_ms: int = DEBOUNCE_DELAY_MS
    last_press_ms: int = 0

    def press(self, now_ms: int) -> bool:
        """Register a press at ``now_ms``; return whether it counts."""
        if now_ms - self.last_press_ms > self.delay_ms:
            self.last_press_ms = now_ms
            return True
        return False


class GaltonBoard:
    """State of one round: pins, balls in flight and per-chute counts."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.pins = make_pins()
        self.balls: list[Ball] = []
        self.bin_counts = [0] * NUM_BINS
        self.total_balls = 0
        self.balls_in_chutes = 0
        self.game_active = True
        self.show_histogram = False
        self.last_ball_time_us: int | None = None
        self.init_balls()

    def init_balls(self) -> None:
        """Make every ball slot free."""
        self.balls = [Ball() for _ in range(MAX_BALLS)]

    def _rand(self, limit: int) -> int:
        return self.rng.randrange(limit)

    def spawn_ball(self) -> None:
        """Drop a new ball near the top centre, or end the round at the limit."""
        if self.total_balls >= MAX_TOTAL_BALLS:
            self.game_active = False
            return
        ball = next((b for b in self.balls if not b.active), None)
        if ball is None:
            return
        min_sq = (BALL_SIZE * 2) ** 2
        for _ in range(10):
            ball.x = float(SCREEN_WIDTH // 2 + (self._rand(11) - 5))
            ball.y = 0.0
            if not any(
                (ball.x - other.x) ** 2 + (ball.y - other.y) ** 2 < min_sq
                for other in self.balls
                if other.active
            ):
                break
        ball.vx = self._rand(100) / 100.0 * 0.5 - 0.25
        ball.vy = 0.5 + self._rand(20) / 100.0
        ball.active = True
        ball.bin = -1
        self.total_balls += 1

    def check_ball_collision(self, first: Ball, second: Ball) -> bool:
        """Return whether two distinct active balls touch."""
        if not first.active or not second.active or first is second:
            return False
        dx = first.x - second.x
        dy = first.y - second.y
        min_distance = BALL_SIZE * 2
        return dx * dx + dy * dy <= min_distance * min_distance

    def check_pin_collision(self, ball: Ball) -> bool:
        """Bounce the ball off the first pin it touches; return whether it hit one."""
        reach = (BALL_SIZE + PIN_RADIUS) ** 2
        for pin in self.pins:
            dx = ball.x - pin.x
            dy = ball.y - pin.y
            if dx * dx + dy * dy <= reach:
                angle = self._rand(314) / 100.0
                speed = math.hypot(ball.vx, ball.vy) * (0.8 + self._rand(40) / 100.0)
                ball.vx = math.cos(angle) * speed
                ball.vy = abs(math.sin(angle)) * speed * 1.1
                ball.x += ball.vx * 0.5
                ball.y += ball.vy * 0.5
                return True
        return False

    def update_ball(self, ball: Ball) -> None:
        """Advance one ball by a frame: collisions, gravity, walls, pins, chutes."""
        if not ball.active:
            return

        for other in self.balls:
            if other is ball or not self.check_ball_collision(ball, other):
                continue
            ball.vx, other.vx = other.vx * 0.9, ball.vx * 0.9
            ball.vy, other.vy = other.vy * 0.9, ball.vy * 0.9
            dx = ball.x - other.x
            dy = ball.y - other.y
            distance = math.hypot(dx, dy)
            overlap = (BALL_SIZE * 2 - distance) / 2.0
            if distance > 0:
                ball.x += overlap * dx / distance
                ball.y += overlap * dy / distance
                other.x -= overlap * dx / distance
                other.y -= overlap * dy / distance

        ball.x += ball.vx
        ball.y += ball.vy
        ball.vy += 0.02

        speed = math.hypot(ball.vx, ball.vy)
        if speed > 2.0:
            ball.vx = ball.vx / speed * 2.0
            ball.vy = ball.vy / speed * 2.0

        if ball.x <= BALL_SIZE or ball.x >= SCREEN_WIDTH - BALL_SIZE:
            ball.vx *= -0.7
            ball.x = float(BALL_SIZE if ball.x <= BALL_SIZE else SCREEN_WIDTH - BALL_SIZE)

        self.check_pin_collision(ball)

        if ball.y >= SCREEN_HEIGHT - BALL_SIZE - CHUTE_HEIGHT:
            ball.active = False
            chute_index = int(ball.x / (SCREEN_WIDTH // NUM_CHUTES))
            if 0 <= chute_index < NUM_BINS:
                self.bin_counts[chute_index] += 1
                self.balls_in_chutes += 1

    def step(self, now_us: int) -> None:
        """Advance the simulation by one frame at time ``now_us``."""
        if self.last_ball_time_us is None:
            self.last_ball_time_us = now_us
        if self.show_histogram or not self.game_active:
            return
        for ball in self.balls:
            self.update_ball(ball)
        if (
            now_us - self.last_ball_time_us > BALL_INTERVAL_US
            and self.total_balls < MAX_TOTAL_BALLS
        ):
            self.spawn_ball()
            self.last_ball_time_us = now_us

    def toggle_histogram(self) -> bool:
        """Switch between the board and the histogram; return the new setting."""
        self.show_histogram = not self.show_histogram
        return self.show_histogram

    def draw_pins(self, buffer: FrameBuffer) -> None:
        """Draw every pin as a small filled disc."""
        offsets = [
            (dx, dy)
            for dx in range(-PIN_RADIUS, PIN_RADIUS + 1)
            for dy in range(-PIN_RADIUS, PIN_RADIUS + 1)
            if dx * dx + dy * dy <= PIN_RADIUS * PIN_RADIUS
        ]
        for pin in self.pins:
            for dx, dy in offsets:
                buffer.draw_pixel(int(pin.x) + dx, int(pin.y) + dy, True)

    def draw_chutes(self, buffer: FrameBuffer) -> None:
        """Draw the chute walls along the bottom edge."""
        chute_width = SCREEN_WIDTH // NUM_CHUTES
        for i in range(NUM_CHUTES):
            x_start = i * chute_width
            x_end = (i + 1) * chute_width - 1
            for y in range(SCREEN_HEIGHT - CHUTE_HEIGHT, SCREEN_HEIGHT):
                buffer.draw_pixel(x_start, y, True)
                buffer.draw_pixel(x_end, y, True)

    def draw_ball(self, ball: Ball, buffer: FrameBuffer) -> None:
        """Draw an active ball as a filled square."""
        if not ball.active:
            return
        x, y = int(ball.x), int(ball.y)
        for i in range(-BALL_SIZE, BALL_SIZE + 1):
            for j in range(-BALL_SIZE, BALL_SIZE + 1):
                buffer.draw_pixel(x + i, y + j, True)

    def draw_histogram(self, buffer: FrameBuffer) -> None:
        """Draw a bar and count for every chute, with a title."""
        max_count = max(self.bin_counts)
        if max_count == 0:
            return
        y_start = SCREEN_HEIGHT - 10
        for i, count in enumerate(self.bin_counts):
            bar_height = int(count / max_count * (SCREEN_HEIGHT - 20))
            if bar_height == 0 and count > 0:
                bar_height = 1
            x_start = i * BIN_WIDTH + 2
            x_end = (i + 1) * BIN_WIDTH - 3
            y_end = y_start - bar_height
            for x in range(x_start, x_end + 1):
                for y in range(y_end, y_start + 1):
                    buffer.draw_pixel(x, y, True)
            label = str(count)
            buffer.draw_string(
                x_start + (BIN_WIDTH - len(label) * CHAR_ADVANCE) // 2,
                SCREEN_HEIGHT - 8,
                label,
            )
        title = "Resultados"
        buffer.draw_string((SCREEN_WIDTH - len(title) * CHAR_ADVANCE) // 2, 0, title)

    def render_game_screen(self, buffer: FrameBuffer) -> None:
        """Draw the board, balls in flight and the landed-ball count."""
        buffer.clear()
        self.draw_pins(buffer)
        self.draw_chutes(buffer)
        for ball in self.balls:
            self.draw_ball(ball, buffer)
        buffer.draw_string(5, 0, f"Bolas: {self.balls_in_chutes}")
        if (
            self.total_balls >= MAX_TOTAL_BALLS
            and self.balls_in_chutes == MAX_TOTAL_BALLS
        ):
            message = "Completo!"
            buffer.draw_string(
                (SCREEN_WIDTH - len(message) * CHAR_ADVANCE) // 2,
                SCREEN_HEIGHT // 2,
                message,
            )

    def render_histogram_screen(self, buffer: FrameBuffer) -> None:
        """Draw the histogram screen."""
        buffer.clear()
        self.draw_histogram(buffer)
        total = f"Total: {self.balls_in_chutes} bolas"
        buffer.draw_string(
            (SCREEN_WIDTH - len(total) * CHAR_ADVANCE) // 2, SCREEN_HEIGHT - 2, total
        )

    def render(self, buffer: FrameBuffer) -> None:
        """Draw whichever screen is currently selected."""
        if self.show_histogram:
            self.render_histogram_screen(buffer)
        else:
            self.render_game_screen(buffer)