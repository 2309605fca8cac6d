import random

import pytest

from galtonboard.board import (
    BALL_SIZE,
    MAX_BALLS,
    MAX_TOTAL_BALLS,
    NUM_BINS,
    PIN_COUNT,
    SCREEN_WIDTH,
    Ball,
    ButtonDebouncer,
    GaltonBoard,
    Pin,
    display_message,
    make_pins,
)
from galtonboard.font import glyph
from galtonboard.framebuffer import FrameBuffer


def _board(seed=1):
    return GaltonBoard(random.Random(seed))


def test_make_pins_triangle():
    pins = make_pins()
    assert len(pins) == PIN_COUNT
    assert pins[0] == Pin(64, 20)
    rows = sorted({p.y for p in pins})
    assert len(rows) == 5
    for count, y in enumerate(rows, start=1):
        row = [p for p in pins if p.y == y]
        assert len(row) == count
        xs = sorted(p.x for p in row)
        assert xs[0] + xs[-1] == SCREEN_WIDTH


def test_display_message_writes_line():
    buffer = FrameBuffer()
    buffer.data[0] = 0xFF
    display_message(buffer, "Galton", 3)
    assert buffer.data[0] == 0
    start = 3 * 128 + 5
    assert bytes(buffer.data[start:start + 8]) == glyph("G")
    assert not any(buffer.data[:3 * 128])


def test_debouncer():
    debouncer = ButtonDebouncer()
    assert debouncer.press(100) is False
    assert debouncer.press(201) is True
    assert debouncer.press(300) is False
    assert debouncer.press(402) is True
    assert debouncer.last_press_ms == 402


def test_init_balls_all_free():
    board = _board()
    assert len(board.balls) == MAX_BALLS
    assert all(not b.active and b.bin == -1 for b in board.balls)


def test_spawn_ball_ranges():
    board = _board(5)
    board.spawn_ball()
    assert board.total_balls == 1
    ball = board.balls[0]
    assert ball.active
    assert 59 <= ball.x <= 69
    assert ball.y == 0
    assert -0.25 <= ball.vx < 0.25
    assert 0.5 <= ball.vy < 0.7


def test_spawn_ball_stops_at_limit():
    board = _board()
    board.total_balls = MAX_TOTAL_BALLS
    board.spawn_ball()
    assert board.game_active is False
    assert board.total_balls == MAX_TOTAL_BALLS


def test_spawn_ball_no_free_slot():
    board = _board()
    for ball in board.balls:
        ball.active = True
    board.spawn_ball()
    assert board.total_balls == 0


def test_ball_collision_rules():
    board = _board()
    a = Ball(x=10, y=10, active=True)
    b = Ball(x=12, y=10, active=True)
    far = Ball(x=30, y=10, active=True)
    assert board.check_ball_collision(a, b) is True
    assert board.check_ball_collision(a, a) is False
    assert board.check_ball_collision(a, far) is False
    b.active = False
    assert board.check_ball_collision(a, b) is False


def test_pin_collision_hit_and_miss():
    board = _board(3)
    ball = Ball(x=64, y=20, vx=0.0, vy=1.0, active=True)
    assert board.check_pin_collision(ball) is True
    assert ball.vy >= 0
    speed = (ball.vx ** 2 + ball.vy ** 2) ** 0.5
    assert speed <= 1.2 * 1.1 + 1e-9
    miss = Ball(x=5, y=5, vx=0.1, vy=0.1, active=True)
    assert board.check_pin_collision(miss) is False
    assert (miss.vx, miss.vy) == (0.1, 0.1)


def test_update_inactive_ball_unchanged():
    board = _board()
    ball = Ball(x=30, y=30, vx=1, vy=1)
    board.update_ball(ball)
    assert (ball.x, ball.y) == (30, 30)


def test_update_ball_lands_in_chute():
    board = _board()
    ball = board.balls[0]
    ball.x, ball.y, ball.vx, ball.vy, ball.active = 30.0, 57.0, 0.0, 1.0, True
    board.update_ball(ball)
    assert ball.active is False
    assert board.bin_counts == [0, 1, 0, 0, 0]
    assert board.balls_in_chutes == 1


def test_update_ball_bounces_off_wall():
    board = _board()
    ball = board.balls[0]
    ball.x, ball.y, ball.vx, ball.vy, ball.active = 125.0, 5.0, 1.0, 0.0, True
    board.update_ball(ball)
    assert ball.x == SCREEN_WIDTH - BALL_SIZE
    assert ball.vx == pytest.approx(-0.7)


def test_step_spawns_after_interval():
    board = _board()
    board.step(0)
    assert board.total_balls == 0
    board.step(800_000)
    assert board.total_balls == 0
    board.step(800_001)
    assert board.total_balls == 1


def test_step_frozen_while_histogram_shown():
    board = _board()
    board.step(0)
    assert board.toggle_histogram() is True
    board.step(5_000_000)
    assert board.total_balls == 0
    assert board.toggle_histogram() is False


def test_full_round_invariants():
    board = _board(7)
    for frame in range(8000):
        board.step(frame * 16_000)
    assert board.total_balls == MAX_TOTAL_BALLS
    assert sum(board.bin_counts) == board.balls_in_chutes
    assert board.balls_in_chutes <= MAX_TOTAL_BALLS
    assert len(board.bin_counts) == NUM_BINS
    assert not any(b.active for b in board.balls)


def test_same_seed_same_result():
    first, second = _board(11), _board(11)
    for frame in range(2000):
        first.step(frame * 16_000)
        second.step(frame * 16_000)
    assert first.bin_counts == second.bin_counts
    assert bytes(first.balls[0].__dict__.__repr__(), "ascii") == bytes(
        second.balls[0].__dict__.__repr__(), "ascii"
    )


def test_render_game_screen_draws_pins_and_chutes():
    board = _board()
    buffer = FrameBuffer()
    board.render(buffer)
    assert buffer.get_pixel(64, 20)
    assert buffer.get_pixel(0, 63)
    assert buffer.get_pixel(24, 63)
    assert not buffer.get_pixel(12, 63)


def test_render_game_screen_draws_ball():
    board = _board()
    board.balls[0] = Ball(x=10, y=40, active=True)
    buffer = FrameBuffer()
    board.render_game_screen(buffer)
    assert buffer.get_pixel(8, 38)
    assert buffer.get_pixel(12, 42)
    assert not buffer.get_pixel(13, 40)


def test_completion_message():
    board = _board()
    board.total_balls = MAX_TOTAL_BALLS
    board.balls_in_chutes = MAX_TOTAL_BALLS
    buffer = FrameBuffer()
    board.render_game_screen(buffer)
    start = 4 * 128 + 37
    assert bytes(buffer.data[start:start + 8]) == glyph("C")


def test_histogram_empty_draws_nothing():
    board = _board()
    assert board.toggle_histogram() is True
    buffer = FrameBuffer()
    buffer.data[10] = 0xFF
    board.render(buffer)
    assert bytes(buffer.data) == bytes(1024)