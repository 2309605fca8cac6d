"""Page-organised monochrome frame buffer and its drawing primitives."""

from __future__ import annotations

from dataclasses import dataclass

from .font import GLYPH_WIDTH, glyph

PAGE_HEIGHT = 8
PIXEL_ON = "#"
PIXEL_OFF = "."


@dataclass
class RenderArea:
    """A rectangle of columns and pages to be sent to the display."""

    start_column: int
    end_column: int
    start_page: int
    end_page: int

    def buffer_length(self) -> int:
        """Number of buffer bytes the area covers."""
        return (self.end_column - self.start_column + 1) * (
            self.end_page - self.start_page + 1
        )


def full_screen_area(width: int = 128, height: int = 64) -> RenderArea:
    """Return the render area that covers a whole display."""
    return RenderArea(0, width - 1, 0, height // PAGE_HEIGHT - 1)


def _lower_ascii_to_upper(character: str | int) -> str | int:
    if isinstance(character, int):
        character = chr(character)
    if "a" <= character <= "z":
        return character.upper()
    return character


class FrameBuffer:
    """A display buffer: one byte per column per page, bit 0 on top."""

    def __init__(self, width: int = 128, height: int = 64) -> None:
        if width <= 0 or height <= 0 or height % PAGE_HEIGHT:
            raise ValueError("width must be positive and height a positive multiple of 8")
        self.width = width
        self.height = height
        self.pages = height // PAGE_HEIGHT
        self.data = bytearray(self.pages * width)

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def clear(self) -> None:
        """Turn every pixel off."""
        self.data[:] = bytes(len(self.data))

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _locate(self, x: int, y: int) -> tuple[int, int]:
        return (y // PAGE_HEIGHT) * self.width + x, 1 << (y % PAGE_HEIGHT)

    def get_pixel(self, x: int, y: int) -> bool:
        """Return whether the pixel at (x, y) is on."""
        if not self._in_bounds(x, y):
            raise IndexError(f"pixel ({x}, {y}) is outside the buffer")
        index, mask = self._locate(x, y)
        return bool(self.data[index] & mask)

    def set_pixel(self, x: int, y: int, on: bool = True) -> None:
        """Set one pixel; coordinates outside the buffer are an error."""
        if not self._in_bounds(x, y):
            raise IndexError(f"pixel ({x}, {y}) is outside the buffer")
        index, mask = self._locate(x, y)
        if on:
            self.data[index] |= mask
        else:
            self.data[index] &= ~mask & 0xFF

    def draw_pixel(self, x: int, y: int, on: bool = True) -> None:
        """Set one pixel, silently ignoring coordinates outside the buffer."""
        if self._in_bounds(x, y):
            self.set_pixel(x, y, on)

    def draw_line(self, x0: int, y0: int, x1: int, y1: int, on: bool = True) -> None:
        """Draw a straight line with Bresenham's algorithm."""
        dx = abs(x1 - x0)
        dy = -abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        error = dx + dy
        while True:
            self.set_pixel(x0, y0, on)
            if x0 == x1 and y0 == y1:
                break
            doubled = 2 * error
            if doubled >= dy:
                error += dy
                x0 += sx
            if doubled <= dx:
                error += dx
                y0 += sy

    def draw_char(self, x: int, y: int, character: str | int) -> None:
        """Write a glyph at column x on the page holding row y.

        Characters that would not fit to the right or below are skipped.
        """
        if x > self.width - GLYPH_WIDTH or y > self.height - PAGE_HEIGHT:
            return
        page = int(y / PAGE_HEIGHT)
        start = page * self.width + x
        if start < 0:
            raise IndexError(f"character at ({x}, {y}) starts outside the buffer")
        self.data[start:start + GLYPH_WIDTH] = glyph(_lower_ascii_to_upper(character))

    def draw_string(self, x: int, y: int, text: str) -> None:
        """Draw text left to right, one glyph every eight columns."""
        if x > self.width - GLYPH_WIDTH or y > self.height - PAGE_HEIGHT:
            return
        for character in text:
            self.draw_char(x, y, character)
            x += GLYPH_WIDTH

    def to_text(self) -> str:
        """Render the buffer as lines of '#' and '.', one line per pixel row."""
        return "\n".join(
            "".join(
                PIXEL_ON if self.get_pixel(x, y) else PIXEL_OFF
                for x in range(self.width)
            )
            for y in range(self.height)
        )