"""SSD1306 OLED controller command sequences over an I2C write callable."""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Iterable, Sequence, SupportsBytes, Union

from .framebuffer import PAGE_HEIGHT, RenderArea

WIDTH = 128
HEIGHT = 64
I2C_ADDRESS = 0x3C
I2C_CLOCK_KHZ = 400

COMMAND_CONTROL = 0x80
DATA_CONTROL = 0x40

Writer = Callable[[int, bytes], object]
BufferLike = Union[bytes, bytearray, memoryview, SupportsBytes]


class Command(IntEnum):
    """Controller command opcodes."""

    SET_MEMORY_MODE = 0x20
    SET_COLUMN_ADDRESS = 0x21
    SET_PAGE_ADDRESS = 0x22
    SET_HORIZONTAL_SCROLL = 0x26
    SET_SCROLL = 0x2E
    SET_DISPLAY_START_LINE = 0x40
    SET_CONTRAST = 0x81
    SET_CHARGE_PUMP = 0x8D
    SET_SEGMENT_REMAP = 0xA0
    SET_ENTIRE_ON = 0xA4
    SET_ALL_ON = 0xA5
    SET_NORMAL_DISPLAY = 0xA6
    SET_INVERSE_DISPLAY = 0xA7
    SET_MUX_RATIO = 0xA8
    SET_DISPLAY = 0xAE
    SET_COMMON_OUTPUT_DIRECTION = 0xC0
    SET_COMMON_OUTPUT_DIRECTION_FLIP = 0xC0
    SET_DISPLAY_OFFSET = 0xD3
    SET_DISPLAY_CLOCK_DIVIDE_RATIO = 0xD5
    SET_PRECHARGE = 0xD9
    SET_COMMON_PIN_CONFIGURATION = 0xDA
    SET_VCOMH_DESELECT_LEVEL = 0xDB
    WRITE_MODE = 0xFE
    READ_MODE = 0xFF


def init_commands(width: int = WIDTH, height: int = HEIGHT) -> list[int]:
    """Return the start-up command sequence for a display of the given size."""
    pin_configuration = 0x12 if (width, height) == (128, 64) else 0x02
    return [
        Command.SET_DISPLAY, Command.SET_MEMORY_MODE, 0x00,
        Command.SET_DISPLAY_START_LINE, Command.SET_SEGMENT_REMAP | 0x01,
        Command.SET_MUX_RATIO, height - 1,
        Command.SET_COMMON_OUTPUT_DIRECTION | 0x08, Command.SET_DISPLAY_OFFSET,
        0x00, Command.SET_COMMON_PIN_CONFIGURATION, pin_configuration,
        Command.SET_DISPLAY_CLOCK_DIVIDE_RATIO, 0x80, Command.SET_PRECHARGE,
        0xF1, Command.SET_VCOMH_DESELECT_LEVEL, 0x30, Command.SET_CONTRAST,
        0xFF, Command.SET_ENTIRE_ON, Command.SET_NORMAL_DISPLAY,
        Command.SET_CHARGE_PUMP, 0x14, Command.SET_SCROLL | 0x00,
        Command.SET_DISPLAY | 0x01,
    ]


def scroll_commands(enabled: bool) -> list[int]:
    """Return the horizontal scroll setup, ending with scroll on or off."""
    return [
        Command.SET_HORIZONTAL_SCROLL | 0x00, 0x00, 0x00, 0x00, 0x03,
        0x00, 0xFF, Command.SET_SCROLL | (0x01 if enabled else 0x00),
    ]


class Ssd1306:
    """A 128x64 display reached through ``write(address, payload)``."""

    def __init__(self, write: Writer, address: int = I2C_ADDRESS) -> None:
        self.write = write
        self.address = address

    def send_command(self, command: int) -> None:
        """Send one command byte, prefixed with the command control byte."""
        self.write(self.address, bytes([COMMAND_CONTROL, command]))

    def send_command_list(self, commands: Iterable[int]) -> None:
        """Send each command in turn."""
        for command in commands:
            self.send_command(command)

    def send_buffer(self, data: BufferLike) -> None:
        """Send display data, prefixed with the data control byte."""
        self.write(self.address, bytes([DATA_CONTROL]) + bytes(data))

    def init(self) -> None:
        """Run the start-up sequence."""
        self.send_command_list(init_commands(WIDTH, HEIGHT))

    def scroll(self, enabled: bool) -> None:
        """Turn horizontal scrolling on or off."""
        self.send_command_list(scroll_commands(enabled))

    def render(self, buffer: BufferLike, area: RenderArea) -> None:
        """Select the area's columns and pages, then send its share of the buffer."""
        length = area.buffer_length()
        payload = bytes(buffer)
        if len(payload) < length:
            raise ValueError(
                f"buffer holds {len(payload)} bytes, area needs {length}"
            )
        self.send_command_list(
            [
                Command.SET_COLUMN_ADDRESS, area.start_column, area.end_column,
                Command.SET_PAGE_ADDRESS, area.start_page, area.end_page,
            ]
        )
        self.send_buffer(payload[:length])


class BitmapDisplay:
    """A display that holds its own RAM image and sends it whole."""

    def __init__(
        self,
        write: Writer,
        width: int = WIDTH,
        height: int = HEIGHT,
        external_vcc: bool = False,
        address: int = I2C_ADDRESS,
    ) -> None:
        self.write = write
        self.width = width
        self.height = height
        self.pages = height // PAGE_HEIGHT
        self.address = address
        self.external_vcc = external_vcc
        self.bufsize = self.pages * width + 1
        self.ram_buffer = bytearray(self.bufsize)
        self.ram_buffer[0] = DATA_CONTROL

    def command(self, command: int) -> None:
        """Send one command byte."""
        self.write(self.address, bytes([COMMAND_CONTROL, command]))

    def config(self) -> None:
        """Run the bitmap start-up sequence (vertical addressing mode)."""
        for command in (
            Command.SET_DISPLAY | 0x00,
            Command.SET_MEMORY_MODE, 0x01,
            Command.SET_DISPLAY_START_LINE | 0x00,
            Command.SET_SEGMENT_REMAP | 0x01,
            Command.SET_MUX_RATIO, HEIGHT - 1,
            Command.SET_COMMON_OUTPUT_DIRECTION | 0x08,
            Command.SET_DISPLAY_OFFSET, 0x00,
            Command.SET_COMMON_PIN_CONFIGURATION, 0x12,
            Command.SET_DISPLAY_CLOCK_DIVIDE_RATIO, 0x80,
            Command.SET_PRECHARGE, 0xF1,
            Command.SET_VCOMH_DESELECT_LEVEL, 0x30,
            Command.SET_CONTRAST, 0xFF,
            Command.SET_ENTIRE_ON,
            Command.SET_NORMAL_DISPLAY,
            Command.SET_CHARGE_PUMP, 0x14,
            Command.SET_DISPLAY | 0x01,
        ):
            self.command(command)

    def send_data(self) -> None:
        """Address the whole screen and send the RAM image."""
        for command in (
            Command.SET_COLUMN_ADDRESS, 0, self.width - 1,
            Command.SET_PAGE_ADDRESS, 0, self.pages - 1,
        ):
            self.command(command)
        self.write(self.address, bytes(self.ram_buffer))

    def draw_bitmap(self, bitmap: Sequence[int]) -> None:
        """Copy a bitmap into RAM byte by byte, sending the image after each byte."""
        needed = self.bufsize - 1
        if len(bitmap) < needed:
            raise ValueError(f"bitmap holds {len(bitmap)} bytes, display needs {needed}")
        for offset, value in enumerate(bitmap[:needed], start=1):
            self.ram_buffer[offset] = value
            self.send_data()