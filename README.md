# galtonboard

A Galton board simulation. Balls drop from near the top centre of a 128×64
monochrome screen, bounce off a triangle of 15 pins and each other, and settle
into five chutes along the bottom edge. A second screen shows a histogram of
how many balls landed in each chute. A round stops spawning balls after 100.

Everything is drawn into an in-memory frame buffer laid out the way an SSD1306
OLED controller expects it: one byte for each column of eight vertical pixels,
page after page, bit 0 on top. The package also builds the SSD1306 command and
data byte streams, so a frame can be sent to a display through an I²C write
function you provide.

## Installing

```
pip install .
```

## Running the simulation

```
galtonboard
```

This runs the simulation for a number of 16 ms frames and prints the final
frame as text art, one line per pixel row, `#` for a lit pixel and `.` for an
unlit one. A new ball is dropped every 800 ms of simulated time.

Options:

- `--frames N` – how many frames to simulate (default 6000, enough for the
  whole round of 100 balls to be dropped). Must not be negative.
- `--seed N` – seed for the random number generator, for repeatable runs.
- `--histogram` – print the histogram screen instead of the board.

The same thing is available from Python as `galtonboard.cli.run(frames, seed,
histogram, out)`, which writes the text to `out` (standard output by default)
and returns the `GaltonBoard` it simulated.

## Using it as a library

```python
import random

from galtonboard.board import GaltonBoard
from galtonboard.framebuffer import FrameBuffer

board = GaltonBoard(random.Random(1))
buffer = FrameBuffer(128, 64)

now_us = 0
for _ in range(2000):
    board.step(now_us)
    now_us += 16_000

board.render(buffer)
print(buffer.to_text())
print(board.bin_counts, board.balls_in_chutes)

board.toggle_histogram()
board.render(buffer)
print(buffer.to_text())
```

`GaltonBoard.step(now_us)` advances every ball by one frame and drops a new
ball when more than 800 000 µs have passed since the last one. It does nothing
while the histogram screen is selected. `galtonboard.board.ButtonDebouncer`
accepts a press only if more than 200 ms have passed since the last accepted
one, which suits driving `toggle_histogram` from a push button.

`galtonboard.framebuffer.FrameBuffer` offers `set_pixel` (raises `IndexError`
outside the buffer), `draw_pixel` (ignores coordinates outside the buffer),
`get_pixel`, `draw_line`, `draw_char`, `draw_string`, `clear` and `to_text`.
Text is drawn on whole 8-pixel pages, eight columns per character, and a
string whose start would not fit on screen is skipped. The built-in font in
`galtonboard.font` covers `A`–`Z` and `0`–`9`; lower-case letters are drawn as
upper case, and any other character (spaces, punctuation) is drawn blank.

## Sending frames to a display

`galtonboard.ssd1306.Ssd1306` takes a callable `write(address, payload)` that
puts bytes on the I²C bus:

```python
from galtonboard.framebuffer import full_screen_area
from galtonboard.ssd1306 import Ssd1306

display = Ssd1306(write=my_i2c_write, address=0x3C)
display.init()
display.render(buffer, full_screen_area(128, 64))
```

Each command is sent as its own two-byte write prefixed with `0x80`; display
data is prefixed with `0x40`. `init_commands` and `scroll_commands` return the
raw command sequences, and `BitmapDisplay` keeps its own RAM image and sends
it whole with `send_data`.

## What it does not do

The package contains no I²C bus driver and no GPIO handling: to reach real
hardware you supply the `write` callable and call `ButtonDebouncer.press`
yourself. The `galtonboard` command does not animate or read a button; it
prints only the last frame of a run.

## Running the tests

```
pip install .[test]
pytest
```