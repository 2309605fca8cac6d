"""Command line entry point: run the simulation and print the screen."""

from __future__ import annotations

import argparse
import random
import sys
from typing import TextIO

from .board import FRAME_DELAY_MS, GaltonBoard
from .framebuffer import FrameBuffer

DEFAULT_FRAMES = 6000


def run(
    frames: int = DEFAULT_FRAMES,
    seed: int | None = None,
    histogram: bool = False,
    out: TextIO | None = None,
) -> GaltonBoard:
    """Simulate ``frames`` frames, then write the chosen screen as text."""
    if frames < 0:
        raise ValueError("frames must not be negative")
    if out is None:
        out = sys.stdout
    board = GaltonBoard(random.Random(seed))
    for frame in range(frames):
        board.step(frame * FRAME_DELAY_MS * 1000)
    if histogram:
        board.toggle_histogram()
    buffer = FrameBuffer()
    board.render(buffer)
    out.write(buffer.to_text() + "\n")
    return board


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="galtonboard", description="Simulate a Galton board and print the screen."
    )
    parser.add_argument("--frames", type=int, default=DEFAULT_FRAMES)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--histogram", action="store_true")
    args = parser.parse_args(argv)
    if args.frames < 0:
        parser.error("--frames must not be negative")
    run(args.frames, args.seed, args.histogram)
    return 0


if __name__ == "__main__":
    sys.exit(main())