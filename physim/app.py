"""Command-line entry point that opens the window and runs the demo game."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .engine import Engine
from .game import Game
from .logger import critical
from .renderer import RenderType, WindowData

WINDOW = WindowData(800, 600, "Physim")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the engine and run the game; return the process exit status."""
    parser = argparse.ArgumentParser(
        prog="physim", description="Run the particle demo in a window."
    )
    parser.parse_args(argv)

    engine = Engine.get_instance()
    try:
        engine.init(WindowData(WINDOW.width, WINDOW.height, WINDOW.name), RenderType.OPENGL)
    except RuntimeError:
        critical("Failed to init engine")
        return 1

    try:
        game = Game(engine)
        game.init()
        engine.run(game)
    finally:
        engine.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())