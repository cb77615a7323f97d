"""Process-wide engine facade that owns the core loop."""

from __future__ import annotations

import dataclasses
from typing import Any, Optional

from .core import CoreEngine
from .renderer import Context, Renderer, RenderType, WindowData
from .resource_manager import ResourceManager


class Engine:
    """Sets up the core engine and hands games to it."""

    _instance: Optional[Engine] = None

    def __init__(self) -> None:
        self._core: Optional[CoreEngine] = None

    @classmethod
    def get_instance(cls) -> Engine:
        """Return the shared engine, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def init(self, window_data: WindowData, render_type: RenderType) -> bool:
        """Create the window and core engine; raise if the window cannot be made."""
        ctx = Context(window_data=dataclasses.replace(window_data), api=render_type)
        self._core = CoreEngine(ctx)
        return True

    def shutdown(self) -> None:
        """Close the window and drop the core engine."""
        if self._core is not None:
            self._core.close()
            self._core = None

    def run(self, game: Any) -> None:
        """Run ``game`` until it or the window asks to quit."""
        if self._core is not None:
            self._core.set_game(game)
            self._core.run()

    def renderer(self) -> Optional[Renderer]:
        return self._core.renderer if self._core is not None else None

    def resource_manager(self) -> Optional[ResourceManager]:
        return self._core.resource_manager if self._core is not None else None

    def window_size(self) -> WindowData:
        if self._core is not None:
            return self._core.window_size()
        return WindowData(0, 0, "")