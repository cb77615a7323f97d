"""The fixed-step game loop that drives input, updates and rendering."""

from __future__ import annotations

import copy
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Protocol

import pygame

from .logger import log, loop, warn
from .renderer import Context, Renderer, WindowData, create_renderer
from .resource_manager import ResourceManager


class GameLike(Protocol):
    """What the loop expects from a game."""

    @property
    def is_running(self) -> bool: ...

    def handle_input(self, event: Any) -> None: ...

    def update(self, delta_time: float) -> None: ...

    def render(self, renderer: Any) -> None: ...


def _ticks() -> int:
    """Milliseconds from a monotonic clock."""
    return int(time.monotonic() * 1000)


@dataclass
class GameLoopData:
    last_frame_time: int = 0
    last_fixed_update_time: int = 0
    accumulator: float = 0.0

    limit_frame_rate: bool = True
    target_fps: float = 165.0
    fixed_time_step: float = 1.0 / 165.0
    max_frame_time: float = 0.25

    frame_count: int = 0
    fixed_update_count: int = 0
    last_fps_update_time: int = 0
    fps_update_interval: int = 1000

    current_fps: float = 0.0

    max_updates_per_frame: int = 5


@dataclass
class PerformanceMetrics:
    avg_frame_time: float = 0.0
    avg_update_time: float = 0.0
    avg_render_time: float = 0.0

    history_size: int = 60
    history_index: int = 0

    frame_time_history: list[float] = field(default_factory=list)
    update_time_history: list[float] = field(default_factory=list)
    render_time_history: list[float] = field(default_factory=list)

    def __post_init__(self) -> None:
        for history in (
            self.frame_time_history,
            self.update_time_history,
            self.render_time_history,
        ):
            history.extend([0.0] * (self.history_size - len(history)))


class CoreEngine:
    """Owns the renderer and resources and runs the main loop."""

    def __init__(
        self,
        ctx: Context,
        *,
        renderer_factory: Callable[[Context], Renderer] = create_renderer,
        clock: Callable[[], int] = _ticks,
        event_source: Optional[Callable[[], Iterable[Any]]] = None,
    ) -> None:
        self._ctx = ctx
        self._clock = clock
        self._poll = event_source or (lambda: pygame.event.get())
        self._game: Optional[GameLike] = None
        self.quit_requested = False

        self.renderer = renderer_factory(ctx)
        self.resource_manager = ResourceManager()
        log("Core engine initialized")

        now = clock()
        self.loop_data = GameLoopData(
            last_frame_time=now,
            last_fixed_update_time=now,
            last_fps_update_time=now,
        )
        self._metrics = PerformanceMetrics()

    @property
    def performance_metrics(self) -> PerformanceMetrics:
        """A snapshot of the rolling timing averages."""
        return copy.deepcopy(self._metrics)

    def close(self) -> None:
        """Release the renderer's window, if it has one."""
        closer = getattr(self.renderer, "close", None)
        if callable(closer):
            closer()

    def set_game(self, game: Optional[GameLike]) -> None:
        self._game = game

    def window_size(self) -> WindowData:
        return self._ctx.window_data

    def run(self) -> None:
        """Loop until a quit is requested."""
        log("Starting main game loop")
        data = self.loop_data
        while not self.quit_requested:
            current = self._clock()
            delta = (current - data.last_frame_time) / 1000.0
            data.last_frame_time = current

            if delta > data.max_frame_time:
                warn(
                    "Frame time exceeded maximum threshold: ", delta,
                    "s. Capping to ", data.max_frame_time, "s",
                )
                delta = data.max_frame_time

            frame_start = self._clock()
            self.process_input()
            data.accumulator += delta

            update_start = self._clock()
            update_count = 0
            while data.accumulator >= data.fixed_time_step:
                self.fixed_update(data.fixed_time_step)
                data.accumulator -= data.fixed_time_step
                data.fixed_update_count += 1
                update_count += 1
                if update_count >= data.max_updates_per_frame:
                    warn(
                        "Too many updates in one frame: ", update_count,
                        ". Dropping remainder of time: ", data.accumulator,
                    )
                    data.accumulator = 0.0
                    break
            update_time = (self._clock() - update_start) / 1000.0

            self.variable_update(delta)
            alpha = data.accumulator / data.fixed_time_step

            render_start = self._clock()
            self.render(alpha)
            render_time = (self._clock() - render_start) / 1000.0

            frame_time = (self._clock() - frame_start) / 1000.0
            self.update_performance_metrics(frame_time, update_time, render_time)

            data.frame_count += 1
            if current - data.last_fps_update_time >= data.fps_update_interval:
                elapsed = (current - data.last_fps_update_time) / 1000.0
                fps = data.frame_count / elapsed
                frame_avg = elapsed / data.frame_count
                data.current_fps = fps
                loop(
                    f"FPS: {fps:.1f}",
                    f" | Frame time: {frame_avg * 1000.0:.2f}ms",
                    f" | Updates/s: {data.fixed_update_count / elapsed:.2f}",
                )
                data.frame_count = 0
                data.fixed_update_count = 0
                data.last_fps_update_time = current

            self.limit_frame_rate(current)
        log("Game loop terminated")

    def process_input(self) -> None:
        """Drain pending events, handling quit and resize and passing them to the game."""
        for event in self._poll():
            if event.type == pygame.QUIT:
                self.quit_requested = True
            if event.type == pygame.WINDOWRESIZED:
                self.renderer.resize()
            if self._game is not None:
                self._game.handle_input(event)
                if not self._game.is_running:
                    self.quit_requested = True

    def fixed_update(self, fixed_time_step: float) -> None:
        if self._game is not None:
            self._game.update(fixed_time_step)

    def variable_update(self, delta_time: float) -> None:
        """Per-frame hook with the real elapsed time; nothing needs it yet."""

    def render(self, interpolation: float) -> None:
        self.renderer.begin_frame()
        if self._game is not None:
            self._game.render(self.renderer)
        self.renderer.end_frame()

    def update_performance_metrics(
        self, frame_time: float, update_time: float, render_time: float
    ) -> None:
        """Record one frame's timings and refresh the rolling averages."""
        m = self._metrics
        i = m.history_index
        m.frame_time_history[i] = frame_time
        m.update_time_history[i] = update_time
        m.render_time_history[i] = render_time
        m.history_index = (i + 1) % m.history_size

        m.avg_frame_time = sum(m.frame_time_history) / m.history_size
        m.avg_update_time = sum(m.update_time_history) / m.history_size
        m.avg_render_time = sum(m.render_time_history) / m.history_size

    def limit_frame_rate(self, frame_start_time: int) -> int:
        """Sleep out the rest of the frame budget; return the milliseconds slept."""
        data = self.loop_data
        if not data.limit_frame_rate:
            return 0
        target = 1.0 / data.target_fps
        elapsed = (self._clock() - frame_start_time) / 1000.0
        if elapsed >= target:
            return 0
        sleep_ms = int((target - elapsed) * 1000)
        if 1 < sleep_ms < 100:
            time.sleep(sleep_ms / 1000.0)
            return sleep_ms
        return 0