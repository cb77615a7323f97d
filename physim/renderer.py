"""Renderer interface, window context and the pygame-backed renderer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

import pygame

from .logger import critical, log, warn
from .math2d import Vec2
from .sprite import Color, Sprite, Texture
from .sprite_renderer import WHITE, SpriteRenderer

_GREY = int(0.3 * 255 + 0.5)
CLEAR_COLOR = (_GREY, _GREY, _GREY)


class RenderType(Enum):
    OPENGL = auto()
    OPENGL_ES_3 = auto()
    SOFTWARE = auto()


@dataclass
class WindowData:
    width: int
    height: int
    name: str = ""


@dataclass
class Context:
    window_data: WindowData = field(default_factory=lambda: WindowData(0, 0, ""))
    api: RenderType = RenderType.OPENGL


class Renderer(ABC):
    """What the engine needs from a drawing backend."""

    @abstractmethod
    def begin_frame(self) -> None:
        """Clear the frame and start drawing."""

    @abstractmethod
    def render(self) -> None:
        """Present what has been drawn so far."""

    @abstractmethod
    def end_frame(self) -> None:
        """Finish drawing and show the frame."""

    @abstractmethod
    def resize(self) -> None:
        """Adopt the window's current size."""

    @abstractmethod
    def init_sprite_renderer(self) -> None:
        """Create a fresh sprite renderer."""

    @abstractmethod
    def draw_sprite(self, sprite: Sprite) -> Optional[pygame.Rect]:
        """Draw a sprite."""

    @abstractmethod
    def draw_texture(
        self,
        texture: Optional[Texture],
        position: Vec2,
        size: Vec2 = Vec2(1.0, 1.0),
        rotation: float = 0.0,
        color: Color = WHITE,
    ) -> Optional[pygame.Rect]:
        """Draw a texture centred on a position."""


class PygameRenderer(Renderer):
    """Draws into a resizable pygame window."""

    def __init__(self, ctx: Context) -> None:
        log("Init ", ctx.api.name, " renderer")
        self._ctx = ctx
        self.sprite_renderer: Optional[SpriteRenderer] = None
        window = ctx.window_data
        try:
            pygame.display.init()
            pygame.display.set_mode((window.width, window.height), pygame.RESIZABLE)
        except pygame.error as exc:
            critical("Failed to create window")
            raise RuntimeError("failed to create window") from exc
        pygame.display.set_caption(window.name)
        log("Display driver: ", pygame.display.get_driver())
        self.init_sprite_renderer()

    @property
    def ctx(self) -> Context:
        return self._ctx

    @property
    def surface(self) -> pygame.Surface:
        """The window's drawing surface."""
        surface = pygame.display.get_surface()
        if surface is None:
            raise RuntimeError("the window has been closed")
        return surface

    def close(self) -> None:
        """Destroy the window."""
        pygame.display.quit()

    def begin_frame(self) -> None:
        surface = self.surface
        surface.fill(CLEAR_COLOR)
        if self.sprite_renderer is not None:
            self.sprite_renderer.begin(surface)

    def render(self) -> None:
        pygame.display.flip()

    def end_frame(self) -> None:
        if self.sprite_renderer is not None:
            self.sprite_renderer.end()
        self.render()

    def resize(self) -> None:
        window = self._ctx.window_data
        window.width, window.height = self.surface.get_size()
        if self.sprite_renderer is not None:
            self.sprite_renderer.resize(window.width, window.height)

    def init_sprite_renderer(self) -> None:
        self.sprite_renderer = SpriteRenderer()
        window = self._ctx.window_data
        self.sprite_renderer.init(window.width, window.height)
        log("Sprite renderer initialized")

    def draw_sprite(self, sprite: Sprite) -> Optional[pygame.Rect]:
        if self.sprite_renderer is None:
            return None
        return self.sprite_renderer.draw_sprite(sprite)

    def draw_texture(
        self,
        texture: Optional[Texture],
        position: Vec2,
        size: Vec2 = Vec2(1.0, 1.0),
        rotation: float = 0.0,
        color: Color = WHITE,
    ) -> Optional[pygame.Rect]:
        if self.sprite_renderer is None:
            return None
        return self.sprite_renderer.draw_texture(texture, position, size, rotation, color)


def create_renderer(ctx: Context) -> Renderer:
    """Build the renderer for ``ctx.api``; unsupported kinds fall back with a warning."""
    if ctx.api in (RenderType.OPENGL, RenderType.OPENGL_ES_3):
        return PygameRenderer(ctx)
    warn("Unknown Renderer, defaulting to OpenGL Renderer.")
    return PygameRenderer(ctx)