"""Projection and model matrices, and a renderer that blits sprites with pygame."""

from __future__ import annotations

import math
import weakref
from typing import Optional

import pygame
from PIL import Image

from .logger import log, warn
from .math2d import Vec2, clamp
from .sprite import Color, Sprite, Texture

Row = tuple[float, float, float, float]
Matrix4 = tuple[Row, Row, Row, Row]

WHITE: Color = (1.0, 1.0, 1.0, 1.0)


def _identity() -> Matrix4:
    return (
        (1.0, 0.0, 0.0, 0.0),
        (0.0, 1.0, 0.0, 0.0),
        (0.0, 0.0, 1.0, 0.0),
        (0.0, 0.0, 0.0, 1.0),
    )


def _multiply(a: Matrix4, b: Matrix4) -> Matrix4:
    columns = tuple(zip(*b))
    return tuple(
        tuple(sum(x * y for x, y in zip(row, column)) for column in columns)
        for row in a
    )  # type: ignore[return-value]


def _translation(x: float, y: float) -> Matrix4:
    return (
        (1.0, 0.0, 0.0, x),
        (0.0, 1.0, 0.0, y),
        (0.0, 0.0, 1.0, 0.0),
        (0.0, 0.0, 0.0, 1.0),
    )


def _rotation_z(angle: float) -> Matrix4:
    c, s = math.cos(angle), math.sin(angle)
    return (
        (c, -s, 0.0, 0.0),
        (s, c, 0.0, 0.0),
        (0.0, 0.0, 1.0, 0.0),
        (0.0, 0.0, 0.0, 1.0),
    )


def _scaling(x: float, y: float) -> Matrix4:
    return (
        (x, 0.0, 0.0, 0.0),
        (0.0, y, 0.0, 0.0),
        (0.0, 0.0, 1.0, 0.0),
        (0.0, 0.0, 0.0, 1.0),
    )


def _apply(matrix: Matrix4, x: float, y: float) -> tuple[float, float]:
    point = (x, y, 0.0, 1.0)
    px, py = (sum(m * p for m, p in zip(row, point)) for row in matrix[:2])
    return px, py


def ortho(
    left: float, right: float, bottom: float, top: float, near: float, far: float
) -> Matrix4:
    """Return an orthographic projection matrix (rows of a column-vector transform)."""
    return (
        (2.0 / (right - left), 0.0, 0.0, -(right + left) / (right - left)),
        (0.0, 2.0 / (top - bottom), 0.0, -(top + bottom) / (top - bottom)),
        (0.0, 0.0, -2.0 / (far - near), -(far + near) / (far - near)),
        (0.0, 0.0, 0.0, 1.0),
    )


def model_matrix(position: Vec2, size: Vec2, rotation: float = 0.0) -> Matrix4:
    """Map the unit square onto a rectangle centred on ``position``, rotated about its centre."""
    model = _translation(position.x - size.x / 2.0, position.y - size.y / 2.0)
    if rotation != 0.0:
        model = _multiply(model, _translation(size.x * 0.5, size.y * 0.5))
        model = _multiply(model, _rotation_z(rotation))
        model = _multiply(model, _translation(-size.x * 0.5, -size.y * 0.5))
    return _multiply(model, _scaling(size.x, size.y))


def _to_byte(channel: float) -> int:
    return int(round(clamp(channel, 0.0, 1.0) * 255))


class SpriteRenderer:
    """Draws textured quads onto a pygame surface using a screen-space projection."""

    def __init__(self) -> None:
        self.projection: Matrix4 = _identity()
        self.draw_calls = 0
        self._target: Optional[pygame.Surface] = None
        self._surfaces: weakref.WeakKeyDictionary[Texture, tuple[bytes, pygame.Surface]] = (
            weakref.WeakKeyDictionary()
        )

    def init(self, screen_width: int, screen_height: int) -> None:
        """Set up the projection for a screen of the given size."""
        self.resize(screen_width, screen_height)
        log("Sprite renderer ready for ", screen_width, "x", screen_height)

    def resize(self, screen_width: int, screen_height: int) -> None:
        """Rebuild the projection with the origin at the top-left corner."""
        self.projection = ortho(
            0.0, float(screen_width), float(screen_height), 0.0, -1.0, 1.0
        )

    def begin(self, target: pygame.Surface) -> None:
        """Start a batch of draws onto ``target``."""
        self._target = target
        self.draw_calls = 0

    def end(self) -> int:
        """Finish the batch and return how many quads were drawn."""
        count = self.draw_calls
        self._target = None
        return count

    def draw_sprite(self, sprite: Sprite) -> Optional[pygame.Rect]:
        """Draw a sprite; return the covered rectangle, or None if it has no texture."""
        if sprite.texture is None:
            warn("Attempting to draw sprite with no texture")
            return None
        return self._draw(
            sprite.texture, sprite.position, sprite.size, sprite.rotation, sprite.color
        )

    def draw_texture(
        self,
        texture: Optional[Texture],
        position: Vec2,
        size: Vec2 = Vec2(1.0, 1.0),
        rotation: float = 0.0,
        color: Color = WHITE,
    ) -> Optional[pygame.Rect]:
        """Draw a texture centred on ``position``; return the covered rectangle."""
        if texture is None:
            warn("Attempting to draw sprite with no texture")
            return None
        return self._draw(texture, position, size, rotation, color)

    def _surface_for(self, texture: Texture) -> pygame.Surface:
        cached = self._surfaces.get(texture)
        if cached is not None and cached[0] is texture.pixels:
            return cached[1]
        image = Image.frombytes(texture.mode, (texture.width, texture.height), texture.pixels)
        image = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM).convert("RGBA")
        surface = pygame.image.frombuffer(image.tobytes(), image.size, "RGBA").copy()
        self._surfaces[texture] = (texture.pixels, surface)
        return surface

    def _draw(
        self, texture: Texture, position: Vec2, size: Vec2, rotation: float, color: Color
    ) -> Optional[pygame.Rect]:
        target = self._target
        if target is None:
            raise RuntimeError("begin() must be called before drawing")
        if texture.width == 0 or texture.height == 0 or not texture.mode:
            warn("Attempting to draw sprite with an empty texture")
            return None

        target_w, target_h = target.get_size()
        mvp = _multiply(self.projection, model_matrix(position, size, rotation))
        ndc_x, ndc_y = _apply(mvp, 0.5, 0.5)
        centre = (
            round((ndc_x + 1.0) * 0.5 * target_w),
            round((1.0 - ndc_y) * 0.5 * target_h),
        )

        width = size.x * self.projection[0][0] * target_w / 2.0
        height = -size.y * self.projection[1][1] * target_h / 2.0
        image = pygame.transform.scale(
            self._surface_for(texture),
            (max(1, round(abs(width))), max(1, round(abs(height)))),
        )
        if width < 0 or height < 0:
            image = pygame.transform.flip(image, width < 0, height < 0)
        if tuple(color) != WHITE:
            image.fill(tuple(_to_byte(c) for c in color), special_flags=pygame.BLEND_RGBA_MULT)
        if rotation != 0.0:
            image = pygame.transform.rotate(image, -math.degrees(rotation))

        rect = image.get_rect(center=centre)
        target.blit(image, rect)
        self.draw_calls += 1
        return rect