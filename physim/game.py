"""The demo game: a sprite that follows the mouse."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import pygame

from .engine import Engine
from .logger import error, log, warn
from .math2d import Vec2
from .sprite import Sprite, TextureLoadError

PLAYER_TEXTURE_PATH = "assets/textures/white_particle.png"


class Game:
    """Draws a player sprite at the mouse position."""

    def __init__(
        self,
        engine: Optional[Any] = None,
        texture_path: Union[str, Path] = PLAYER_TEXTURE_PATH,
    ) -> None:
        self._engine = engine
        self.texture_path = texture_path
        self._running = True
        self.player_sprite: Optional[Sprite] = None
        self.player_position = Vec2(100.0, 100.0)
        self.player_velocity = Vec2(0.0, 0.0)
        self.player_speed = 200.0
        self.key_up = False
        self.key_down = False
        self.key_left = False
        self.key_right = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def engine(self) -> Any:
        return self._engine if self._engine is not None else Engine.get_instance()

    def init(self) -> None:
        """Load the player texture, centre the player and create its sprite."""
        log("Initializing game...")
        engine = self.engine
        renderer = engine.renderer()
        resources = engine.resource_manager()
        if renderer is None:
            error("No renderer available!")
            return
        if resources is None:
            error("No resource manager available!")
            return

        renderer.init_sprite_renderer()
        try:
            resources.load_texture("player", self.texture_path)
        except TextureLoadError:
            warn("Failed to load player texture, using fallback color")

        window = engine.window_size()
        self.player_position = Vec2(window.width / 2.0, window.height / 2.0)

        try:
            self.player_sprite = resources.create_sprite_with_native_size(
                "playerSprite", "player"
            )
        except KeyError:
            self.player_sprite = None
            error("Failed to create player sprite")
        else:
            self.player_sprite.position = self.player_position
            size = self.player_sprite.size
            log("Player sprite created with size: ", size.x, "x", size.y)
        log("Game initialized")

    def handle_input(self, event: Any) -> None:
        """Move the player to the mouse position."""
        pos = getattr(event, "pos", None)
        if pos is None:
            pos = pygame.mouse.get_pos()
        self.player_position = Vec2(float(pos[0]), float(pos[1]))

    def update(self, delta_time: float) -> None:
        if self.player_sprite is not None:
            self.player_sprite.position = self.player_position

    def render(self, renderer: Any) -> None:
        """Draw the player at a sixth of its texture size."""
        if renderer is None or self.player_sprite is None:
            return
        renderer.draw_texture(
            self.player_sprite.texture,
            self.player_position,
            self.player_sprite.size / 6.0,
        )