"""Named storage for textures and the sprites built on them."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .logger import error, log, warn
from .sprite import Sprite, Texture, TextureLoadError


@dataclass(frozen=True)
class MemoryStats:
    total_texture_memory: int
    texture_count: int
    sprite_count: int


class ResourceManager:
    """Owns textures and sprites, each looked up by name."""

    def __init__(self) -> None:
        self._textures: dict[str, Texture] = {}
        self._sprites: dict[str, Sprite] = {}
        log("ResourceManager initialized")

    def __enter__(self) -> ResourceManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()

    def load_texture(self, name: str, filepath: Union[str, Path]) -> Texture:
        """Load and register a texture; an existing name returns the stored one."""
        existing = self._textures.get(name)
        if existing is not None:
            warn("Texture '", name, "' already exists")
            return existing

        texture = Texture()
        try:
            texture.load_from_file(filepath)
        except TextureLoadError:
            error("Failed to load texture: ", name, " from ", filepath)
            raise
        self._textures[name] = texture
        log("Loaded texture: ", name, " from ", filepath)
        return texture

    def get_texture(self, name: str) -> Optional[Texture]:
        """Return the named texture, or None if there is none."""
        texture = self._textures.get(name)
        if texture is None:
            warn("Texture '", name, "' not found")
        return texture

    def unload_texture(self, name: str) -> None:
        """Drop a texture unless a sprite still uses it."""
        texture = self._textures.get(name)
        if texture is None:
            return
        for sprite_name, sprite in self._sprites.items():
            if sprite.texture is texture:
                warn(
                    "Cannot unload texture '", name,
                    "' as it's used by sprite '", sprite_name, "'",
                )
                return
        del self._textures[name]
        log("Unloaded texture: ", name)

    def _texture_for_sprite(self, name: str, texture_name: str) -> Texture:
        texture = self.get_texture(texture_name)
        if texture is None:
            error("Cannot create sprite '", name, "': texture '", texture_name, "' not found")
            raise KeyError(texture_name)
        return texture

    def create_sprite(
        self, name: str, width: float, height: float, texture_name: str
    ) -> Sprite:
        """Create a sprite of the given size; raise KeyError if the texture is unknown."""
        existing = self._sprites.get(name)
        if existing is not None:
            warn("Sprite '", name, "' already exists")
            return existing

        texture = self._texture_for_sprite(name, texture_name)
        sprite = Sprite()
        sprite.init(width, height)
        sprite.texture = texture
        self._sprites[name] = sprite
        log("Created sprite: ", name)
        return sprite

    def create_sprite_with_native_size(self, name: str, texture_name: str) -> Sprite:
        """Create a sprite sized to its texture; raise KeyError if the texture is unknown."""
        existing = self._sprites.get(name)
        if existing is not None:
            warn("Sprite '", name, "' already exists")
            return existing

        texture = self._texture_for_sprite(name, texture_name)
        sprite = Sprite()
        sprite.init_with_native_size(texture)
        self._sprites[name] = sprite
        log(
            "Created sprite: ", name, " with native texture size ",
            sprite.size.x, "x", sprite.size.y,
        )
        return sprite

    def get_sprite(self, name: str) -> Optional[Sprite]:
        """Return the named sprite, or None if there is none."""
        sprite = self._sprites.get(name)
        if sprite is None:
            warn("Sprite '", name, "' not found")
        return sprite

    def destroy_sprite(self, name: str) -> None:
        if self._sprites.pop(name, None) is not None:
            log("Destroyed sprite: ", name)

    def cleanup(self) -> None:
        """Forget every sprite and texture."""
        self._sprites.clear()
        self._textures.clear()
        log("Resource Manager cleanup complete")

    def memory_stats(self) -> MemoryStats:
        """Return counts and the total pixel bytes of all textures."""
        total = sum(t.width * t.height * t.channels for t in self._textures.values())
        return MemoryStats(
            total_texture_memory=total,
            texture_count=len(self._textures),
            sprite_count=len(self._sprites),
        )