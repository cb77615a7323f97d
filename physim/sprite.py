"""Textures loaded from image files and the sprites that display them."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from .logger import error, log, warn
from .math2d import Vec2

Color = tuple[float, float, float, float]

_CHANNELS_BY_MODE = {"L": 1, "LA": 2, "RGB": 3, "RGBA": 4}
_MODE_BY_CHANNELS = {channels: mode for mode, channels in _CHANNELS_BY_MODE.items()}


class TextureLoadError(OSError):
    """Raised when an image file cannot be read as a texture."""


def _normalise(image: Image.Image) -> Image.Image:
    """Convert an image to an 8-bit mode with 1 to 4 channels."""
    mode = image.mode
    if mode in _CHANNELS_BY_MODE:
        return image
    if mode == "P":
        return image.convert("RGBA" if "transparency" in image.info else "RGB")
    if mode in ("PA", "RGBa"):
        return image.convert("RGBA")
    if mode == "La":
        return image.convert("LA")
    if mode == "1" or mode.startswith("I") or mode == "F":
        return image.convert("L")
    return image.convert("RGB")


class Texture:
    """Pixel data of an image, stored bottom row first."""

    def __init__(self) -> None:
        self.width = 0
        self.height = 0
        self.channels = 0
        self.pixels = b""
        self.path: Optional[Path] = None

    @property
    def mode(self) -> str:
        """The image mode matching the channel count, or an empty string."""
        return _MODE_BY_CHANNELS.get(self.channels, "")

    def load_from_file(self, path: Union[str, Path]) -> None:
        """Read an image file, flipping it vertically; raise TextureLoadError on failure."""
        source = Path(path)
        try:
            with Image.open(source) as opened:
                opened.load()
                image = _normalise(opened)
        except (OSError, UnidentifiedImageError, ValueError) as exc:
            error("Failed to load texture: ", source)
            raise TextureLoadError(f"cannot load texture from {source}") from exc

        image = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
        self.width, self.height = image.size
        self.channels = _CHANNELS_BY_MODE[image.mode]
        self.pixels = image.tobytes()
        self.path = source
        log(
            "Loaded texture: ", source, " (", self.width, "x", self.height,
            ", ", self.channels, " channels)",
        )

    def native_size(self) -> Vec2:
        """Return the texture's width and height in pixels."""
        return Vec2(float(self.width), float(self.height))


@dataclass(eq=False)
class Sprite:
    """A textured, coloured rectangle placed by its centre."""

    position: Vec2 = field(default_factory=Vec2)
    size: Vec2 = field(default_factory=lambda: Vec2(1.0, 1.0))
    rotation: float = 0.0
    color: Color = (1.0, 1.0, 1.0, 1.0)
    texture: Optional[Texture] = None

    def init(self, width: float, height: float) -> None:
        """Set the sprite's size."""
        self.size = Vec2(width, height)

    def init_with_native_size(self, texture: Optional[Texture]) -> None:
        """Use ``texture`` and take its pixel size; a missing texture is ignored."""
        if texture is None:
            warn("Cannot initialize sprite with null texture")
            return
        self.texture = texture
        self.size = texture.native_size()
        log("Initialized sprite with native texture size: ", self.size.x, "x", self.size.y)