from pathlib import Path

import pytest
from PIL import Image

from physim.logger import set_log_file
from physim.math2d import Vec2
from physim.sprite import Sprite, Texture, TextureLoadError


@pytest.fixture(autouse=True)
def no_log_file():
    previous = set_log_file(None)
    yield
    set_log_file(previous)


def _save(tmp_path: Path, image: Image.Image, name: str = "img.png") -> Path:
    path = tmp_path / name
    image.save(path)
    return path


def test_load_rgb_dimensions(tmp_path):
    path = _save(tmp_path, Image.new("RGB", (4, 2), (10, 20, 30)))
    texture = Texture()
    texture.load_from_file(path)
    assert (texture.width, texture.height, texture.channels) == (4, 2, 3)
    assert texture.mode == "RGB"
    assert len(texture.pixels) == 4 * 2 * 3
    assert texture.path == path


def test_load_flips_vertically(tmp_path):
    image = Image.new("RGB", (1, 2))
    image.putpixel((0, 0), (255, 0, 0))
    image.putpixel((0, 1), (0, 0, 255))
    texture = Texture()
    texture.load_from_file(_save(tmp_path, image))
    assert texture.pixels[:3] == bytes((0, 0, 255))
    assert texture.pixels[3:] == bytes((255, 0, 0))


@pytest.mark.parametrize(
    "mode, channels",
    [("L", 1), ("LA", 2), ("RGB", 3), ("RGBA", 4)],
)
def test_channels_follow_image_mode(tmp_path, mode, channels):
    texture = Texture()
    texture.load_from_file(_save(tmp_path, Image.new(mode, (3, 3))))
    assert texture.channels == channels
    assert texture.mode == mode


def test_palette_image_becomes_rgb(tmp_path):
    path = _save(tmp_path, Image.new("P", (2, 2)))
    texture = Texture()
    texture.load_from_file(path)
    assert texture.channels == 3


def test_missing_file_raises(tmp_path):
    texture = Texture()
    with pytest.raises(TextureLoadError):
        texture.load_from_file(tmp_path / "absent.png")
    assert texture.width == 0


def test_non_image_file_raises(tmp_path):
    path = tmp_path / "bad.png"
    path.write_bytes(b"not an image at all")
    with pytest.raises(TextureLoadError):
        Texture().load_from_file(path)


def test_native_size_matches_dimensions(tmp_path):
    texture = Texture()
    texture.load_from_file(_save(tmp_path, Image.new("RGBA", (5, 7))))
    assert texture.native_size() == Vec2(5.0, 7.0)


def test_sprite_defaults():
    sprite = Sprite()
    assert sprite.position == Vec2(0.0, 0.0)
    assert sprite.size == Vec2(1.0, 1.0)
    assert sprite.rotation == 0.0
    assert sprite.color == (1.0, 1.0, 1.0, 1.0)
    assert sprite.texture is None


def test_sprite_init_sets_size():
    sprite = Sprite()
    sprite.init(32.0, 16.0)
    assert sprite.size == Vec2(32.0, 16.0)


def test_init_with_native_size(tmp_path):
    texture = Texture()
    texture.load_from_file(_save(tmp_path, Image.new("RGB", (6, 3))))
    sprite = Sprite()
    sprite.init_with_native_size(texture)
    assert sprite.texture is texture
    assert sprite.size == Vec2(6.0, 3.0)


def test_init_with_native_size_none_keeps_state():
    sprite = Sprite()
    sprite.init(2.0, 2.0)
    sprite.init_with_native_size(None)
    assert sprite.texture is None
    assert sprite.size == Vec2(2.0, 2.0)