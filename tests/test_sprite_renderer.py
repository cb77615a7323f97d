import math

import pygame
import pytest
from PIL import Image

from physim.logger import set_log_file
from physim.math2d import Vec2
from physim.sprite import Sprite, Texture
from physim.sprite_renderer import SpriteRenderer, model_matrix, ortho


@pytest.fixture(autouse=True)
def _no_log_file():
    previous = set_log_file(None)
    yield
    set_log_file(previous)


def _apply(matrix, x, y):
    point = (x, y, 0.0, 1.0)
    return tuple(sum(m * p for m, p in zip(row, point)) for row in matrix[:2])


def _texture(width, height, rgba):
    texture = Texture()
    texture.width = width
    texture.height = height
    texture.channels = 4
    texture.pixels = bytes(rgba) * (width * height)
    return texture


@pytest.fixture
def renderer():
    r = SpriteRenderer()
    r.init(10, 10)
    return r


@pytest.fixture
def target():
    surface = pygame.Surface((10, 10))
    surface.fill((0, 0, 0))
    return surface


def test_ortho_maps_screen_corners_to_clip_space():
    proj = ortho(0.0, 640.0, 480.0, 0.0, -1.0, 1.0)
    assert _apply(proj, 0.0, 0.0) == pytest.approx((-1.0, 1.0))
    assert _apply(proj, 640.0, 480.0) == pytest.approx((1.0, -1.0))
    assert _apply(proj, 320.0, 240.0) == pytest.approx((0.0, 0.0))


def test_model_matrix_without_rotation_spans_rectangle():
    position, size = Vec2(50.0, 30.0), Vec2(20.0, 10.0)
    model = model_matrix(position, size, 0.0)
    assert _apply(model, 0.0, 0.0) == pytest.approx((position.x - 10.0, position.y - 5.0))
    assert _apply(model, 1.0, 1.0) == pytest.approx((position.x + 10.0, position.y + 5.0))


def test_model_matrix_rotation_keeps_centre_fixed():
    position, size = Vec2(12.0, -4.0), Vec2(6.0, 2.0)
    model = model_matrix(position, size, 1.1)
    assert _apply(model, 0.5, 0.5) == pytest.approx((position.x, position.y))


def test_model_matrix_rotation_preserves_edge_length():
    size = Vec2(6.0, 2.0)
    model = model_matrix(Vec2(0.0, 0.0), size, math.pi / 3)
    ax, ay = _apply(model, 0.0, 0.0)
    bx, by = _apply(model, 1.0, 0.0)
    assert math.hypot(bx - ax, by - ay) == pytest.approx(size.x)


def test_draw_texture_places_quad_centred(renderer, target):
    renderer.begin(target)
    rect = renderer.draw_texture(_texture(2, 2, (255, 0, 0, 255)), Vec2(5.0, 5.0), Vec2(4.0, 4.0))
    assert rect.center == (5, 5)
    assert rect.size == (4, 4)
    assert target.get_at((5, 5)) == pygame.Color(255, 0, 0, 255)
    assert target.get_at((0, 0)) == pygame.Color(0, 0, 0, 255)


def test_draw_sprite_without_texture_is_skipped(renderer, target):
    renderer.begin(target)
    assert renderer.draw_sprite(Sprite()) is None
    assert renderer.end() == 0


def test_end_reports_draw_count(renderer, target):
    texture = _texture(1, 1, (255, 255, 255, 255))
    renderer.begin(target)
    renderer.draw_texture(texture, Vec2(2.0, 2.0), Vec2(2.0, 2.0))
    renderer.draw_texture(texture, Vec2(7.0, 7.0), Vec2(2.0, 2.0))
    assert renderer.end() == 2


def test_drawing_outside_a_batch_raises(renderer):
    with pytest.raises(RuntimeError):
        renderer.draw_texture(_texture(1, 1, (1, 2, 3, 255)), Vec2(1.0, 1.0))


def test_colour_tints_texture(renderer, target):
    renderer.begin(target)
    renderer.draw_texture(
        _texture(1, 1, (255, 255, 255, 255)),
        Vec2(5.0, 5.0),
        Vec2(4.0, 4.0),
        0.0,
        (1.0, 0.0, 0.0, 1.0),
    )
    assert target.get_at((5, 5)) == pygame.Color(255, 0, 0, 255)


def test_quarter_turn_swaps_dimensions(renderer, target):
    renderer.begin(target)
    rect = renderer.draw_texture(
        _texture(1, 1, (0, 255, 0, 255)), Vec2(5.0, 5.0), Vec2(4.0, 2.0), math.pi / 2
    )
    assert rect.size == (2, 4)
    assert rect.center == (5, 5)


def test_draw_sprite_uses_sprite_fields(renderer, target):
    sprite = Sprite(position=Vec2(5.0, 5.0), size=Vec2(2.0, 2.0))
    sprite.texture = _texture(1, 1, (0, 0, 255, 255))
    renderer.begin(target)
    rect = renderer.draw_sprite(sprite)
    assert rect.center == (5, 5)
    assert target.get_at((5, 5)) == pygame.Color(0, 0, 255, 255)


def test_loaded_texture_is_drawn_upright(tmp_path):
    image = Image.new("RGB", (1, 2))
    image.putpixel((0, 0), (255, 0, 0))
    image.putpixel((0, 1), (0, 0, 255))
    path = tmp_path / "upright.png"
    image.save(path)
    texture = Texture()
    texture.load_from_file(path)

    renderer = SpriteRenderer()
    renderer.init(4, 4)
    target = pygame.Surface((4, 4))
    renderer.begin(target)
    renderer.draw_texture(texture, Vec2(1.0, 2.0), Vec2(2.0, 4.0))
    assert target.get_at((0, 0))[:3] == (255, 0, 0)
    assert target.get_at((0, 3))[:3] == (0, 0, 255)


def test_resize_changes_projection(renderer):
    renderer.resize(200, 100)
    assert _apply(renderer.projection, 200.0, 100.0) == pytest.approx((1.0, -1.0))