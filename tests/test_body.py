import math

import pytest

from physim.body import (
    AABB,
    BodyType,
    CircleShape,
    Collision,
    RectangleShape,
    RigidBody,
    Shape,
    ShapeType,
)
from physim.math2d import Vec2


def test_shape_types():
    assert CircleShape(1.0).shape_type is ShapeType.CIRCLE
    assert RectangleShape(Vec2(1.0, 2.0)).shape_type is ShapeType.RECTANGLE


def test_shape_base_is_abstract():
    with pytest.raises(TypeError):
        Shape()  # type: ignore[abstract]


def test_aabb_overlap_is_symmetric_and_inclusive():
    a = AABB(Vec2(0.0, 0.0), Vec2(1.0, 1.0))
    touching = AABB(Vec2(1.0, 0.0), Vec2(2.0, 1.0))
    apart = AABB(Vec2(3.0, 3.0), Vec2(4.0, 4.0))
    assert a.overlaps(touching) and touching.overlaps(a)
    assert not a.overlaps(apart) and not apart.overlaps(a)


def test_aabb_center_and_extent_rebuild_box():
    box = AABB(Vec2(-2.0, 1.0), Vec2(6.0, 5.0))
    assert box.center() - box.extent() == box.min
    assert box.center() + box.extent() == box.max


def test_default_body():
    body = RigidBody()
    assert body.body_type is BodyType.DYNAMIC
    assert body.active
    assert body.restitution == 0.5
    assert body.friction == 0.2
    body.update_aabb()
    assert body.aabb == AABB()


def test_dynamic_circle():
    pos = Vec2(10.0, 20.0)
    body = RigidBody.create_circle(BodyType.DYNAMIC, pos, 3.0, 2.0)
    assert body.mass == 2.0
    assert body.inv_mass * body.mass == pytest.approx(1.0)
    assert body.inertia * body.inv_inertia == pytest.approx(1.0)
    assert body.prev_position == pos
    assert body.aabb.center() == pos
    assert body.aabb.extent() == Vec2(3.0, 3.0)


@pytest.mark.parametrize("factory_args", [
    ("create_circle", (4.0,)),
    ("create_rectangle", (Vec2(2.0, 3.0),)),
])
def test_static_bodies_have_no_mass(factory_args):
    name, extra = factory_args
    body = getattr(RigidBody, name)(BodyType.STATIC, Vec2(1.0, 1.0), *extra, 5.0)
    assert (body.mass, body.inv_mass, body.inertia, body.inv_inertia) == (0.0, 0.0, 0.0, 0.0)


def test_rectangle_aabb_unrotated():
    size = Vec2(4.0, 2.0)
    body = RigidBody.create_rectangle(BodyType.DYNAMIC, Vec2(5.0, 5.0), size)
    assert body.aabb.extent() == size * 0.5
    assert body.aabb.center() == Vec2(5.0, 5.0)


def test_rectangle_aabb_quarter_turn_swaps_extent():
    body = RigidBody.create_rectangle(BodyType.DYNAMIC, Vec2(0.0, 0.0), Vec2(4.0, 2.0))
    body.rotation = math.pi / 2
    body.update_aabb()
    ext = body.aabb.extent()
    assert ext.x == pytest.approx(1.0)
    assert ext.y == pytest.approx(2.0)


def test_rotated_aabb_contains_unrotated_box_diagonal():
    body = RigidBody.create_rectangle(BodyType.DYNAMIC, Vec2(0.0, 0.0), Vec2(2.0, 2.0))
    body.rotation = math.pi / 4
    body.update_aabb()
    ext = body.aabb.extent()
    assert ext.x > 1.0 and ext.y > 1.0
    assert ext.x == pytest.approx(ext.y)


def test_forces_accumulate_and_clear():
    body = RigidBody()
    body.apply_force(Vec2(1.0, 2.0))
    body.apply_force(Vec2(3.0, 4.0))
    assert body.force_accumulator == Vec2(4.0, 6.0)
    body.apply_force_at_point(Vec2(0.0, 2.0), Vec2(1.0, 0.0))
    assert body.torque_accumulator == 2.0
    body.clear_forces()
    assert body.force_accumulator == Vec2()
    assert body.torque_accumulator == 0.0


def test_force_through_centre_gives_no_torque():
    body = RigidBody(position=Vec2(3.0, 3.0))
    body.apply_force_at_point(Vec2(5.0, -1.0), Vec2(3.0, 3.0))
    assert body.torque_accumulator == 0.0


def test_impulse_changes_velocity():
    body = RigidBody.create_circle(BodyType.DYNAMIC, Vec2(0.0, 0.0), 1.0, 2.0)
    body.apply_impulse(Vec2(4.0, 0.0), Vec2(0.0, 0.0))
    assert body.velocity == Vec2(4.0, 0.0) * body.inv_mass
    assert body.angular_velocity == 0.0


def test_impulse_off_centre_spins():
    body = RigidBody.create_circle(BodyType.DYNAMIC, Vec2(0.0, 0.0), 1.0)
    body.apply_impulse(Vec2(0.0, 1.0), Vec2(1.0, 0.0))
    assert body.angular_velocity > 0.0


def test_impulse_ignored_by_static_body():
    body = RigidBody.create_circle(BodyType.STATIC, Vec2(0.0, 0.0), 1.0)
    body.apply_impulse(Vec2(5.0, 5.0), Vec2(1.0, 0.0))
    assert body.velocity == Vec2()
    assert body.angular_velocity == 0.0


def test_bodies_compare_by_identity():
    a = RigidBody()
    b = RigidBody()
    assert a != b
    assert a == a


def test_collision_defaults():
    c = Collision()
    assert c.body_a is None and c.body_b is None
    assert c.normal == Vec2() and c.contact_point == Vec2()
    assert c.penetration == 0.0
    assert c.has_collision is False