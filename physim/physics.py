"""Integrators, narrow-phase collision tests and the physics world."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Iterable, Optional

from .body import BodyType, CircleShape, Collision, RectangleShape, RigidBody
from .math2d import Vec2, clamp
from .spatial_hash import SpatialHash

CollisionCallback = Callable[[Collision], None]

_DEFAULT_GRAVITY = Vec2(0.0, 9.81)
_MAX_DT = 1.0 / 30.0
_CORRECTION_PERCENT = 0.2
_CORRECTION_SLOP = 0.01


class IntegrationMethod(Enum):
    VERLET = auto()
    LEAPFROG = auto()


class Solver(ABC):
    """Advances bodies through one time step."""

    def __init__(self) -> None:
        self.gravity = _DEFAULT_GRAVITY

    @abstractmethod
    def integrate(self, bodies: Iterable[RigidBody], dt: float) -> None:
        """Move every active dynamic body forward by ``dt``."""

    @staticmethod
    def _movable(bodies: Iterable[RigidBody]) -> Iterable[RigidBody]:
        return (b for b in bodies if b.body_type is not BodyType.STATIC and b.active)


class VerletSolver(Solver):
    """Position Verlet integration."""

    def integrate(self, bodies: Iterable[RigidBody], dt: float) -> None:
        for body in self._movable(bodies):
            body.apply_force(body.mass * self.gravity)
            old_position = body.position
            acceleration = body.force_accumulator * body.inv_mass
            body.velocity = body.velocity + acceleration * dt
            body.position = (
                2.0 * body.position - body.prev_position + acceleration * (dt * dt)
            )
            body.prev_position = old_position

            angular = body.torque_accumulator * body.inv_inertia
            body.angular_velocity += angular * dt
            body.rotation += angular * dt
            body.clear_forces()


class LeapFrogSolver(Solver):
    """Kick-drift-kick leapfrog integration."""

    def integrate(self, bodies: Iterable[RigidBody], dt: float) -> None:
        for body in self._movable(bodies):
            body.apply_force(body.mass * self.gravity)
            acceleration = body.force_accumulator * body.inv_mass
            half_kick = acceleration * (dt * 0.5)
            body.velocity = body.velocity + half_kick
            body.position = body.position + body.velocity * dt
            body.velocity = body.velocity + half_kick

            angular = body.torque_accumulator * body.inv_inertia
            body.angular_velocity += angular * dt
            body.rotation += body.angular_velocity * dt
            body.clear_forces()


def detect_collision(body_a: RigidBody, body_b: RigidBody) -> Optional[Collision]:
    """Return contact data for two overlapping bodies, or None."""
    shape_a, shape_b = body_a.shape, body_b.shape
    if shape_a is None or shape_b is None:
        return None
    if not body_a.aabb.overlaps(body_b.aabb):
        return None

    if isinstance(shape_a, CircleShape) and isinstance(shape_b, CircleShape):
        return circle_vs_circle(body_a, body_b)
    if isinstance(shape_a, RectangleShape) and isinstance(shape_b, RectangleShape):
        return rectangle_vs_rectangle(body_a, body_b)
    if isinstance(shape_a, CircleShape) and isinstance(shape_b, RectangleShape):
        return circle_vs_rectangle(body_a, body_b)
    if isinstance(shape_a, RectangleShape) and isinstance(shape_b, CircleShape):
        collision = circle_vs_rectangle(body_b, body_a)
        if collision is not None:
            collision.body_a, collision.body_b = collision.body_b, collision.body_a
            collision.normal = -collision.normal
        return collision
    return None


def circle_vs_circle(body_a: RigidBody, body_b: RigidBody) -> Optional[Collision]:
    """Test two circles; the normal points from A towards B."""
    radius_a = body_a.shape.radius
    radius_b = body_b.shape.radius
    direction = body_b.position - body_a.position
    distance_sq = direction.dot(direction)
    radius_sum = radius_a + radius_b
    if distance_sq > radius_sum * radius_sum:
        return None

    distance = math.sqrt(distance_sq)
    normal = direction / distance if distance > 0.0 else Vec2(1.0, 0.0)
    return Collision(
        body_a=body_a,
        body_b=body_b,
        normal=normal,
        contact_point=body_a.position + normal * radius_a,
        penetration=radius_sum - distance,
        has_collision=True,
    )


def rectangle_vs_rectangle(body_a: RigidBody, body_b: RigidBody) -> Optional[Collision]:
    """Test two axis-aligned rectangles along the axis of least overlap."""
    half_a = body_a.shape.size * 0.5
    half_b = body_b.shape.size * 0.5
    diff = body_b.position - body_a.position

    overlap_x = half_a.x + half_b.x - abs(diff.x)
    overlap_y = half_a.y + half_b.y - abs(diff.y)
    if overlap_x <= 0 or overlap_y <= 0:
        return None

    sign_x = -1.0 if diff.x < 0 else 1.0
    sign_y = -1.0 if diff.y < 0 else 1.0
    if overlap_x < overlap_y:
        penetration, normal = overlap_x, Vec2(sign_x, 0.0)
    else:
        penetration, normal = overlap_y, Vec2(0.0, sign_y)

    return Collision(
        body_a=body_a,
        body_b=body_b,
        normal=normal,
        contact_point=body_a.position + Vec2(sign_x * half_a.x, sign_y * half_a.y),
        penetration=penetration,
        has_collision=True,
    )


def circle_vs_rectangle(circle: RigidBody, rectangle: RigidBody) -> Optional[Collision]:
    """Test a circle against an axis-aligned rectangle."""
    radius = circle.shape.radius
    half = rectangle.shape.size * 0.5
    local = circle.position - rectangle.position
    closest = Vec2(clamp(local.x, -half.x, half.x), clamp(local.y, -half.y, half.y))

    to_circle = local - closest
    distance_sq = to_circle.dot(to_circle)
    if distance_sq > radius * radius:
        return None

    distance = math.sqrt(distance_sq)
    if distance > 0.0:
        normal = to_circle / distance
    else:
        overlap_x = half.x - abs(local.x)
        overlap_y = half.y - abs(local.y)
        if overlap_x < overlap_y:
            normal = Vec2(-1.0 if local.x < 0 else 1.0, 0.0)
        else:
            normal = Vec2(0.0, -1.0 if local.y < 0 else 1.0)

    return Collision(
        body_a=circle,
        body_b=rectangle,
        normal=normal,
        contact_point=circle.position - normal * radius,
        penetration=radius - distance,
        has_collision=True,
    )


@dataclass
class PhysicsConfig:
    gravity: float = 9.81
    gravity_vec: Vec2 = field(default_factory=lambda: _DEFAULT_GRAVITY)
    spatial_hash_cell_size: float = 100.0
    velocity_iterations: int = 8
    position_iterations: int = 3
    damping: float = 0.99


_SOLVERS: dict[IntegrationMethod, type[Solver]] = {
    IntegrationMethod.VERLET: VerletSolver,
    IntegrationMethod.LEAPFROG: LeapFrogSolver,
}


class PhysicsEngine:
    """A world of rigid bodies stepped with broad and narrow phase collision."""

    def __init__(self) -> None:
        self.config = PhysicsConfig()
        self._bodies: list[RigidBody] = []
        self._integration_method = IntegrationMethod.VERLET
        self._solver: Solver = VerletSolver()
        self._spatial_hash = SpatialHash(self.config.spatial_hash_cell_size)
        self._collision_callback: Optional[CollisionCallback] = None
        self._potential_collisions: list[tuple[RigidBody, RigidBody]] = []
        self._collisions: list[Collision] = []

    def __len__(self) -> int:
        return len(self._bodies)

    @property
    def bodies(self) -> tuple[RigidBody, ...]:
        return tuple(self._bodies)

    @property
    def collisions(self) -> tuple[Collision, ...]:
        """Contacts found by the most recent update."""
        return tuple(self._collisions)

    @property
    def solver(self) -> Solver:
        return self._solver

    @property
    def integration_method(self) -> IntegrationMethod:
        return self._integration_method

    def add_body(self, body: RigidBody) -> int:
        """Add a body and return its index."""
        self._bodies.append(body)
        return len(self._bodies) - 1

    def remove_body(self, index: int) -> None:
        """Remove the body at ``index``; out-of-range indices are ignored."""
        if 0 <= index < len(self._bodies):
            del self._bodies[index]

    def get_body(self, index: int) -> Optional[RigidBody]:
        """Return the body at ``index``, or None if out of range."""
        if 0 <= index < len(self._bodies):
            return self._bodies[index]
        return None

    def set_integration_method(self, method: IntegrationMethod) -> None:
        if method is self._integration_method:
            return
        self._integration_method = method
        self._solver = _SOLVERS[method]()

    def set_gravity(self, gravity: Vec2) -> None:
        self.config.gravity_vec = gravity

    def set_spatial_hash_cell_size(self, cell_size: float) -> None:
        self.config.spatial_hash_cell_size = cell_size
        self._spatial_hash = SpatialHash(cell_size)

    def set_collision_callback(self, callback: Optional[CollisionCallback]) -> None:
        self._collision_callback = callback

    def update(self, dt: float) -> None:
        """Step the world; non-positive steps are ignored, long ones capped at 1/30 s."""
        if dt <= 0.0:
            return
        dt = min(dt, _MAX_DT)

        for body in self._bodies:
            body.update_aabb()

        self._spatial_hash.clear()
        for body in self._bodies:
            if body.active:
                self._spatial_hash.insert(body)
        self._potential_collisions = self._spatial_hash.query_all_potential_collisions()

        self._narrow_phase()
        self._solver.integrate(self._bodies, dt)
        for collision in self._collisions:
            self._resolve(collision)

    def _narrow_phase(self) -> None:
        self._collisions = []
        for body_a, body_b in self._potential_collisions:
            if not (body_a.active and body_b.active):
                continue
            if body_a.body_type is BodyType.STATIC and body_b.body_type is BodyType.STATIC:
                continue
            collision = detect_collision(body_a, body_b)
            if collision is None:
                continue
            self._collisions.append(collision)
            if self._collision_callback is not None:
                self._collision_callback(collision)

    @staticmethod
    def _resolve(collision: Collision) -> None:
        body_a, body_b = collision.body_a, collision.body_b
        if body_a.body_type is BodyType.STATIC and body_b.body_type is BodyType.STATIC:
            return

        relative = body_b.velocity - body_a.velocity
        normal_velocity = relative.dot(collision.normal)
        if normal_velocity > 0:
            return

        inv_mass_sum = body_a.inv_mass + body_b.inv_mass
        restitution = min(body_a.restitution, body_b.restitution)
        j = -(1.0 + restitution) * normal_velocity / inv_mass_sum
        impulse = j * collision.normal

        a_dynamic = body_a.body_type is BodyType.DYNAMIC
        b_dynamic = body_b.body_type is BodyType.DYNAMIC
        if a_dynamic:
            body_a.apply_impulse(-impulse, collision.contact_point)
        if b_dynamic:
            body_b.apply_impulse(impulse, collision.contact_point)

        depth = max(collision.penetration - _CORRECTION_SLOP, 0.0)
        correction = collision.normal * (depth * _CORRECTION_PERCENT / inv_mass_sum)
        if a_dynamic:
            body_a.position = body_a.position - correction * body_a.inv_mass
        if b_dynamic:
            body_b.position = body_b.position + correction * body_b.inv_mass