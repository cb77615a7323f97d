"""Rigid bodies, collision shapes and bounding boxes."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from functools import reduce
from typing import Optional

from .math2d import Vec2


class BodyType(Enum):
    STATIC = auto()
    DYNAMIC = auto()


class ShapeType(Enum):
    CIRCLE = auto()
    RECTANGLE = auto()


class Shape(ABC):
    """A collision shape centred on its body's position."""

    @property
    @abstractmethod
    def shape_type(self) -> ShapeType:
        """The kind of shape."""


@dataclass
class CircleShape(Shape):
    radius: float

    @property
    def shape_type(self) -> ShapeType:
        return ShapeType.CIRCLE


@dataclass
class RectangleShape(Shape):
    size: Vec2

    @property
    def shape_type(self) -> ShapeType:
        return ShapeType.RECTANGLE


@dataclass
class AABB:
    """Axis-aligned bounding box."""

    min: Vec2 = field(default_factory=Vec2)
    max: Vec2 = field(default_factory=Vec2)

    def overlaps(self, other: AABB) -> bool:
        """Return True if the boxes touch or intersect."""
        return (
            self.min.x <= other.max.x
            and self.max.x >= other.min.x
            and self.min.y <= other.max.y
            and self.max.y >= other.min.y
        )

    def center(self) -> Vec2:
        return (self.min + self.max) * 0.5

    def extent(self) -> Vec2:
        return (self.max - self.min) * 0.5


@dataclass(eq=False)
class RigidBody:
    """A 2D rigid body; compared by identity."""

    body_type: BodyType = BodyType.DYNAMIC
    id: str = ""
    active: bool = True

    position: Vec2 = field(default_factory=Vec2)
    prev_position: Vec2 = field(default_factory=Vec2)
    rotation: float = 0.0

    velocity: Vec2 = field(default_factory=Vec2)
    acceleration: Vec2 = field(default_factory=Vec2)
    angular_velocity: float = 0.0

    mass: float = 1.0
    inv_mass: float = 1.0
    inertia: float = 1.0
    inv_inertia: float = 1.0

    restitution: float = 0.5
    friction: float = 0.2

    force_accumulator: Vec2 = field(default_factory=Vec2)
    torque_accumulator: float = 0.0

    shape: Optional[Shape] = None
    aabb: AABB = field(default_factory=AABB)

    @classmethod
    def _create(
        cls, body_type: BodyType, position: Vec2, shape: Shape, mass: float, inertia: float
    ) -> RigidBody:
        body = cls(body_type=body_type, position=position, prev_position=position, shape=shape)
        if body_type is BodyType.STATIC:
            body.mass = body.inv_mass = body.inertia = body.inv_inertia = 0.0
        else:
            body.mass = mass
            body.inv_mass = 1.0 / mass
            body.inertia = inertia
            body.inv_inertia = 1.0 / inertia
        body.update_aabb()
        return body

    @classmethod
    def create_circle(
        cls, body_type: BodyType, position: Vec2, radius: float, mass: float = 1.0
    ) -> RigidBody:
        """Build a circular body with inertia of a solid disc."""
        return cls._create(
            body_type, position, CircleShape(radius), mass, 0.5 * mass * radius * radius
        )

    @classmethod
    def create_rectangle(
        cls, body_type: BodyType, position: Vec2, size: Vec2, mass: float = 1.0
    ) -> RigidBody:
        """Build a rectangular body with inertia of a solid box."""
        inertia = (1.0 / 12.0) * mass * (size.x * size.x + size.y * size.y)
        return cls._create(body_type, position, RectangleShape(size), mass, inertia)

    def update_aabb(self) -> None:
        """Recompute the bounding box from shape, position and rotation."""
        shape = self.shape
        if shape is None:
            return
        if isinstance(shape, CircleShape):
            r = Vec2(shape.radius, shape.radius)
            self.aabb = AABB(self.position - r, self.position + r)
        elif isinstance(shape, RectangleShape):
            half = shape.size * 0.5
            if self.rotation == 0.0:
                self.aabb = AABB(self.position - half, self.position + half)
                return
            c = math.cos(self.rotation)
            s = math.sin(self.rotation)
            corners = [
                self.position + offset
                for offset in (
                    Vec2(half.x * c - half.y * s, half.x * s + half.y * c),
                    Vec2(half.x * c + half.y * s, half.x * s - half.y * c),
                    Vec2(-half.x * c + half.y * s, -half.x * s - half.y * c),
                    Vec2(-half.x * c - half.y * s, -half.x * s + half.y * c),
                )
            ]
            self.aabb = AABB(reduce(Vec2.min, corners), reduce(Vec2.max, corners))

    def apply_force(self, force: Vec2) -> None:
        self.force_accumulator = self.force_accumulator + force

    def apply_force_at_point(self, force: Vec2, point: Vec2) -> None:
        """Apply a force at a world point, accumulating the resulting torque."""
        self.force_accumulator = self.force_accumulator + force
        arm = point - self.position
        self.torque_accumulator += arm.x * force.y - arm.y * force.x

    def apply_impulse(self, impulse: Vec2, contact_point: Vec2) -> None:
        """Change linear and angular velocity; static bodies are unaffected."""
        if self.body_type is BodyType.STATIC:
            return
        self.velocity = self.velocity + impulse * self.inv_mass
        arm = contact_point - self.position
        self.angular_velocity += (arm.x * impulse.y - arm.y * impulse.x) * self.inv_inertia

    def clear_forces(self) -> None:
        self.force_accumulator = Vec2()
        self.torque_accumulator = 0.0


@dataclass
class Collision:
    """Contact information between two bodies."""

    body_a: Optional[RigidBody] = None
    body_b: Optional[RigidBody] = None
    normal: Vec2 = field(default_factory=Vec2)
    contact_point: Vec2 = field(default_factory=Vec2)
    penetration: float = 0.0
    has_collision: bool = False