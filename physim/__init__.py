"""2D rigid-body physics, pygame sprite rendering and a fixed-step game loop."""

__version__ = "0.1.0"