# physim

A small 2D game engine for Python, built on pygame and Pillow. It provides:

- **Rigid-body physics**: circles and rectangles, Verlet or leap-frog integration, a spatial hash for the broad phase, and impulse-based collision response with positional correction (`physim.physics`, `physim.body`, `physim.spatial_hash`, with vectors from `physim.math2d`).
- **Sprites and resources**: textures loaded from image files with Pillow, sprites sized by hand or from the texture's native size, and a `ResourceManager` that tracks both by name and reports memory use (`physim.sprite`, `physim.resource_manager`).
- **Rendering**: `PygameRenderer` draws into a resizable pygame window; `SpriteRenderer` maps sprites through an orthographic projection and per-sprite model matrices and blits them (`physim.renderer`, `physim.sprite_renderer`).
- **A fixed-step game loop**: input, capped fixed-rate updates, rendering, frame-rate limiting and rolling performance metrics (`physim.core`, `physim.engine`).
- **Coloured logging** to the console and to an append-only log file (`physim.logger`).

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install .[test]
pytest
```

## Running the demo

```
physim
```

This opens an 800×600 window titled "Physim". A particle sprite, drawn at a sixth of its texture size, follows the mouse. Close the window to quit. The texture is read from `assets/textures/white_particle.png` under the working directory; if it is missing, a warning is logged and nothing is drawn. The command exits with status 1 if the window cannot be created.

## Using the physics engine

```python
from physim.body import BodyType, RigidBody
from physim.math2d import Vec2
from physim.physics import IntegrationMethod, PhysicsEngine

world = PhysicsEngine()
world.set_integration_method(IntegrationMethod.LEAPFROG)

ground = RigidBody.create_rectangle(BodyType.STATIC, Vec2(400, 580), Vec2(800, 40), 1.0)
ball = RigidBody.create_circle(BodyType.DYNAMIC, Vec2(400, 100), 10.0, 1.0)

world.add_body(ground)
ball_index = world.add_body(ball)

world.set_collision_callback(lambda c: print("hit", c.normal, c.penetration))

for _ in range(600):
    world.update(1 / 60)

print(world.get_body(ball_index).position)
```

The solvers apply a gravity of `Vec2(0, 9.81)`, which points down in screen coordinates; it is held in `world.solver.gravity`. A step longer than 1/30 s is clamped to 1/30 s, and a step of zero or less is ignored. `get_body` returns `None` and `remove_body` does nothing for an index out of range. The contacts found by the latest step are in `world.collisions`.

`detect_collision(body_a, body_b)` returns a `Collision` or `None`, and can be used on its own.

## Resources

```python
from physim.resource_manager import ResourceManager

with ResourceManager() as resources:
    resources.load_texture("player", "assets/textures/white_particle.png")
    sprite = resources.create_sprite_with_native_size("playerSprite", "player")
    print(resources.memory_stats())
```

`load_texture` raises `physim.sprite.TextureLoadError` if the image cannot be read. `create_sprite` and `create_sprite_with_native_size` raise `KeyError` for an unknown texture name. `unload_texture` leaves a texture in place while a sprite still uses it.

## Writing a game

A game object has `handle_input(event)`, `update(delta_time)`, `render(renderer)` and an `is_running` property; `physim.game.Game` is the demo game. Pass it to the engine:

```python
from physim.engine import Engine
from physim.game import Game
from physim.renderer import RenderType, WindowData

engine = Engine.get_instance()
engine.init(WindowData(800, 600, "My game"), RenderType.OPENGL)

game = Game()
game.init()
engine.run(game)
engine.shutdown()
```

`Engine.init` raises `RuntimeError` if the window cannot be created. `RenderType.OPENGL` and `RenderType.OPENGL_ES_3` both give a `PygameRenderer`; `RenderType.SOFTWARE` logs a warning and gives one too.

The loop runs fixed updates at 165 Hz, with at most 5 updates per frame. It caps a single frame at 0.25 s, limits rendering to 165 frames per second, and logs the frame rate once a second.

## Logging

`physim.logger` has `log`, `warn`, `error`, `critical` and `loop`. Each prints a coloured line with the caller's file and line, and returns the message. All but `loop` also append a timestamped line to `log.txt` in the working directory; `set_log_file(path)` changes that file, and `set_log_file(None)` turns file output off.

## What it does not do

- The physics engine is not wired into the game loop; the demo game does not use it. A game that wants physics must own a `PhysicsEngine` and step it from `update`.
- There is no debug drawing of bodies, no friction, damping or rotated-rectangle collision (collision tests treat rectangles as axis-aligned).
- Rendering is pygame surface blitting only; there is no GPU shader pipeline and no separate software renderer.
- There is no build for running in a web browser.