# scene.py

import logging
import math
import numpy as np
import pygame
import constants
from viewport import ViewportMapper
from lanterns import LanternPool
from vehicle import Vehicle
from fireworks import FireworkEmitter

logger = logging.getLogger("lantern_scene")


class SceneState:
    """
    Everything one frame reads and writes, passed explicitly into update and draw.

    Data Contract:
    - Inputs:
        - config (dict): The 'scene' section of the config file.
        - rng (np.random.Generator): The master seeded random number generator.
        - size (tuple): Initial (width, height) of the drawing surface.
    - Side Effects: Owns the lifetime of the lantern pool, vehicle and fireworks.
    - Invariants: `geometry` only changes through resize(); entities read it.
    """
    def __init__(self, config: dict, rng: np.random.Generator, size: tuple):
        self.config = config
        self.mapper = ViewportMapper(config['viewport'])
        self.geometry = self.mapper.recompute(*size)
        self.elapsed = 0.0

        lantern_config = config['lanterns']
        self.lanterns = LanternPool(lantern_config['capacity'], lantern_config, rng, self.geometry)
        self.vehicle = Vehicle.from_config(config['vehicle'], self.geometry)
        self.fireworks = FireworkEmitter(config['fireworks'], rng, self.geometry)

    def resize(self, width, height):
        """Recomputes geometry and hands it to every dependent entity."""
        self.geometry = self.mapper.recompute(width, height)
        self.lanterns.apply_geometry(self.geometry)
        self.vehicle.apply_geometry(self.geometry)
        self.fireworks.apply_geometry(self.geometry)
        logger.info(f"Viewport resized to {self.geometry.surface_width}x{self.geometry.surface_height}.")

    def launch(self, wish: str):
        return self.lanterns.launch(wish)

    def reset(self):
        self.lanterns.reset()
        self.vehicle.reset()
        self.fireworks.reset()


def draw_water(screen: pygame.Surface, geometry, elapsed: float, overlay=None):
    """
    River body below the water line, topped by stacked sine wave lines drifting with elapsed time.

    Pass back the returned overlay to reuse it on the next frame; it is rebuilt
    only when the surface size changes.
    """
    width = int(geometry.surface_width)
    water_top = int(geometry.water_line)
    pygame.draw.rect(screen, constants.RIVER, (0, water_top, width, int(geometry.surface_height) - water_top))

    if overlay is None or overlay.get_size() != screen.get_size():
        overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
    else:
        overlay.fill((0, 0, 0, 0))
    xs = np.arange(0, width + 1, 2, dtype=np.float64)

    for i in range(constants.WAVE_LINE_COUNT):
        base = geometry.water_line + i * constants.WAVE_LINE_SPACING
        ys = base + np.sin(xs / constants.WAVE_LENGTH + elapsed * (i + 1) * 0.5) * constants.WAVE_AMPLITUDE
        points = list(zip(xs.astype(int).tolist(), ys.astype(int).tolist()))
        if len(points) >= 2:
            pygame.draw.lines(overlay, constants.WAVE_LINE_COLOR, False, points, 1)
    screen.blit(overlay, (0, 0))
    return overlay


class FrameScheduler:
    """
    Runs one update+draw pass per frame in a fixed back-to-front order:
    water, fireworks, vehicle, then lanterns sorted by vertical position.

    dt is the time since the previous frame, clamped to `max_dt` so a long
    pause (minimised window, debugger) does not produce a runaway step.
    """
    def __init__(self, state: SceneState, max_dt: float = 0.033, assets=None, font=None):
        self.state = state
        self.max_dt = max_dt
        self.assets = assets or {}
        self.font = font
        self.last_time = None
        self.frame_count = 0
        self.water_overlay = None

    def compute_dt(self, now: float) -> float:
        """Seconds since the previous frame, in [0, max_dt]. The first frame gets 0."""
        if self.last_time is None:
            dt = 0.0
        else:
            dt = now - self.last_time
        self.last_time = now

        if not math.isfinite(dt) or dt < 0:
            return 0.0
        return min(dt, self.max_dt)

    def run_frame(self, screen: pygame.Surface, now: float) -> float:
        dt = self.compute_dt(now)
        self.step(screen, dt)
        return dt

    def step(self, screen: pygame.Surface, dt: float):
        state = self.state
        state.elapsed += dt

        screen.fill(constants.NIGHT_SKY)
        self.water_overlay = draw_water(screen, state.geometry, state.elapsed, self.water_overlay)

        state.fireworks.tick(dt)
        state.fireworks.update(dt)
        state.fireworks.draw(screen, self.assets.get('firework_logo'))

        state.vehicle.update(dt)
        state.vehicle.draw(screen, self.assets.get('vehicle'))

        state.lanterns.update(dt)
        order = state.lanterns.draw_order()
        state.lanterns.draw(screen, self.assets.get('lanterns'), self.font, order)

        self.frame_count += 1
        if self.frame_count % 600 == 0:
            logger.debug(
                f"Frame={self.frame_count}, Lanterns={state.lanterns.active_count}/{state.lanterns.capacity}, "
                f"Fireworks={len(state.fireworks.fireworks)}, Vehicle={state.vehicle.position:.0f}"
            )
        return order
