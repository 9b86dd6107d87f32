# fireworks.py

import enum
import logging
import numpy as np
import numba
import pygame

logger = logging.getLogger("lantern_scene")


class FireworkState(enum.Enum):
    RISING = "rising"
    EXPLODED = "exploded"


class FireworkVariant(enum.Enum):
    BURST = "burst"  # Finishes when every particle has faded.
    LOGO = "logo"    # Fades a static image; finishes when its life counter runs out.


# --- JIT-Compiled Particle Kernel ---
# Operates only on NumPy arrays and scalars, as required by Numba's nopython mode.

@numba.jit(nopython=True, fastmath=True)
def _integrate_particles_jit(positions, velocities, alphas, gravity, alpha_decay):
    """
    One update tick for a burst, in place:
    position += velocity, velocity.y += gravity, alpha -= decay.
    """
    for i in range(positions.shape[0]):
        positions[i, 0] += velocities[i, 0]
        positions[i, 1] += velocities[i, 1]
        velocities[i, 1] += gravity
        alphas[i] -= alpha_decay


class Firework:
    """
    One firework: a rising marker that bursts when it reaches its target height.

    Particles are held as parallel arrays (positions, velocities, alphas) and
    stay empty while the firework is rising.

    Data Contract:
    - Inputs:
        - origin_x, launch_y, target_y (float): Where it rises from and bursts at.
        - variant (FireworkVariant): Selects the terminal condition.
        - config (dict): The 'fireworks' section of the scene config.
        - rng (np.random.Generator): Source for burst velocities and color.
    - Invariants:
        - state is RISING => no particles.
        - Particle count equals burst_size right after the burst and never grows.
    """
    def __init__(self, origin_x: float, launch_y: float, target_y: float,
                 variant: FireworkVariant, config: dict, rng: np.random.Generator):
        self.origin_x = origin_x
        self.y = launch_y
        self.target_y = target_y
        self.variant = variant
        self.config = config
        self.rng = rng

        self.state = FireworkState.RISING
        self.life = 0.0
        self.positions = np.zeros((0, 2), dtype=np.float64)
        self.velocities = np.zeros((0, 2), dtype=np.float64)
        self.alphas = np.zeros(0, dtype=np.float64)
        self.color = tuple(int(c) for c in rng.integers(80, 256, 3))

        if self.y <= self.target_y:
            self._explode()

    @property
    def particle_count(self) -> int:
        return self.alphas.shape[0]

    @property
    def logo_alpha(self) -> float:
        """Opacity of the logo variant, fading linearly over its lifetime."""
        return max(0.0, 1.0 - self.life / self.config['logo_lifetime'])

    def _explode(self):
        self.y = self.target_y
        self.state = FireworkState.EXPLODED
        if self.variant is not FireworkVariant.BURST:
            return

        count = self.config['burst_size']
        angles = self.rng.uniform(0.0, 2 * np.pi, count)
        speeds = self.rng.uniform(self.config['particle_speed_min'], self.config['particle_speed_max'], count)

        self.positions = np.empty((count, 2), dtype=np.float64)
        self.positions[:, 0] = self.origin_x
        self.positions[:, 1] = self.y
        self.velocities = np.column_stack((np.cos(angles) * speeds, np.sin(angles) * speeds))
        self.alphas = np.ones(count, dtype=np.float64)

    def update(self, dt: float):
        if self.state is FireworkState.RISING:
            self.y -= self.config['ascent_rate'] * dt
            if self.y <= self.target_y:
                self._explode()
            return

        if self.variant is FireworkVariant.LOGO:
            self.life += dt
            return

        _integrate_particles_jit(
            self.positions,
            self.velocities,
            self.alphas,
            self.config['gravity'],
            self.config['alpha_decay']
        )

        # Prune faded particles, keeping the remaining order.
        alive = self.alphas > 0
        if not alive.all():
            self.positions = self.positions[alive]
            self.velocities = self.velocities[alive]
            self.alphas = self.alphas[alive]

    def is_finished(self) -> bool:
        if self.state is not FireworkState.EXPLODED:
            return False
        if self.variant is FireworkVariant.LOGO:
            return self.life >= self.config['logo_lifetime']
        return self.particle_count == 0

    def draw(self, screen: pygame.Surface, logo_image=None, scale: float = 1.0, layer=None):
        """
        Draws the rising marker, the burst particles, or the fading logo.

        The logo is sized by `scale`; without a ready image it draws a fading
        filled circle instead. Burst particles go onto `layer` when one is
        given (the caller blits it), otherwise onto a temporary overlay.
        """
        if self.state is FireworkState.RISING:
            pygame.draw.circle(screen, self.color, (int(self.origin_x), int(self.y)), 2)
            return

        if self.variant is FireworkVariant.LOGO:
            alpha = int(255 * self.logo_alpha)
            size = self.config['logo_size'] * scale
            sprite = logo_image.scaled(size, size) if logo_image is not None else None
            if sprite is not None:
                sprite = sprite.copy()
                sprite.set_alpha(alpha)
                screen.blit(sprite, (int(self.origin_x - size / 2), int(self.y - size / 2)))
            else:
                radius = max(int(size / 2), 1)
                glow = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
                pygame.draw.circle(glow, (*self.color, alpha), (radius, radius), radius)
                screen.blit(glow, (int(self.origin_x) - radius, int(self.y) - radius))
            return

        if self.particle_count == 0:
            return
        target = layer if layer is not None else pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        alphas = np.clip(self.alphas * 255, 0, 255).astype(int)
        for i in range(self.particle_count):
            pygame.draw.circle(
                target,
                (*self.color, int(alphas[i])),
                (int(self.positions[i, 0]), int(self.positions[i, 1])),
                2
            )
        if layer is None:
            screen.blit(target, (0, 0))


class FireworkEmitter:
    """
    Owns every live firework: spawns them on demand and on a periodic timer,
    updates them, and drops the finished ones.

    The periodic timer is an accumulator of synthetic dt. Once it reaches the
    spawn interval a batch of logo fireworks is launched, one per anchor, and
    the accumulator is reset. A cap on live fireworks bounds growth.

    Data Contract:
    - Inputs:
        - config (dict): The 'fireworks' section of the scene config.
        - rng (np.random.Generator): The master seeded random number generator.
        - geometry (ViewportGeometry): The current viewport geometry.
    - Invariants: len(fireworks) <= max_live.
    """
    def __init__(self, config: dict, rng: np.random.Generator, geometry):
        self.config = config
        self.rng = rng
        self.spawn_interval = config['spawn_interval']
        self.max_live = config['max_live']
        self.anchors = [tuple(a) for a in config.get('anchors', [])]
        self.fireworks = []
        self.timer = 0.0
        self.layer = None
        self.apply_geometry(geometry)

        logger.info(
            f"FireworkEmitter created: interval={self.spawn_interval}s, cap={self.max_live}, "
            f"{len(self.anchors)} anchors."
        )

    def apply_geometry(self, geometry):
        self.geometry = geometry
        self.launch_y = geometry.water_line

    def spawn_at(self, x: float, y: float, variant: FireworkVariant = FireworkVariant.BURST):
        """Launches a firework that rises from the water line at x and bursts at y."""
        if len(self.fireworks) >= self.max_live:
            logger.debug(f"Firework cap of {self.max_live} reached, spawn at ({x:.0f}, {y:.0f}) skipped.")
            return None
        firework = Firework(x, self.launch_y, y, variant, self.config, self.rng)
        self.fireworks.append(firework)
        logger.debug(f"Spawned {variant.value} firework at ({x:.0f}, {y:.0f}).")
        return firework

    def tick(self, dt: float) -> list:
        """Accumulates dt and launches a batch at the anchors once the interval is reached."""
        self.timer += dt
        if self.timer < self.spawn_interval:
            return []

        self.timer = 0.0
        spawned = []
        for fx, fy in self.anchors:
            x = fx * self.geometry.surface_width
            y = fy * self.geometry.surface_height
            firework = self.spawn_at(x, y, FireworkVariant.LOGO)
            if firework is not None:
                spawned.append(firework)
        return spawned

    def update(self, dt: float):
        for firework in self.fireworks:
            firework.update(dt)
        self.fireworks = [f for f in self.fireworks if not f.is_finished()]

    def reset(self):
        self.fireworks = []
        self.timer = 0.0

    def _particle_layer(self, size):
        """One transparent overlay shared by every burst, rebuilt only when the surface size changes."""
        if self.layer is None or self.layer.get_size() != size:
            self.layer = pygame.Surface(size, pygame.SRCALPHA)
        else:
            self.layer.fill((0, 0, 0, 0))
        return self.layer

    def draw(self, screen: pygame.Surface, logo_image=None):
        if not self.fireworks:
            return
        layer = self._particle_layer(screen.get_size())
        scale = self.geometry.scale_factor
        for firework in self.fireworks:
            firework.draw(screen, logo_image, scale, layer)
        screen.blit(layer, (0, 0))
