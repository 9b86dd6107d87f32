# lanterns.py

import heapq
import logging
from collections import namedtuple
import numpy as np
import pygame
import constants

logger = logging.getLogger("lantern_scene")

# Read-only snapshot of one pool slot, as returned by LanternPool.get().
Lantern = namedtuple('Lantern', ['index', 'lane', 'x', 'y', 'speed', 'phase', 'wish', 'sequence'])

ELLIPSIS = '...'


def display_wish(wish: str, max_length: int) -> str:
    """Truncates a wish for rendering. The stored wish is never modified."""
    if len(wish) > max_length:
        return wish[:max_length] + ELLIPSIS
    return wish


class LanternPool:
    """
    Fixed-capacity arena of floating lanterns, stored as parallel NumPy arrays.

    Each slot owns a lane, a horizontal position and speed, a bobbing phase and
    an optional wish. Slots without a wish are idle and kept in a min-heap so
    the lowest-indexed idle slot is reused first. When no slot is idle the slot
    with the lowest creation sequence is evicted.

    Data Contract:
    - Inputs:
        - capacity (int): Number of slots. Never changes.
        - config (dict): The 'lanterns' section of the scene config.
        - rng (np.random.Generator): The master seeded random number generator.
        - geometry (ViewportGeometry): The current viewport geometry.
    - Outputs: Slot indices from launch(); snapshots from get().
    - Side Effects: Mutates its own arrays on launch/update/reset.
    - Invariants:
        - All arrays have length `capacity`.
        - A slot is in the idle heap iff its wish is None.
        - Vertical position is never stored; it is derived from phase and elapsed time.
    """
    def __init__(self, capacity: int, config: dict, rng: np.random.Generator, geometry):
        if capacity < 1:
            raise ValueError(f"Lantern pool capacity must be positive, got {capacity}")

        self.capacity = capacity
        self.lane_count = config['lane_count']
        self.spacing = config.get('spacing', 300.0)
        self.base_size = config.get('size', 80.0)
        self.bob_amplitude = config.get('bob_amplitude', 5.0)
        self.bob_frequency = config.get('bob_frequency', 1.5)
        self.wish_display_length = config.get('wish_display_length', 10)
        jitter = config.get('speed_jitter', 0.0)

        # --- Per-slot state (Structure of Arrays) ---
        self.lanes = np.arange(capacity) % self.lane_count
        self.speeds = config['speed'] + rng.uniform(-jitter, jitter, capacity)
        self.phases = rng.uniform(0.0, 2 * np.pi, capacity)
        self.sequence = np.arange(capacity, dtype=np.int64)
        self.wishes = [None] * capacity
        self._next_sequence = capacity
        self._idle = list(range(capacity))  # Already a valid heap.
        self.elapsed = 0.0
        self.geometry = None

        self.apply_geometry(geometry)
        self.positions = self.initial_positions()

        logger.info(
            f"LanternPool created with {capacity} slots across {self.lane_count} lanes."
        )

    def apply_geometry(self, geometry):
        """
        Rebuilds size, entry coordinate and lane baselines for a new viewport.

        Horizontal positions are rescaled to the new width so lanterns keep their
        place in the journey (and their wishes) across a resize.
        """
        previous = self.geometry
        self.geometry = geometry
        if previous is not None:
            self.positions *= geometry.surface_width / previous.surface_width
        self.size = self.base_size * geometry.scale_factor
        self.entry_x = -self.size

        # Lanes split the band between the water line and the road line.
        band = geometry.road_line - geometry.water_line
        lane_centres = geometry.water_line + (np.arange(self.lane_count) + 0.5) * band / self.lane_count
        self.lane_baselines = lane_centres - self.size / 2

    def initial_positions(self) -> np.ndarray:
        """The staggered off-surface start coordinates used at creation and on reset."""
        return self.entry_x - np.arange(self.capacity) * self.spacing * self.geometry.scale_factor

    @property
    def idle_count(self) -> int:
        return len(self._idle)

    @property
    def active_count(self) -> int:
        return self.capacity - len(self._idle)

    def vertical_positions(self) -> np.ndarray:
        """Sinusoidal bob around each slot's lane baseline at the current elapsed time."""
        amplitude = self.bob_amplitude * self.geometry.scale_factor
        bob = amplitude * np.sin(self.phases + self.bob_frequency * self.elapsed)
        return self.lane_baselines[self.lanes] + bob

    def launch(self, wish: str):
        """
        Assigns a wish to a slot and sends that lantern in from the entry edge.

        Returns the slot index, or None for an empty wish (no state change).
        """
        if not wish or not wish.strip():
            logger.debug("Ignoring launch with an empty wish.")
            return None

        if self._idle:
            index = heapq.heappop(self._idle)
        else:
            index = int(np.argmin(self.sequence))
            logger.debug(
                f"Pool full, evicting lantern {index} (sequence {self.sequence[index]}, "
                f"wish {self.wishes[index]!r})."
            )

        self.wishes[index] = wish
        self.sequence[index] = self._next_sequence
        self._next_sequence += 1
        self.positions[index] = self.entry_x

        logger.debug(f"Launched lantern {index} in lane {self.lanes[index]} with wish {wish!r}.")
        return index

    def update(self, dt: float):
        """Advances every lantern by speed * dt, wrapping and freeing those past the far edge."""
        self.elapsed += dt
        self.positions += self.speeds * dt

        exited = np.nonzero(self.positions > self.geometry.surface_width)[0]
        for index in exited:
            self.positions[index] = self.entry_x
            if self.wishes[index] is not None:
                logger.debug(f"Lantern {index} finished its journey; wish {self.wishes[index]!r} cleared.")
                self.wishes[index] = None
                heapq.heappush(self._idle, int(index))

    def reset(self):
        """Clears all wishes and returns every lantern to its staggered start."""
        self.wishes = [None] * self.capacity
        self._idle = list(range(self.capacity))
        self.sequence = np.arange(self.capacity, dtype=np.int64)
        self._next_sequence = self.capacity
        self.positions = self.initial_positions()
        logger.info("LanternPool reset.")

    def active_wishes(self) -> list:
        """Wishes currently afloat, in slot order."""
        return [wish for wish in self.wishes if wish is not None]

    def get(self, index: int) -> Lantern:
        return Lantern(
            index=index,
            lane=int(self.lanes[index]),
            x=float(self.positions[index]),
            y=float(self.vertical_positions()[index]),
            speed=float(self.speeds[index]),
            phase=float(self.phases[index]),
            wish=self.wishes[index],
            sequence=int(self.sequence[index]),
        )

    def draw_order(self) -> np.ndarray:
        """Slot indices sorted by vertical position, back (smallest y) first."""
        return np.argsort(self.vertical_positions(), kind='stable')

    def draw(self, screen: pygame.Surface, images=None, font=None, order=None):
        """
        Draws every lantern back to front, with its truncated wish on top.

        Slots whose image handle is missing or not ready are drawn as a filled circle.
        """
        if order is None:
            order = self.draw_order()
        ys = self.vertical_positions()
        size = self.size

        for i in order:
            x, y = float(self.positions[i]), float(ys[i])
            handle = images[i] if images else None
            sprite = handle.scaled(size, size) if handle is not None else None

            if sprite is not None:
                screen.blit(sprite, (int(x), int(y)))
            else:
                pygame.draw.circle(
                    screen,
                    constants.LANTERN_GOLD,
                    (int(x + size / 2), int(y + size / 2)),
                    max(int(size / 2), 1)
                )

            wish = self.wishes[i]
            if wish and font is not None:
                text = font.render(display_wish(wish, self.wish_display_length), True, constants.WISH_TEXT)
                centre = (int(x + size / 2), int(y + size / 2 - 10 * self.geometry.scale_factor))
                screen.blit(text, text.get_rect(center=centre))
