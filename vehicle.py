# vehicle.py

import logging
import pygame
import constants

logger = logging.getLogger("lantern_scene")


class Vehicle:
    """
    The single vehicle that drives along the road line and wraps around.

    Its horizontal position is the left edge of the sprite. Once that edge has
    passed the right side of the surface the vehicle is fully off-screen and
    re-enters at -width.
    """
    def __init__(self, geometry, speed: float, width: float, height: float, road_offset: float = 10.0):
        self.speed = speed
        self.base_width = width
        self.base_height = height
        self.road_offset = road_offset
        self.geometry = None
        self.apply_geometry(geometry)
        self.position = self.start_position

        logger.info(f"Vehicle created: speed={speed}, size={self.width:.0f}x{self.height:.0f}.")

    @classmethod
    def from_config(cls, config: dict, geometry):
        return cls(
            geometry,
            speed=config['speed'],
            width=config['width'],
            height=config['height'],
            road_offset=config.get('road_offset', 10.0),
        )

    @property
    def start_position(self) -> float:
        return -self.width

    def apply_geometry(self, geometry):
        """Rescales the sprite and re-seats it on the road. Called on resize, not per frame."""
        previous = self.geometry
        self.geometry = geometry
        if previous is not None:
            self.position *= geometry.surface_width / previous.surface_width
        scale = geometry.scale_factor
        self.width = self.base_width * scale
        self.height = self.base_height * scale
        self.y = geometry.road_line - self.height + self.road_offset * scale

    def update(self, dt: float):
        self.position += self.speed * dt
        # Wraps on the left edge passing surface_width (sprite fully off-surface), not surface_width + width.
        if self.position > self.geometry.surface_width:
            logger.debug("Vehicle left the surface, wrapping to the start.")
            self.position = self.start_position

    def reset(self):
        self.position = self.start_position

    def draw(self, screen: pygame.Surface, image=None):
        sprite = image.scaled(self.width, self.height) if image is not None else None
        if sprite is not None:
            screen.blit(sprite, (int(self.position), int(self.y)))
        else:
            rect = pygame.Rect(int(self.position), int(self.y), max(int(self.width), 1), max(int(self.height), 1))
            pygame.draw.rect(screen, constants.VEHICLE_RED, rect)
