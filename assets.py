# assets.py

import logging
import os
import pygame
import constants

logger = logging.getLogger("lantern_scene")


class ImageHandle:
    """
    An opaque, possibly not-yet-loaded image.

    Draw code checks `ready` and falls back to a vector placeholder when the
    surface is missing, so a failed load never fails a frame.
    """
    def __init__(self, path: str, surface=None):
        self.path = path
        self.surface = surface

    @property
    def ready(self) -> bool:
        return self.surface is not None

    def scaled(self, width: float, height: float):
        """Returns the image scaled to the given size, or None if not ready."""
        if not self.ready:
            return None
        size = (max(int(width), 1), max(int(height), 1))
        if self.surface.get_size() == size:
            return self.surface
        return pygame.transform.scale(self.surface, size)


def load_image(path: str, base_dir: str = '.') -> ImageHandle:
    """
    Loads an image from disk without ever raising.

    - Inputs: path (str) relative to base_dir.
    - Outputs: ImageHandle, ready only if the file was decoded.
    """
    full_path = os.path.join(base_dir, path)
    try:
        surface = pygame.image.load(full_path)
    except (pygame.error, FileNotFoundError) as e:
        logger.warning(f"Image '{full_path}' unavailable, drawing placeholder instead: {e}")
        return ImageHandle(path)

    # convert_alpha() needs a display mode; headless runs keep the raw surface.
    if pygame.display.get_surface() is not None:
        surface = surface.convert_alpha()
    return ImageHandle(path, surface)


def load_scene_assets(lantern_count: int, base_dir: str = '.') -> dict:
    """
    Loads every image the scene draws.

    Lantern slots cycle through the available lantern artwork.
    """
    lantern_art = [load_image(p, base_dir) for p in constants.LANTERN_IMAGE_PATHS]
    assets = {
        'lanterns': [lantern_art[i % len(lantern_art)] for i in range(lantern_count)],
        'vehicle': load_image(constants.VEHICLE_IMAGE_PATH, base_dir),
        'firework_logo': load_image(constants.FIREWORK_LOGO_PATH, base_dir),
    }
    ready = sum(h.ready for h in lantern_art) + assets['vehicle'].ready + assets['firework_logo'].ready
    logger.info(f"Loaded {ready}/{len(lantern_art) + 2} images from '{base_dir}'.")
    return assets
