# viewport.py

import logging
from collections import namedtuple
import constants

logger = logging.getLogger("lantern_scene")

# Derived surface dimensions and reference horizontals. Entities only read it.
ViewportGeometry = namedtuple(
    'ViewportGeometry',
    ['surface_width', 'surface_height', 'water_line', 'road_line', 'scale_factor']
)


class ViewportMapper:
    """
    Converts window dimensions into the geometry every entity positions itself against.

    The water line is a fixed fraction of surface height. The road line is
    either a second fraction or a pixel offset from the bottom (scaled), and is
    clamped so it never rises above the water line. The scale factor fits the
    logical art resolution into the surface with "contain" semantics.

    Data Contract:
    - Inputs: config (dict) - The 'viewport' section of the scene config.
    - Outputs: ViewportGeometry records from recompute().
    - Side Effects: None. recompute() is idempotent.
    - Invariants: Every returned field is finite; width and height are >= 1.
    """
    def __init__(self, config: dict):
        self.logical_width = config.get('logical_width', constants.LOGICAL_WIDTH)
        self.logical_height = config.get('logical_height', constants.LOGICAL_HEIGHT)
        self.water_line_ratio = config['water_line_ratio']
        self.road_mode = config.get('road_mode', 'fraction')
        self.road_line_ratio = config.get('road_line_ratio', 0.9)
        self.road_offset = config.get('road_offset', 100)

        if self.road_mode not in ('fraction', 'offset'):
            raise ValueError(f"Unknown road_mode: {self.road_mode!r}")

    def recompute(self, new_width, new_height) -> ViewportGeometry:
        """Returns the geometry for a surface of the given size."""
        width = max(new_width, constants.MIN_VIEWPORT_DIMENSION)
        height = max(new_height, constants.MIN_VIEWPORT_DIMENSION)
        if new_width < constants.MIN_VIEWPORT_DIMENSION or new_height < constants.MIN_VIEWPORT_DIMENSION:
            logger.warning(
                f"Degenerate viewport {new_width}x{new_height} clamped to {width}x{height}."
            )

        # Fit the logical aspect ratio inside the surface ("contain").
        aspect = self.logical_width / self.logical_height
        if width / height > aspect:
            effective_width = height * aspect
        else:
            effective_width = width
        scale_factor = effective_width / self.logical_width

        water_line = height * self.water_line_ratio
        if self.road_mode == 'fraction':
            road_line = height * self.road_line_ratio
        else:
            road_line = height - self.road_offset * scale_factor

        # y grows downward: the road may not sit above the water, nor below the surface.
        road_line = min(max(road_line, water_line), float(height))

        geometry = ViewportGeometry(
            surface_width=width,
            surface_height=height,
            water_line=water_line,
            road_line=road_line,
            scale_factor=scale_factor,
        )
        logger.debug(f"Viewport recomputed: {geometry}")
        return geometry
