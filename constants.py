# constants.py

"""
Application Constants

This module defines static configuration values for the scene's framework.
These are not expected to change between runs; tunables live in config.json.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
"""

# Default window dimensions (the window is resizable)
WIDTH = 1280  # Pixels
HEIGHT = 720  # Pixels

# Reference resolution the background art and firework anchors were laid out for.
LOGICAL_WIDTH = 1920  # Pixels
LOGICAL_HEIGHT = 1080  # Pixels

# Degenerate viewports are clamped to this size before any ratio is computed.
MIN_VIEWPORT_DIMENSION = 1  # Pixels

# Framerate
FPS = 60  # Frames per second

# Colors (RGB)
NIGHT_SKY = (8, 12, 40)
RIVER = (14, 30, 70)
LANTERN_GOLD = (240, 180, 60)
VEHICLE_RED = (200, 50, 50)
WISH_TEXT = (0, 0, 0)
HUD_TEXT = (240, 240, 240)

# Water surface wave lines
WAVE_LINE_COLOR = (255, 255, 255, 128)  # RGBA
WAVE_LINE_COUNT = 5
WAVE_LINE_SPACING = 5  # Pixels between stacked lines
WAVE_AMPLITUDE = 5  # Pixels
WAVE_LENGTH = 30  # Pixels per radian

# Window Title
TITLE = "Loy Krathong"

# Assets
LANTERN_IMAGE_PATHS = [f"images/kt{i}.png" for i in range(1, 6)]
VEHICLE_IMAGE_PATH = "images/tuktuk.png"
FIREWORK_LOGO_PATH = "images/logo.png"
SONG_PATH = "audio/song.mp3"

# HUD
TOAST_TEXT = "Your wish has been sent"
TOAST_DURATION = 3.0  # Seconds
