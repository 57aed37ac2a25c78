# constants.py

"""
Application Constants

This module defines static rendering values for the particle field.
These are not expected to change between runs; tunable behaviour lives in
config.json and is parsed by field_config.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
"""

# Default window dimensions (overridden by the "window" section of config.json)
WIDTH = 1280  # Pixels
HEIGHT = 720  # Pixels

# Framerate
FPS = 60  # Frames per second

# Colors
WHITE = (255, 255, 255)
PAGE_COLOR = (12, 12, 20)  # RGB the host paints behind the layer
TRANSPARENT = (0, 0, 0, 0)  # RGBA

# Window Title
TITLE = "Particle Field"

# Particle opacity
BASE_OPACITY = 0.5        # Peak alpha of a particle at mid-life.
PRE_FADE_OPACITY = 0.35   # Alpha ceiling during the last frames of life.
PRE_FADE_FRAMES = 100     # Frames before expiry where the ceiling applies.

# Radius growth
RADIUS_SCALE = 0.2        # Spawn radius is (base + random * range) * RADIUS_SCALE.
GROWTH_RATE = 1.05        # Per-frame radius multiplier while young.
GROWTH_FRAMES = 50        # Particles younger than this keep growing.

# Bounds
BOUNDS_PADDING_FACTOR = 2.0  # Off-screen tolerance in multiples of the radius.

# Spawning
CENTER_SPREAD = 0.25  # Max jitter around the centre, as a fraction of width/height.

# Connections
CONNECTION_OPACITY = 0.15  # Alpha of a line between two coincident particles.
CONNECTION_WIDTH = 1       # Pixels

# Compositing
COMPOSITE_ALPHA = 0.8  # Global alpha of the blurred layer on the visible buffer.
FADE_IN_MS = 1000      # Duration of the layer fade-in once revealed.

# Logging
STATS_LOG_INTERVAL = 100  # Frames between statistics lines.

# Scrolling
SCROLL_STEP = 40  # Pixels scrolled per mouse-wheel notch.
