"""Centralized default configuration values for the map engine.

This module provides a single source of truth for all default parameter values.
These defaults are used by:
- The MapView controller and StoryNavigator (as constructor defaults)
- CLI argument parsing (as fallbacks when args aren't provided)
"""

# Data source defaults
COLORS_API_URL = "http://localhost:3000/api/colors"
REQUEST_TIMEOUT_SECONDS = 10.0
LOG_FILE = "run.log"

# Initial viewport
DEFAULT_LATITUDE = 40.0
DEFAULT_LONGITUDE = -74.5
DEFAULT_ZOOM = 9.0

# Clustering threshold (degrees) when no zoom policy applies
DEFAULT_THRESHOLD_DEGREES = 0.01

# Zoom-dependent clustering threshold, as (minimum zoom, threshold in degrees)
# steps ordered from the most zoomed in to the most zoomed out. Anything below
# the last step uses MAX_THRESHOLD_DEGREES.
ZOOM_THRESHOLD_STEPS: tuple[tuple[float, float], ...] = (
    (14.0, 0.0001),
    (12.0, 0.001),
    (10.0, 0.005),
    (8.0, 0.02),
    (6.0, 0.1),
    (4.0, 0.5),
    (2.0, 1.5),
)
MAX_THRESHOLD_DEGREES = 3.0

# Zoom scaling of marker size and offsets
MIN_SCALE = 0.5
MAX_SCALE = 2.0
SCALE_MIN_ZOOM = 2.0
SCALE_MAX_ZOOM = 14.0
BASE_MARKER_SIZE_PX = 20.0

# Story mode camera
STORY_FOCUS_ZOOM = 12.0
STORY_FLY_DURATION_MS = 2000
# Shifts the camera east of the record so the marker stays visible next to
# the detail panel
STORY_LONGITUDE_OFFSET = 0.02
