"""Default constants and configuration values."""

import math

# Time
MS_PER_SECOND = 1000.0

# Player / transitions
DEFAULT_TRANSITION_TIME = 0.0   # seconds, 0 = switch immediately
DEFAULT_EASING = "linear"

# Managed layers
DEFAULT_BLEND_TIME = 0.5        # seconds

# Random animation state
DEFAULT_PLAY_INTERVAL = 3.0     # seconds
RANDOM_INTERVAL_MIN_FACTOR = 0.25
RANDOM_INTERVAL_MAX_FACTOR = 2.0

# Single states
DEFAULT_CLIP_DURATION = 1.0     # seconds
DEFAULT_LOOP_COUNT = math.inf
DEFAULT_TIME_SCALE = 1.0

# Layers
DEFAULT_LAYER_WEIGHT = 1.0

# Blend modes
BLEND_OVERRIDE = "override"
BLEND_ADDITIVE = "additive"
