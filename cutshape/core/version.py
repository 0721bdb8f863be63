"""CutShape - version constants.

Keep this module tiny and dependency-free. It is imported by many places
(models, geometry, UI, CLI) and must not have side effects.
"""

APP_NAME = "CutShape"
APP_VERSION = "0.1.0"

# Geometry defaults (px).
# NOTE: keep these stable; changing them changes every outline without attributes.
DEFAULT_ROUNDED_PX = 20.0
DEFAULT_STROKE_WIDTH = 1.0
DEFAULT_CUT_CAP_PX = 60.0
EXPLICIT_CUT_MAX_RATIO = 0.9
FALLBACK_CUT_DIVISOR = 5.0

# Pipeline defaults.
DEFAULT_COMPACT_BREAKPOINT_PX = 1024
DEFAULT_RESIZE_DEBOUNCE_MS = 100
DEFAULT_SETTLE_RECHECK_MS = 50
DEFAULT_JITTER_THRESHOLD_PX = 150
DEFAULT_FONT_SIZE_PX = 16.0
