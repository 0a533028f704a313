"""
Takeoff Engine - Master Constants Reference

Numeric defaults and labels shared by the measurement engine.
Settings loaded from YAML may override the scale defaults only.
"""

# =============================================================================
# PAGE UNITS
# =============================================================================

# PDF points per inch
POINTS_PER_INCH = 72.0

# Inches per foot
INCHES_PER_FOOT = 12.0

# Cubic feet per cubic yard
CUFT_PER_CUYD = 27.0

# =============================================================================
# SCALE PARSING CONSTANTS
# =============================================================================

# Default scale label when none has been chosen
DEFAULT_SCALE_LABEL = "1/8\" = 1'"

# Inches per foot used when a fractional scale token cannot be parsed
FRACTION_FALLBACK_INCHES_PER_FOOT = 0.125

# Inches per foot used when a decimal scale token cannot be parsed
DECIMAL_FALLBACK_INCHES_PER_FOOT = 1.0

# Feet per point returned for a non-positive scale
NEUTRAL_FEET_PER_POINT = 1.0

# Scale labels offered to the user
SCALE_PRESETS = [
    "1/16\" = 1'",
    "1/8\" = 1'",
    "1/4\" = 1'",
    "1/2\" = 1'",
    "1\" = 1'",
]

# =============================================================================
# PAGE TRANSFORM CONSTANTS
# =============================================================================

# Page rotations a PDF page may carry (degrees)
ALLOWED_ROTATIONS_DEG = (0, 90, 180, 270)

# =============================================================================
# QUANTITY CONSTANTS
# =============================================================================

# Minimum committed points before a quantity is non-zero
MIN_POINTS_LINEAR = 2
MIN_POINTS_AREA = 3
MIN_POINTS_COUNT = 0

# Live preview switches to whole numbers at this magnitude
PREVIEW_WHOLE_NUMBER_THRESHOLD = 1000

# Below this page-space length or area, geometry is treated as degenerate
DEGENERATE_GEOMETRY_EPSILON = 1e-9

# =============================================================================
# UNIT LABELS
# =============================================================================

class Unit:
    FEET = "ft"
    # Area quantities are square feet reported under this label
    SQUARE_YARDS = "yd²"
    COUNT = "ct"
    NONE = ""
