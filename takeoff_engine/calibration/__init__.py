# Scale parsing and calibration module

from .scale_parser import (
    ScaleSpec,
    feet_per_point,
    parse_inches_token,
    parse_scale,
    scale_conversion,
)

from .unit_converter import (
    points_distance,
    points_to_inches,
    points_to_real_feet,
    area_points_to_sqft,
    area_sqft_to_cubic_yards,
    format_quantity,
    calculate_scale_from_calibration,
    parse_calibration_string,
)

__all__ = [
    # Scale Parser
    "ScaleSpec",
    "feet_per_point",
    "parse_inches_token",
    "parse_scale",
    "scale_conversion",
    # Unit Converter
    "points_distance",
    "points_to_inches",
    "points_to_real_feet",
    "area_points_to_sqft",
    "area_sqft_to_cubic_yards",
    "format_quantity",
    "calculate_scale_from_calibration",
    "parse_calibration_string",
]
