# Takeoff geometry and quantity calculation module

from .takeoff import (
    Point2D,
    TakeoffType,
    TakeoffResult,
    TakeoffItem,
    as_points,
)

from .calculator import (
    polyline_length_points,
    polygon_area_points,
    calculate_linear_feet,
    calculate_area_quantity,
    calculate_takeoff_quantity,
    calculate_result,
    segment_pairs,
    validate_takeoff_geometry,
)

__all__ = [
    # Takeoff
    "Point2D",
    "TakeoffType",
    "TakeoffResult",
    "TakeoffItem",
    "as_points",
    # Calculator
    "polyline_length_points",
    "polygon_area_points",
    "calculate_linear_feet",
    "calculate_area_quantity",
    "calculate_takeoff_quantity",
    "calculate_result",
    "segment_pairs",
    "validate_takeoff_geometry",
]
