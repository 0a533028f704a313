"""
Unit Converter Module

Functions for converting between PDF points and real-world units,
and for deriving a scale from a two-point calibration.
"""

import logging
import math
import re
from typing import Tuple

from ..constants import (
    POINTS_PER_INCH,
    INCHES_PER_FOOT,
    CUFT_PER_CUYD,
    PREVIEW_WHOLE_NUMBER_THRESHOLD,
)
from .scale_parser import ScaleSpec

logger = logging.getLogger(__name__)

FEET_PER_METER = 3.28084


def points_distance(
    a: Tuple[float, float],
    b: Tuple[float, float]
) -> float:
    """Distance in PDF points between two page points."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return math.sqrt(dx * dx + dy * dy)


def points_to_inches(points: float) -> float:
    """Convert PDF points to drawing inches."""
    return points / POINTS_PER_INCH


def points_to_real_feet(points: float, feet_per_inch: float) -> float:
    """
    Convert a length in PDF points to real feet.

    Args:
        points: Length in PDF points
        feet_per_inch: Scale as "1 inch = feet_per_inch feet"

    Returns:
        Length in feet
    """
    return points_to_inches(points) * feet_per_inch


def area_points_to_sqft(area_points: float, feet_per_inch: float) -> float:
    """
    Convert an area in PDF points squared to square feet.

    Each drawing square inch corresponds to feet_per_inch squared
    square feet.

    Args:
        area_points: Area in PDF points squared
        feet_per_inch: Scale as "1 inch = feet_per_inch feet"

    Returns:
        Area in square feet
    """
    area_square_inches = area_points / (POINTS_PER_INCH * POINTS_PER_INCH)
    return area_square_inches * (feet_per_inch * feet_per_inch)


def area_sqft_to_cubic_yards(area_sqft: float, thickness_inches: float) -> float:
    """
    Volume in cubic yards of a slab of given area and thickness.

    Args:
        area_sqft: Area in square feet
        thickness_inches: Thickness in inches

    Returns:
        Volume in cubic yards
    """
    thickness_feet = thickness_inches / INCHES_PER_FOOT
    volume_cubic_feet = area_sqft * thickness_feet
    return volume_cubic_feet / CUFT_PER_CUYD


def format_quantity(quantity: float, unit: str) -> str:
    """
    Format a quantity for live display.

    Large quantities drop their decimals.

    Returns:
        String like "16.00 ft" or "1250 yd²"; empty if unit is empty
    """
    if not unit:
        return ""

    if quantity >= PREVIEW_WHOLE_NUMBER_THRESHOLD:
        return f"{quantity:.0f} {unit}"
    return f"{quantity:.2f} {unit}"


def _length_to_feet(real_length: float, length_unit: str) -> float:
    if length_unit == "feet":
        return real_length
    elif length_unit == "inches":
        return real_length / INCHES_PER_FOOT
    elif length_unit == "meters":
        return real_length * FEET_PER_METER
    elif length_unit == "mm":
        return real_length / 1000 * FEET_PER_METER
    else:
        logger.warning(f"Unknown unit '{length_unit}', assuming feet")
        return real_length


def calculate_scale_from_calibration(
    point1: Tuple[float, float],
    point2: Tuple[float, float],
    real_length: float,
    length_unit: str = "feet"
) -> ScaleSpec:
    """
    Calculate a drawing scale from a two-point calibration.

    The page distance between the points, measured in drawing inches,
    divided by the real length in feet gives inches per foot.

    Args:
        point1: First point (x, y) in page space
        point2: Second point (x, y) in page space
        real_length: Real-world length between points
        length_unit: Unit of real_length

    Returns:
        ScaleSpec; a fallback spec with inches_per_foot 0 (neutral
        feet-per-point) if the calibration is degenerate
    """
    pdf_length = points_distance(point1, point2)
    real_feet = _length_to_feet(real_length, length_unit)

    if real_feet <= 0 or pdf_length == 0:
        logger.warning(
            f"Degenerate calibration ({pdf_length:.1f} pts, {real_feet:.2f} ft), "
            "cannot calculate scale"
        )
        return ScaleSpec(inches_per_foot=0.0, label="calibration", is_fallback=True)

    inches_per_foot = points_to_inches(pdf_length) / real_feet
    logger.info(
        f"Calibration: {pdf_length:.1f} pts / {real_feet:.2f} ft = "
        f"{inches_per_foot:.4f} in/ft"
    )

    return ScaleSpec(
        inches_per_foot=inches_per_foot,
        label=f"{inches_per_foot:g}\" = 1'",
    )


def parse_calibration_string(
    calib_string: str
) -> Tuple[Tuple[float, float], Tuple[float, float], float, str]:
    """
    Parse a calibration string in format "x1,y1:x2,y2=LENGTH UNIT".

    Args:
        calib_string: Calibration string like "100,200:300,200=10ft"

    Returns:
        Tuple of (point1, point2, length, unit)

    Raises:
        ValueError: If string format is invalid
    """
    number = r"(-?\d+(?:\.\d+)?)"
    pattern = (
        rf"{number},{number}:{number},{number}=(\d+(?:\.\d+)?)\s*"
        r"(ft|feet|m|meters?|mm|in|inch|inches)?$"
    )

    match = re.match(pattern, calib_string.strip(), re.IGNORECASE)
    if not match:
        raise ValueError(f"Invalid calibration format: {calib_string}")

    x1, y1, x2, y2, length, unit = match.groups()

    length_unit = (unit or "feet").lower()
    if length_unit in ("ft", "feet"):
        length_unit = "feet"
    elif length_unit in ("m", "meter", "meters"):
        length_unit = "meters"
    elif length_unit in ("in", "inch", "inches"):
        length_unit = "inches"

    return (float(x1), float(y1)), (float(x2), float(y2)), float(length), length_unit
