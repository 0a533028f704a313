"""
Quantity Calculator Module

Functions for deriving takeoff quantities from page-space points.

All calculations are pure: they read a snapshot of the points and
return zero with the type's unit for degenerate input instead of raising.
"""

import logging
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from shapely.geometry import LineString, Polygon
from shapely.validation import explain_validity

from ..calibration.scale_parser import ScaleSpec, parse_scale
from ..constants import Unit, DEGENERATE_GEOMETRY_EPSILON
from .takeoff import Point2D, TakeoffType, TakeoffResult, as_points

logger = logging.getLogger(__name__)

PointLike = Sequence[float]
ScaleLike = Union[ScaleSpec, str, None]
TypeLike = Union[TakeoffType, str, None]


def _snapshot(points: Sequence[PointLike]) -> np.ndarray:
    """Copy points into an (n, 2) float array."""
    if len(points) == 0:
        return np.zeros((0, 2), dtype=float)
    return np.array([(float(p[0]), float(p[1])) for p in points], dtype=float)


def _resolve_scale(scale: ScaleLike) -> ScaleSpec:
    if isinstance(scale, ScaleSpec):
        return scale
    return parse_scale(scale)


def _resolve_type(takeoff_type: TypeLike) -> Optional[TakeoffType]:
    if isinstance(takeoff_type, TakeoffType):
        return takeoff_type
    return TakeoffType.from_string(takeoff_type)


def polyline_length_points(points: Sequence[PointLike]) -> float:
    """
    Length in PDF points along the full ordered point sequence.

    Sums the distance between every consecutive pair of points.

    Args:
        points: Page-space points

    Returns:
        Length in PDF points (0 for fewer than 2 points)
    """
    coords = _snapshot(points)
    if len(coords) < 2:
        return 0.0

    return float(LineString(coords).length)


def polygon_area_points(points: Sequence[PointLike]) -> float:
    """
    Area in PDF points squared via the shoelace formula.

    The sequence is treated as a closed polygon (last point joins the
    first). The absolute value is taken, so winding does not matter.

    Args:
        points: Page-space polygon vertices in order

    Returns:
        Area in PDF points squared (0 for fewer than 3 points)
    """
    coords = _snapshot(points)
    if len(coords) < 3:
        return 0.0

    x = coords[:, 0]
    y = coords[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)

    signed_sum = np.sum(x * y_next - x_next * y)
    return float(abs(signed_sum) / 2.0)


def calculate_linear_feet(points: Sequence[PointLike], scale: ScaleLike) -> float:
    """
    Calculate traced length in real feet.

    Args:
        points: Page-space points
        scale: ScaleSpec or scale label

    Returns:
        Length in feet
    """
    if len(points) < TakeoffType.LINEAR.min_points:
        return 0.0

    return polyline_length_points(points) * _resolve_scale(scale).feet_per_point


def calculate_area_quantity(points: Sequence[PointLike], scale: ScaleLike) -> float:
    """
    Calculate polygon area scaled by feet-per-point squared.

    Note: the result is in square feet although Area takeoffs are
    labelled yd². No division by 9 is applied.

    Args:
        points: Page-space polygon vertices
        scale: ScaleSpec or scale label

    Returns:
        Area quantity (square feet)
    """
    if len(points) < TakeoffType.AREA.min_points:
        return 0.0

    factor = _resolve_scale(scale).feet_per_point
    return polygon_area_points(points) * factor * factor


def calculate_takeoff_quantity(
    points: Sequence[PointLike],
    takeoff_type: TypeLike,
    scale: ScaleLike
) -> Tuple[float, str]:
    """
    Calculate the quantity and unit for a takeoff.

    - Linear: length along all points in order, in feet ("ft")
    - Area: shoelace area times feet-per-point squared ("yd²")
    - Count: number of points ("ct")
    - Unrecognized type: (0.0, "")

    Args:
        points: Page-space points (read once, never mutated)
        takeoff_type: TakeoffType or type name
        scale: ScaleSpec, scale label, or None for the default scale

    Returns:
        Tuple of (quantity, unit)
    """
    resolved = _resolve_type(takeoff_type)
    if resolved is None:
        logger.warning(f"Unknown takeoff type {takeoff_type!r}, quantity is 0")
        return 0.0, Unit.NONE

    snapshot = as_points(points)

    if resolved == TakeoffType.LINEAR:
        return calculate_linear_feet(snapshot, scale), resolved.unit
    elif resolved == TakeoffType.AREA:
        return calculate_area_quantity(snapshot, scale), resolved.unit
    else:
        return float(len(snapshot)), resolved.unit


def calculate_result(
    points: Sequence[PointLike],
    takeoff_type: TypeLike,
    scale: ScaleLike
) -> TakeoffResult:
    """Same as calculate_takeoff_quantity, wrapped in a TakeoffResult."""
    quantity, unit = calculate_takeoff_quantity(points, takeoff_type, scale)
    return TakeoffResult(quantity=quantity, unit=unit)


def segment_pairs(points: Sequence[PointLike]) -> List[Tuple[Point2D, Point2D]]:
    """
    Read points two at a time as independent segments.

    A trailing unmatched point is dropped.

    Returns:
        List of (start, end) tuples
    """
    snapshot = as_points(points)
    return [
        (snapshot[i], snapshot[i + 1])
        for i in range(0, len(snapshot) - 1, 2)
    ]


def validate_takeoff_geometry(
    points: Sequence[PointLike],
    takeoff_type: TypeLike
) -> List[str]:
    """
    Check committed takeoff geometry and return warnings.

    Args:
        points: Page-space points
        takeoff_type: TakeoffType or type name

    Returns:
        List of warning messages
    """
    warnings = []
    resolved = _resolve_type(takeoff_type)
    if resolved is None:
        warnings.append(f"Unknown takeoff type {takeoff_type!r}")
        return warnings

    count = len(points)

    if resolved.uses_segment_pairs and count % 2 == 1:
        warnings.append(
            f"Odd point count ({count}): last point is not part of a segment"
        )

    if resolved == TakeoffType.LINEAR and count >= resolved.min_points:
        if polyline_length_points(points) < DEGENERATE_GEOMETRY_EPSILON:
            warnings.append("Linear takeoff has zero length")

    if resolved == TakeoffType.AREA and count >= resolved.min_points:
        coords = _snapshot(points)
        polygon = Polygon(coords)
        if polygon_area_points(coords) < DEGENERATE_GEOMETRY_EPSILON:
            warnings.append("Area takeoff encloses zero area")
        elif not polygon.is_valid:
            warnings.append(
                f"Area outline is not a simple polygon ({explain_validity(polygon)}); "
                "overlapping parts cancel in the area"
            )

    return warnings
