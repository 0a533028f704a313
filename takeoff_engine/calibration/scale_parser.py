"""
Scale Parser Module

Parses drawing scale labels such as 1/4" = 1' into a ScaleSpec.

Parsing never fails: malformed labels degrade to documented defaults so
that drawing is never blocked by a bad scale.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from ..constants import (
    POINTS_PER_INCH,
    DEFAULT_SCALE_LABEL,
    FRACTION_FALLBACK_INCHES_PER_FOOT,
    DECIMAL_FALLBACK_INCHES_PER_FOOT,
    NEUTRAL_FEET_PER_POINT,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScaleSpec:
    """A parsed drawing scale: X inches on paper equal one real foot."""
    inches_per_foot: float
    label: str = DEFAULT_SCALE_LABEL
    is_fallback: bool = False  # True if the label could not be parsed

    @property
    def feet_per_point(self) -> float:
        """Real feet represented by one PDF point."""
        return feet_per_point(self.inches_per_foot)

    @property
    def points_per_foot(self) -> float:
        """PDF points per real foot (inverse of feet_per_point)."""
        return 1.0 / self.feet_per_point


def feet_per_point(inches_per_foot: float) -> float:
    """
    Convert an inches-per-foot scale into feet per PDF point.

    1 point = 1/72 inch, so feet/point = 1 / (72 * inches_per_foot).
    A non-positive or non-finite scale yields the neutral factor 1.0.
    """
    if not math.isfinite(inches_per_foot) or inches_per_foot <= 0:
        logger.warning(
            f"Invalid inches-per-foot {inches_per_foot}, "
            f"using neutral factor {NEUTRAL_FEET_PER_POINT}"
        )
        return NEUTRAL_FEET_PER_POINT

    return 1.0 / (POINTS_PER_INCH * inches_per_foot)


def _parse_number(token: str) -> Optional[float]:
    try:
        return float(token)
    except ValueError:
        return None


def parse_inches_token(token: str) -> Tuple[float, bool]:
    """
    Parse the paper-inches side of a scale label.

    Args:
        token: Left side of the label with quotes removed, e.g. "3/8" or "1"

    Returns:
        Tuple of (inches_per_foot, is_fallback)
    """
    if "/" in token:
        parts = token.split("/")
        if len(parts) == 2:
            numerator = _parse_number(parts[0].strip())
            denominator = _parse_number(parts[1].strip())
            if numerator is not None and denominator is not None and denominator != 0:
                return numerator / denominator, False

        logger.warning(
            f"Cannot parse fraction '{token}', "
            f"falling back to {FRACTION_FALLBACK_INCHES_PER_FOOT} in/ft"
        )
        return FRACTION_FALLBACK_INCHES_PER_FOOT, True

    value = _parse_number(token)
    if value is None:
        logger.warning(
            f"Cannot parse scale '{token}', "
            f"falling back to {DECIMAL_FALLBACK_INCHES_PER_FOOT} in/ft"
        )
        return DECIMAL_FALLBACK_INCHES_PER_FOOT, True

    return value, False


def parse_scale(label: Optional[str]) -> ScaleSpec:
    """
    Parse a scale label into a ScaleSpec.

    Accepts formats like:
    - 1/8" = 1'
    - 3/8" = 1'
    - 1" = 1'

    Only the left side of '=' is read; the right side is always one foot.
    A missing label yields the default scale (1/8" = 1').

    Args:
        label: User-selected scale label

    Returns:
        ScaleSpec (never raises)
    """
    if label is None:
        return parse_scale(DEFAULT_SCALE_LABEL)

    left = label.split("=")[0].strip()
    inches_token = left.replace('"', "").strip()

    inches_per_foot, is_fallback = parse_inches_token(inches_token)

    logger.debug(f"Parsed scale '{label}' -> {inches_per_foot} in/ft")
    return ScaleSpec(
        inches_per_foot=inches_per_foot,
        label=label,
        is_fallback=is_fallback,
    )


def scale_conversion(label: Optional[str]) -> float:
    """Feet per PDF point for a scale label."""
    return parse_scale(label).feet_per_point
