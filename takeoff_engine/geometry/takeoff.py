"""
Takeoff Data Structure Module

Defines page-space points, takeoff types, quantity results, and the
TakeoffItem record handed to persistence.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Dict, Any, Sequence

from ..constants import (
    Unit,
    MIN_POINTS_LINEAR,
    MIN_POINTS_AREA,
    MIN_POINTS_COUNT,
)

logger = logging.getLogger(__name__)


class Point2D(NamedTuple):
    """A point in page space (PDF points, intrinsic page coordinates)."""
    x: float
    y: float


class TakeoffType(Enum):
    """
    Kind of quantity a takeoff measures.

    Values:
        LINEAR: Length along the traced points, in feet
        AREA: Enclosed polygon area
        COUNT: Number of placed points
    """
    LINEAR = "Linear"
    AREA = "Area"
    COUNT = "Count"

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional["TakeoffType"]:
        """
        Parse a takeoff type name, case-insensitive.

        Returns:
            TakeoffType, or None for an unrecognized name
        """
        if not isinstance(value, str):
            return None

        normalized = value.strip().capitalize()
        try:
            return cls(normalized)
        except ValueError:
            return None

    @property
    def unit(self) -> str:
        """Canonical unit label for this type."""
        return _TYPE_UNITS[self]

    @property
    def min_points(self) -> int:
        """Points needed before a non-zero quantity is produced."""
        return _TYPE_MIN_POINTS[self]

    @property
    def uses_segment_pairs(self) -> bool:
        """True if clicks are captured as chained two-point segments."""
        return self in (TakeoffType.LINEAR, TakeoffType.AREA)


_TYPE_UNITS = {
    TakeoffType.LINEAR: Unit.FEET,
    TakeoffType.AREA: Unit.SQUARE_YARDS,
    TakeoffType.COUNT: Unit.COUNT,
}

_TYPE_MIN_POINTS = {
    TakeoffType.LINEAR: MIN_POINTS_LINEAR,
    TakeoffType.AREA: MIN_POINTS_AREA,
    TakeoffType.COUNT: MIN_POINTS_COUNT,
}


@dataclass(frozen=True)
class TakeoffResult:
    """A derived quantity with its unit label."""
    quantity: float = 0.0
    unit: str = Unit.NONE

    def to_dict(self) -> Dict[str, Any]:
        return {"quantity": self.quantity, "unit": self.unit}


def as_points(raw: Sequence[Sequence[float]]) -> List[Point2D]:
    """Convert a sequence of (x, y) pairs to Point2D values."""
    return [Point2D(float(p[0]), float(p[1])) for p in raw]


@dataclass
class TakeoffItem:
    """
    A single measured item traced on a plan page.

    Holds the committed page-space points and the quantity computed
    when the last capture pass was finished.
    """
    # Identification
    takeoff_id: str
    name: str
    takeoff_type: TakeoffType

    # Location
    page_index: Optional[int] = None  # 0-indexed, set when a capture is finished

    # Committed geometry in page space
    points: List[Point2D] = field(default_factory=list)

    # Committed measurement
    quantity: float = 0.0
    unit: str = Unit.NONE
    scale_label: str = ""

    # Pricing
    price_per_unit: Optional[float] = None

    # Validation warnings from the last commit
    warnings: List[str] = field(default_factory=list)

    @property
    def total_cost(self) -> Optional[float]:
        """Quantity times unit price, or None when no price is set."""
        if self.price_per_unit is None:
            return None
        return self.quantity * self.price_per_unit

    @property
    def result(self) -> TakeoffResult:
        return TakeoffResult(quantity=self.quantity, unit=self.unit)

    def to_dict(self) -> Dict[str, Any]:
        """Convert takeoff to dictionary for persistence."""
        return {
            "takeoff_id": self.takeoff_id,
            "name": self.name,
            "type": self.takeoff_type.value,
            "page_index": self.page_index,
            "points": [{"x": p.x, "y": p.y} for p in self.points],
            "quantity": self.quantity,
            "unit": self.unit,
            "scale_label": self.scale_label,
            "price_per_unit": self.price_per_unit,
            "total_cost": self.total_cost,
            "warnings": list(self.warnings),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TakeoffItem":
        """
        Rebuild a takeoff from its dictionary form.

        Unknown type names fall back to LINEAR with a warning.
        """
        takeoff_type = TakeoffType.from_string(data.get("type"))
        if takeoff_type is None:
            logger.warning(
                f"Unknown takeoff type {data.get('type')!r} for "
                f"{data.get('takeoff_id')}, using Linear"
            )
            takeoff_type = TakeoffType.LINEAR

        return cls(
            takeoff_id=str(data["takeoff_id"]),
            name=data.get("name", "Untitled"),
            takeoff_type=takeoff_type,
            page_index=data.get("page_index"),
            points=[Point2D(float(p["x"]), float(p["y"])) for p in data.get("points", [])],
            quantity=float(data.get("quantity", 0.0)),
            unit=data.get("unit", Unit.NONE),
            scale_label=data.get("scale_label", ""),
            price_per_unit=data.get("price_per_unit"),
            warnings=list(data.get("warnings", [])),
        )
