"""
Point Capture Module

State machine turning clicks into the point sequence of a takeoff.

Linear and Area takeoffs are captured as chained segments: the first
click is held as pending, each following click appends the pending
point and the new point, and the new point becomes pending. The stored
sequence therefore reads as pairs (p0, p1), (p1, p2), ... Count takeoffs
append one point per click instead of being paired, so three count
clicks store three points rather than the four a paired capture would.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..geometry.calculator import segment_pairs
from ..geometry.takeoff import Point2D, TakeoffType, as_points

logger = logging.getLogger(__name__)


class CaptureMode(Enum):
    """Drawing mode of the capture state machine."""
    IDLE = "idle"
    CAPTURING = "capturing"


class PointCapture:
    """
    In-progress point buffer for the takeoff being drawn.

    All points handed to this class are expected in page space.
    """

    def __init__(self):
        self.mode = CaptureMode.IDLE
        self.takeoff_id: Optional[str] = None
        self.takeoff_type: Optional[TakeoffType] = None
        self._points: List[Point2D] = []
        self._pending: Optional[Point2D] = None
        self._cursor: Optional[Point2D] = None

    @property
    def is_capturing(self) -> bool:
        return self.mode == CaptureMode.CAPTURING

    @property
    def points(self) -> Tuple[Point2D, ...]:
        """Snapshot of the captured sequence."""
        return tuple(self._points)

    @property
    def pending_first_click(self) -> Optional[Point2D]:
        return self._pending

    @property
    def preview_segment(self) -> Optional[Tuple[Point2D, Point2D]]:
        """Rubber-band segment from the pending click to the pointer."""
        if self._pending is None or self._cursor is None:
            return None
        return (self._pending, self._cursor)

    def segments(self) -> List[Tuple[Point2D, Point2D]]:
        """Complete captured segments; an unmatched trailing point is left out."""
        return segment_pairs(self._points)

    def start(
        self,
        takeoff_id: str,
        takeoff_type: TakeoffType,
        initial_points: Sequence[Point2D] = ()
    ) -> None:
        """
        Enter capturing mode for a takeoff.

        Any capture already in progress is cancelled first so that no
        pending click carries over to the new takeoff.

        Args:
            takeoff_id: Takeoff being edited
            takeoff_type: Its type, deciding how clicks are grouped
            initial_points: Previously committed points to continue from
        """
        if self.is_capturing:
            self.cancel()

        self.mode = CaptureMode.CAPTURING
        self.takeoff_id = takeoff_id
        self.takeoff_type = takeoff_type
        self._points = as_points(initial_points)
        self._pending = None
        self._cursor = None
        logger.debug(
            f"Capture started for {takeoff_id} ({takeoff_type.value}), "
            f"{len(self._points)} existing points"
        )

    def on_click(self, point: Sequence[float]) -> bool:
        """
        Handle a click at a page-space point.

        Returns:
            True if the captured sequence changed
        """
        if not self.is_capturing:
            logger.debug("Click ignored, not capturing")
            return False

        p = Point2D(float(point[0]), float(point[1]))

        if self.takeoff_type is not None and not self.takeoff_type.uses_segment_pairs:
            self._points.append(p)
            return True

        if self._pending is None:
            self._pending = p
            return False

        self._points.append(self._pending)
        self._points.append(p)
        self._pending = p
        self._cursor = None
        return True

    def on_move(self, point: Sequence[float]) -> None:
        """Track the pointer for the rubber-band preview."""
        if not self.is_capturing or self._pending is None:
            return
        self._cursor = Point2D(float(point[0]), float(point[1]))

    def reset(self) -> None:
        """Clear points and pending click, staying in capturing mode."""
        self._points = []
        self._pending = None
        self._cursor = None
        logger.debug(f"Capture reset for {self.takeoff_id}")

    def cancel(self) -> None:
        """Leave capturing mode, discarding uncommitted points."""
        if self.is_capturing:
            logger.debug(
                f"Capture cancelled for {self.takeoff_id}, "
                f"discarding {len(self._points)} points"
            )
        self._clear()

    def finish(self) -> Tuple[Point2D, ...]:
        """
        Leave capturing mode and hand back the captured points.

        A pending click that never got its second point is dropped.
        """
        points = self.points
        self._clear()
        return points

    def _clear(self) -> None:
        self.mode = CaptureMode.IDLE
        self.takeoff_id = None
        self.takeoff_type = None
        self._points = []
        self._pending = None
        self._cursor = None
