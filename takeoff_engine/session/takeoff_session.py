"""
Takeoff Session Module

Coordinates scale, page transform, point capture, and quantity
calculation for the takeoff currently being drawn.

The rendering side pushes pointer events and view transform changes in;
the session keeps a live quantity preview current and commits the final
quantity to the takeoff item when capture is finished.
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..calibration.scale_parser import ScaleSpec, parse_scale
from ..calibration.unit_converter import format_quantity
from ..capture.point_capture import PointCapture
from ..geometry.calculator import calculate_result, validate_takeoff_geometry
from ..geometry.takeoff import Point2D, TakeoffItem, TakeoffResult
from ..settings import Settings
from ..viewport.page_transform import PageTransform, ViewTransform

logger = logging.getLogger(__name__)


class TakeoffSession:
    """
    Measurement context for one displayed page.

    Clicks are converted to page space through the page transform as
    they arrive, so captured points do not depend on the zoom or pan in
    effect when they were placed. Every state change recomputes the live
    preview; recomputing with unchanged inputs gives the same result.

    Public methods are serialized by a single lock, so the session can
    be driven from more than one thread.
    """

    def __init__(
        self,
        page_transform: Optional[PageTransform] = None,
        scale: Optional[str] = None,
        page_index: int = 0,
        settings: Optional[Settings] = None
    ):
        self.settings = settings or Settings()
        self.page_transform = page_transform or PageTransform()
        self.page_index = page_index
        self.scale: ScaleSpec = parse_scale(self.settings.default_scale if scale is None else scale)
        self.capture = PointCapture()
        self.takeoffs: Dict[str, TakeoffItem] = {}

        self._lock = threading.RLock()
        self._preview = TakeoffResult()

        self.page_transform.subscribe(self._on_transform_changed)

    def close(self) -> None:
        """Cancel any capture and stop listening to the page transform."""
        with self._lock:
            self.capture.cancel()
            self._recompute()
        self.page_transform.unsubscribe(self._on_transform_changed)

    # -------------------------------------------------------------------------
    # Takeoff registry
    # -------------------------------------------------------------------------

    def add_takeoff(self, item: TakeoffItem) -> TakeoffItem:
        with self._lock:
            self.takeoffs[item.takeoff_id] = item
            return item

    def get_takeoff(self, takeoff_id: str) -> Optional[TakeoffItem]:
        return self.takeoffs.get(takeoff_id)

    def remove_takeoff(self, takeoff_id: str) -> Optional[TakeoffItem]:
        """Remove a takeoff, cancelling its capture if it is active."""
        with self._lock:
            if self.capture.takeoff_id == takeoff_id:
                self.cancel_capture()
            return self.takeoffs.pop(takeoff_id, None)

    def load_takeoffs(self, records: Iterable[Dict[str, Any]]) -> List[TakeoffItem]:
        """Register takeoffs from their dictionary form."""
        return [self.add_takeoff(TakeoffItem.from_dict(record)) for record in records]

    def export_takeoffs(self) -> List[Dict[str, Any]]:
        """Committed takeoffs as plain dictionaries for persistence."""
        with self._lock:
            return [item.to_dict() for item in self.takeoffs.values()]

    @property
    def active_takeoff(self) -> Optional[TakeoffItem]:
        if self.capture.takeoff_id is None:
            return None
        return self.takeoffs.get(self.capture.takeoff_id)

    @property
    def is_capturing(self) -> bool:
        return self.capture.is_capturing

    # -------------------------------------------------------------------------
    # Session control
    # -------------------------------------------------------------------------

    def set_scale(self, label: Optional[str]) -> ScaleSpec:
        """Change the drawing scale; a missing label restores the default."""
        with self._lock:
            self.scale = parse_scale(self.settings.default_scale if label is None else label)
            logger.debug(f"Scale set to {self.scale.label} ({self.scale.feet_per_point:.6f} ft/pt)")
            self._recompute()
            return self.scale

    def set_scale_spec(self, scale: ScaleSpec) -> None:
        """Use an already-parsed scale, e.g. from a two-point calibration."""
        with self._lock:
            self.scale = scale
            self._recompute()

    def set_page(self, page_index: int) -> None:
        """Switch to another page; a capture in progress is cancelled."""
        with self._lock:
            if page_index != self.page_index and self.is_capturing:
                logger.info(f"Page changed to {page_index}, cancelling capture")
                self.capture.cancel()
            self.page_index = page_index
            self._recompute()

    def start_capture(self, takeoff_id: str) -> bool:
        """
        Start drawing on a takeoff.

        Switching from another takeoff mid-capture discards that
        capture's uncommitted points and pending click.

        Returns:
            False if the takeoff is unknown
        """
        with self._lock:
            item = self.takeoffs.get(takeoff_id)
            if item is None:
                logger.warning(f"Cannot start capture, unknown takeoff {takeoff_id}")
                return False

            if self.is_capturing and self.capture.takeoff_id != takeoff_id:
                logger.info(
                    f"Switching capture from {self.capture.takeoff_id} to {takeoff_id}, "
                    "discarding uncommitted points"
                )

            self.capture.start(takeoff_id, item.takeoff_type, item.points)
            self._recompute()
            return True

    def finish_capture(self) -> Optional[TakeoffItem]:
        """
        Commit the captured points and quantity to the active takeoff.

        Returns:
            The updated TakeoffItem, or None if nothing was being captured
        """
        with self._lock:
            item = self.active_takeoff
            if item is None:
                logger.debug("Finish ignored, not capturing")
                self.capture.cancel()
                return None

            points = self.capture.finish()
            result = calculate_result(points, item.takeoff_type, self.scale)

            item.points = list(points)
            item.quantity = result.quantity
            item.unit = result.unit
            item.page_index = self.page_index
            item.scale_label = self.scale.label
            item.warnings = validate_takeoff_geometry(points, item.takeoff_type)

            for warning in item.warnings:
                logger.warning(f"Takeoff {item.takeoff_id}: {warning}")

            logger.info(
                f"Takeoff {item.takeoff_id} ({item.name}): "
                f"{result.quantity:.2f} {result.unit} on page {self.page_index + 1}"
            )

            self._recompute()
            return item

    def reset_capture(self) -> None:
        """Clear the in-progress points; the committed result is kept."""
        with self._lock:
            self.capture.reset()
            self._recompute()

    def cancel_capture(self) -> None:
        """Stop drawing without committing."""
        with self._lock:
            self.capture.cancel()
            self._recompute()

    # -------------------------------------------------------------------------
    # Events from the rendering side
    # -------------------------------------------------------------------------

    def on_pointer_down(self, raw: Sequence[float]) -> Point2D:
        """
        Handle a click in view coordinates.

        Returns:
            The click position in page space
        """
        with self._lock:
            page_point = self.page_transform.to_page(raw)
            if self.capture.on_click(page_point):
                self._recompute()
            return page_point

    def on_pointer_move(self, raw: Sequence[float]) -> None:
        with self._lock:
            if self.capture.pending_first_click is None:
                return
            self.capture.on_move(self.page_transform.to_page(raw))

    def on_view_transform_changed(
        self,
        transform: Optional[ViewTransform],
        rotation_radians: Optional[float] = None
    ) -> None:
        """Apply a new zoom/pan/rotation; conversions after this use it."""
        with self._lock:
            self.page_transform.set_transform(transform, rotation_radians)

    def _on_transform_changed(self, transform: ViewTransform, rotation_radians: float) -> None:
        with self._lock:
            self._recompute()

    # -------------------------------------------------------------------------
    # Preview
    # -------------------------------------------------------------------------

    def current_preview(self) -> TakeoffResult:
        return self._preview

    def preview_text(self) -> str:
        """Live quantity formatted for display; empty when idle."""
        preview = self._preview
        return format_quantity(preview.quantity, preview.unit)

    def overlay_segments(self) -> List[Tuple[Point2D, Point2D]]:
        """Captured segments in view coordinates for drawing."""
        with self._lock:
            transform = self.page_transform.transform
            return [
                (transform.page_to_view(a), transform.page_to_view(b))
                for a, b in self.capture.segments()
            ]

    def preview_segment(self) -> Optional[Tuple[Point2D, Point2D]]:
        """Rubber-band segment in view coordinates, if one is showing."""
        with self._lock:
            segment = self.capture.preview_segment
            if segment is None:
                return None
            transform = self.page_transform.transform
            return (transform.page_to_view(segment[0]), transform.page_to_view(segment[1]))

    def _recompute(self) -> TakeoffResult:
        item = self.active_takeoff
        if not self.is_capturing or item is None:
            self._preview = TakeoffResult()
        else:
            self._preview = calculate_result(self.capture.points, item.takeoff_type, self.scale)
        return self._preview
