"""
Page Transform Module

Keeps the mapping between on-screen view coordinates and page space
current as the page is zoomed, panned, or rotated, and notifies
subscribers whenever it changes.

View coordinates depend on zoom and pan; page space does not. All
measurement happens in page space.
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

import pymupdf

from ..constants import ALLOWED_ROTATIONS_DEG
from ..geometry.takeoff import Point2D
from ..pdf.reader import PageGeometry, get_page_geometry

logger = logging.getLogger(__name__)

RectLike = Union[pymupdf.Rect, Sequence[float]]
TransformListener = Callable[["ViewTransform", float], None]


@dataclass(frozen=True)
class ViewTransform:
    """
    Affine placement of a page on screen (no rotation, no shear).

    scale_x/scale_y and translate_x/translate_y describe where page space
    lands in view space: view = page * scale + translate. view_to_page
    applies the inverse.
    """
    scale_x: float = 1.0
    scale_y: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    @classmethod
    def identity(cls) -> "ViewTransform":
        return cls()

    @classmethod
    def from_rects(cls, intrinsic: RectLike, projected: RectLike) -> "ViewTransform":
        """
        Compute the transform that maps the page's intrinsic bounds onto
        its projected on-screen rectangle.

        Args:
            intrinsic: Page crop box in page space (x0, y0, x1, y1)
            projected: Same box as currently displayed in view space

        Returns:
            ViewTransform; identity if either rectangle is empty
        """
        intrinsic = pymupdf.Rect(intrinsic)
        projected = pymupdf.Rect(projected)

        if intrinsic.width <= 0 or intrinsic.height <= 0:
            logger.warning(f"Empty page bounds {tuple(intrinsic)}, using identity transform")
            return cls.identity()

        if projected.width <= 0 or projected.height <= 0:
            logger.warning(f"Empty projected rect {tuple(projected)}, using identity transform")
            return cls.identity()

        scale_x = projected.width / intrinsic.width
        scale_y = projected.height / intrinsic.height

        return cls(
            scale_x=scale_x,
            scale_y=scale_y,
            translate_x=projected.x0 - intrinsic.x0 * scale_x,
            translate_y=projected.y0 - intrinsic.y0 * scale_y,
        )

    @property
    def matrix(self) -> pymupdf.Matrix:
        """Page-to-view matrix."""
        return pymupdf.Matrix(
            self.scale_x, 0, 0, self.scale_y, self.translate_x, self.translate_y
        )

    @property
    def inverse_matrix(self) -> pymupdf.Matrix:
        """View-to-page matrix."""
        return ~self.matrix

    def page_to_view(self, point: Sequence[float]) -> Point2D:
        p = pymupdf.Point(point[0], point[1]) * self.matrix
        return Point2D(p.x, p.y)

    def view_to_page(self, point: Sequence[float]) -> Point2D:
        p = pymupdf.Point(point[0], point[1]) * self.inverse_matrix
        return Point2D(p.x, p.y)


def normalize_rotation(degrees: float) -> int:
    """
    Snap a rotation to one of 0, 90, 180, 270 degrees.

    Rotations that are not a multiple of 90 are treated as 0.
    """
    if not math.isfinite(degrees):
        logger.warning(f"Invalid page rotation {degrees}, using 0")
        return 0

    rounded = int(round(degrees)) % 360
    if rounded not in ALLOWED_ROTATIONS_DEG or abs(degrees - round(degrees)) > 1e-6:
        logger.warning(f"Page rotation {degrees} is not a multiple of 90, using 0")
        return 0
    return rounded


class PageTransform:
    """
    Current view transform and rotation of the displayed page.

    Owned by the rendering side, which calls update()/set_transform()
    on load, zoom, pan, and rotation. Readers get a consistent snapshot:
    the transform and rotation are swapped together under a lock and
    each swap bumps a version counter. Subscribers are notified after
    the new state is in place.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._transform = ViewTransform.identity()
        self._rotation_degrees = 0
        self._version = 0
        self._listeners: List[TransformListener] = []

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, listener: TransformListener) -> None:
        """Register a callback receiving (transform, rotation_radians)."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: TransformListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def update(
        self,
        intrinsic: RectLike,
        projected: RectLike,
        rotation_degrees: float = 0
    ) -> ViewTransform:
        """
        Recompute from the page bounds and its on-screen rectangle.

        Args:
            intrinsic: Page crop box in page space
            projected: Crop box as displayed in view space
            rotation_degrees: Page rotation (0/90/180/270)

        Returns:
            The new ViewTransform
        """
        transform = ViewTransform.from_rects(intrinsic, projected)
        self._apply(transform, normalize_rotation(rotation_degrees))
        return transform

    def update_from_page(
        self,
        page: Union[pymupdf.Page, PageGeometry],
        projected: RectLike
    ) -> ViewTransform:
        """Recompute using a PDF page's crop box and rotation."""
        geometry = page if isinstance(page, PageGeometry) else get_page_geometry(page)
        return self.update(geometry.crop_box, projected, geometry.rotation)

    def set_transform(
        self,
        transform: Optional[ViewTransform],
        rotation_radians: Optional[float] = None
    ) -> None:
        """
        Replace the transform with one computed by the rendering side.

        A missing transform is treated as identity; a missing rotation
        keeps the current rotation.
        """
        if transform is None:
            logger.debug("No transform supplied, using identity")
            transform = ViewTransform.identity()

        if transform.scale_x <= 0 or transform.scale_y <= 0:
            logger.warning(
                f"Non-positive view scale ({transform.scale_x}, {transform.scale_y}), "
                "using identity transform"
            )
            transform = ViewTransform.identity()

        if rotation_radians is None:
            rotation = self.rotation_degrees
        else:
            rotation = normalize_rotation(math.degrees(rotation_radians))

        self._apply(transform, rotation)

    def reset(self) -> None:
        """Return to identity with no rotation."""
        self._apply(ViewTransform.identity(), 0)

    def _apply(self, transform: ViewTransform, rotation_degrees: int) -> None:
        with self._lock:
            self._transform = transform
            self._rotation_degrees = rotation_degrees
            self._version += 1
            version = self._version

        logger.debug(
            f"View transform v{version}: scale=({transform.scale_x:.4f}, "
            f"{transform.scale_y:.4f}) translate=({transform.translate_x:.1f}, "
            f"{transform.translate_y:.1f}) rotation={rotation_degrees}"
        )

        radians = math.radians(rotation_degrees)
        for listener in list(self._listeners):
            listener(transform, radians)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def snapshot(self) -> Tuple[ViewTransform, int, int]:
        """Return (transform, rotation_degrees, version) read together."""
        with self._lock:
            return self._transform, self._rotation_degrees, self._version

    @property
    def transform(self) -> ViewTransform:
        return self.snapshot()[0]

    @property
    def rotation_degrees(self) -> int:
        return self.snapshot()[1]

    @property
    def rotation_radians(self) -> float:
        return math.radians(self.rotation_degrees)

    @property
    def rotation_matrix(self) -> pymupdf.Matrix:
        """Rotation for overlay geometry, matching how page content is rotated."""
        return pymupdf.Matrix(self.rotation_degrees)

    @property
    def version(self) -> int:
        return self.snapshot()[2]

    def to_page(self, point: Sequence[float]) -> Point2D:
        """Convert a view-space point to page space."""
        return self.transform.view_to_page(point)

    def to_view(self, point: Sequence[float]) -> Point2D:
        """Convert a page-space point to view space."""
        return self.transform.page_to_view(point)
