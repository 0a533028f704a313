"""
PDF Reader Module

Functions for opening PDF files and reading the page geometry the
measurement engine needs: crop box bounds and page rotation.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import pymupdf

logger = logging.getLogger(__name__)


class PDFReadError(Exception):
    """Raised when a PDF cannot be read."""
    pass


class PDFPasswordProtectedError(PDFReadError):
    """Raised when a PDF is password protected."""
    pass


class PDFCorruptedError(PDFReadError):
    """Raised when a PDF is corrupted."""
    pass


@dataclass(frozen=True)
class PageGeometry:
    """Intrinsic geometry of a single page."""
    page_index: int
    crop_box: pymupdf.Rect  # Unrotated page-space bounds
    rotation: int  # Degrees, one of 0/90/180/270

    @property
    def width(self) -> float:
        return self.crop_box.width

    @property
    def height(self) -> float:
        return self.crop_box.height

    @property
    def displayed_size(self) -> tuple:
        """(width, height) as shown on screen, after rotation."""
        if self.rotation in (90, 270):
            return (self.height, self.width)
        return (self.width, self.height)


def open_pdf(filepath: str) -> pymupdf.Document:
    """
    Open a PDF file and return a document object.

    Args:
        filepath: Path to the PDF file

    Returns:
        pymupdf.Document object

    Raises:
        PDFReadError: If file not found
        PDFPasswordProtectedError: If PDF is password protected
        PDFCorruptedError: If PDF is corrupted
    """
    path = Path(filepath)

    if not path.exists():
        raise PDFReadError(f"File not found: {filepath}")

    if not path.is_file():
        raise PDFReadError(f"Path is not a file: {filepath}")

    try:
        doc = pymupdf.open(filepath)
    except Exception as e:
        error_msg = str(e).lower()
        if "password" in error_msg or "encrypted" in error_msg:
            raise PDFPasswordProtectedError(f"PDF is password protected: {filepath}")
        raise PDFCorruptedError(f"Cannot open PDF (may be corrupted): {filepath}. Error: {e}")

    if doc.needs_pass:
        doc.close()
        raise PDFPasswordProtectedError(f"PDF is password protected: {filepath}")

    if doc.page_count == 0:
        doc.close()
        raise PDFCorruptedError(f"PDF has no pages: {filepath}")

    logger.info(f"Opened PDF: {filepath} ({doc.page_count} pages)")
    return doc


def get_page(doc: pymupdf.Document, page_number: int) -> pymupdf.Page:
    """
    Get a specific page from a PDF document.

    Args:
        doc: pymupdf.Document object
        page_number: 0-indexed page number

    Returns:
        pymupdf.Page object

    Raises:
        PDFReadError: If page number is invalid
    """
    if page_number < 0 or page_number >= doc.page_count:
        raise PDFReadError(
            f"Invalid page number: {page_number}. "
            f"Document has {doc.page_count} pages (0-{doc.page_count - 1})."
        )

    return doc.load_page(page_number)


def get_page_geometry(page: pymupdf.Page) -> PageGeometry:
    """
    Read the crop box and rotation of a page.

    The crop box is the unrotated page-space rectangle that measurement
    points are expressed in; rotation is reported separately.

    Args:
        page: pymupdf.Page object

    Returns:
        PageGeometry
    """
    geometry = PageGeometry(
        page_index=page.number,
        crop_box=pymupdf.Rect(page.cropbox),
        rotation=page.rotation,
    )
    logger.debug(
        f"Page {page.number}: crop box {tuple(geometry.crop_box)}, "
        f"rotation {geometry.rotation}"
    )
    return geometry
