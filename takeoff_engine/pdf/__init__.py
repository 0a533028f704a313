# PDF page geometry module

from .reader import (
    open_pdf,
    get_page,
    get_page_geometry,
    PageGeometry,
    PDFReadError,
    PDFPasswordProtectedError,
    PDFCorruptedError,
)

__all__ = [
    # Reader functions
    "open_pdf",
    "get_page",
    "get_page_geometry",
    "PageGeometry",
    # Reader exceptions
    "PDFReadError",
    "PDFPasswordProtectedError",
    "PDFCorruptedError",
]
