# View-to-page coordinate transform module

from .page_transform import (
    ViewTransform,
    PageTransform,
    normalize_rotation,
)

__all__ = [
    "ViewTransform",
    "PageTransform",
    "normalize_rotation",
]
