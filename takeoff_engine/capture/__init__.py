# Click-to-point capture module

from .point_capture import (
    CaptureMode,
    PointCapture,
)

__all__ = [
    "CaptureMode",
    "PointCapture",
]
