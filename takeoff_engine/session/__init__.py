# Takeoff session orchestration module

from .takeoff_session import TakeoffSession

__all__ = [
    "TakeoffSession",
]
