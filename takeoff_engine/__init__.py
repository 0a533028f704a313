# Takeoff measurement engine: scale parsing, view-to-page transforms,
# point capture, and quantity calculation for construction plan takeoffs.

__version__ = "0.1.0"
