#!/usr/bin/env python
"""
Takeoff Engine - Installation Verification Script

Run this script to verify the geometry stack and configuration load.
"""

import sys
from pathlib import Path

# Add project root to path for the takeoff_engine import
sys.path.insert(0, str(Path(__file__).parent.parent))


def check_package(name: str, import_name: str = None, version_attr: str = "__version__") -> tuple[bool, str]:
    """Check if a package is installed and return version."""
    import_name = import_name or name
    try:
        module = __import__(import_name)
        version = getattr(module, version_attr, "unknown")
        return True, str(version)
    except ImportError as e:
        return False, str(e)


def check_constants() -> tuple[bool, str]:
    """Check if the constants module loads correctly."""
    try:
        from takeoff_engine.constants import (
            POINTS_PER_INCH,
            DEFAULT_SCALE_LABEL,
            SCALE_PRESETS,
            Unit,
        )
        return True, f"loaded ({POINTS_PER_INCH=}, {DEFAULT_SCALE_LABEL=}, {len(SCALE_PRESETS)} presets)"
    except ImportError as e:
        return False, str(e)


def check_settings() -> tuple[bool, str]:
    """Check if settings.yaml loads and its default scale parses."""
    try:
        from takeoff_engine.calibration import parse_scale
        from takeoff_engine.settings import DEFAULT_SETTINGS_PATH, load_settings

        if not DEFAULT_SETTINGS_PATH.exists():
            return False, "settings.yaml not found"

        settings = load_settings()
        scale = parse_scale(settings.default_scale)
        if scale.is_fallback:
            return False, f"default scale {settings.default_scale!r} does not parse"
        return True, f"default scale {scale.label} ({scale.feet_per_point:.6f} ft/pt)"
    except Exception as e:
        return False, str(e)


def check_measurement() -> tuple[bool, str]:
    """Measure a known line to confirm the engine computes quantities."""
    try:
        from takeoff_engine.geometry import TakeoffType, calculate_takeoff_quantity

        quantity, unit = calculate_takeoff_quantity(
            [(0, 0), (288, 0)], TakeoffType.LINEAR, "1/4\" = 1'"
        )
        if abs(quantity - 16.0) > 1e-9:
            return False, f"expected 16.00 ft, got {quantity:.2f} {unit}"
        return True, f"{quantity:.2f} {unit}"
    except Exception as e:
        return False, str(e)


def main():
    print("=" * 60)
    print("Takeoff Engine - Installation Verification")
    print("=" * 60)
    print()

    results = []

    # Core packages
    print("Core Dependencies:")
    print("-" * 40)

    packages = [
        ("pymupdf", "pymupdf", "__version__"),
        ("shapely", "shapely", "__version__"),
        ("numpy", "numpy", "__version__"),
        ("pyyaml", "yaml", "__version__"),
    ]

    for name, import_name, version_attr in packages:
        ok, info = check_package(name, import_name, version_attr)
        status = "PASS" if ok else "FAIL"
        print(f"  {name:25} [{status}] {info}")
        results.append((name, ok))

    print()
    print("Configuration:")
    print("-" * 40)

    # Constants
    ok, info = check_constants()
    status = "PASS" if ok else "FAIL"
    print(f"  {'constants.py':25} [{status}] {info}")
    results.append(("constants", ok))

    # Settings
    ok, info = check_settings()
    status = "PASS" if ok else "FAIL"
    print(f"  {'settings.yaml':25} [{status}] {info}")
    results.append(("settings", ok))

    print()
    print("Engine:")
    print("-" * 40)

    ok, info = check_measurement()
    status = "PASS" if ok else "FAIL"
    print(f"  {'linear takeoff':25} [{status}] {info}")
    results.append(("measurement", ok))

    print()
    print("=" * 60)

    # Summary
    passed = sum(1 for _, ok in results if ok)
    total = len(results)

    if passed == total:
        print(f"ALL CHECKS PASSED ({passed}/{total})")
        print("Environment is ready for takeoff measurement.")
        return 0
    else:
        failed = [name for name, ok in results if not ok]
        print(f"SOME CHECKS FAILED ({passed}/{total})")
        print(f"Failed: {', '.join(failed)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
