#!/usr/bin/env python
"""
Takeoff Session Tests

End-to-end tests driving a session with view-space clicks: live preview,
commit, zoom changes during capture, scale changes, switching takeoffs,
page changes, and persistence.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from takeoff_engine.geometry import Point2D, TakeoffItem, TakeoffResult, TakeoffType
from takeoff_engine.session import TakeoffSession
from takeoff_engine.settings import Settings
from takeoff_engine.viewport import PageTransform, ViewTransform

QUARTER_INCH = "1/4\" = 1'"
EIGHTH_INCH = "1/8\" = 1'"
ONE_INCH = "1\" = 1'"


def _close(a, b, tol=1e-9):
    return abs(a[0] - b[0]) < tol and abs(a[1] - b[1]) < tol


def _session_with(item: TakeoffItem, scale: str = QUARTER_INCH) -> TakeoffSession:
    session = TakeoffSession(scale=scale)
    session.add_takeoff(item)
    return session


def test_linear_sixteen_feet():
    """Two clicks 288 pt apart at 1/4" = 1' preview and commit 16 ft."""
    item = TakeoffItem("wall-1", "Interior wall", TakeoffType.LINEAR)
    session = _session_with(item)

    assert session.start_capture("wall-1")
    session.on_pointer_down((0, 0))
    assert session.current_preview() == TakeoffResult(0.0, "ft")

    session.on_pointer_down((288, 0))
    preview = session.current_preview()
    assert abs(preview.quantity - 16.0) < 1e-9
    assert preview.unit == "ft"
    assert session.preview_text() == "16.00 ft"

    committed = session.finish_capture()
    assert committed is item
    assert abs(item.quantity - 16.0) < 1e-9
    assert item.unit == "ft"
    assert item.points == [Point2D(0, 0), Point2D(288, 0)]
    assert item.scale_label == QUARTER_INCH
    assert item.page_index == 0
    assert item.warnings == []

    assert not session.is_capturing
    assert session.current_preview() == TakeoffResult()

    print("  [PASS] Linear 16 ft")


def test_zoom_during_capture():
    """Points keep their page position when the view zooms mid-capture."""
    page_transform = PageTransform()
    page_transform.update((0, 0, 612, 792), (0, 0, 1224, 1584))

    session = TakeoffSession(page_transform=page_transform, scale=QUARTER_INCH)
    session.add_takeoff(TakeoffItem("wall-1", "Wall", TakeoffType.LINEAR))
    session.start_capture("wall-1")

    page_point = session.on_pointer_down((0, 0))
    assert page_point == Point2D(0, 0)
    page_point = session.on_pointer_down((576, 0))
    assert _close(page_point, (288, 0))
    assert abs(session.current_preview().quantity - 16.0) < 1e-9

    # Zoom in to 4x; the committed segment must not change length
    session.on_view_transform_changed(ViewTransform(4.0, 4.0, 0.0, 0.0))
    assert abs(session.current_preview().quantity - 16.0) < 1e-9

    # (1152, 1152) at 4x is page (288, 288)
    page_point = session.on_pointer_down((1152, 1152))
    assert _close(page_point, (288, 288))
    assert abs(session.current_preview().quantity - 32.0) < 1e-9

    print("  [PASS] Zoom during capture")


def test_idle_preview():
    """With nothing captured the preview is zero with no unit."""
    session = TakeoffSession()
    assert session.current_preview() == TakeoffResult(0.0, "")
    assert session.preview_text() == ""
    assert session.active_takeoff is None

    session.on_pointer_down((50, 50))
    assert session.current_preview() == TakeoffResult(0.0, "")

    assert session.finish_capture() is None

    print("  [PASS] Idle preview")


def test_reset_keeps_committed_result():
    """Reset clears the live points but not the committed quantity."""
    item = TakeoffItem("wall-1", "Wall", TakeoffType.LINEAR)
    session = _session_with(item)

    session.start_capture("wall-1")
    session.on_pointer_down((0, 0))
    session.on_pointer_down((288, 0))
    session.finish_capture()

    # Resuming starts from the committed points
    session.start_capture("wall-1")
    assert abs(session.current_preview().quantity - 16.0) < 1e-9

    session.reset_capture()
    assert session.is_capturing
    assert session.current_preview().quantity == 0.0
    assert abs(item.quantity - 16.0) < 1e-9
    assert len(item.points) == 2

    print("  [PASS] Reset keeps committed result")


def test_switch_takeoff_mid_capture():
    """Switching takeoffs discards uncommitted points of the first one."""
    wall = TakeoffItem("A", "Wall", TakeoffType.LINEAR)
    slab = TakeoffItem("B", "Slab", TakeoffType.AREA)
    session = _session_with(wall)
    session.add_takeoff(slab)

    session.start_capture("A")
    session.on_pointer_down((0, 0))
    session.on_pointer_down((288, 0))
    session.finish_capture()

    session.start_capture("A")
    session.on_pointer_down((288, 0))
    session.on_pointer_down((288, 288))
    session.on_pointer_down((0, 288))

    assert session.start_capture("B")
    assert session.active_takeoff is slab
    assert session.capture.points == ()
    assert session.capture.pending_first_click is None
    assert session.current_preview() == TakeoffResult(0.0, "yd²")

    assert wall.points == [Point2D(0, 0), Point2D(288, 0)]
    assert abs(wall.quantity - 16.0) < 1e-9

    print("  [PASS] Switch takeoff mid-capture")


def test_cancel_capture():
    """Cancel leaves the takeoff untouched and the preview empty."""
    item = TakeoffItem("wall-1", "Wall", TakeoffType.LINEAR)
    session = _session_with(item)

    session.start_capture("wall-1")
    session.on_pointer_down((0, 0))
    session.on_pointer_down((288, 0))
    session.cancel_capture()

    assert not session.is_capturing
    assert session.current_preview() == TakeoffResult()
    assert item.points == []
    assert item.quantity == 0.0

    print("  [PASS] Cancel capture")


def test_scale_change_recomputes():
    """Changing scale during capture updates the preview immediately."""
    session = _session_with(TakeoffItem("wall-1", "Wall", TakeoffType.LINEAR))
    session.start_capture("wall-1")
    session.on_pointer_down((0, 0))
    session.on_pointer_down((288, 0))
    assert abs(session.current_preview().quantity - 16.0) < 1e-9

    session.set_scale(EIGHTH_INCH)
    assert abs(session.current_preview().quantity - 32.0) < 1e-9

    # Same inputs, same result
    first = session.current_preview()
    session.set_scale(EIGHTH_INCH)
    assert session.current_preview() == first

    print("  [PASS] Scale change recomputes")


def test_area_takeoff():
    """Tracing a 72 pt square at 1" = 1' gives 1.0 under the yd² label."""
    item = TakeoffItem("slab", "Slab", TakeoffType.AREA)
    session = _session_with(item, scale=ONE_INCH)

    session.start_capture("slab")
    for click in [(0, 0), (72, 0), (72, 72), (0, 72), (0, 0)]:
        session.on_pointer_down(click)

    session.finish_capture()
    assert abs(item.quantity - 1.0) < 1e-12
    assert item.unit == "yd²"
    assert len(item.points) == 8

    print("  [PASS] Area takeoff")


def test_count_takeoff():
    """Each click on a count takeoff adds one."""
    item = TakeoffItem("outlets", "Outlets", TakeoffType.COUNT)
    session = _session_with(item)

    session.start_capture("outlets")
    for click in [(10, 10), (20, 20), (30, 30)]:
        session.on_pointer_down(click)

    assert session.current_preview() == TakeoffResult(3.0, "ct")
    session.finish_capture()
    assert item.quantity == 3.0
    assert item.unit == "ct"

    print("  [PASS] Count takeoff")


def test_overlay_in_view_coordinates():
    """Overlay and rubber-band segments are returned in view space."""
    session = _session_with(TakeoffItem("wall-1", "Wall", TakeoffType.LINEAR))
    session.on_view_transform_changed(ViewTransform(2.0, 2.0, 10.0, 20.0))

    session.start_capture("wall-1")
    session.on_pointer_down((10, 20))
    session.on_pointer_down((154, 20))

    segments = session.overlay_segments()
    assert len(segments) == 1
    assert _close(segments[0][0], (10, 20))
    assert _close(segments[0][1], (154, 20))
    assert _close(session.capture.points[1], (72, 0))

    assert session.preview_segment() is None
    session.on_pointer_move((154, 60))
    segment = session.preview_segment()
    assert _close(segment[0], (154, 20))
    assert _close(segment[1], (154, 60))

    print("  [PASS] Overlay in view coordinates")


def test_unknown_takeoff():
    """Starting an unknown takeoff is refused."""
    session = TakeoffSession()
    assert session.start_capture("missing") is False
    assert not session.is_capturing

    print("  [PASS] Unknown takeoff")


def test_page_change_cancels_capture():
    """Moving to another page abandons the capture in progress."""
    item = TakeoffItem("wall-1", "Wall", TakeoffType.LINEAR)
    session = _session_with(item)

    session.start_capture("wall-1")
    session.on_pointer_down((0, 0))
    session.set_page(0)
    assert session.is_capturing

    session.set_page(2)
    assert not session.is_capturing
    assert item.points == []

    session.start_capture("wall-1")
    session.on_pointer_down((0, 0))
    session.on_pointer_down((288, 0))
    session.finish_capture()
    assert item.page_index == 2

    print("  [PASS] Page change cancels capture")


def test_remove_active_takeoff():
    """Removing the takeoff being drawn cancels its capture."""
    session = _session_with(TakeoffItem("wall-1", "Wall", TakeoffType.LINEAR))
    session.start_capture("wall-1")

    removed = session.remove_takeoff("wall-1")
    assert removed is not None
    assert not session.is_capturing
    assert session.get_takeoff("wall-1") is None

    print("  [PASS] Remove active takeoff")


def test_export_and_load():
    """Committed takeoffs survive an export/load cycle."""
    item = TakeoffItem("wall-1", "Wall", TakeoffType.LINEAR, price_per_unit=2.5)
    session = _session_with(item)
    session.start_capture("wall-1")
    session.on_pointer_down((0, 0))
    session.on_pointer_down((288, 0))
    session.finish_capture()

    assert abs(item.total_cost - 40.0) < 1e-9

    records = session.export_takeoffs()
    assert records[0]["type"] == "Linear"
    assert abs(records[0]["total_cost"] - 40.0) < 1e-9

    restored = TakeoffSession()
    loaded = restored.load_takeoffs(records)
    assert len(loaded) == 1

    copy = restored.get_takeoff("wall-1")
    assert copy.takeoff_type == TakeoffType.LINEAR
    assert copy.points == item.points
    assert copy.quantity == item.quantity
    assert copy.price_per_unit == 2.5

    print("  [PASS] Export and load")


def test_settings_default_scale():
    """A session without a scale uses the settings default."""
    settings = Settings(default_scale=QUARTER_INCH)
    session = TakeoffSession(settings=settings)
    assert session.scale.inches_per_foot == 0.25

    session.set_scale(ONE_INCH)
    session.set_scale(None)
    assert session.scale.label == QUARTER_INCH

    assert TakeoffSession().scale.inches_per_foot == 0.125

    print("  [PASS] Settings default scale")


def test_empty_scale_label():
    """An empty label parses like parse_scale(""), not as the default."""
    session = TakeoffSession(scale="")
    assert session.scale.inches_per_foot == 1.0
    assert session.scale.is_fallback

    session.set_scale(QUARTER_INCH)
    session.set_scale("")
    assert session.scale.inches_per_foot == 1.0
    assert session.scale.label == ""

    print("  [PASS] Empty scale label")


def test_close_unsubscribes():
    """A closed session no longer reacts to transform changes."""
    page_transform = PageTransform()
    session = TakeoffSession(page_transform=page_transform)
    session.add_takeoff(TakeoffItem("wall-1", "Wall", TakeoffType.LINEAR))
    session.start_capture("wall-1")

    session.close()
    assert not session.is_capturing

    calls = []
    session._recompute = lambda: calls.append(True)
    page_transform.update((0, 0, 100, 100), (0, 0, 200, 200))
    assert calls == []

    # A second session on the same transform still receives updates
    other = TakeoffSession(page_transform=page_transform)
    other.add_takeoff(TakeoffItem("wall-2", "Wall", TakeoffType.LINEAR))
    other.start_capture("wall-2")
    other.on_pointer_down((0, 0))
    other.on_pointer_down((144, 0))
    page_transform.update((0, 0, 100, 100), (0, 0, 100, 100))
    assert abs(other.current_preview().quantity - 8.0) < 1e-9

    print("  [PASS] Close unsubscribes")


def run_all_tests():
    """Run all takeoff session tests."""
    print("\n" + "=" * 60)
    print("Takeoff Session Tests")
    print("=" * 60)

    tests = [
        test_linear_sixteen_feet,
        test_zoom_during_capture,
        test_idle_preview,
        test_reset_keeps_committed_result,
        test_switch_takeoff_mid_capture,
        test_cancel_capture,
        test_scale_change_recomputes,
        test_area_takeoff,
        test_count_takeoff,
        test_overlay_in_view_coordinates,
        test_unknown_takeoff,
        test_page_change_cancels_capture,
        test_remove_active_takeoff,
        test_export_and_load,
        test_settings_default_scale,
        test_empty_scale_label,
        test_close_unsubscribes,
    ]

    passed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except AssertionError as e:
            print(f"  [FAIL] {test.__name__}: {e}")

    print("\n" + "=" * 60)
    print(f"Takeoff Session Results: {passed}/{len(tests)} tests passed")
    print("=" * 60)

    return passed == len(tests)


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
