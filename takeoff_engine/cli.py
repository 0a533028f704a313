"""
Command Line Interface Module

Measures a takeoff from a list of points for a given type and scale.
"""

import argparse
import json
import logging
import re
import sys
from typing import Any, Dict, List, Optional

from .calibration.scale_parser import parse_scale
from .calibration.unit_converter import (
    calculate_scale_from_calibration,
    format_quantity,
    parse_calibration_string,
)
from .geometry.calculator import calculate_result, validate_takeoff_geometry
from .geometry.takeoff import Point2D, TakeoffItem, TakeoffType
from .pdf.reader import get_page, get_page_geometry, open_pdf
from .session.takeoff_session import TakeoffSession
from .settings import load_settings

logger = logging.getLogger(__name__)


def parse_points_string(points_str: str) -> List[Point2D]:
    """
    Parse a point list like "0,0 288,0" or "0,0;288,0".

    Args:
        points_str: Whitespace- or semicolon-separated "x,y" pairs

    Returns:
        List of Point2D

    Raises:
        ValueError: If a pair cannot be parsed
    """
    points = []
    for part in re.split(r"[\s;]+", points_str.strip()):
        if not part:
            continue
        coords = part.split(",")
        if len(coords) != 2:
            raise ValueError(f"Invalid point '{part}', expected x,y")
        try:
            points.append(Point2D(float(coords[0]), float(coords[1])))
        except ValueError:
            raise ValueError(f"Invalid point '{part}', expected numbers")
    return points


def parse_rect_string(rect_str: str) -> tuple:
    """Parse "x0,y0,x1,y1" into a 4-tuple of floats."""
    parts = rect_str.split(",")
    if len(parts) != 4:
        raise ValueError(f"Invalid rectangle '{rect_str}', expected x0,y0,x1,y1")
    return tuple(float(p) for p in parts)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the takeoff engine."""
    parser = argparse.ArgumentParser(
        prog="takeoff-engine",
        description="Measure linear, area, and count takeoffs on scaled drawings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  takeoff-engine --type Linear --scale "1/4\\" = 1'" --points "0,0 288,0"
  takeoff-engine --type Area --calib "0,0:72,0=1ft" --points "0,0 72,0 72,72 0,72"
  takeoff-engine --type Linear --pdf plan.pdf --page 1 --projected 0,0,1224,1584 --clicks "10,10 586,10"
        """
    )

    parser.add_argument(
        "--type",
        default="Linear",
        help="Takeoff type: Linear, Area, or Count (default: Linear)"
    )

    points_group = parser.add_mutually_exclusive_group(required=True)

    points_group.add_argument(
        "--points",
        help="Page-space points, e.g. '0,0 288,0'"
    )

    points_group.add_argument(
        "--clicks",
        help="View-space clicks replayed through the capture state machine"
    )

    parser.add_argument(
        "--scale",
        help="Drawing scale label (default from settings, e.g. '1/8\" = 1'')"
    )

    parser.add_argument(
        "--calib",
        help="Two-point calibration ('x1,y1:x2,y2=10ft'), overrides --scale"
    )

    parser.add_argument(
        "--pdf",
        help="PDF file supplying page bounds and rotation for --clicks"
    )

    parser.add_argument(
        "--page",
        type=int,
        default=1,
        help="Page number in --pdf, 1-indexed (default: 1)"
    )

    parser.add_argument(
        "--projected",
        help="On-screen rectangle of the page crop box for --clicks (x0,y0,x1,y1)"
    )

    parser.add_argument(
        "--price",
        type=float,
        help="Price per unit for a cost total"
    )

    parser.add_argument(
        "--config",
        help="Settings YAML file (default: config/settings.yaml)"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the takeoff as JSON"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    return parser


def replay_clicks(session: TakeoffSession, item: TakeoffItem, clicks: List[Point2D]) -> TakeoffItem:
    """Feed view-space clicks through a session and commit the result."""
    session.add_takeoff(item)
    session.start_capture(item.takeoff_id)
    for click in clicks:
        session.on_pointer_move(click)
        session.on_pointer_down(click)
    return session.finish_capture()


def run_measurement(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Measure a takeoff from parsed arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        Takeoff dictionary

    Raises:
        ValueError: On malformed points, rectangle, or calibration strings
    """
    settings = load_settings(args.config)

    if args.calib:
        point1, point2, length, unit = parse_calibration_string(args.calib)
        scale = calculate_scale_from_calibration(point1, point2, length, unit)
    else:
        scale = parse_scale(settings.default_scale if args.scale is None else args.scale)

    takeoff_type = TakeoffType.from_string(args.type)
    if takeoff_type is None:
        raise ValueError(f"Unknown takeoff type: {args.type}")

    item = TakeoffItem(
        takeoff_id="cli",
        name=f"{takeoff_type.value} takeoff",
        takeoff_type=takeoff_type,
        price_per_unit=args.price,
    )

    if args.points is not None:
        points = parse_points_string(args.points)
        result = calculate_result(points, takeoff_type, scale)
        item.points = points
        item.quantity = result.quantity
        item.unit = result.unit
        item.scale_label = scale.label
        item.warnings = validate_takeoff_geometry(points, takeoff_type)
        return item.to_dict()

    session = TakeoffSession(page_index=args.page - 1, settings=settings)
    session.set_scale_spec(scale)

    if args.pdf:
        if not args.projected:
            raise ValueError("--projected is required with --pdf")
        doc = open_pdf(args.pdf)
        try:
            geometry = get_page_geometry(get_page(doc, args.page - 1))
        finally:
            doc.close()
        session.page_transform.update_from_page(geometry, parse_rect_string(args.projected))
    elif args.projected:
        raise ValueError("--projected requires --pdf")

    committed = replay_clicks(session, item, parse_points_string(args.clicks))
    return committed.to_dict()


def format_report(record: Dict[str, Any]) -> str:
    """Human-readable summary of a takeoff dictionary."""
    lines = [
        f"{record['name']}: {format_quantity(record['quantity'], record['unit'])}",
        f"  Scale: {record['scale_label']}",
        f"  Points: {len(record['points'])}",
    ]
    if record["total_cost"] is not None:
        lines.append(f"  Cost: {record['total_cost']:,.2f}")
    for warning in record["warnings"]:
        lines.append(f"  Warning: {warning}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None):
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format='%(message)s')

    try:
        record = run_measurement(args)
    except KeyboardInterrupt:
        print("\nCancelled by user")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    if args.json:
        print(json.dumps(record, indent=2, ensure_ascii=False))
    else:
        print(format_report(record))


if __name__ == "__main__":
    main()
