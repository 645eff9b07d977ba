"""
Command line entry point.

Usage:
    python -m gmlgeom dataset.gml
    python -m gmlgeom dataset.gml --max-error 0.001 --validator 3
    python -m gmlgeom dataset.gml --num-points 20 --srs EPSG:25832 --log-level DEBUG
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from gmlgeom.config import APP_VERSION, DEFAULT_MAX_ERROR, DEFAULT_MAX_NUM_POINTS, DEFAULT_TOLERANCE
from gmlgeom.errors import GeometryError
from gmlgeom.gml import iter_geometries, parse_document, read_geometry
from gmlgeom.linearization import CurveLinearizer
from gmlgeom.logging_config import setup_logging
from gmlgeom.model.criteria import LinearizationCriterion, MaxErrorCriterion, NumPointsCriterion
from gmlgeom.planar import PlanarConverter
from gmlgeom.srs import SrsLookup
from gmlgeom.validation import ElementContext, Severity, ValidationResult, list_ids, validate

logger = logging.getLogger("gmlgeom.cli")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="gmlgeom", description="Linearize and validate GML geometries")
    ap.add_argument("file", help="Path to a GML document")
    ap.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    ap.add_argument("--tolerance", type=float, default=DEFAULT_TOLERANCE,
                    help="Added to the radius of interpolated arc points")
    ap.add_argument("--max-error", type=float, default=DEFAULT_MAX_ERROR,
                    help="Maximum deviation of a chord from the true curve")
    count = ap.add_mutually_exclusive_group()
    count.add_argument("--max-num-points", type=int, default=DEFAULT_MAX_NUM_POINTS,
                       help="Cap for the computed number of points per segment (0 = no cap)")
    count.add_argument("--num-points", type=int, default=None,
                       help="Use exactly this many points per arc instead of --max-error")
    ap.add_argument("--srs", default=None, help="Standard SRS name used when a geometry has none")
    ap.add_argument("--validator", dest="validators", type=int, action="append", choices=list_ids(),
                    help="Validator id to run (repeatable, default: all)")
    ap.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    ap.add_argument("--log-file", default=None, help="Also write log messages to this file")
    return ap


def criterion_from_args(args: argparse.Namespace) -> LinearizationCriterion:
    if args.num_points is not None:
        return NumPointsCriterion(args.num_points)
    return MaxErrorCriterion(args.max_error, args.max_num_points)


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    try:
        criterion = criterion_from_args(args)
    except ValueError as e:
        ap.error(str(e))

    converter = PlanarConverter(CurveLinearizer(args.tolerance), criterion)
    srs_lookup = SrsLookup(args.srs)

    try:
        tree = parse_document(args.file)
    except GeometryError as e:
        logger.error(str(e))
        return 1

    has_errors = False
    for index, element in enumerate(iter_geometries(tree.getroot()), start=1):
        element_id = None
        try:
            geometry = read_geometry(element, srs_lookup)
            element_id = geometry.id or f"#{index}"
            result = ValidationResult()
            validate(ElementContext(element_id, geometry, converter), result, args.validators)
        except GeometryError as e:
            logger.error(f"Geometry {element_id or f'#{index}'} (line {element.sourceline}) cannot be validated: {e}")
            has_errors = True
            continue

        for diagnostic in result.diagnostics:
            print(f"{element_id}: {diagnostic.severity} {diagnostic.message_key}: {diagnostic.text}")
            has_errors = has_errors or diagnostic.severity == Severity.ERROR
        if result.failed_silently:
            print(f"{element_id}: UNKNOWN")

    return 1 if has_errors else 0


if __name__ == "__main__":
    sys.exit(main())
