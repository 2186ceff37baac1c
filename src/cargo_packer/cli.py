from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from cargo_packer.config import configure_logging, get_settings
from cargo_packer.engine import pack
from cargo_packer.io.export import export_payload, format_summary, write_export
from cargo_packer.io.schemas import PackRequest
from cargo_packer.models import PackingOptions
from cargo_packer.packing.heuristics import available_algorithms

logger = logging.getLogger(__name__)


def load_input(path: Path) -> PackRequest:
    """
    Read a shipment file.

    Accepts either {"container": {...}} or {"container_preset": "40HC"},
    plus "boxes" and optional "options".
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    request = PackRequest.model_validate(data)
    missing = request.missing_fields()
    if missing:
        raise ValueError(f"Input is missing: {', '.join(missing)}")
    return request


def build_options(args: argparse.Namespace, request: PackRequest) -> PackingOptions:
    """Command-line flags override the options stored in the input file."""
    options = request.options or PackingOptions(algorithm=get_settings().default_algorithm)
    updates = {}
    if args.algorithm:
        updates["algorithm"] = args.algorithm
    if args.no_rotation:
        updates["allow_rotation"] = False
    if args.ignore_stacking:
        updates["respect_stackability"] = False
    return options.model_copy(update=updates)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Cargo Packer CLI")
    parser.add_argument("--input", required=True, help="Input shipment JSON file")
    parser.add_argument("--output", required=True, help="Output plan JSON file")
    parser.add_argument(
        "--algorithm",
        choices=available_algorithms(),
        help="layer = row/column/layer fill, best-fit = tightest space search, constrained = first-fit with weight and stacking rules",
    )
    parser.add_argument(
        "--no-rotation",
        action="store_true",
        help="Keep every box in its input orientation",
    )
    parser.add_argument(
        "--ignore-stacking",
        action="store_true",
        help="Skip support, stackability and fragility checks",
    )

    args = parser.parse_args(argv)
    configure_logging()

    try:
        request = load_input(Path(args.input))
        container = request.resolve_container()
    except (OSError, ValueError, ValidationError) as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 2

    options = build_options(args, request)
    result = pack(container, request.boxes, options)

    out = write_export(Path(args.output), export_payload(container, request.boxes, result))
    print(format_summary(result))
    print(f"Wrote {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
