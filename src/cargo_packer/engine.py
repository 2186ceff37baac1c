"""Entry point of the packing core."""

from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

from cargo_packer.errors import ConfigurationError
from cargo_packer.metrics import compute_metrics
from cargo_packer.models import (
    BoxSpec,
    Container,
    PackingOptions,
    PackingResult,
    UnplacedReason,
)
from cargo_packer.packing.heuristics import get_packer
from cargo_packer.packing.units import (
    ColorAssigner,
    UnplacedLedger,
    box_spec_problems,
    container_problems,
    expand_units,
)

logger = logging.getLogger(__name__)


def pack(
    container: Container,
    boxes: Sequence[BoxSpec],
    options: Optional[PackingOptions] = None,
    color_assigner: Optional[ColorAssigner] = None,
) -> PackingResult:
    """
    Place boxes inside the container with the chosen strategy.

    Expected failures never raise: boxes that cannot be placed, invalid box
    specs and an infeasible container are all reported in `unplaced_boxes`.
    Every call works on its own state; the same inputs give the same layout.

    Args:
        container: Container dimensions and optional weight limit
        boxes: Box types; each is expanded into `quantity` units
        options: Strategy selection and constraint switches
        color_assigner: Optional (spec, spec_index) -> color used when a spec has no color

    Returns:
        PackingResult with placements, unplaced boxes and metrics
    """
    options = options or PackingOptions()
    start = time.perf_counter()
    ledger = UnplacedLedger()

    valid: list[tuple[int, BoxSpec]] = []
    for index, spec in enumerate(boxes):
        problems = box_spec_problems(spec)
        if problems:
            logger.warning(f"box spec {index} rejected: {'; '.join(problems)}")
            ledger.add(index, spec, UnplacedReason.INVALID_INPUT, quantity=max(spec.quantity, 0))
        else:
            valid.append((index, spec))

    units = expand_units(valid, color_assigner)
    placed = []

    problems = container_problems(container)
    if problems:
        logger.warning(f"container rejected: {'; '.join(problems)}")
        for unit in units:
            ledger.add_unit(unit, UnplacedReason.INVALID_CONTAINER)
    else:
        strategy = get_packer(options.algorithm)
        try:
            placed, rejected = strategy(container, units, options)
        except ConfigurationError as e:
            logger.warning(f"packing aborted: {e}")
            placed, rejected = [], [(u, UnplacedReason.INVALID_CONTAINER) for u in units]
        for unit, reason in rejected:
            ledger.add_unit(unit, reason)

    result = PackingResult(
        algorithm=options.algorithm,
        placed_boxes=placed,
        unplaced_boxes=ledger.entries(),
        packing_time_ms=(time.perf_counter() - start) * 1000.0,
        **compute_metrics(container, placed),
    )

    logger.info(
        f"algorithm={options.algorithm}, placed={result.placed_count}, "
        f"unplaced={result.unplaced_count}, "
        f"volume_utilization={result.volume_utilization:.2f}%"
    )
    return result
