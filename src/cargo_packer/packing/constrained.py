# src/cargo_packer/packing/constrained.py

from __future__ import annotations

import logging

from cargo_packer.geometry import orientations_of
from cargo_packer.models import Container, PackingOptions, PlacedBox, UnplacedReason
from cargo_packer.packing.constraints import Candidate, LoadState, build_constraints
from cargo_packer.packing.spaces import FreeSpaceTracker
from cargo_packer.packing.units import Unit, sort_by_volume_desc, trailing_min_sides

logger = logging.getLogger(__name__)


def pack_constrained(
    container: Container,
    units: list[Unit],
    options: PackingOptions,
) -> tuple[list[PlacedBox], list[tuple[Unit, UnplacedReason]]]:
    """
    First-fit decreasing packer with weight and stacking constraints.
    - Big boxes first (stable on ties)
    - Spaces scanned bottom-first, then back-to-front, then left-to-right
    - Accepts the FIRST candidate that fits and passes every constraint
    - Deterministic (no randomness)
    """
    tracker = FreeSpaceTracker(container.dims)
    constraints = build_constraints(container, options)
    allow_rotation = options.rotation_enabled()

    state = LoadState()
    rejected: list[tuple[Unit, UnplacedReason]] = []

    ordered = sort_by_volume_desc(units)
    min_sides = trailing_min_sides(ordered)

    for unit, min_side in zip(ordered, min_sides):
        orientations = orientations_of(unit.dims, allow_rotation)
        reason = UnplacedReason.NO_FIT
        placed = False

        for space in tracker:
            if placed:
                break

            for dims in orientations:
                if not space.fits(dims):
                    continue

                candidate = Candidate(unit, space.x, space.y, space.z, dims)
                failed = next((c for c in constraints if not c.check(candidate, state)), None)
                if failed is not None:
                    reason = failed.reason
                    continue

                # First admissible placement found - accept it immediately
                state.commit(unit.place(space.x, space.y, space.z, dims))
                tracker.place(space, dims, policy="constrained", min_side=min_side)
                tracker.sort_by_position()
                placed = True
                break

        if not placed:
            rejected.append((unit, reason))

    logger.debug(
        f"constrained packer placed {len(state.placed)} of {len(units)} units, "
        f"weight={state.weight:.2f}"
    )
    return state.placed, rejected
