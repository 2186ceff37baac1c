"""Best-fit packer: cheapest (space, orientation) pair by waste plus surface area."""

from __future__ import annotations

import logging
from typing import Optional

from cargo_packer.geometry import Dims, orientations_of, surface_area, volume
from cargo_packer.models import Container, PackingOptions, PlacedBox, UnplacedReason
from cargo_packer.packing.spaces import FreeSpace, FreeSpaceTracker
from cargo_packer.packing.units import Unit, sort_by_volume_desc, trailing_min_sides

logger = logging.getLogger(__name__)

SURFACE_WEIGHT = 0.1


def fit_score(space: FreeSpace, dims: Dims) -> float:
    """Leftover volume of the space plus a small penalty on the box's surface area."""
    return (space.volume - volume(dims)) + SURFACE_WEIGHT * surface_area(dims)


def best_candidate(
    tracker: FreeSpaceTracker,
    orientations: list[Dims],
) -> Optional[tuple[FreeSpace, Dims]]:
    best: Optional[tuple[FreeSpace, Dims]] = None
    best_score = float("inf")
    for space in tracker:
        for dims in orientations:
            if not space.fits(dims):
                continue
            score = fit_score(space, dims)
            if score < best_score:
                best_score = score
                best = (space, dims)
    return best


def pack_best_fit(
    container: Container,
    units: list[Unit],
    options: PackingOptions,
) -> tuple[list[PlacedBox], list[tuple[Unit, UnplacedReason]]]:
    tracker = FreeSpaceTracker(container.dims)
    allow_rotation = options.rotation_enabled()

    placed: list[PlacedBox] = []
    rejected: list[tuple[Unit, UnplacedReason]] = []

    ordered = sort_by_volume_desc(units)
    min_sides = trailing_min_sides(ordered)

    for unit, min_side in zip(ordered, min_sides):
        # Tightest space first
        tracker.sort_by_volume()
        found = best_candidate(tracker, orientations_of(unit.dims, allow_rotation))
        if found is None:
            rejected.append((unit, UnplacedReason.NO_FIT))
            continue

        space, dims = found
        placed.append(unit.place(space.x, space.y, space.z, dims))
        tracker.place(space, dims, policy="best-fit", min_side=min_side)

    logger.debug(
        f"best-fit placed {len(placed)} of {len(units)} units, "
        f"{len(tracker)} free spaces left"
    )
    return placed, rejected
