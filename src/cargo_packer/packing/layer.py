"""Layer-by-layer packer: rows along x, rows stacked along z, layers along y."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from cargo_packer.geometry import Dims, approx_le, fits, orientations_of
from cargo_packer.models import Container, PackingOptions, PlacedBox, UnplacedReason
from cargo_packer.packing.units import Unit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cursor:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    # Widest box in the current row and tallest box in the current layer
    row_depth: float = 0.0
    layer_height: float = 0.0


def _slots(cursor: Cursor, base_layer_height: float) -> list[Cursor]:
    """Positions to try, in order: cursor, start of next row, start of next layer."""
    next_row = replace(cursor, x=0.0, z=cursor.z + cursor.row_depth, row_depth=0.0)
    next_layer = Cursor(
        x=0.0,
        y=cursor.y + cursor.layer_height,
        z=0.0,
        row_depth=0.0,
        layer_height=base_layer_height,
    )
    return [cursor, next_row, next_layer]


def _try_place(cursor: Cursor, dims: Dims, container_dims: Dims) -> bool:
    l, h, w = dims
    cl, ch, cw = container_dims
    return (
        approx_le(cursor.x + l, cl)
        and approx_le(cursor.y + h, ch)
        and approx_le(cursor.z + w, cw)
    )


def next_position(
    cursor: Cursor,
    orientations: list[Dims],
    container_dims: Dims,
    base_layer_height: float,
) -> Optional[tuple[Cursor, Dims]]:
    for slot in _slots(cursor, base_layer_height):
        for dims in orientations:
            if _try_place(slot, dims, container_dims):
                return slot, dims
    return None


def pack_layers(
    container: Container,
    units: list[Unit],
    options: PackingOptions,
) -> tuple[list[PlacedBox], list[tuple[Unit, UnplacedReason]]]:
    """
    Deterministic single pass in input order, no search.

    A unit that does not fit anywhere ahead of the cursor is reported as
    unplaced and packing continues with the next unit.
    """
    container_dims = container.dims
    allow_rotation = options.rotation_enabled()

    placed: list[PlacedBox] = []
    rejected: list[tuple[Unit, UnplacedReason]] = []
    if not units:
        return placed, rejected

    base_layer_height = units[0].dims[1]
    cursor = Cursor(layer_height=base_layer_height)

    for unit in units:
        orientations = [
            d for d in orientations_of(unit.dims, allow_rotation)
            if fits(d, container_dims)
        ]
        found = next_position(cursor, orientations, container_dims, base_layer_height) if orientations else None
        if found is None:
            rejected.append((unit, UnplacedReason.NO_FIT))
            continue

        slot, dims = found
        l, h, w = dims
        placed.append(unit.place(slot.x, slot.y, slot.z, dims))
        cursor = replace(
            slot,
            x=slot.x + l,
            row_depth=max(slot.row_depth, w),
            layer_height=max(slot.layer_height, h),
        )

    logger.debug(f"layer packer placed {len(placed)} of {len(units)} units")
    return placed, rejected
