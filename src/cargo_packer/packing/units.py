"""Input validation, quantity expansion and unplaced-box aggregation."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from cargo_packer.geometry import Dims
from cargo_packer.models import BoxSpec, Container, PlacedBox, UnplacedBox, UnplacedReason

logger = logging.getLogger(__name__)

ColorAssigner = Callable[[BoxSpec, int], str]

PALETTE = ["#f87171", "#60a5fa", "#34d399", "#facc15", "#a78bfa", "#8b5cf6"]


def palette_color(spec: BoxSpec, index: int) -> str:
    """Deterministic default: cycle the palette by spec index."""
    return PALETTE[index % len(PALETTE)]


@dataclass(frozen=True)
class Unit:
    """One physical box instance expanded from a BoxSpec."""

    box_id: str
    spec_index: int
    spec: BoxSpec
    color: Optional[str]

    @property
    def dims(self) -> Dims:
        return self.spec.dims

    @property
    def volume(self) -> float:
        return self.spec.volume

    @property
    def weight(self) -> float:
        return float(self.spec.weight)

    def place(self, x: float, y: float, z: float, dims: Dims) -> PlacedBox:
        return PlacedBox(
            box_id=self.box_id,
            spec_index=self.spec_index,
            x=float(x),
            y=float(y),
            z=float(z),
            dims=dims,
            rotated=tuple(dims) != tuple(self.dims),
            weight=self.weight,
            fragile=self.spec.fragile,
            stackable=self.spec.stackable,
            max_stack_weight=self.spec.max_stack_weight,
            color=self.color,
        )


def _finite_positive(value: float) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def box_spec_problems(spec: BoxSpec) -> list[str]:
    """Reasons why a BoxSpec cannot be packed (empty when valid)."""
    problems: list[str] = []
    for name in ("length", "width", "height"):
        if not _finite_positive(getattr(spec, name)):
            problems.append(f"{name} must be a positive number")
    if not math.isfinite(spec.weight) or spec.weight < 0:
        problems.append("weight must be a non-negative number")
    if spec.max_stack_weight is not None and (
        not math.isfinite(spec.max_stack_weight) or spec.max_stack_weight < 0
    ):
        problems.append("max_stack_weight must be a non-negative number")
    if spec.quantity < 1:
        problems.append("quantity must be at least 1")
    return problems


def container_problems(container: Container) -> list[str]:
    problems: list[str] = []
    for name in ("length", "width", "height"):
        if not _finite_positive(getattr(container, name)):
            problems.append(f"container {name} must be a positive number")
    if container.max_weight is not None and (
        math.isnan(container.max_weight) or container.max_weight < 0
    ):
        problems.append("container max_weight must be non-negative")
    return problems


def expand_units(
    specs: Iterable[tuple[int, BoxSpec]],
    color_assigner: Optional[ColorAssigner] = None,
) -> list[Unit]:
    """Expand (index, spec) pairs into `quantity` units each, in input order."""
    assign = color_assigner or palette_color
    units: list[Unit] = []
    for index, spec in specs:
        color = spec.color or assign(spec, index)
        label = spec.label(index)
        for i in range(spec.quantity):
            units.append(Unit(
                box_id=f"{label}_{i + 1:04d}",
                spec_index=index,
                spec=spec,
                color=color,
            ))
    return units


def sort_by_volume_desc(units: list[Unit]) -> list[Unit]:
    # sorted() is stable: ties keep input order
    return sorted(units, key=lambda u: u.volume, reverse=True)


def trailing_min_sides(units: list[Unit]) -> list[float]:
    """Smallest box side among the units after each position (0.0 after the last)."""
    out = [0.0] * len(units)
    smallest = math.inf
    for i in range(len(units) - 1, 0, -1):
        smallest = min(smallest, *units[i].dims)
        out[i - 1] = smallest
    return out


class UnplacedLedger:
    """Collects unplaced units and aggregates them per (spec, reason)."""

    def __init__(self) -> None:
        self._entries: dict[tuple[int, UnplacedReason], UnplacedBox] = {}

    def add(self, spec_index: int, spec: BoxSpec, reason: UnplacedReason, quantity: int = 1) -> None:
        key = (spec_index, reason)
        entry = self._entries.get(key)
        if entry is None:
            self._entries[key] = UnplacedBox(
                spec=spec,
                spec_index=spec_index,
                quantity=quantity,
                reason=reason,
            )
        else:
            entry.quantity += quantity

    def add_unit(self, unit: Unit, reason: UnplacedReason) -> None:
        logger.debug(f"unit {unit.box_id} unplaced ({reason.value})")
        self.add(unit.spec_index, unit.spec, reason)

    def entries(self) -> list[UnplacedBox]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
