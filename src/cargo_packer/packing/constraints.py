"""Admissibility constraints for the constrained packer."""

from __future__ import annotations

from dataclasses import dataclass, field

from cargo_packer.geometry import (
    Bounds,
    Dims,
    approx_eq,
    approx_le,
    footprint_overlap,
    placement_bounds,
)
from cargo_packer.models import Container, PackingOptions, PlacedBox, UnplacedReason
from cargo_packer.packing.units import Unit

# A fragile box may not rest on a supporter lighter than this share of its own weight
FRAGILE_SUPPORT_RATIO = 0.5


@dataclass(frozen=True)
class Candidate:
    """A unit at a tentative position and orientation."""

    unit: Unit
    x: float
    y: float
    z: float
    dims: Dims

    @property
    def bounds(self) -> Bounds:
        return placement_bounds(self.x, self.y, self.z, self.dims)


@dataclass
class LoadState:
    """Boxes committed so far in one packing run and their running weight."""

    placed: list[PlacedBox] = field(default_factory=list)
    weight: float = 0.0

    def commit(self, box: PlacedBox) -> None:
        self.placed.append(box)
        self.weight += box.weight


class Constraint:
    """Base class for placement constraints."""

    reason: UnplacedReason = UnplacedReason.NO_FIT

    def check(self, candidate: Candidate, state: LoadState) -> bool:
        """
        Check whether the candidate may be committed given the current load.

        Args:
            candidate: Unit at its tentative position
            state: Boxes already placed

        Returns:
            True if the constraint is satisfied, False otherwise
        """
        raise NotImplementedError


class WeightConstraint(Constraint):
    """Running payload plus the candidate must not exceed the maximum weight."""

    reason = UnplacedReason.WEIGHT_LIMIT

    def __init__(self, max_weight: float):
        self.max_weight = max_weight

    def check(self, candidate: Candidate, state: LoadState) -> bool:
        return approx_le(state.weight + candidate.unit.weight, self.max_weight)


class SupportConstraint(Constraint):
    """
    Vertical support and stacking rules.

    A candidate on the floor is always supported. Above the floor it needs
    at least one placed box whose top face meets its bottom face with an
    overlapping footprint, and every such supporter must accept the load:
    stackable, enough max_stack_weight, and (for a fragile candidate) not
    lighter than half the candidate.
    """

    reason = UnplacedReason.UNSUPPORTED

    def __init__(self, respect_fragility: bool = True):
        self.respect_fragility = respect_fragility

    def supporters(self, candidate: Candidate, state: LoadState) -> list[PlacedBox]:
        bounds = candidate.bounds
        return [
            p for p in state.placed
            if approx_eq(p.top, candidate.y) and footprint_overlap(p.bounds, bounds)
        ]

    def accepts(self, supporter: PlacedBox, candidate: Candidate) -> bool:
        weight = candidate.unit.weight
        if not supporter.stackable:
            return False
        if supporter.max_stack_weight is not None and supporter.max_stack_weight < weight:
            return False
        if (
            self.respect_fragility
            and candidate.unit.spec.fragile
            and supporter.weight < weight * FRAGILE_SUPPORT_RATIO
        ):
            return False
        return True

    def check(self, candidate: Candidate, state: LoadState) -> bool:
        if approx_eq(candidate.y, 0.0):
            return True
        below = self.supporters(candidate, state)
        return bool(below) and all(self.accepts(p, candidate) for p in below)


def build_constraints(container: Container, options: PackingOptions) -> list[Constraint]:
    """Constraints in evaluation order: weight first, then support."""
    constraints: list[Constraint] = []
    if container.max_weight is not None:
        constraints.append(WeightConstraint(float(container.max_weight)))
    if options.respect_stackability:
        constraints.append(SupportConstraint(respect_fragility=options.respect_fragility))
    return constraints
