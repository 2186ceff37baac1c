"""Free-space tracking for the space-splitting strategies."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterator

from cargo_packer.errors import ConfigurationError
from cargo_packer.geometry import (
    Bounds,
    EPS,
    Dims,
    approx_le,
    boxes_overlap,
    boxes_touch,
    is_positive,
    placement_bounds,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FreeSpace:
    """Empty axis-aligned region: origin (x, y, z) plus extents (dx, dy, dz)."""

    x: float
    y: float
    z: float
    dx: float
    dy: float
    dz: float
    bounds: Bounds = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Frozen, so the bounds tuple is built once per space
        object.__setattr__(self, "bounds", placement_bounds(self.x, self.y, self.z, self.dims))

    @property
    def origin(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def dims(self) -> Dims:
        return (self.dx, self.dy, self.dz)

    @property
    def volume(self) -> float:
        return self.dx * self.dy * self.dz

    def fits(self, dims: Dims) -> bool:
        l, h, w = dims
        return approx_le(l, self.dx) and approx_le(h, self.dy) and approx_le(w, self.dz)

    def can_hold(self, min_side: float) -> bool:
        """False when the space is thinner than `min_side` along some axis."""
        return approx_le(min_side, min(self.dx, self.dy, self.dz))

    def contains(self, other: "FreeSpace") -> bool:
        ax1, ay1, az1, ax2, ay2, az2 = self.bounds
        bx1, by1, bz1, bx2, by2, bz2 = other.bounds
        # Coordinates are non-negative, so the far corners bound every magnitude
        tol = EPS * max(1.0, ax2, ay2, az2, bx2, by2, bz2)
        return (
            ax1 <= bx1 + tol and ay1 <= by1 + tol and az1 <= bz1 + tol
            and bx2 <= ax2 + tol and by2 <= ay2 + tol and bz2 <= az2 + tol
        )


def split_best_fit(space: FreeSpace, dims: Dims) -> list[FreeSpace]:
    """
    Residual fragments of `space` after a box of `dims` is put at its origin.

    Three orthogonal slabs (right, above, behind) plus three corner pieces.
    A fragment is only produced when its deltas are strictly positive.
    """
    x, y, z = space.origin
    l, h, w = dims
    rest_x = space.dx - l
    rest_y = space.dy - h
    rest_z = space.dz - w
    has_x, has_y, has_z = is_positive(rest_x), is_positive(rest_y), is_positive(rest_z)

    out: list[FreeSpace] = []
    if has_x:
        out.append(FreeSpace(x + l, y, z, rest_x, space.dy, space.dz))
    if has_y:
        out.append(FreeSpace(x, y + h, z, space.dx, rest_y, space.dz))
    if has_z:
        out.append(FreeSpace(x, y, z + w, space.dx, space.dy, rest_z))

    # Corner cuts
    if has_x and has_y:
        out.append(FreeSpace(x + l, y + h, z, rest_x, rest_y, w))
    if has_x and has_z:
        out.append(FreeSpace(x + l, y, z + w, rest_x, h, rest_z))
    if has_y and has_z:
        out.append(FreeSpace(x, y + h, z + w, l, rest_y, rest_z))
    return out


def split_constrained(space: FreeSpace, dims: Dims, container_height: float) -> list[FreeSpace]:
    """
    3-way split used by the constrained packer.

    Above the box up to the container ceiling, to the right within the used
    space and behind within the used space. No corner pieces.
    """
    x, y, z = space.origin
    l, h, w = dims
    out: list[FreeSpace] = []

    top = y + h
    if is_positive(container_height - top):
        out.append(FreeSpace(x, top, z, l, container_height - top, w))

    right = x + l
    if is_positive(space.x + space.dx - right):
        out.append(FreeSpace(right, y, z, space.x + space.dx - right, space.dy, w))

    back = z + w
    if is_positive(space.z + space.dz - back):
        out.append(FreeSpace(x, y, back, l, space.dy, space.z + space.dz - back))
    return out


def carve(space: FreeSpace, box: Bounds) -> list[FreeSpace]:
    """Slabs of `space` lying outside `box` (up to one per face)."""
    sx1, sy1, sz1, sx2, sy2, sz2 = space.bounds
    bx1, by1, bz1, bx2, by2, bz2 = box
    out: list[FreeSpace] = []
    if is_positive(bx1 - sx1):
        out.append(FreeSpace(sx1, sy1, sz1, bx1 - sx1, space.dy, space.dz))
    if is_positive(sx2 - bx2):
        out.append(FreeSpace(bx2, sy1, sz1, sx2 - bx2, space.dy, space.dz))
    if is_positive(by1 - sy1):
        out.append(FreeSpace(sx1, sy1, sz1, space.dx, by1 - sy1, space.dz))
    if is_positive(sy2 - by2):
        out.append(FreeSpace(sx1, by2, sz1, space.dx, sy2 - by2, space.dz))
    if is_positive(bz1 - sz1):
        out.append(FreeSpace(sx1, sy1, sz1, space.dx, space.dy, bz1 - sz1))
    if is_positive(sz2 - bz2):
        out.append(FreeSpace(sx1, sy1, bz2, space.dx, space.dy, sz2 - bz2))
    return out


class FreeSpaceTracker:
    """
    Active free spaces of a single packing run.

    Spaces may overlap each other; the tracker only guarantees that no
    active space intersects a placed box. Adjacent spaces are never merged.
    """

    def __init__(self, container_dims: Dims):
        if not all(math.isfinite(d) and d > 0 for d in container_dims):
            raise ConfigurationError(f"Container dimensions must be positive, got {container_dims}")
        self.container_dims = tuple(float(d) for d in container_dims)
        self.spaces: list[FreeSpace] = [FreeSpace(0.0, 0.0, 0.0, *self.container_dims)]

    def __iter__(self) -> Iterator[FreeSpace]:
        return iter(list(self.spaces))

    def __len__(self) -> int:
        return len(self.spaces)

    def sort_by_volume(self) -> None:
        """Tightest space first."""
        self.spaces.sort(key=lambda s: s.volume)

    def sort_by_position(self) -> None:
        """Bottom, then back-to-front, then left-to-right."""
        self.spaces.sort(key=lambda s: (s.y, s.z, s.x))

    def place(
        self,
        space: FreeSpace,
        dims: Dims,
        policy: str = "best-fit",
        min_side: float = 0.0,
    ) -> list[FreeSpace]:
        """
        Remove `space`, append its fragments for a box at its origin and
        carve every other space the box now occupies.

        Spaces thinner than `min_side` (the smallest side of any unit still
        to be packed) can never be used again and are dropped.
        """
        if policy == "best-fit":
            fragments = split_best_fit(space, dims)
        elif policy == "constrained":
            fragments = split_constrained(space, dims, self.container_dims[1])
        else:
            raise ConfigurationError(f"Unknown split policy '{policy}'")

        self.spaces.remove(space)
        self.clip(placement_bounds(space.x, space.y, space.z, dims), min_side)
        self.spaces.extend(f for f in fragments if f.can_hold(min_side))
        logger.debug(
            f"consumed space at {space.origin} -> {len(fragments)} fragments, "
            f"{len(self.spaces)} active"
        )
        return fragments

    def clip(self, box: Bounds, min_side: float = 0.0) -> None:
        """
        Replace every space intersecting `box` by its slabs outside the box.

        A slab already contained in another space is dropped. Both the slab
        and any space containing it touch the box, so only those are compared.
        """
        kept: list[FreeSpace] = []
        carved: list[FreeSpace] = []
        touching: list[FreeSpace] = []
        for s in self.spaces:
            if not s.can_hold(min_side):
                continue
            if boxes_overlap(s.bounds, box):
                carved.extend(carve(s, box))
                continue
            kept.append(s)
            if boxes_touch(s.bounds, box):
                touching.append(s)

        for piece in carved:
            if not piece.can_hold(min_side):
                continue
            if not any(other.contains(piece) for other in touching):
                kept.append(piece)
                touching.append(piece)
        self.spaces = kept
