"""Geometry utilities for box placement."""

from __future__ import annotations

from typing import Sequence

from cargo_packer.errors import ConfigurationError

Dims = tuple[float, float, float]
Bounds = tuple[float, float, float, float, float, float]

# Relative tolerance for containment and support comparisons
EPS = 1e-9


def _tol(a: float, b: float) -> float:
    return EPS * max(1.0, abs(a), abs(b))


def approx_le(a: float, b: float) -> bool:
    """a <= b, forgiving floating-point rounding."""
    return a <= b + _tol(a, b)


def approx_eq(a: float, b: float) -> bool:
    return abs(a - b) <= _tol(a, b)


def is_positive(a: float) -> bool:
    """Strictly positive beyond rounding noise."""
    return a > _tol(a, 0.0)


def volume(dims: Sequence[float]) -> float:
    dx, dy, dz = dims
    return float(dx) * float(dy) * float(dz)


def surface_area(dims: Sequence[float]) -> float:
    """Sum of the three distinct face areas (l*w + w*h + h*l)."""
    l, w, h = dims
    return l * w + w * h + h * l


def orientations_of(dims: Sequence[float], allow_rotation: bool = True) -> list[Dims]:
    """
    Return the axis-aligned orientations of a box.

    Input order comes first. With rotation disabled only the input order is
    returned. Identical permutations (cubes, square faces) are kept once.
    """
    if len(dims) != 3:
        raise ConfigurationError(f"A box needs exactly 3 dimensions, got {len(dims)}")

    a, b, c = (float(d) for d in dims)
    if not allow_rotation:
        return [(a, b, c)]

    seen: set[Dims] = set()
    out: list[Dims] = []
    for candidate in [
        (a, b, c),
        (a, c, b),
        (b, a, c),
        (b, c, a),
        (c, a, b),
        (c, b, a),
    ]:
        if candidate not in seen:
            seen.add(candidate)
            out.append(candidate)
    return out


def fits(dims: Sequence[float], space_dims: Sequence[float]) -> bool:
    """True iff every oriented extent is <= the matching space extent."""
    return all(approx_le(float(d), float(s)) for d, s in zip(dims, space_dims))


def placement_bounds(x: float, y: float, z: float, dims: Sequence[float]) -> Bounds:
    dx, dy, dz = dims
    return (x, y, z, x + dx, y + dy, z + dz)


def boxes_overlap(a: Bounds, b: Bounds) -> bool:
    """
    Axis-aligned bounding box (AABB) overlap test.

    a, b are bounds: (x1, y1, z1, x2, y2, z2)

    Overlap exists only if they overlap on ALL 3 axes with positive volume.
    Touching faces/edges (ax2 == bx1) is NOT considered overlap, and neither
    is an intersection thinner than the rounding tolerance.
    """
    ax1, ay1, az1, ax2, ay2, az2 = a
    bx1, by1, bz1, bx2, by2, bz2 = b

    return (
        _interval_overlap(ax1, ax2, bx1, bx2)
        and _interval_overlap(ay1, ay2, by1, by2)
        and _interval_overlap(az1, az2, bz1, bz2)
    )


def _interval_overlap(a1: float, a2: float, b1: float, b2: float) -> bool:
    return is_positive(min(a2, b2) - max(a1, b1))


def footprint_overlap(a: Bounds, b: Bounds) -> bool:
    """Overlap of the x/z projections (the floor plan), ignoring height."""
    ax1, _, az1, ax2, _, az2 = a
    bx1, _, bz1, bx2, _, bz2 = b
    return _interval_overlap(ax1, ax2, bx1, bx2) and _interval_overlap(az1, az2, bz1, bz2)


def boxes_touch(a: Bounds, b: Bounds) -> bool:
    """Closed intersection: overlapping or sharing a face, edge or corner."""
    ax1, ay1, az1, ax2, ay2, az2 = a
    bx1, by1, bz1, bx2, by2, bz2 = b
    return (
        approx_le(ax1, bx2) and approx_le(bx1, ax2)
        and approx_le(ay1, by2) and approx_le(by1, ay2)
        and approx_le(az1, bz2) and approx_le(bz1, az2)
    )
