from __future__ import annotations

import math
from typing import Any

from cargo_packer.models import Container, PlacedBox, Point

# Allowed centre-of-gravity drift, as a share of the shorter floor side
STABILITY_TOLERANCE = 0.15


def placement_volume(p: PlacedBox) -> float:
    L, H, W = p.dims
    return float(L) * float(H) * float(W)


def used_volume(placements: list[PlacedBox]) -> float:
    return sum(placement_volume(p) for p in placements)


def safe_container_volume(container: Container) -> float:
    """Container volume, or 0.0 for a degenerate container."""
    v = container.volume
    return v if math.isfinite(v) and v > 0 else 0.0


def volume_utilization(container: Container, placements: list[PlacedBox]) -> float:
    """Percentage of the container volume occupied by boxes."""
    container_volume = safe_container_volume(container)
    if container_volume == 0.0:
        return 0.0
    return used_volume(placements) * 100.0 / container_volume


def total_weight(placements: list[PlacedBox]) -> float:
    return sum(p.weight for p in placements)


def weight_utilization(container: Container, placements: list[PlacedBox]) -> float | None:
    if container.max_weight is None:
        return None
    if not container.max_weight > 0:
        return 0.0
    return total_weight(placements) * 100.0 / float(container.max_weight)


def center_of_gravity(placements: list[PlacedBox]) -> Point:
    """
    Weight-weighted centroid of box centres.

    Falls back to the plain centroid when nothing has weight, and to the
    origin for an empty load.
    """
    if not placements:
        return Point()

    weights = [p.weight for p in placements]
    if sum(weights) <= 0:
        weights = [1.0] * len(placements)
    total = sum(weights)

    cx = cy = cz = 0.0
    for p, w in zip(placements, weights):
        x, y, z = p.center
        cx += x * w
        cy += y * w
        cz += z * w
    return Point(x=cx / total, y=cy / total, z=cz / total)


def is_stable(container: Container, placements: list[PlacedBox], cog: Point | None = None) -> bool:
    """CoG strictly within 15% of min(length, width) of the floor centre on both x and z."""
    if not placements:
        return True
    cog = cog or center_of_gravity(placements)
    tolerance = min(float(container.length), float(container.width)) * STABILITY_TOLERANCE
    x_dev = abs(cog.x - float(container.length) / 2.0)
    z_dev = abs(cog.z - float(container.width) / 2.0)
    return x_dev < tolerance and z_dev < tolerance


def count_levels(placements: list[PlacedBox]) -> int:
    """Coarse layer estimate: highest top divided by the lowest box height."""
    if not placements:
        return 0
    max_top = max(p.top for p in placements)
    min_height = min(p.dims[1] for p in placements)
    # Round first so 3 * (1/3) style results do not spill into an extra level
    return math.ceil(round(max_top / min_height, 9))


def compute_metrics(container: Container, placements: list[PlacedBox]) -> dict[str, Any]:
    """All derived statistics, keyed by PackingResult field name."""
    cog = center_of_gravity(placements)
    return {
        "used_volume": used_volume(placements),
        "container_volume": safe_container_volume(container),
        "volume_utilization": volume_utilization(container, placements),
        "total_weight": total_weight(placements),
        "weight_utilization": weight_utilization(container, placements),
        "center_of_gravity": cog,
        "is_stable": is_stable(container, placements, cog),
        "levels": count_levels(placements),
    }
