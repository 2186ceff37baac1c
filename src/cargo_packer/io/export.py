"""JSON export and text summary of a packing result."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from cargo_packer.models import BoxSpec, Container, PackingResult

METRIC_FIELDS = (
    "used_volume",
    "container_volume",
    "volume_utilization",
    "total_weight",
    "weight_utilization",
    "center_of_gravity",
    "is_stable",
    "levels",
    "packing_time_ms",
)


def export_payload(
    container: Container,
    boxes: Sequence[BoxSpec],
    result: PackingResult,
) -> dict[str, Any]:
    """
    Build the exported document.

    Keys: container, items (the requested box types), packedBoxes,
    unplacedBoxes, metrics. Everything is JSON serializable.
    """
    data = result.model_dump(mode="json")
    return {
        "algorithm": result.algorithm,
        "container": container.model_dump(mode="json"),
        "items": [b.model_dump(mode="json") for b in boxes],
        "packedBoxes": data["placed_boxes"],
        "unplacedBoxes": data["unplaced_boxes"],
        "metrics": {k: data[k] for k in METRIC_FIELDS},
    }


def write_export(path: Path, payload: dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    return path


def format_summary(result: PackingResult) -> str:
    weight_fill = (
        "N/A" if result.weight_utilization is None else f"{result.weight_utilization:.1f}%"
    )
    lines = [
        "Packing Complete",
        f"Algorithm: {result.algorithm}",
        f"Placed: {result.placed_count}",
        f"Unplaced: {result.unplaced_count}",
        f"Volume Fill: {result.volume_utilization:.1f}%",
        f"Weight Fill: {weight_fill}",
        f"Stable: {'yes' if result.is_stable else 'no'}",
        f"Levels: {result.levels}",
    ]
    for u in result.unplaced_boxes:
        lines.append(f"  - {u.spec.label(u.spec_index)} x{u.quantity}: {u.reason.value}")
    return "\n".join(lines)
