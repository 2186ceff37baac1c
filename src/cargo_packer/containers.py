# src/cargo_packer/containers.py
from __future__ import annotations

from typing import Optional

from cargo_packer.models import Container

# Internal usable dims (meters).
CONTAINER_PRESETS_M: dict[str, dict[str, float]] = {
    "20":   {"length": 5.890,  "width": 2.350, "height": 2.390},
    "20HC": {"length": 5.891,  "width": 2.330, "height": 2.700},
    "40":   {"length": 12.032, "width": 2.352, "height": 2.395},
    "40HC": {"length": 12.030, "width": 2.350, "height": 2.690},
    "45HC": {"length": 13.556, "width": 2.352, "height": 2.698},
}


def _key(preset: str) -> str:
    # Accept UI labels such as "40' HC"
    return preset.strip().upper().replace(" ", "").replace("'", "")


def get_container_dims(preset: str) -> dict[str, float]:
    key = _key(preset)
    if key not in CONTAINER_PRESETS_M:
        raise ValueError(f"Unknown container_preset '{preset}'. Valid: {sorted(CONTAINER_PRESETS_M.keys())}")
    return CONTAINER_PRESETS_M[key]


def get_container(preset: str, max_weight: Optional[float] = None) -> Container:
    return Container(name=_key(preset), max_weight=max_weight, **get_container_dims(preset))
