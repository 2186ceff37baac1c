"""Registry of placement strategies."""

from __future__ import annotations

from typing import Callable

from cargo_packer.errors import ConfigurationError
from cargo_packer.models import Container, PackingOptions, PlacedBox, UnplacedReason
from cargo_packer.packing.best_fit import pack_best_fit
from cargo_packer.packing.constrained import pack_constrained
from cargo_packer.packing.layer import pack_layers
from cargo_packer.packing.units import Unit

Strategy = Callable[
    [Container, list[Unit], PackingOptions],
    tuple[list[PlacedBox], list[tuple[Unit, UnplacedReason]]],
]

STRATEGIES: dict[str, Strategy] = {
    "layer": pack_layers,
    "best-fit": pack_best_fit,
    "constrained": pack_constrained,
}


def available_algorithms() -> list[str]:
    return list(STRATEGIES)


def get_packer(algorithm: str) -> Strategy:
    """
    Look up a strategy by name.

    Args:
        algorithm: One of "layer", "best-fit", "constrained"

    Returns:
        The strategy callable (container, units, options) -> (placed, rejected)
    """
    key = algorithm.strip().lower()
    if key not in STRATEGIES:
        raise ConfigurationError(
            f"Unknown algorithm '{algorithm}'. Valid: {available_algorithms()}"
        )
    return STRATEGIES[key]
