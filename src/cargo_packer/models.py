from __future__ import annotations

from enum import Enum
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

# Axis convention: x = length, y = height (vertical), z = width.
# Positions are the minimum corner of a box.

AlgorithmName = Literal["layer", "best-fit", "constrained"]


class Container(BaseModel):
    """Container model with dimensions.

    Dimensions are not range-checked here: the engine reports an infeasible
    container as unplaced boxes instead of failing the call.
    """

    length: float = Field(description="Length of the container (x axis)")
    width: float = Field(description="Width of the container (z axis)")
    height: float = Field(description="Height of the container (y axis)")
    max_weight: Optional[float] = Field(
        default=None,
        description="Maximum payload; None means unconstrained")
    max_weight_per_level: Optional[float] = Field(
        default=None,
        description="Accepted for compatibility, not enforced")
    name: Optional[str] = Field(default=None, description="Display name")

    @property
    def dims(self) -> tuple[float, float, float]:
        return (float(self.length), float(self.height), float(self.width))

    @property
    def volume(self) -> float:
        return float(self.length) * float(self.width) * float(self.height)


class BoxSpec(BaseModel):
    """One box type as delivered by the caller, expanded into `quantity` units."""

    length: float = Field(description="Length of the box (x axis)")
    width: float = Field(description="Width of the box (z axis)")
    height: float = Field(description="Height of the box (y axis)")
    quantity: int = Field(default=1, description="Number of identical units")
    id: Optional[str] = Field(default=None, description="Identifier used to label units")
    name: Optional[str] = None
    color: Optional[str] = None
    weight: float = Field(default=0.0, description="Weight of one unit")
    fragile: bool = False
    stackable: bool = True
    max_stack_weight: Optional[float] = Field(
        default=None,
        description="Maximum weight a single box may carry on top")
    priority: Optional[int] = None

    @property
    def dims(self) -> tuple[float, float, float]:
        """Extents along (x, y, z) in input order."""
        return (float(self.length), float(self.height), float(self.width))

    @property
    def volume(self) -> float:
        return float(self.length) * float(self.width) * float(self.height)

    def label(self, index: int) -> str:
        return self.id or self.name or f"BOX{index + 1}"


class PackingOptions(BaseModel):
    """Options recognized by `pack`."""

    algorithm: AlgorithmName = "constrained"
    # None resolves per algorithm: off for layer, on for the others
    allow_rotation: Optional[bool] = None
    respect_stackability: bool = True
    respect_fragility: bool = True
    optimize_for_weight: bool = False
    max_iterations: Optional[int] = None

    def rotation_enabled(self) -> bool:
        if self.allow_rotation is None:
            return self.algorithm != "layer"
        return self.allow_rotation


class UnplacedReason(str, Enum):
    NO_FIT = "no_fit"
    WEIGHT_LIMIT = "weight_limit"
    UNSUPPORTED = "unsupported"
    INVALID_INPUT = "invalid_input"
    INVALID_CONTAINER = "invalid_container"


class Point(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class PlacedBox(BaseModel):
    """A unit committed to a position; never mutated afterwards."""

    model_config = ConfigDict(frozen=True)

    box_id: str = Field(description="Identifier of the placed unit")
    spec_index: int = Field(ge=0, description="Index of the source BoxSpec")
    x: float = Field(ge=0, description="X coordinate of the box position")
    y: float = Field(ge=0, description="Y coordinate of the box position")
    z: float = Field(ge=0, description="Z coordinate of the box position")

    # Oriented extents along (x, y, z) after rotation
    dims: Tuple[float, float, float] = Field(
        description="Oriented extents of the placed box along (x, y, z)"
    )
    rotated: bool = False
    weight: float = 0.0
    fragile: bool = False
    stackable: bool = True
    max_stack_weight: Optional[float] = None
    color: Optional[str] = None

    @property
    def volume(self) -> float:
        dx, dy, dz = self.dims
        return dx * dy * dz

    @property
    def top(self) -> float:
        return self.y + self.dims[1]

    @property
    def center(self) -> tuple[float, float, float]:
        dx, dy, dz = self.dims
        return (self.x + dx / 2.0, self.y + dy / 2.0, self.z + dz / 2.0)

    @property
    def bounds(self) -> tuple[float, float, float, float, float, float]:
        dx, dy, dz = self.dims
        return (self.x, self.y, self.z, self.x + dx, self.y + dy, self.z + dz)


class UnplacedBox(BaseModel):
    """Units of one BoxSpec that could not be placed, for one reason."""

    spec: BoxSpec
    spec_index: int
    quantity: int = Field(ge=0)
    reason: UnplacedReason = UnplacedReason.NO_FIT


class PackingResult(BaseModel):
    """Standard result returned by every strategy."""

    algorithm: AlgorithmName
    placed_boxes: list[PlacedBox] = Field(default_factory=list)
    unplaced_boxes: list[UnplacedBox] = Field(default_factory=list)
    used_volume: float = 0.0
    container_volume: float = 0.0
    volume_utilization: float = 0.0
    total_weight: float = 0.0
    weight_utilization: Optional[float] = None
    center_of_gravity: Point = Field(default_factory=Point)
    is_stable: bool = True
    levels: int = 0
    packing_time_ms: float = 0.0

    @property
    def placed_count(self) -> int:
        return len(self.placed_boxes)

    @property
    def unplaced_count(self) -> int:
        return sum(u.quantity for u in self.unplaced_boxes)
