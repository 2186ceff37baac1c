"""Data schemas for input/output operations."""

from typing import List, Optional

from pydantic import BaseModel, Field

from cargo_packer.containers import get_container
from cargo_packer.models import BoxSpec, Container, PackingOptions


class PackRequest(BaseModel):
    """Schema for a packing request (HTTP body or CLI input file)."""
    container: Optional[Container] = Field(None, description="Explicit container dimensions")
    container_preset: Optional[str] = Field(None, description="Preset key such as 20, 40HC")
    max_weight: Optional[float] = Field(None, description="Payload limit applied to a preset")
    boxes: List[BoxSpec] = Field(default_factory=list, description="Box types to pack")
    options: Optional[PackingOptions] = None

    def missing_fields(self) -> List[str]:
        missing = []
        if self.container is None and not self.container_preset:
            missing.append("container or container_preset")
        if not self.boxes:
            missing.append("boxes")
        return missing

    def resolve_container(self) -> Container:
        """Explicit container wins over the preset; raises ValueError on an unknown preset."""
        if self.container is not None:
            return self.container
        if self.container_preset:
            return get_container(self.container_preset, max_weight=self.max_weight)
        raise ValueError("request must include either 'container' or 'container_preset'")

