"""Typed models for legacy Terraform state documents."""

from terracache.models.base import TerraCacheBaseModel
from terracache.models.state import (
    JsonValue,
    TerraformBackend,
    TerraformState,
    TerraformStateModule,
)

__all__ = [
    "JsonValue",
    "TerraCacheBaseModel",
    "TerraformBackend",
    "TerraformState",
    "TerraformStateModule",
]
