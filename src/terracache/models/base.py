"""Base Pydantic model configuration for terracache models.

State documents are written by many Terraform releases, so models are
lenient about input shape but immutable once built:
- Immutability (frozen=True) so parsed states can be shared across threads
- Unknown keys are ignored (extra="ignore") for forward compatibility
"""

from pydantic import BaseModel, ConfigDict


class TerraCacheBaseModel(BaseModel):
    """Base model for all terracache data types.

    Example:
        >>> class Sample(TerraCacheBaseModel):
        ...     name: str = ""
        >>> Sample.model_validate({"name": "a", "unknown": 1}).name
        'a'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        validate_default=True,
    )
