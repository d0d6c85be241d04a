"""Models for the legacy (pre-0.12) Terraform state file schema.

The schema only describes the envelope of a state document. Backend
configuration, module outputs and module resources are arbitrary JSON and
are kept as plain Python JSON values (dict, list, str, bool, int, float,
None) so callers can walk them without any wrapper types.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Any, Callable, Union

from pydantic import BeforeValidator, Field

from terracache.models.base import TerraCacheBaseModel

JsonValue = Union[str, bool, int, float, None, list[Any], dict[str, Any]]
"""Any value a JSON document can hold, as produced by ``json.loads``."""

ROOT_MODULE_PATH = ("root",)


def _null_as(empty: Callable[[], Any]) -> BeforeValidator:
    """Map an explicit JSON null to the zero value built by ``empty``."""

    def _validator(value: Any) -> Any:
        return empty() if value is None else value

    return BeforeValidator(_validator)


JsonObject = Annotated[dict[str, Any], _null_as(dict)]
NullableStr = Annotated[str, _null_as(str)]
StringList = Annotated[list[str], _null_as(list)]
# Strict: "5", true and 2.0 are schema errors, not counters
Counter = Annotated[int, _null_as(int), Field(ge=0, strict=True)]


class TerraformBackend(TerraCacheBaseModel):
    """The remote backend a state document is stored in.

    Attributes:
        type: Backend identifier, e.g. "s3" or "gcs".
        config: Backend configuration exactly as written in the document.
    """

    type: NullableStr = Field(default="", description="Backend identifier, e.g. s3")
    config: JsonObject = Field(
        default_factory=dict, description="Backend configuration (free-form JSON object)"
    )


class TerraformStateModule(TerraCacheBaseModel):
    """A single module entry of a state document.

    Attributes:
        path: Module path components, rooted at "root".
        outputs: Module outputs (free-form JSON object).
        resources: Module resources keyed by resource address (free-form JSON object).
    """

    path: StringList = Field(default_factory=list, description="Module path components")
    outputs: JsonObject = Field(default_factory=dict, description="Module outputs")
    resources: JsonObject = Field(default_factory=dict, description="Module resources")

    def is_root(self) -> bool:
        """Return True if this is the root module."""
        return tuple(self.path) == ROOT_MODULE_PATH


ModuleList = Annotated[list[TerraformStateModule], _null_as(list)]


class TerraformState(TerraCacheBaseModel):
    """A parsed legacy Terraform state document.

    Every field is optional in the source document; missing or null fields
    take their zero value, so ``{}`` parses to a valid, local state.

    Attributes:
        version: State schema version.
        serial: Monotonic counter bumped on every state write.
        backend: Remote backend, or None for purely local state.
        modules: Module entries in document order.
    """

    version: Counter = Field(default=0, description="State schema version")
    serial: Counter = Field(default=0, description="Monotonic state serial")
    backend: TerraformBackend | None = Field(
        default=None, description="Remote backend, absent for local state"
    )
    modules: ModuleList = Field(
        default_factory=list, description="Module entries in document order"
    )

    def is_remote(self) -> bool:
        """Return True if this state is stored in a remote backend.

        Only the presence of the backend block matters; its type and
        configuration are not inspected.
        """
        return self.backend is not None

    def find_module(self, path: Sequence[str]) -> TerraformStateModule | None:
        """Return the first module whose path equals ``path``, or None."""
        wanted = tuple(path)
        for module in self.modules:
            if tuple(module.path) == wanted:
                return module
        return None

    def root_module(self) -> TerraformStateModule | None:
        """Return the root module, or None if the state has none."""
        return self.find_module(ROOT_MODULE_PATH)
