"""Tests for the registry endpointers."""

from terracache.cache.discovery import Endpointer
from terracache.cache.endpoints import (
    ModuleRegistryEndpoints,
    ProviderRegistryEndpoints,
    StaticEndpoints,
)


class TestRegistryEndpoints:
    """Tests for the provider and module registry endpointers."""

    def test_provider_registry_defaults(self) -> None:
        assert ProviderRegistryEndpoints().endpoints() == {"providers.v1": "/v1/providers/"}

    def test_module_registry_defaults(self) -> None:
        assert ModuleRegistryEndpoints().endpoints() == {"modules.v1": "/v1/modules/"}

    def test_custom_base_paths(self) -> None:
        """Base paths are advertised as given."""
        assert ProviderRegistryEndpoints("/cache/providers/").endpoints() == {
            "providers.v1": "/cache/providers/"
        }
        assert ModuleRegistryEndpoints("/cache/modules/").endpoints() == {
            "modules.v1": "/cache/modules/"
        }

    def test_satisfy_endpointer(self) -> None:
        assert isinstance(ProviderRegistryEndpoints(), Endpointer)
        assert isinstance(ModuleRegistryEndpoints(), Endpointer)
        assert isinstance(StaticEndpoints({}), Endpointer)


class TestStaticEndpoints:
    """Tests for StaticEndpoints."""

    def test_returns_entries(self) -> None:
        assert StaticEndpoints({"state.v2": "/api/v2/"}).endpoints() == {"state.v2": "/api/v2/"}

    def test_returns_fresh_copy_each_call(self) -> None:
        """Mutating a returned mapping does not change later calls."""
        endpointer = StaticEndpoints({"login.v1": {"ports": [10000, 10010]}})

        first = endpointer.endpoints()
        first["login.v1"]["ports"].append(1)
        first["extra"] = True

        assert endpointer.endpoints() == {"login.v1": {"ports": [10000, 10010]}}

    def test_isolated_from_source_mapping(self) -> None:
        """Later changes to the source mapping are not advertised."""
        source = {"a": 1}
        endpointer = StaticEndpoints(source)
        source["b"] = 2

        assert endpointer.endpoints() == {"a": 1}
