"""Tests for the /.well-known/terraform.json discovery controller."""

from __future__ import annotations

import json
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from terracache.cache.discovery import (
    DISCOVERY_PATH,
    TERRAFORM_DISCOVERY_PATH,
    DiscoveryController,
    Endpointer,
)
from terracache.cache.router import RequestContext, Router
from terracache.errors import ProviderError

DISCOVERY_URL = DISCOVERY_PATH + TERRAFORM_DISCOVERY_PATH


class _Fixed:
    def __init__(self, entries: dict[str, Any]) -> None:
        self.entries = entries

    def endpoints(self) -> dict[str, Any]:
        return dict(self.entries)


class _Counting:
    """Returns a new value on every call."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.calls = 0

    def endpoints(self) -> dict[str, Any]:
        with self._lock:
            self.calls += 1
            return {"calls": self.calls}


class _Failing:
    def endpoints(self) -> dict[str, Any]:
        raise ProviderError("failing", "backing store unavailable")


def _client(*endpointers: Endpointer) -> TestClient:
    app = FastAPI()
    Router(app).register(DiscoveryController(endpointers))
    return TestClient(app, raise_server_exceptions=False)


class TestDiscoveryController:
    """Tests for DiscoveryController."""

    def test_register_mounts_under_well_known(self) -> None:
        """register() scopes the controller's router to /.well-known."""
        controller = DiscoveryController()
        Router(FastAPI()).register(controller)

        assert controller.router is not None
        assert controller.router.prefix == "/.well-known"

    def test_later_endpointer_wins(self) -> None:
        """Entries merge in registration order, last writer wins."""
        response = _client(_Fixed({"x": 1, "y": 2}), _Fixed({"y": 3, "z": 4})).get(DISCOVERY_URL)

        assert response.status_code == 200
        assert response.json() == {"x": 1, "y": 3, "z": 4}

    def test_registration_order_matters(self) -> None:
        """Swapping the endpointers swaps the winner."""
        response = _client(_Fixed({"y": 3, "z": 4}), _Fixed({"x": 1, "y": 2})).get(DISCOVERY_URL)

        assert response.json() == {"x": 1, "y": 2, "z": 4}

    def test_no_endpointers_returns_empty_object(self) -> None:
        """An empty registry still serves a JSON object."""
        response = _client().get(DISCOVERY_URL)

        assert response.status_code == 200
        assert response.json() == {}

    def test_content_type_is_application_json(self) -> None:
        """Content-Type is application/json."""
        response = _client(_Fixed({"providers.v1": "/v1/providers/"})).get(DISCOVERY_URL)

        assert "application/json" in response.headers.get("content-type", "")

    def test_nested_descriptors_pass_through(self) -> None:
        """Descriptor values can be any JSON value."""
        descriptor = {"client": "terraform-cli", "grant_types": ["authz_code"], "ports": [10000]}
        response = _client(_Fixed({"login.v1": descriptor})).get(DISCOVERY_URL)

        assert response.json() == {"login.v1": descriptor}

    def test_not_cached_between_requests(self) -> None:
        """Each request consults the endpointers again."""
        counting = _Counting()
        client = _client(counting)

        assert client.get(DISCOVERY_URL).json() == {"calls": 1}
        assert client.get(DISCOVERY_URL).json() == {"calls": 2}

    def test_endpointer_failure_returns_500(self) -> None:
        """An endpointer error is not swallowed: the server answers 5xx."""
        response = _client(_Fixed({"x": 1}), _Failing()).get(DISCOVERY_URL)

        assert response.status_code == 500

    def test_endpointer_failure_propagates_unchanged(self) -> None:
        """merged_endpoints() re-raises the endpointer's own exception."""
        controller = DiscoveryController([_Failing()])

        with pytest.raises(ProviderError) as exc_info:
            controller.merged_endpoints()

        assert exc_info.value.provider == "failing"

    def test_non_json_value_returns_500(self) -> None:
        """A descriptor that cannot be serialized yields a server error."""
        response = _client(_Fixed({"bad": object()})).get(DISCOVERY_URL)

        assert response.status_code == 500

    def test_merged_endpoints_does_not_mutate_endpointer_output(self) -> None:
        """The merge copies entries into a fresh dict."""
        first = {"x": 1}

        class _Shared:
            def endpoints(self) -> dict[str, Any]:
                return first

        merged = DiscoveryController([_Shared(), _Fixed({"x": 2})]).merged_endpoints()

        assert merged == {"x": 2}
        assert first == {"x": 1}

    def test_endpointers_frozen_at_construction(self) -> None:
        """Mutating the list passed in does not affect the controller."""
        endpointers: list[Endpointer] = [_Fixed({"a": 1})]
        controller = DiscoveryController(endpointers)
        endpointers.append(_Fixed({"b": 2}))

        assert controller.merged_endpoints() == {"a": 1}

    def test_concurrent_requests(self) -> None:
        """Concurrent handler calls each build the full merged document."""
        controller = DiscoveryController([_Fixed({"x": 1}), _Fixed({"y": 2})])

        with ThreadPoolExecutor(max_workers=8) as pool:
            responses = list(
                pool.map(lambda _: controller.terraform_action(RequestContext()), range(32))
            )

        assert all(r.status_code == 200 for r in responses)
        assert all(json.loads(r.body) == {"x": 1, "y": 2} for r in responses)

    def test_endpointer_protocol(self) -> None:
        """Any object with endpoints() satisfies Endpointer."""
        assert isinstance(_Fixed({}), Endpointer)
        assert not isinstance(object(), Endpointer)
