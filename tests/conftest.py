"""Shared pytest fixtures for terracache tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

LOCAL_STATE = """
{
    "version": 1,
    "serial": 0,
    "modules": [
        {
            "path": ["root"],
            "outputs": {},
            "resources": {}
        }
    ]
}
"""

REMOTE_STATE = """
{
    "version": 5,
    "serial": 12,
    "backend": {
        "type": "s3",
        "config": {
            "bucket": "bucket",
            "encrypt": true,
            "key": "experiment-1.tfstate",
            "region": "us-east-1"
        }
    },
    "modules": [
        {
            "path": ["root"],
            "outputs": {},
            "resources": {}
        }
    ]
}
"""


def _eip(allocation_id: str, public_ip: str) -> dict[str, Any]:
    return {
        "type": "aws_eip",
        "depends_on": ["aws_internet_gateway.main"],
        "primary": {
            "id": allocation_id,
            "attributes": {
                "association_id": "",
                "domain": "vpc",
                "id": allocation_id,
                "instance": "",
                "network_interface": "",
                "private_ip": "",
                "public_ip": public_ip,
                "vpc": "true",
            },
        },
    }


# A trimmed-down state of Terraform templates that created a VPC
VPC_STATE_DOCUMENT: dict[str, Any] = {
    "version": 1,
    "serial": 51,
    "backend": {
        "type": "s3",
        "config": {
            "bucket": "bucket",
            "encrypt": True,
            "key": "terraform.tfstate",
            "region": "us-east-1",
        },
    },
    "modules": [
        {
            "path": ["root"],
            "outputs": {"key1": "value1", "key2": "value2", "key3": "value3"},
            "resources": {},
        },
        {
            "path": ["root", "module_with_outputs_no_resources"],
            "outputs": {"key1": "", "key2": ""},
            "resources": {},
        },
        {
            "path": ["root", "module_with_resources_no_outputs"],
            "outputs": {},
            "resources": {
                "aws_eip.nat.0": _eip("eipalloc-b421becd", "23.20.182.117"),
                "aws_eip.nat.1": _eip("eipalloc-95d846ec", "52.21.82.253"),
            },
        },
        {
            "path": ["root", "module_level_1", "module_level_2"],
            "outputs": {},
            "resources": {},
        },
    ],
}


@pytest.fixture
def local_state_json() -> str:
    """Local state document (no backend)."""
    return LOCAL_STATE


@pytest.fixture
def remote_state_json() -> str:
    """Remote state document with an s3 backend."""
    return REMOTE_STATE


@pytest.fixture
def vpc_state_document() -> dict[str, Any]:
    """Remote state document with nested modules and resources."""
    return json.loads(json.dumps(VPC_STATE_DOCUMENT))


@pytest.fixture
def remote_state_file(tmp_path: Path) -> Path:
    """REMOTE_STATE written to tmp_path/terraform.tfstate."""
    path = tmp_path / "terraform.tfstate"
    path.write_text(REMOTE_STATE, encoding="utf-8")
    return path


@pytest.fixture
def local_state_file(tmp_path: Path) -> Path:
    """LOCAL_STATE written to tmp_path/local.tfstate."""
    path = tmp_path / "local.tfstate"
    path.write_text(LOCAL_STATE, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clean_terracache_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host TERRACACHE_* and TF_DATA_DIR settings out of tests."""
    for name in (
        "TERRACACHE_HOST",
        "TERRACACHE_PORT",
        "TERRACACHE_PROVIDERS_PATH",
        "TERRACACHE_MODULES_PATH",
        "TERRACACHE_EXTRA_ENDPOINTS",
        "TF_DATA_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
