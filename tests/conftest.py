"""Pytest configuration and fixtures for kubeschema tests."""

import logging
from typing import Any

import pytest

from kubeschema.config import CacheSettings, Settings
from kubeschema.constants import (
    ENV_CONFIG_DIR,
    ENV_FILENAME,
    ENV_KUBERNETES_VERSION,
    ENV_LOG_DIR,
    ENV_SCHEMA_LOCATION,
)
from kubeschema.exceptions import SchemaError

TEST_SCHEMA_LOCATION = "https://schemas.test"

SERVICE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["metadata", "spec"],
    "additionalProperties": False,
    "properties": {
        "apiVersion": {"type": "string"},
        "kind": {"type": "string"},
        "metadata": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "labels": {
                    "type": "object",
                    "additionalProperties": {"type": "string"},
                },
            },
        },
        "spec": {
            "type": "object",
            "properties": {
                "type": {
                    "type": "string",
                    "enum": ["ClusterIP", "NodePort", "LoadBalancer"],
                },
                "ports": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["port"],
                        "properties": {
                            "port": {"type": "integer", "format": "int32"},
                            "targetPort": {
                                "format": "int-or-string",
                                "oneOf": [
                                    {"type": "string"},
                                    {"type": "integer"},
                                ],
                            },
                        },
                    },
                },
            },
        },
    },
}


class FakeSchemaFetcher:
    """Schema fetcher serving schemas from a dict keyed by URL."""

    def __init__(
        self,
        schemas: dict[str, dict[str, Any]] | None = None,
        default: dict[str, Any] | None = None,
    ) -> None:
        self.schemas = schemas or {}
        self.default = default
        self.requested: list[str] = []

    async def fetch(self, url: str) -> dict[str, Any]:
        self.requested.append(url)
        if url in self.schemas:
            return self.schemas[url]
        if self.default is not None:
            return self.default
        msg = "Schema not found (HTTP 404)"
        raise SchemaError(msg, url=url)


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation so caplog sees kubeschema records."""
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("kubeschema"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logging.getLogger(name).propagate = propagate_value


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep tests independent of the developer's environment."""
    for name in (
        ENV_SCHEMA_LOCATION,
        ENV_KUBERNETES_VERSION,
        ENV_FILENAME,
        ENV_LOG_DIR,
        "NO_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv(ENV_CONFIG_DIR, str(tmp_path / "config"))


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a fake schema host with caching disabled."""
    return Settings(
        schema_location=TEST_SCHEMA_LOCATION,
        cache=CacheSettings(enabled=False, directory=tmp_path / "cache"),
    )


@pytest.fixture
def service_url() -> str:
    return f"{TEST_SCHEMA_LOCATION}/master-standalone-strict/service-v1.json"


@pytest.fixture
def fetcher(service_url) -> FakeSchemaFetcher:
    return FakeSchemaFetcher({service_url: SERVICE_SCHEMA})


@pytest.fixture
def service_schema() -> dict[str, Any]:
    return SERVICE_SCHEMA


@pytest.fixture
def make_fetcher():
    """Factory for fake fetchers with custom schema maps."""
    return FakeSchemaFetcher
