"""Tests for the dependency-injection wiring and Dynaconf-backed settings."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from pokeapi_client.application.cache import (
    NoEviction,
    ResourceCache,
    SizeBoundEviction,
    TtlEviction,
)
from pokeapi_client.application.client import ResourceClient
from pokeapi_client.infrastructure.containers import Container, create_container
from pokeapi_client.infrastructure.decoder import PydanticDecoder
from pokeapi_client.infrastructure.transport import HttpxTransport
from pokeapi_client.settings import settings_to_dict


def _options(**cache: Any) -> dict[str, Any]:
    return {
        "client": {
            "base_url": "https://pokeapi.test/api/v2/",
            "timeout": 2.5,
            "page_size": 50,
            "show_progress": False,
        },
        "cache": {"policy": "none", "max_entries": 8, "ttl_seconds": 60.0, **cache},
        "logging": {"level": "DEBUG"},
    }


@pytest.fixture
def container() -> Container:
    container = Container()
    container.config.from_dict(_options())
    return container


async def test_resource_client_is_fully_wired(container: Container) -> None:
    client = container.resource_client()

    assert isinstance(client, ResourceClient)
    assert client is container.resource_client()
    assert client.base_url == "https://pokeapi.test/api/v2"
    assert client.page_size == 50
    assert isinstance(client.transport, HttpxTransport)
    assert client.transport.timeout == 2.5
    assert isinstance(client.decoder, PydanticDecoder)
    assert client.cache is container.cache()
    await client.aclose()


@pytest.mark.parametrize(
    ("policy", "expected"),
    [("none", NoEviction), ("size", SizeBoundEviction), ("ttl", TtlEviction)],
)
def test_eviction_policy_follows_configuration(policy: str, expected: type) -> None:
    container = Container()
    container.config.from_dict(_options(policy=policy))

    cache = container.cache()

    assert isinstance(cache, ResourceCache)
    assert isinstance(cache.eviction_policy, expected)


def test_size_and_ttl_bounds_are_passed_through() -> None:
    container = Container()
    container.config.from_dict(_options(policy="size"))
    assert container.eviction_policy().max_entries == 8

    container.config.from_dict({"cache": {"policy": "ttl"}})
    assert container.eviction_policy().ttl_seconds == 60.0


def test_logging_resource_applies_configured_level(
    container: Container, monkeypatch: pytest.MonkeyPatch
) -> None:
    applied = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: applied.append(kw))

    container.init_resources()
    container.shutdown_resources()

    assert applied == [{"level": "DEBUG"}]


def test_settings_file_provides_defaults() -> None:
    options = settings_to_dict()

    assert options["client"]["base_url"] == "https://pokeapi.co/api/v2"
    assert options["client"]["page_size"] == 20
    assert options["cache"]["policy"] in {"none", "size", "ttl"}


async def test_create_container_applies_overrides() -> None:
    container = create_container({"cache": {"policy": "ttl", "ttl_seconds": 5}})

    assert container.config.client.base_url() == "https://pokeapi.co/api/v2"
    policy = container.eviction_policy()
    assert isinstance(policy, TtlEviction)
    assert policy.ttl_seconds == 5
    await container.transport().aclose()
