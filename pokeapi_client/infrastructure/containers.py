"""
Dependency Injection container for the catalog client.

This container uses the `dependency-injector` library to wire together the
cache, the infrastructure adapters and the resource client, based on the
client's configuration.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from dependency_injector import containers, providers

from ..application.cache import (
    NoEviction,
    ResourceCache,
    SizeBoundEviction,
    TtlEviction,
)
from ..application.client import ResourceClient
from ..application.domain import Decoder, Transport
from ..settings import settings_to_dict

from .decoder import PydanticDecoder
from .transport import HttpxTransport


def setup_logging(level: str):
    """Applies basic logging configuration."""
    logging.basicConfig(level=level)


class Container(containers.DeclarativeContainer):
    """DI container for wiring the client components."""

    config = providers.Configuration()

    logging_setup = providers.Resource(setup_logging, level=config.logging.level)

    http_client = providers.Singleton(httpx.AsyncClient)

    transport: providers.Singleton[Transport] = providers.Singleton(
        HttpxTransport,
        client=http_client,
        timeout=config.client.timeout,
    )

    decoder: providers.Factory[Decoder] = providers.Factory(PydanticDecoder)

    eviction_policy = providers.Selector(
        config.cache.policy,
        none=providers.Factory(NoEviction),
        size=providers.Factory(
            SizeBoundEviction, max_entries=config.cache.max_entries
        ),
        ttl=providers.Factory(
            TtlEviction, ttl_seconds=config.cache.ttl_seconds
        ),
    )

    cache = providers.Singleton(ResourceCache, eviction_policy=eviction_policy)

    resource_client = providers.Singleton(
        ResourceClient,
        transport=transport,
        decoder=decoder,
        cache=cache,
        base_url=config.client.base_url,
        page_size=config.client.page_size,
        show_progress=config.client.show_progress,
    )


def create_container(overrides: Optional[Dict[str, Any]] = None) -> Container:
    """
    Builds a container configured from the Dynaconf settings.

    Args:
        overrides: Optional nested options merged over the loaded settings,
                   e.g. {"cache": {"policy": "ttl"}}.
    """

    container = Container()
    container.config.from_dict(settings_to_dict())
    if overrides:
        container.config.from_dict(overrides)
    return container
