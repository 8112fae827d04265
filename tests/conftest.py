"""Shared fakes and payload builders for the client test suite."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from pokeapi_client.application.cache import ResourceCache
from pokeapi_client.application.client import ResourceClient
from pokeapi_client.application.domain import Transport
from pokeapi_client.application.exceptions import FetchError
from pokeapi_client.infrastructure.decoder import PydanticDecoder

BASE_URL = "https://pokeapi.co/api/v2"


class FakeTransport(Transport):
    """A transport serving canned payloads and recording every GET.

    Unknown URLs answer 404. An exception stored as a response is raised.
    Setting `gate` holds every request until the event is set.
    """

    def __init__(self, responses: dict[str, Any] | None = None):
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None
        self.closed = False

    async def get(self, url: str) -> bytes:
        self.calls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        outcome = self.responses.get(url)
        if outcome is None:
            raise FetchError(url, status_code=404)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


# ── Payload builders ─────────────────────────────────────────────────────


def _encode(data: dict[str, Any]) -> bytes:
    return json.dumps(data).encode()


def ref(endpoint: str, name: str, id_: int) -> dict[str, str]:
    return {"name": name, "url": f"{BASE_URL}/{endpoint}/{id_}/"}


def name_entry(tag: str, name: str) -> dict[str, Any]:
    return {"name": name, "language": ref("language", tag, 1)}


def pokemon_json(id_: int, name: str, species: str, species_id: int) -> bytes:
    return _encode({
        "id": id_,
        "name": name,
        "base_experience": 64,
        "height": 7,
        "weight": 69,
        "is_default": True,
        "species": ref("pokemon-species", species, species_id),
        "types": [{"slot": 1, "type": ref("type", "grass", 12)}],
    })


def species_json(
    id_: int,
    name: str,
    names: list[dict[str, Any]] | None = None,
    evolves_from: dict[str, str] | None = None,
) -> bytes:
    return _encode({
        "id": id_,
        "name": name,
        "order": id_,
        "is_legendary": False,
        "is_mythical": False,
        "generation": ref("generation", "generation-i", 1),
        "evolves_from_species": evolves_from,
        "names": names or [],
    })


def page_json(
    endpoint: str,
    start: int,
    size: int,
    count: int,
    next_url: str | None,
    previous_url: str | None = None,
) -> bytes:
    return _encode({
        "count": count,
        "next": next_url,
        "previous": previous_url,
        "results": [
            ref(endpoint, f"{endpoint}-{i}", i)
            for i in range(start + 1, start + size + 1)
        ],
    })


def resource_url(endpoint: str, identifier: Any) -> str:
    return f"{BASE_URL}/{endpoint}/{identifier}/"


# ── Fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def cache() -> ResourceCache:
    return ResourceCache()


@pytest.fixture
def client(transport: FakeTransport, cache: ResourceCache) -> ResourceClient:
    return ResourceClient(
        transport=transport,
        decoder=PydanticDecoder(),
        cache=cache,
        base_url=BASE_URL,
        page_size=20,
    )
