"""
This module defines the core domain models for the client.

These classes describe how a resource is addressed, what a loaded resource
and a page of a listing look like, and the ports (interfaces) the client
needs from the outside world: a transport that fetches bytes and a decoder
that turns them into typed resources.
"""

import dataclasses
from urllib.parse import urlsplit

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar, Union

T = TypeVar("T")

Identifier = Union[int, str]


def endpoint_of(resource_type: type) -> str:
    """Returns the API endpoint name a resource type is served under."""
    endpoint = getattr(resource_type, "endpoint", None)
    if not isinstance(endpoint, str) or not endpoint:
        raise TypeError(
            f"{resource_type.__name__} does not declare an API endpoint"
        )
    return endpoint


# --- Domain Models ---

@dataclasses.dataclass(frozen=True)
class ResourceKey:
    """
    Addresses a single resource by its type and identifier.

    Identifiers are either positive integer ids or non-empty, case-sensitive
    names. A name made only of digits is the same resource as the numeric id,
    so it is normalized to an int.
    """

    resource_type: type
    identifier: Identifier

    def __post_init__(self):
        identifier = self.identifier
        if isinstance(identifier, bool):
            raise ValueError("Boolean is not a valid resource identifier")
        if isinstance(identifier, str):
            if not identifier:
                raise ValueError("Resource name must not be empty")
            if identifier.isascii() and identifier.isdigit():
                identifier = int(identifier)
                object.__setattr__(self, "identifier", identifier)
        elif not isinstance(identifier, int):
            raise ValueError(
                f"Unsupported identifier type: {type(identifier).__name__}"
            )
        if isinstance(identifier, int) and identifier <= 0:
            raise ValueError(f"Resource id must be positive, got {identifier}")

    @property
    def endpoint(self) -> str:
        return endpoint_of(self.resource_type)

    def __str__(self) -> str:
        return f"{self.endpoint}/{self.identifier}"


@dataclasses.dataclass(frozen=True)
class PageKey:
    """Addresses one page of a listing. Pages are keyed by their URL."""

    url: str

    def __str__(self) -> str:
        return self.url


@dataclasses.dataclass(frozen=True)
class NamedReference:
    """A lightweight pointer to another resource, embedded without its body."""

    name: str
    url: str

    @property
    def resource_type(self) -> str:
        """The endpoint segment of the URL, e.g. 'pokemon-species'."""
        segments = [s for s in urlsplit(self.url).path.split("/") if s]
        if len(segments) >= 2 and segments[-1].isdigit():
            return segments[-2]
        return segments[-1] if segments else ""


@dataclasses.dataclass(frozen=True)
class Resource(Generic[T]):
    """A decoded payload together with the key it was fetched under."""

    key: Union[ResourceKey, PageKey]
    value: T


@dataclasses.dataclass(frozen=True)
class Page:
    """One slice of a list endpoint, with links to its neighbours."""

    items: List[NamedReference]
    total_count: int
    next_page_url: Optional[str] = None
    previous_page_url: Optional[str] = None

    @property
    def is_last(self) -> bool:
        return self.next_page_url is None


@dataclasses.dataclass(frozen=True)
class LocalizedName:
    """A resource's display name in one language."""

    language_tag: str
    name: str
    is_official: bool = False


# --- Ports (Interfaces) ---

class Transport(ABC):
    """A port for fetching the raw payload behind a resource URL."""

    @abstractmethod
    async def get(self, url: str) -> bytes:
        """
        Fetches the payload at a URL.
        Raises FetchError on network errors, timeouts and non-2xx statuses.
        """
        pass

    async def aclose(self):
        """Releases any connections held by the transport."""
        pass


class Decoder(ABC):
    """A port for turning raw payloads into typed resources."""

    @abstractmethod
    def decode(self, payload: bytes, resource_type: type) -> Any:
        """
        Decodes a payload into an instance of resource_type.
        Raises DecodeError on malformed or incompatible payloads.
        """
        pass

    @abstractmethod
    def decode_page(self, payload: bytes) -> Page:
        """Decodes one page of a list endpoint."""
        pass
