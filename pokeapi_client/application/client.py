"""
The resource client: the single entry point for loading catalog resources.

It combines the cache layer with the transport and decoder ports to fetch
resources by key, follow named references from one loaded resource to
another, and drain paginated list endpoints lazily.
"""

import contextlib
import inspect
import logging
from urllib.parse import quote
from typing import (
    AsyncIterator,
    Awaitable,
    Callable,
    Optional,
    Set,
    Type,
    TypeVar,
    Union,
)

from tqdm import tqdm

from .cache import ResourceCache
from .domain import (
    Decoder,
    Identifier,
    NamedReference,
    Page,
    PageKey,
    Resource,
    ResourceKey,
    Transport,
    endpoint_of,
)
from .exceptions import ConfigurationError, NoReferenceError

S = TypeVar("S")
T = TypeVar("T")

Extractor = Callable[[Resource[S]], Optional[NamedReference]]


class ResourceClient:
    """Fetches, caches, links and paginates catalog resources."""

    def __init__(
        self,
        transport: Transport,
        decoder: Decoder,
        cache: ResourceCache,
        base_url: str,
        page_size: int = 20,
        show_progress: bool = False,
    ):
        """
        Initializes the client.

        Args:
            transport: The port used to fetch raw payloads.
            decoder: The port used to turn payloads into typed resources.
            cache: The cache shared by every fetch this client performs.
            base_url: The API prefix, e.g. https://pokeapi.co/api/v2
            page_size: Number of items requested per page of a listing.
            show_progress: Whether drains display a progress bar by default.

        Raises:
            ConfigurationError: If base_url or page_size is invalid.
        """

        if not base_url or not base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Base URL must be an absolute http(s) URL, got {base_url!r}"
            )
        if page_size < 1:
            raise ConfigurationError(
                f"Page size must be at least 1, got {page_size}"
            )

        self.logger = logging.getLogger(self.__class__.__name__)
        self.transport = transport
        self.decoder = decoder
        self.cache = cache
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self.show_progress = show_progress

    async def __aenter__(self) -> "ResourceClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        """Closes the underlying transport. The cache is left untouched."""
        await self.transport.aclose()

    # --- URL building ---

    def resource_url(self, key: ResourceKey) -> str:
        identifier = quote(str(key.identifier), safe="")
        return f"{self.base_url}/{key.endpoint}/{identifier}/"

    def page_url(self, resource_type: type, page_number: int) -> str:
        if page_number < 0:
            raise ValueError(f"Page number must not be negative, got {page_number}")
        offset = page_number * self.page_size
        return (
            f"{self.base_url}/{endpoint_of(resource_type)}/"
            f"?offset={offset}&limit={self.page_size}"
        )

    # --- Producers ---

    async def _load_resource(self, key: ResourceKey) -> Resource:
        url = self.resource_url(key)
        self.logger.info(f"Fetching {key} from {url}...")
        payload = await self.transport.get(url)
        value = self.decoder.decode(payload, key.resource_type)
        return Resource(key=key, value=value)

    async def _load_page(self, key: PageKey) -> Resource[Page]:
        self.logger.info(f"Fetching page {key.url}...")
        payload = await self.transport.get(key.url)
        page = self.decoder.decode_page(payload)
        return Resource(key=key, value=page)

    # --- Public API ---

    async def fetch(
        self, resource_type: Type[T], identifier: Identifier
    ) -> Resource[T]:
        """
        Loads a single resource by id or name, through the cache.

        Concurrent calls for the same key share one network fetch, and a
        completed fetch is served from memory afterwards.

        Args:
            resource_type: The resource shape to load, e.g. Pokemon.
            identifier: A positive id or a case-sensitive name.

        Returns:
            The loaded resource.

        Raises:
            ValueError: If the identifier is not a positive id or a name.
            FetchError: If the payload could not be fetched.
            DecodeError: If the payload does not match resource_type.
        """

        key = ResourceKey(resource_type, identifier)
        return await self.cache.get_or_fetch(
            key, lambda: self._load_resource(key)
        )

    async def fetch_page(
        self, resource_type: type, page: Union[int, str] = 0
    ) -> Resource[Page]:
        """
        Loads one page of a listing, by zero-based page number or page URL.

        Pages are cached under their URL, so following a 'next' link and
        requesting the same page by number are the same cache entry.
        """

        url = page if isinstance(page, str) else self.page_url(resource_type, page)
        key = PageKey(url)
        return await self.cache.get_or_fetch(key, lambda: self._load_page(key))

    async def follow_reference(
        self,
        source: Union[Resource[S], Awaitable[Resource[S]]],
        extractor: Extractor,
        target_type: Type[T],
    ) -> Resource[T]:
        """
        Loads the resource a named reference inside another resource points to.

        Args:
            source: A loaded resource, or an awaitable resolving to one, so
                    that calls chain: follow_reference(fetch(...), ...).
            extractor: A plain function picking the reference out of the
                       source, e.g. lambda pokemon: pokemon.value.species
            target_type: The resource shape the reference points to.

        Returns:
            The referenced resource, loaded through the same cache as fetch.

        Raises:
            NoReferenceError: If the extractor finds no reference. No fetch
                              is attempted in that case.
        """

        if inspect.isawaitable(source):
            source = await source

        reference = extractor(source)
        if reference is None:
            raise NoReferenceError(source.key, target_type)

        self.logger.debug(
            f"Following {source.key} -> {reference.resource_type}/{reference.name}"
        )
        return await self.fetch(target_type, reference.name)

    async def drain_pages(
        self, resource_type: type, show_progress: Optional[bool] = None
    ) -> AsyncIterator[NamedReference]:
        """
        Lazily yields every item of a listing, page by page.

        Each call starts from the first page. The next page is only requested
        once the consumer has taken every item of the current one, so a
        consumer that stops iterating stops further fetches. A failing page
        raises after the items of all earlier pages have been yielded.

        Args:
            resource_type: The resource shape whose listing to drain.
            show_progress: Overrides the client's progress bar default.

        Yields:
            The listing's references, in the order the API returned them.

        Raises:
            FetchError: If a page could not be fetched.
            DecodeError: If a page payload is malformed.
        """

        if show_progress is None:
            show_progress = self.show_progress

        page = (await self.fetch_page(resource_type)).value
        total_count = page.total_count
        visited: Set[str] = {self.page_url(resource_type, 0)}

        progress_bar = tqdm(
            total=total_count,
            unit="item",
            desc=endpoint_of(resource_type),
            disable=not show_progress,
        )
        try:
            while True:
                for item in page.items:
                    yield item
                    progress_bar.update(1)

                if page.is_last:
                    return
                next_url = page.next_page_url
                if next_url in visited:
                    self.logger.warning(
                        f"Listing loops back to {next_url}, stopping."
                    )
                    return
                visited.add(next_url)

                page = (await self.fetch_page(resource_type, next_url)).value
                if page.total_count != total_count:
                    self.logger.warning(
                        f"Total count of {endpoint_of(resource_type)} changed "
                        f"from {total_count} to {page.total_count} mid-listing"
                    )
        finally:
            progress_bar.close()

    async def drain_resources(
        self, resource_type: Type[T], show_progress: Optional[bool] = None
    ) -> AsyncIterator[Resource[T]]:
        """Drains a listing and loads every referenced resource, in order."""

        references = self.drain_pages(resource_type, show_progress)
        async with contextlib.aclosing(references):
            async for reference in references:
                yield await self.fetch(resource_type, reference.name)
