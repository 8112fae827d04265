"""Pydantic implementation of the Decoder port."""

import functools
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ..application.domain import Decoder, Page
from ..application.exceptions import DecodeError

from .api_models import NamedResourceList


@functools.lru_cache(maxsize=None)
def _adapter_for(resource_type: type) -> TypeAdapter:
    return TypeAdapter(resource_type)


class PydanticDecoder(Decoder):
    """A decoder that validates JSON payloads against pydantic models."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def _map_to_domain(self, dto: NamedResourceList) -> Page:
        """Maps a list-endpoint DTO to a domain page."""
        return Page(
            items=list(dto.results),
            total_count=dto.count,
            next_page_url=dto.next,
            previous_page_url=dto.previous,
        )

    def decode(self, payload: bytes, resource_type: type) -> Any:
        """
        Validates a JSON payload into an instance of resource_type.

        Raises:
            DecodeError: If the payload is not JSON or does not match the
                         shape of resource_type.
        """

        try:
            return _adapter_for(resource_type).validate_json(payload)
        except ValidationError as e:
            self.logger.debug(f"Rejected payload for {resource_type.__name__}")
            raise DecodeError(resource_type, str(e)) from e

    def decode_page(self, payload: bytes) -> Page:
        """Validates one page of a list endpoint and maps it to a Page."""
        dto = self.decode(payload, NamedResourceList)
        return self._map_to_domain(dto)
