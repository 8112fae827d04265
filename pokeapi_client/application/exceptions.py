"""
Core exceptions for the catalog client.

This module defines a hierarchy of custom exceptions so that callers can
handle transport, payload, and reference failures separately, without ever
seeing the raw exception types of the underlying HTTP or parsing libraries.
"""

from typing import Optional


class CatalogClientError(Exception):
    """Base exception for all client-specific errors."""
    pass


# --- Configuration Errors ---

class ConfigurationError(CatalogClientError):
    """Raised for errors related to client configuration."""
    pass


# --- Infrastructure Errors ---

class InfrastructureError(CatalogClientError):
    """Base class for errors related to external systems (network, payload)."""
    pass


class FetchError(InfrastructureError):
    """
    Raised when a resource cannot be fetched: the host is unreachable, the
    request timed out, or the API answered with a non-success status.
    """

    def __init__(
        self,
        url: str,
        status_code: Optional[int] = None,
        cause: Optional[str] = None,
    ):
        self.url = url
        self.status_code = status_code
        self.cause = cause
        detail = f"HTTP {status_code}" if status_code is not None else cause
        super().__init__(f"Failed to fetch {url}: {detail or 'unknown error'}")


class DecodeError(InfrastructureError):
    """Raised when a payload does not match the expected resource shape."""

    def __init__(self, target_type: type, message: str):
        self.target_type = target_type
        self.message = message
        super().__init__(
            f"Cannot decode payload into {target_type.__name__}: {message}"
        )


# --- Domain Errors ---

class DomainError(CatalogClientError):
    """Base class for errors in the client's own logic."""
    pass


class NoReferenceError(DomainError):
    """Raised when following a reference field that is absent on a resource."""

    def __init__(self, source, target_type: type):
        self.source = source
        self.target_type = target_type
        super().__init__(
            f"{source} holds no reference to a {target_type.__name__}"
        )


class CacheStateError(CatalogClientError):
    """
    Raised when a cache entry is driven through an illegal state transition.
    Observing this error means there is a defect in the cache layer.
    """
    pass
