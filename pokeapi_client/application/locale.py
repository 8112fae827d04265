"""Resolves localized display names from a loaded resource's name list."""

from typing import Any, Optional

from .domain import LocalizedName, Resource


def _payload(resource: Any) -> Any:
    return resource.value if isinstance(resource, Resource) else resource


def _as_localized(entry: Any) -> LocalizedName:
    if isinstance(entry, LocalizedName):
        return entry
    # Wire shape: {"name": ..., "language": {"name": ..., "url": ...}}
    return LocalizedName(
        language_tag=entry.language.name,
        name=entry.name,
        is_official=getattr(entry, "is_official", False),
    )


def resolve(resource: Any, language_tag: str) -> Optional[LocalizedName]:
    """
    Returns the first name whose language tag matches exactly, or None.

    Resources without a name list resolve to None, never to an error. The
    lookup is pure: no fallback language, no case folding, no I/O.
    """

    names = getattr(_payload(resource), "names", None)
    for entry in names or ():
        localized = _as_localized(entry)
        if localized.language_tag == language_tag:
            return localized
    return None


def resolve_or_default(resource: Any, language_tag: str) -> Optional[str]:
    """Returns the localized name, falling back to the resource's own name."""
    localized = resolve(resource, language_tag)
    if localized is not None:
        return localized.name
    return getattr(_payload(resource), "name", None)
