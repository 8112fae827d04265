"""
Pydantic models for validating the structure of responses from PokéAPI.

These models serve as a strict contract for the JSON shapes the client can
decode. Only the fields the client cares about are declared; anything else
in a payload is ignored. Every fetchable shape names its API endpoint in the
`endpoint` class attribute, which is how the client builds its URLs.
"""

from typing import ClassVar, List, Optional

from pydantic import BaseModel, ConfigDict

from ..application.domain import NamedReference


class ApiModel(BaseModel):
    """Base for all decoded payloads; decoded resources are immutable."""

    model_config = ConfigDict(frozen=True)


class NamedResourceList(ApiModel):
    """One page of a list endpoint."""

    count: int
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[NamedReference]


class Name(ApiModel):
    """A resource's name in one language."""

    name: str
    language: NamedReference


# --- Fetchable resources ---

class Language(ApiModel):
    endpoint: ClassVar[str] = "language"

    id: int
    name: str
    official: bool
    iso639: str
    iso3166: str
    names: List[Name] = []


class PokemonType(ApiModel):
    slot: int
    type: NamedReference


class Pokemon(ApiModel):
    """
    A single form of a Pokémon. Its localized names live on the species,
    reached through the `species` reference.
    """

    endpoint: ClassVar[str] = "pokemon"

    id: int
    name: str
    base_experience: Optional[int] = None
    height: int
    weight: int
    is_default: bool = True
    species: NamedReference
    types: List[PokemonType] = []


class PokemonSpecies(ApiModel):
    endpoint: ClassVar[str] = "pokemon-species"

    id: int
    name: str
    order: Optional[int] = None
    is_legendary: bool = False
    is_mythical: bool = False
    generation: Optional[NamedReference] = None
    evolves_from_species: Optional[NamedReference] = None
    names: List[Name] = []


class Ability(ApiModel):
    endpoint: ClassVar[str] = "ability"

    id: int
    name: str
    is_main_series: bool = True
    names: List[Name] = []


class Move(ApiModel):
    endpoint: ClassVar[str] = "move"

    id: int
    name: str
    power: Optional[int] = None
    pp: Optional[int] = None
    type: Optional[NamedReference] = None
    names: List[Name] = []


class Version(ApiModel):
    endpoint: ClassVar[str] = "version"

    id: int
    name: str
    version_group: NamedReference
    names: List[Name] = []


class VersionGroup(ApiModel):
    endpoint: ClassVar[str] = "version-group"

    id: int
    name: str
    order: int
    generation: NamedReference
    versions: List[NamedReference] = []
