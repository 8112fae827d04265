"""Unit tests for resource identity, references and pages."""

from __future__ import annotations

import pytest

from pokeapi_client.application.domain import (
    NamedReference,
    Page,
    PageKey,
    ResourceKey,
    endpoint_of,
)
from pokeapi_client.infrastructure.api_models import Pokemon, PokemonSpecies


class TestResourceKey:
    def test_digit_name_is_the_same_key_as_numeric_id(self) -> None:
        assert ResourceKey(Pokemon, "25") == ResourceKey(Pokemon, 25)
        assert hash(ResourceKey(Pokemon, "25")) == hash(ResourceKey(Pokemon, 25))
        assert ResourceKey(Pokemon, "025").identifier == 25

    def test_names_are_case_sensitive(self) -> None:
        assert ResourceKey(Pokemon, "Pikachu") != ResourceKey(Pokemon, "pikachu")

    def test_same_identifier_of_different_types_differs(self) -> None:
        assert ResourceKey(Pokemon, 1) != ResourceKey(PokemonSpecies, 1)

    @pytest.mark.parametrize("identifier", [0, -4, "", True, 1.5, None])
    def test_invalid_identifiers_are_rejected(self, identifier) -> None:
        with pytest.raises(ValueError):
            ResourceKey(Pokemon, identifier)

    def test_str_names_endpoint_and_identifier(self) -> None:
        assert str(ResourceKey(PokemonSpecies, "bulbasaur")) == "pokemon-species/bulbasaur"

    def test_keys_are_immutable(self) -> None:
        key = ResourceKey(Pokemon, 1)
        with pytest.raises(AttributeError):
            key.identifier = 2  # type: ignore[misc]


def test_endpoint_of_requires_declared_endpoint() -> None:
    assert endpoint_of(Pokemon) == "pokemon"

    class Undeclared:
        pass

    with pytest.raises(TypeError):
        endpoint_of(Undeclared)


def test_page_keys_compare_by_url() -> None:
    url = "https://pokeapi.co/api/v2/pokemon?offset=20&limit=20"
    assert PageKey(url) == PageKey(url)
    assert str(PageKey(url)) == url


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://pokeapi.co/api/v2/pokemon-species/1/", "pokemon-species"),
        ("https://pokeapi.co/api/v2/version-group/3", "version-group"),
        ("https://pokeapi.co/api/v2/language/", "language"),
    ],
)
def test_named_reference_resource_type_comes_from_url(url: str, expected: str) -> None:
    assert NamedReference(name="x", url=url).resource_type == expected


def test_last_page_has_no_next_link() -> None:
    assert Page(items=[], total_count=0).is_last
    assert not Page(items=[], total_count=40, next_page_url="https://x/?offset=20").is_last
