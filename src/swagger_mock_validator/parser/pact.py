"""Pact file parser.

Parses Pact v2/v3 documents into ParsedMock models. Only structures the
document; no validation happens here.
"""

import logging
from urllib.parse import parse_qsl

from swagger_mock_validator.errors import MalformedMockDocument
from swagger_mock_validator.location import PACT_ROOT, LocatedValue, Location, MockOwner

from .base import MULTI_COLLECTION_SEPARATOR, NO_PROVIDER_STATE, ParsedMock, ParsedMockInteraction

logger = logging.getLogger(__name__)


def parse_mock(mock_json: dict, mock_path_or_url: str) -> ParsedMock:
    """Parse a raw Pact document into a ParsedMock."""
    if not isinstance(mock_json, dict) or not isinstance(mock_json.get("interactions"), list):
        raise MalformedMockDocument(f'"{mock_path_or_url}" is not a valid pact file: missing "interactions"')

    interactions = tuple(
        _parse_interaction(interaction, index, mock_path_or_url)
        for index, interaction in enumerate(mock_json["interactions"])
    )
    logger.debug("Parsed %d interactions from %s", len(interactions), mock_path_or_url)
    return ParsedMock(path_or_url=mock_path_or_url, interactions=interactions)


def _parse_interaction(interaction: dict, index: int, mock_path_or_url: str) -> ParsedMockInteraction:
    location = Location(root=PACT_ROOT, steps=("interactions", index))
    request = interaction.get("request") if isinstance(interaction, dict) else None
    response = interaction.get("response") if isinstance(interaction, dict) else None
    if not isinstance(request, dict) or not isinstance(response, dict):
        raise MalformedMockDocument(f'"{mock_path_or_url}" is not a valid pact file: {location} needs a request and a response')
    if not isinstance(request.get("method"), str) or not isinstance(request.get("path"), str):
        raise MalformedMockDocument(f'"{mock_path_or_url}" is not a valid pact file: {location}.request needs a method and a path')
    if "status" not in response:
        raise MalformedMockDocument(f'"{mock_path_or_url}" is not a valid pact file: {location}.response needs a status')

    owner = MockOwner(
        mock_file=mock_path_or_url,
        description=str(interaction.get("description", "")),
        state=_provider_state(interaction),
    )
    request_location = location.child("request")
    response_location = location.child("response")
    path, _, inline_query = request["path"].partition("?")

    def located(value, at: Location) -> LocatedValue:
        return LocatedValue(value=value, location=at, owner=owner)

    return ParsedMockInteraction(
        description=owner.description,
        state=owner.state,
        location=location,
        request_method=located(request["method"].lower(), request_location.child("method")),
        request_path=located(path, request_location.child("path")),
        request_path_segments=tuple(
            located(segment, request_location.child("path")) for segment in path.split("/") if segment
        ),
        request_query=_parse_query(request.get("query"), inline_query, request_location, owner),
        request_headers=_parse_headers(request.get("headers"), request_location.child("headers"), owner),
        request_body=located(request.get("body"), request_location.child("body")),
        response_status=located(response["status"], response_location.child("status")),
        response_headers=_parse_headers(response.get("headers"), response_location.child("headers"), owner),
        response_body=located(response.get("body"), response_location.child("body")),
    )


def _provider_state(interaction: dict) -> str:
    state = interaction.get("providerState") or interaction.get("state")
    if not state:
        states = interaction.get("providerStates") or []
        if states and isinstance(states[0], dict):
            state = states[0].get("name")
    return state or NO_PROVIDER_STATE


def _parse_headers(headers: dict | None, location: Location, owner: MockOwner) -> dict[str, LocatedValue]:
    result = {}
    for name, value in (headers or {}).items():
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        result[name] = LocatedValue(value=value, location=location.child(name), owner=owner)
    return result


def _parse_query(query, inline_query: str, request_location: Location, owner: MockOwner) -> dict[str, LocatedValue]:
    """Collect query values by name; repeated values are joined with the multi separator."""
    values: dict[str, list[str]] = {}
    locations: dict[str, Location] = {}

    if isinstance(query, dict):
        # Pact v3: {"name": ["value", ...]}
        for name, raw in query.items():
            raw = raw if isinstance(raw, list) else [raw]
            values.setdefault(name, []).extend(str(v) for v in raw)
            locations[name] = request_location.child("query", name)
    elif isinstance(query, str):
        for name, value in parse_qsl(query, keep_blank_values=True):
            values.setdefault(name, []).append(value)
            locations.setdefault(name, request_location.child("query"))

    for name, value in parse_qsl(inline_query, keep_blank_values=True):
        values.setdefault(name, []).append(value)
        locations.setdefault(name, request_location.child("path"))

    return {
        name: LocatedValue(value=MULTI_COLLECTION_SEPARATOR.join(items), location=locations[name], owner=owner)
        for name, items in values.items()
    }
