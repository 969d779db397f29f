"""Parsed data models for spec and mock documents.

Both parsers convert their raw input into these frozen models. The only raw
document validation sees is the spec itself, kept as the target of schema $refs.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from swagger_mock_validator.location import LocatedValue, Location, Step, locate_in_body

MULTI_COLLECTION_SEPARATOR = "[multi-array-separator]"
NO_PROVIDER_STATE = "[none]"


class ParsedSpecParameter(LocatedValue):
    """A path, query or header parameter (value is the raw definition)."""

    name: str
    required: bool = False
    collection_format: str = "csv"
    value_schema: dict = {}  # JSON Schema for the parameter value


class ParsedSpecBody(LocatedValue):
    """A request body schema (value is the schema, located at the schema itself)."""

    required: bool = False


class ParsedSpecResponse(LocatedValue):
    status: str
    headers: dict[str, ParsedSpecParameter] = {}  # keyed by lower-cased name
    body_schema: LocatedValue | None = None


class ParsedSpecOperation(LocatedValue):
    """One (path template, method) pair; value is the raw operation object."""

    path_name: str
    path_template: tuple[str, ...]
    method: str  # lower-case
    path_parameters: dict[str, ParsedSpecParameter] = {}
    query_parameters: dict[str, ParsedSpecParameter] = {}
    request_header_parameters: dict[str, ParsedSpecParameter] = {}  # lower-cased names
    request_body_parameter: ParsedSpecBody | None = None
    security_headers: frozenset[str] = frozenset()
    responses: dict[str, ParsedSpecResponse] = {}


class ParsedSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    path_or_url: str
    base_path: str = ""
    paths: LocatedValue
    operations: tuple[ParsedSpecOperation, ...] = ()
    document: dict[str, Any] = {}  # raw document; schema $refs resolve against it


class ParsedMockInteraction(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str
    state: str
    location: Location
    request_method: LocatedValue
    request_path: LocatedValue
    request_path_segments: tuple[LocatedValue, ...]
    request_query: dict[str, LocatedValue] = {}
    request_headers: dict[str, LocatedValue] = {}  # original case
    request_body: LocatedValue
    response_status: LocatedValue
    response_headers: dict[str, LocatedValue] = {}
    response_body: LocatedValue

    def get_request_body_path(self, steps: tuple[Step, ...] | list[Step]) -> LocatedValue:
        return locate_in_body(self.request_body, steps)

    def get_response_body_path(self, steps: tuple[Step, ...] | list[Step]) -> LocatedValue:
        return locate_in_body(self.response_body, steps)


class ParsedMock(BaseModel):
    model_config = ConfigDict(frozen=True)

    path_or_url: str
    interactions: tuple[ParsedMockInteraction, ...] = ()
