"""Path and query parameter validation.

Mock values arrive as strings; they are coerced to the declared type
before being checked against the parameter's schema, so "1" satisfies
`type: number` while "not-a-number" does not.
"""

import re

from swagger_mock_validator.location import LocatedValue
from swagger_mock_validator.parser.base import (
    MULTI_COLLECTION_SEPARATOR,
    ParsedMockInteraction,
    ParsedSpecOperation,
    ParsedSpecParameter,
)

from .results import ValidationResult, error
from .schema import SchemaFailure, validate_json

COLLECTION_SEPARATORS = {
    "csv": ",",
    "ssv": " ",
    "tsv": "\t",
    "pipes": "|",
    "multi": MULTI_COLLECTION_SEPARATOR,
}

INCOMPATIBLE_PARAMETER = "Value is incompatible with the parameter defined in the swagger file"

_INTEGER = re.compile(r"^-?\d+$")
_NUMBER = re.compile(r"^-?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$")


def coerce_value(raw, schema: dict, collection_format: str = "csv"):
    """Convert a serialized parameter value to the type its schema declares."""
    if not isinstance(raw, str):
        return raw
    kind = schema.get("type")
    if kind == "integer" and _INTEGER.match(raw):
        return int(raw)
    if kind == "number" and _NUMBER.match(raw):
        return int(raw) if _INTEGER.match(raw) else float(raw)
    if kind == "boolean" and raw in ("true", "false"):
        return raw == "true"
    if kind == "array":
        if raw == "":
            return []
        items = schema.get("items") if isinstance(schema.get("items"), dict) else {}
        separator = COLLECTION_SEPARATORS.get(collection_format, ",")
        return [coerce_value(item, items, items.get("collectionFormat", "csv")) for item in raw.split(separator)]
    return raw


def validate_parameter(
    value: LocatedValue, parameter: ParsedSpecParameter, document: dict | None = None
) -> list[SchemaFailure]:
    coerced = coerce_value(value.value, parameter.value_schema, parameter.collection_format)
    return validate_json(parameter.value_schema, coerced, document)


def incompatible_parameter(code: str, value: LocatedValue, parameter: ParsedSpecParameter, failure: SchemaFailure):
    return error(code, f"{INCOMPATIBLE_PARAMETER}: {failure.message}", value, parameter)


def validate_path_parameters(
    operation: ParsedSpecOperation, path_values: dict[str, LocatedValue], document: dict | None = None
) -> list[ValidationResult]:
    results = []
    for name, value in path_values.items():
        parameter = operation.path_parameters.get(name)
        if parameter is None:
            continue
        failures = validate_parameter(value, parameter, document)
        if failures:
            results.append(incompatible_parameter("spv.request.path.incompatible", value, parameter, failures[0]))
    return results


def validate_query_parameters(
    interaction: ParsedMockInteraction, operation: ParsedSpecOperation, document: dict | None = None
) -> list[ValidationResult]:
    """Check declared query parameters; undeclared ones in the mock are ignored."""
    results = []
    for name, parameter in operation.query_parameters.items():
        value = interaction.request_query.get(name)
        if value is None:
            if parameter.required:
                missing = LocatedValue(
                    value=None,
                    location=interaction.location.child("request", "query"),
                    owner=interaction.request_path.owner,
                )
                results.append(
                    error("spv.request.query.missing", f"Missing required query parameter: {name}", missing, parameter)
                )
            continue
        failures = validate_parameter(value, parameter, document)
        if failures:
            results.append(incompatible_parameter("spv.request.query.incompatible", value, parameter, failures[0]))
    return results
