"""Request and response body validation against the spec's body schemas."""

from swagger_mock_validator.location import SWAGGER_ROOT, LocatedValue, Location, Step
from swagger_mock_validator.parser.base import ParsedMockInteraction, ParsedSpecOperation, ParsedSpecResponse
from swagger_mock_validator.parser.swagger import MAX_REF_DEPTH, MISSING, follow_pointer, pointer_steps

from .results import ValidationResult, error, warning
from .schema import SchemaFailure, validate_json


def has_body(value) -> bool:
    """A body counts as absent when it is missing, empty text, false or zero."""
    if value is None or value == "":
        return False
    if isinstance(value, (bool, int, float)) and not value:
        return False
    return True


def schema_segment(schema: LocatedValue, failure: SchemaFailure, document: dict | None = None) -> LocatedValue:
    """Locate the schema keyword a failure came from.

    Steps walk down from the body schema. Crossing a local `$ref` moves the
    location to the referenced schema under the spec root, so the cited
    location and value always agree.
    """
    node = schema.value
    location = schema.location
    for step in failure.schema_steps:
        node, location = _follow_refs(node, location, document)
        node = _step_into(node, step)
        location = location.child(str(step))
    return LocatedValue(value=node, location=location, owner=schema.owner)


def _follow_refs(node, location: Location, document: dict | None):
    for _ in range(MAX_REF_DEPTH):
        if document is None or not isinstance(node, dict):
            break
        steps = pointer_steps(node.get("$ref"))
        if steps is None:
            break
        target = follow_pointer(document, steps)
        if target is MISSING:
            break
        node, location = target, Location(root=SWAGGER_ROOT, steps=steps)
    return node, location


def _step_into(node, step: Step):
    if isinstance(node, dict):
        return node.get(str(step))
    if isinstance(node, list) and str(step).isdigit() and int(step) < len(node):
        return node[int(step)]
    return None


def validate_request_body(
    interaction: ParsedMockInteraction, operation: ParsedSpecOperation, document: dict | None = None
) -> list[ValidationResult]:
    body = interaction.request_body
    parameter = operation.request_body_parameter

    if parameter is None:
        if has_body(body.value):
            return [warning("spv.request.body.unknown", "No schema found for request body", body, operation)]
        return []

    if not has_body(body.value) and not parameter.required:
        return []

    return [
        error(
            "spv.request.body.incompatible",
            f"Request body is incompatible with the request body schema in the swagger file: {failure.message}",
            interaction.get_request_body_path(failure.data_steps),
            schema_segment(parameter, failure, document),
        )
        for failure in validate_json(parameter.value, body.value, document)
    ]


def validate_response_body(
    interaction: ParsedMockInteraction, response: ParsedSpecResponse, document: dict | None = None
) -> list[ValidationResult]:
    body = interaction.response_body
    if not has_body(body.value):
        return []

    if response.body_schema is None:
        return [warning("spv.response.body.unknown", "No schema found for response body", body, response)]

    return [
        error(
            "spv.response.body.incompatible",
            f"Response body is incompatible with the response body schema in the swagger file: {failure.message}",
            interaction.get_response_body_path(failure.data_steps),
            schema_segment(response.body_schema, failure, document),
        )
        for failure in validate_json(response.body_schema.value, body.value, document)
    ]
