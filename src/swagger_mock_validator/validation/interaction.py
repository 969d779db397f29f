"""Validates a single mock interaction against the spec."""

import logging

from swagger_mock_validator.location import LocatedValue
from swagger_mock_validator.parser.base import ParsedMockInteraction, ParsedSpec, ParsedSpecOperation

from .body import validate_request_body, validate_response_body
from .headers import validate_headers
from .matcher import match_operation
from .parameters import validate_path_parameters, validate_query_parameters
from .results import ValidationResult, error

logger = logging.getLogger(__name__)


def validate_interaction(interaction: ParsedMockInteraction, spec: ParsedSpec) -> list[ValidationResult]:
    """Run every check for one interaction; checks never short-circuit each other."""
    match = match_operation(interaction, spec)
    if match.operation is None:
        logger.debug("%s: no operation matched", interaction.location)
        return list(match.results)

    operation = match.operation
    logger.debug("%s: matched %s", interaction.location, operation.location)

    results = []
    results.extend(validate_path_parameters(operation, match.path_values, spec.document))
    results.extend(validate_query_parameters(interaction, operation, spec.document))
    results.extend(validate_headers(
        interaction.request_headers,
        operation.request_header_parameters,
        kind="request",
        spec_anchor=operation,
        implied=operation.security_headers,
        document=spec.document,
    ))
    results.extend(validate_request_body(interaction, operation, spec.document))
    results.extend(_validate_response(interaction, operation, spec))
    return results


def _validate_response(
    interaction: ParsedMockInteraction, operation: ParsedSpecOperation, spec: ParsedSpec
) -> list[ValidationResult]:
    status = str(interaction.response_status.value)
    response = operation.responses.get(status) or operation.responses.get("default")
    if response is None:
        responses = LocatedValue(
            value=operation.value.get("responses"),
            location=operation.location.child("responses"),
            owner=operation.owner,
        )
        return [error(
            "spv.response.status.unknown",
            f"Status code not defined in swagger file: {status}",
            interaction.response_status,
            responses,
        )]

    results = validate_headers(
        interaction.response_headers,
        response.headers,
        kind="response",
        spec_anchor=response,
        document=spec.document,
    )
    results.extend(validate_response_body(interaction, response, spec.document))
    return results
