"""Builders for spec and pact documents used across the tests."""

from swagger_mock_validator.errors import MockIncompatibleError
from swagger_mock_validator.validator import validate

SPEC_FILE = "swagger.json"
MOCK_FILE = "pact.json"

_MISSING = object()


def swagger(paths: dict, **extra) -> dict:
    return {"swagger": "2.0", "info": {"title": "api", "version": "1.0"}, "paths": paths, **extra}


def operation(responses: dict | None = None, parameters: list | None = None, **extra) -> dict:
    op = {"responses": responses if responses is not None else {"200": {"description": "ok"}}}
    if parameters is not None:
        op["parameters"] = parameters
    op.update(extra)
    return op


def response(headers: dict | None = None, schema: dict | None = None) -> dict:
    result = {"description": "a response"}
    if headers is not None:
        result["headers"] = headers
    if schema is not None:
        result["schema"] = schema
    return result


def pact(*interactions) -> dict:
    return {
        "consumer": {"name": "consumer"},
        "provider": {"name": "provider"},
        "interactions": list(interactions),
        "metadata": {"pactSpecification": {"version": "2.0.0"}},
    }


def interaction(
    path: str = "/does/exist",
    method: str = "GET",
    status=200,
    description: str = "interaction description",
    state: str | None = None,
    query=None,
    request_headers: dict | None = None,
    response_headers: dict | None = None,
    request_body=_MISSING,
    response_body=_MISSING,
) -> dict:
    request = {"method": method, "path": path}
    if query is not None:
        request["query"] = query
    if request_headers is not None:
        request["headers"] = request_headers
    if request_body is not _MISSING:
        request["body"] = request_body

    result = {"status": status}
    if response_headers is not None:
        result["headers"] = response_headers
    if response_body is not _MISSING:
        result["body"] = response_body

    doc = {"description": description, "request": request, "response": result}
    if state is not None:
        doc["providerState"] = state
    return doc


def run(spec_json: dict, mock_json: dict, **kwargs):
    """Validate and return (errors, warnings) as wire dicts, whether or not it passed."""
    try:
        outcome = validate(spec_json, SPEC_FILE, mock_json, MOCK_FILE, **kwargs)
    except MockIncompatibleError as e:
        return e.details["errors"], e.details["warnings"]
    return [], outcome.as_dict()["warnings"]
