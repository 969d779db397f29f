"""OpenAPI / Swagger document parser.

Parses Swagger 2.0 (and the OpenAPI 3.x subset that maps onto it) into a
ParsedSpec of location-annotated operations.
"""

import logging
from urllib.parse import urlparse

from swagger_mock_validator.errors import MalformedSpecDocument
from swagger_mock_validator.location import SWAGGER_ROOT, LocatedValue, Location, SpecOwner

from .base import (
    ParsedSpec,
    ParsedSpecBody,
    ParsedSpecOperation,
    ParsedSpecParameter,
    ParsedSpecResponse,
)

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Swagger 2 parameter keys that are also JSON Schema keywords
PARAMETER_SCHEMA_KEYS = (
    "type", "format", "items", "enum", "minimum", "maximum", "exclusiveMinimum",
    "exclusiveMaximum", "minLength", "maxLength", "pattern", "minItems",
    "maxItems", "uniqueItems", "multipleOf",
)

JSON_MEDIA_TYPES = ("application/json", "application/hal+json", "application/problem+json")

MAX_REF_DEPTH = 20

MISSING = object()


def parse_spec(spec_json: dict, spec_path_or_url: str) -> ParsedSpec:
    """Parse a raw spec document into a ParsedSpec."""
    if not isinstance(spec_json, dict):
        raise MalformedSpecDocument(f'"{spec_path_or_url}" is not a valid swagger file: expected an object')
    paths = spec_json.get("paths")
    if not isinstance(paths, dict):
        raise MalformedSpecDocument(f'"{spec_path_or_url}" is not a valid swagger file: missing "paths"')

    root = Location(root=SWAGGER_ROOT)
    paths_location = root.child("paths")
    operations = []

    for path_name, path_item in paths.items():
        path_item = _resolve_ref(spec_json, path_item)
        if not isinstance(path_item, dict):
            continue
        path_location = paths_location.child(path_name)
        shared = _collect_parameters(spec_json, path_item.get("parameters"), path_location.child("parameters"))

        for method, operation in path_item.items():
            if method.lower() not in HTTP_METHODS or not isinstance(operation, dict):
                continue
            owner = SpecOwner(spec_file=spec_path_or_url, path_name=path_name, method=method.lower())
            operations.append(
                _parse_operation(spec_json, path_name, operation, path_location.child(method), owner, shared)
            )

    logger.debug("Parsed %d operations from %s", len(operations), spec_path_or_url)

    return ParsedSpec(
        path_or_url=spec_path_or_url,
        base_path=_parse_base_path(spec_json),
        paths=LocatedValue(value=paths, location=paths_location, owner=SpecOwner(spec_file=spec_path_or_url)),
        operations=tuple(operations),
        document=spec_json,
    )


def _parse_operation(
    doc: dict,
    path_name: str,
    operation: dict,
    location: Location,
    owner: SpecOwner,
    shared: dict,
) -> ParsedSpecOperation:
    parameters = dict(shared)
    parameters.update(_collect_parameters(doc, operation.get("parameters"), location.child("parameters")))

    path_parameters = {}
    query_parameters = {}
    header_parameters = {}
    body = None

    for (name, kind), (definition, param_location) in parameters.items():
        if kind == "body":
            body = ParsedSpecBody(
                value=definition.get("schema", {}),
                location=param_location.child("schema"),
                owner=owner,
                required=bool(definition.get("required", False)),
            )
            continue
        if kind not in ("path", "query", "header"):
            continue
        parameter = _parse_parameter(name, kind, definition, param_location, owner)
        if kind == "path":
            path_parameters[name] = parameter
        elif kind == "query":
            query_parameters[name] = parameter
        else:
            header_parameters[name.lower()] = parameter

    if body is None and "requestBody" in operation:
        body = _parse_request_body(doc, operation["requestBody"], location.child("requestBody"), owner)

    responses = {}
    for status, response in (operation.get("responses") or {}).items():
        status = str(status)
        responses[status] = _parse_response(doc, status, response, location.child("responses", status), owner)

    return ParsedSpecOperation(
        value=operation,
        location=location,
        owner=owner,
        path_name=path_name,
        path_template=tuple(s for s in path_name.split("/") if s),
        method=owner.method,
        path_parameters=path_parameters,
        query_parameters=query_parameters,
        request_header_parameters=header_parameters,
        request_body_parameter=body,
        security_headers=_security_headers(doc, operation),
        responses=responses,
    )


def _collect_parameters(doc: dict, params: list | None, location: Location) -> dict:
    """Map (name, in) -> (resolved definition, location of the declaration)."""
    result = {}
    for index, param in enumerate(params or []):
        definition = _resolve_ref(doc, param)
        if not isinstance(definition, dict) or "name" not in definition:
            continue
        result[(definition["name"], definition.get("in", "query"))] = (definition, location.child(index))
    return result


def _parse_parameter(
    name: str, kind: str, definition: dict, location: Location, owner: SpecOwner
) -> ParsedSpecParameter:
    return ParsedSpecParameter(
        value=definition,
        location=location,
        owner=owner,
        name=name,
        required=kind == "path" or bool(definition.get("required", False)),
        collection_format=_collection_format(kind, definition),
        value_schema=_parameter_schema(definition),
    )


def _parameter_schema(definition: dict) -> dict:
    if isinstance(definition.get("schema"), dict):
        return definition["schema"]
    return {k: definition[k] for k in PARAMETER_SCHEMA_KEYS if k in definition}


def _collection_format(kind: str, definition: dict) -> str:
    if "collectionFormat" in definition:
        return definition["collectionFormat"]
    if "schema" not in definition:
        return "csv"
    # OpenAPI 3 style/explode
    style = definition.get("style", "form" if kind == "query" else "simple")
    if style == "spaceDelimited":
        return "ssv"
    if style == "pipeDelimited":
        return "pipes"
    if style == "form" and definition.get("explode", True):
        return "multi"
    return "csv"


def _parse_request_body(doc: dict, request_body, location: Location, owner: SpecOwner) -> ParsedSpecBody | None:
    request_body = _resolve_ref(doc, request_body)
    if not isinstance(request_body, dict):
        return None
    found = _media_schema(request_body.get("content"), location.child("content"))
    if found is None:
        return None
    schema, schema_location = found
    return ParsedSpecBody(
        value=schema,
        location=schema_location,
        owner=owner,
        required=bool(request_body.get("required", False)),
    )


def _parse_response(doc: dict, status: str, response, location: Location, owner: SpecOwner) -> ParsedSpecResponse:
    response = _resolve_ref(doc, response)
    if not isinstance(response, dict):
        response = {}

    headers = {}
    for header_name, header in (response.get("headers") or {}).items():
        header = _resolve_ref(doc, header)
        if not isinstance(header, dict):
            continue
        headers[header_name.lower()] = _parse_parameter(
            header_name, "header", header, location.child("headers", header_name), owner
        )

    body_schema = None
    if "schema" in response:
        body_schema = LocatedValue(value=response["schema"], location=location.child("schema"), owner=owner)
    else:
        found = _media_schema(response.get("content"), location.child("content"))
        if found is not None:
            body_schema = LocatedValue(value=found[0], location=found[1], owner=owner)

    return ParsedSpecResponse(
        value=response,
        location=location,
        owner=owner,
        status=status,
        headers=headers,
        body_schema=body_schema,
    )


def _media_schema(content, location: Location) -> tuple[dict, Location] | None:
    """Pick the JSON media type's schema, falling back to the first one declared."""
    if not isinstance(content, dict):
        return None
    candidates = [m for m in JSON_MEDIA_TYPES if m in content] + list(content)
    for media_type in candidates:
        media = content[media_type]
        if isinstance(media, dict) and "schema" in media:
            return media["schema"], location.child(media_type, "schema")
    return None


def _security_headers(doc: dict, operation: dict) -> frozenset[str]:
    requirements = operation.get("security", doc.get("security")) or []
    schemes = doc.get("securityDefinitions") or (doc.get("components") or {}).get("securitySchemes") or {}

    names = set()
    for requirement in requirements:
        for scheme_name in requirement or {}:
            scheme = schemes.get(scheme_name) or {}
            kind = scheme.get("type")
            if kind == "apiKey" and scheme.get("in") == "header" and "name" in scheme:
                names.add(scheme["name"].lower())
            elif kind in ("basic", "oauth2", "http", "openIdConnect"):
                names.add("authorization")
    return frozenset(names)


def _parse_base_path(doc: dict) -> str:
    base_path = doc.get("basePath")
    if base_path is None:
        servers = doc.get("servers") or []
        if servers and isinstance(servers[0], dict):
            base_path = urlparse(servers[0].get("url", "")).path
    return (base_path or "").rstrip("/")


def pointer_steps(ref) -> tuple[str, ...] | None:
    """Split a local `#/...` reference into unescaped keys; None for any other ref."""
    if not isinstance(ref, str) or not ref.startswith("#/"):
        return None
    return tuple(part.replace("~1", "/").replace("~0", "~") for part in ref[2:].split("/"))


def follow_pointer(doc: dict, steps: tuple[str, ...]):
    """Walk `steps` from the document root; returns MISSING when a key is absent."""
    target = doc
    for part in steps:
        if isinstance(target, list) and part.isdigit() and int(part) < len(target):
            target = target[int(part)]
        elif isinstance(target, dict) and part in target:
            target = target[part]
        else:
            return MISSING
    return target


def _resolve_ref(doc: dict, node, depth: int = 0):
    """Follow a local `#/...` reference; anything unresolvable is returned as-is."""
    if not isinstance(node, dict) or "$ref" not in node or depth > MAX_REF_DEPTH:
        return node
    steps = pointer_steps(node["$ref"])
    if steps is None:
        return node
    target = follow_pointer(doc, steps)
    if target is MISSING:
        return node
    return _resolve_ref(doc, target, depth + 1)
