"""JSON Schema validation adapter.

Wraps jsonschema's Draft 4 validator and reports failures as
{dataPath, schemaPath, message} in the vocabulary used by the rest of the
report, e.g. dataPath ".items[0].id", schemaPath "#/properties/items/items/type"
and message "should be integer".

Local `#/...` references resolve against the whole spec document, which is
registered as its own resource; the schema being checked never shadows it.
"""

import re

from jsonschema import Draft4Validator
from jsonschema.exceptions import ValidationError
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from referencing import Registry
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT4

from swagger_mock_validator.location import Step, format_steps

SPEC_URI = "https://swagger-mock-validator.invalid/spec.json"

_REQUIRED_PROPERTY = re.compile(r"^(.*) is a required property$")


class SchemaFailure(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    data_path: str
    schema_path: str
    message: str
    data_steps: tuple[Step, ...] = ()
    schema_steps: tuple[Step, ...] = ()


def validate_json(schema, value, document: dict | None = None) -> list[SchemaFailure]:
    """Validate `value` against `schema`; returns an empty list when valid.

    With a `document`, `#/...` refs point into it rather than into `schema`.
    A reference that cannot be resolved is reported as a failure, never raised.
    """
    if not isinstance(schema, dict):
        return []
    if document is None:
        validator = Draft4Validator(schema, format_checker=Draft4Validator.FORMAT_CHECKER)
    else:
        registry = Registry().with_resource(SPEC_URI, DRAFT4.create_resource(document))
        validator = Draft4Validator(
            _anchor_refs(schema),
            registry=registry,
            format_checker=Draft4Validator.FORMAT_CHECKER,
        )

    errors = []
    unresolved = None
    try:
        for error in validator.iter_errors(value):
            errors.append(error)
    except Unresolvable as exc:
        unresolved = _unresolved(exc)

    failures = [_to_failure(error) for error in sorted(errors, key=_sort_key)]
    if unresolved is not None:
        failures.append(unresolved)
    return failures


def _anchor_refs(node):
    """Copy a schema, pointing every local ref at the registered spec document."""
    if isinstance(node, dict):
        anchored = {key: _anchor_refs(item) for key, item in node.items()}
        ref = node.get("$ref")
        if isinstance(ref, str) and ref.startswith("#"):
            anchored["$ref"] = SPEC_URI + ref
        return anchored
    if isinstance(node, list):
        return [_anchor_refs(item) for item in node]
    return node


def _unresolved(exc: Unresolvable) -> SchemaFailure:
    ref = str(getattr(exc, "ref", "") or "")
    if ref.startswith(SPEC_URI):
        ref = ref[len(SPEC_URI):]
    elif ref.startswith("/"):
        ref = "#" + ref
    return SchemaFailure(data_path="", schema_path="#/", message=f"can't resolve reference {ref} from id #")


def _sort_key(error: ValidationError) -> tuple:
    # indices compare as numbers so items[2] sorts before items[10]
    return (
        tuple((isinstance(step, str), step) for step in error.absolute_path),
        tuple((isinstance(step, str), step) for step in error.absolute_schema_path),
    )


def _to_failure(error: ValidationError) -> SchemaFailure:
    data_steps = tuple(error.absolute_path)
    schema_steps = tuple(error.absolute_schema_path)
    return SchemaFailure(
        data_path=format_steps(data_steps),
        schema_path="#/" + "/".join(str(step) for step in schema_steps),
        message=_message(error),
        data_steps=data_steps,
        schema_steps=schema_steps,
    )


def _message(error: ValidationError) -> str:
    keyword = error.validator
    expected = error.validator_value
    schema = error.schema if isinstance(error.schema, dict) else {}

    if keyword == "type":
        return f"should be {expected if isinstance(expected, str) else ','.join(expected)}"
    if keyword == "required":
        match = _REQUIRED_PROPERTY.match(error.message)
        return f"should have required property {match.group(1) if match else expected}"
    if keyword == "enum":
        return "should be equal to one of the allowed values"
    if keyword == "minimum":
        return f"should be {'>' if schema.get('exclusiveMinimum') is True else '>='} {expected}"
    if keyword == "maximum":
        return f"should be {'<' if schema.get('exclusiveMaximum') is True else '<='} {expected}"
    if keyword == "minLength":
        return f"should NOT be shorter than {expected} characters"
    if keyword == "maxLength":
        return f"should NOT be longer than {expected} characters"
    if keyword == "pattern":
        return f'should match pattern "{expected}"'
    if keyword == "format":
        return f'should match format "{expected}"'
    if keyword == "additionalProperties":
        return "should NOT have additional properties"
    if keyword == "minItems":
        return f"should NOT have less than {expected} items"
    if keyword == "maxItems":
        return f"should NOT have more than {expected} items"
    if keyword == "uniqueItems":
        return "should NOT have duplicate items"
    if keyword == "multipleOf":
        return f"should be multiple of {expected}"
    if keyword == "minProperties":
        return f"should NOT have less than {expected} properties"
    if keyword == "maxProperties":
        return f"should NOT have more than {expected} properties"
    if keyword == "anyOf":
        return "should match some schema in anyOf"
    if keyword == "oneOf":
        return "should match exactly one schema in oneOf"
    if keyword == "not":
        return "should NOT be valid"
    return error.message
