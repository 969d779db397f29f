import json
from pathlib import Path

import pytest
import yaml

from swagger_mock_validator.config import ValidatorOptions
from swagger_mock_validator.errors import (
    MalformedMockDocument,
    MalformedSpecDocument,
    MockIncompatibleError,
    SpecValidationError,
)
from swagger_mock_validator.validation.spec_document import SpecCheckReport, SpecIssue
from swagger_mock_validator.validator import validate

from support import MOCK_FILE, SPEC_FILE, interaction, operation, pact, response, run, swagger

FIXTURES = Path(__file__).parent / "fixtures"

NUMBER_HEADER_SPEC = swagger({"/does/exist": {"get": operation(responses={
    "200": response(headers={"x-custom-header": {"type": "number"}}),
})}})


class TestValidate:
    def test_petstore_fixture_is_compatible(self):
        spec_json = yaml.safe_load((FIXTURES / "petstore.yaml").read_text(encoding="utf-8"))
        mock_json = json.loads((FIXTURES / "petstore-pact.json").read_text(encoding="utf-8"))
        outcome = validate(spec_json, "petstore.yaml", mock_json, "petstore-pact.json")
        assert outcome.success
        assert outcome.warnings == []

    def test_petstore_fixture_incompatible(self):
        spec_json = yaml.safe_load((FIXTURES / "petstore.yaml").read_text(encoding="utf-8"))
        mock_json = json.loads((FIXTURES / "petstore-pact-broken.json").read_text(encoding="utf-8"))
        with pytest.raises(MockIncompatibleError) as exc_info:
            validate(spec_json, "petstore.yaml", mock_json, "petstore-pact-broken.json")
        assert str(exc_info.value) == '"petstore-pact-broken.json" is not compatible with "petstore.yaml"'
        [error] = exc_info.value.details["errors"]
        assert error["mockDetails"]["location"] == "[pactRoot].interactions[0].response.body.id"

    def test_success_carries_warnings(self):
        outcome = validate(NUMBER_HEADER_SPEC, SPEC_FILE, pact(interaction(response_headers={"Age": "12"})), MOCK_FILE)
        assert outcome.success
        assert [w.code for w in outcome.warnings] == ["spv.response.header.unknown"]
        assert outcome.errors == []

    def test_rejection_carries_errors_and_warnings(self):
        mock_json = pact(interaction(response_headers={"Age": "12", "x-custom-header": "not-a-number"}))
        errors, warnings = run(NUMBER_HEADER_SPEC, mock_json)
        assert len(errors) == 1
        assert len(warnings) == 1

    def test_every_interaction_is_evaluated(self):
        mock_json = pact(
            interaction(path="/nope", description="first"),
            interaction(response_headers={"x-custom-header": "bad"}, description="second"),
            interaction(status=500, description="third"),
        )
        errors, _ = run(NUMBER_HEADER_SPEC, mock_json)
        assert [e["mockDetails"]["interactionDescription"] for e in errors] == ["first", "second", "third"]

    def test_parallel_run_keeps_order(self):
        mock_json = pact(*[
            interaction(response_headers={"x-custom-header": "bad"}, description=f"interaction {i}")
            for i in range(12)
        ])
        sequential, _ = run(NUMBER_HEADER_SPEC, mock_json)
        parallel, _ = run(NUMBER_HEADER_SPEC, mock_json, options=ValidatorOptions(max_workers=4))
        assert parallel == sequential
        assert [e["mockDetails"]["location"] for e in parallel] == [
            f"[pactRoot].interactions[{i}].response.headers.x-custom-header" for i in range(12)
        ]

    def test_provider_state_is_reported(self):
        errors, _ = run(NUMBER_HEADER_SPEC, pact(interaction(path="/nope", state="user exists")))
        assert errors[0]["mockDetails"]["interactionState"] == "user exists"

    def test_malformed_spec(self):
        with pytest.raises(MalformedSpecDocument):
            validate({"swagger": "2.0"}, SPEC_FILE, pact(interaction()), MOCK_FILE)

    def test_malformed_mock(self):
        with pytest.raises(MalformedMockDocument):
            validate(NUMBER_HEADER_SPEC, SPEC_FILE, {"consumer": {}}, MOCK_FILE)

    def test_invalid_options(self):
        with pytest.raises(ValueError):
            ValidatorOptions(max_workers=0)


class TestSpecChecker:
    def test_errors_reject_the_spec(self):
        def checker(spec_json):
            return SpecCheckReport(
                errors=[SpecIssue(message="Missing required property: info", path=[])],
                warnings=[SpecIssue(message="Unused definition", path=["definitions", "Thing"])],
            )

        with pytest.raises(SpecValidationError) as exc_info:
            validate(NUMBER_HEADER_SPEC, SPEC_FILE, pact(interaction()), MOCK_FILE, spec_checker=checker)

        assert str(exc_info.value) == '"swagger.json" is not a valid swagger file'
        [error] = exc_info.value.details["errors"]
        assert error == {
            "code": "sv.error",
            "message": "Missing required property: info",
            "mockDetails": {
                "interactionDescription": None,
                "interactionState": None,
                "location": "[pactRoot]",
                "mockFile": MOCK_FILE,
                "value": None,
            },
            "source": "swagger-validation",
            "specDetails": {
                "location": "[swaggerRoot]",
                "pathMethod": None,
                "pathName": None,
                "specFile": SPEC_FILE,
                "value": None,
            },
            "type": "error",
        }
        [warning] = exc_info.value.details["warnings"]
        assert warning["specDetails"]["location"] == "[swaggerRoot].definitions.Thing"

    def test_warnings_are_prepended(self):
        def checker(spec_json):
            return SpecCheckReport(warnings=[SpecIssue(message="Unused definition", path=["definitions", "Thing"])])

        outcome = validate(
            NUMBER_HEADER_SPEC, SPEC_FILE, pact(interaction(response_headers={"Age": "1"})), MOCK_FILE,
            spec_checker=checker,
        )
        assert [w.code for w in outcome.warnings] == ["sv.warning", "spv.response.header.unknown"]
