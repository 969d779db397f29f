import pytest

from support import MOCK_FILE, SPEC_FILE, interaction, operation, pact, response, run, swagger

NUMBER_HEADER = {"type": "number"}


def _validate_response_headers(spec_response: dict | None, mock_headers: dict | None):
    spec_response = spec_response if spec_response is not None else response()
    spec_json = swagger({"/does/exist": {"get": operation(responses={"200": spec_response})}})
    return run(spec_json, pact(interaction(response_headers=mock_headers)))


class TestResponseHeaders:
    def test_pass_when_header_matches(self):
        errors, warnings = _validate_response_headers(
            response(headers={"x-custom-header": NUMBER_HEADER}), {"x-custom-header": "1"}
        )
        assert errors == []
        assert warnings == []

    def test_error_when_header_does_not_match(self):
        errors, warnings = _validate_response_headers(
            response(headers={"x-custom-header": NUMBER_HEADER}), {"x-custom-header": "not-a-number"}
        )
        assert warnings == []
        assert errors == [{
            "code": "spv.response.header.incompatible",
            "message": "Value is incompatible with the parameter defined in the swagger file: should be number",
            "mockDetails": {
                "interactionDescription": "interaction description",
                "interactionState": "[none]",
                "location": "[pactRoot].interactions[0].response.headers.x-custom-header",
                "mockFile": MOCK_FILE,
                "value": "not-a-number",
            },
            "source": "swagger-mock-validation",
            "specDetails": {
                "location": "[swaggerRoot].paths./does/exist.get.responses.200.headers.x-custom-header",
                "pathMethod": "get",
                "pathName": "/does/exist",
                "specFile": SPEC_FILE,
                "value": NUMBER_HEADER,
            },
            "type": "error",
        }]

    def test_warning_when_header_is_an_array(self):
        array_header = {"type": "array", "items": {"type": "number"}}
        errors, warnings = _validate_response_headers(
            response(headers={"x-custom-header": array_header}), {"x-custom-header": "1,2,3"}
        )
        assert errors == []
        assert len(warnings) == 1
        assert warnings[0]["message"] == (
            'Validating parameters of type "array" are not supported, assuming value is valid: x-custom-header'
        )
        assert warnings[0]["mockDetails"]["location"] == "[pactRoot].interactions[0].response.headers.x-custom-header"
        assert warnings[0]["specDetails"]["value"] == array_header

    def test_pass_when_declared_header_is_missing_from_mock(self):
        errors, warnings = _validate_response_headers(response(headers={"x-custom-header": NUMBER_HEADER}), None)
        assert errors == []
        assert warnings == []

    def test_error_when_header_is_not_in_spec(self):
        errors, warnings = _validate_response_headers(None, {"x-custom-header": "value"})
        assert warnings == []
        assert len(errors) == 1
        assert errors[0]["message"] == "Response header is not defined in the swagger file: x-custom-header"
        assert errors[0]["specDetails"]["location"] == "[swaggerRoot].paths./does/exist.get.responses.200"
        assert errors[0]["specDetails"]["value"] == response()

    @pytest.mark.parametrize("name,value", [
        ("Age", "12"),
        ("ETag", '"737060cd8c284d8af7ad3082f209582d"'),
        ("Cache-Control", "max-age=3600"),
        ("Set-Cookie", "UserID=JohnDoe; Max-Age=3600; Version=1"),
        ("Vary", "*"),
        ("X-Frame-Options", "deny"),
    ])
    def test_warning_when_undeclared_header_is_standard(self, name, value):
        errors, warnings = _validate_response_headers(None, {name: value})
        assert errors == []
        assert len(warnings) == 1
        assert warnings[0]["code"] == "spv.response.header.unknown"
        assert warnings[0]["message"] == (
            f"Standard http response header is not defined in the swagger file: {name.lower()}"
        )
        assert warnings[0]["mockDetails"]["location"] == f"[pactRoot].interactions[0].response.headers.{name}"

    def test_content_type_is_never_reported(self):
        errors, warnings = _validate_response_headers(None, {"Content-Type": "application/json"})
        assert errors == []
        assert warnings == []

    def test_content_type_is_ignored_even_when_declared(self):
        errors, warnings = _validate_response_headers(
            response(headers={"Content-Type": NUMBER_HEADER}), {"content-type": "application/json"}
        )
        assert errors == []
        assert warnings == []

    def test_header_names_are_case_insensitive(self):
        errors, warnings = _validate_response_headers(
            response(headers={"X-custom-header": NUMBER_HEADER}),
            {"content-Type": "application/json", "X-Custom-Header": "1"},
        )
        assert errors == []
        assert warnings == []

    def test_case_folding_does_not_change_failures(self):
        lower, _ = _validate_response_headers(
            response(headers={"x-custom-header": NUMBER_HEADER}), {"x-custom-header": "nope"}
        )
        mixed, _ = _validate_response_headers(
            response(headers={"x-custom-header": NUMBER_HEADER}), {"X-Custom-Header": "nope"}
        )
        assert [e["message"] for e in lower] == [e["message"] for e in mixed]

    def test_default_response_headers_are_validated(self):
        spec_json = swagger({"/does/exist": {"get": operation(responses={
            "default": response(headers={"x-custom-header": NUMBER_HEADER}),
        })}})
        errors, _ = run(spec_json, pact(interaction(status=201, response_headers={"x-custom-header": "not-a-number"})))
        assert len(errors) == 1
        assert errors[0]["specDetails"]["location"] == (
            "[swaggerRoot].paths./does/exist.get.responses.default.headers.x-custom-header"
        )
