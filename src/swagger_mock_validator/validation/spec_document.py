"""Reports from the structural validator of the spec document itself.

Checking a spec against the Swagger/OpenAPI meta-schema is done by an
external checker; this module only defines the report it must return and
turns that report into results with source "swagger-validation".
"""

from typing import Callable

from pydantic import BaseModel

from swagger_mock_validator.errors import SpecValidationError
from swagger_mock_validator.location import PACT_ROOT, SWAGGER_ROOT, Location

from .results import SPEC_VALIDATION_SOURCE, MockDetails, SpecDetails, ValidationResult


class SpecIssue(BaseModel):
    message: str
    path: list[str | int] = []


class SpecCheckReport(BaseModel):
    errors: list[SpecIssue] = []
    warnings: list[SpecIssue] = []


SpecChecker = Callable[[dict], SpecCheckReport]


def check_spec_document(
    spec_json: dict, spec_path_or_url: str, mock_path_or_url: str, checker: SpecChecker
) -> list[ValidationResult]:
    """Run `checker` on the spec; raise on errors, otherwise return its warnings."""
    report = checker(spec_json)
    errors = [_issue_result(i, "error", spec_path_or_url, mock_path_or_url) for i in report.errors]
    warnings = [_issue_result(i, "warning", spec_path_or_url, mock_path_or_url) for i in report.warnings]

    if errors:
        raise SpecValidationError(
            f'"{spec_path_or_url}" is not a valid swagger file',
            details={
                "errors": [r.as_dict() for r in errors],
                "warnings": [r.as_dict() for r in warnings],
            },
        )
    return warnings


def _issue_result(issue: SpecIssue, kind: str, spec_path_or_url: str, mock_path_or_url: str) -> ValidationResult:
    location = Location(root=SWAGGER_ROOT, steps=tuple(str(step) for step in issue.path))
    return ValidationResult(
        code=f"sv.{kind}",
        message=issue.message,
        mock_details=MockDetails(location=PACT_ROOT, mock_file=mock_path_or_url),
        source=SPEC_VALIDATION_SOURCE,
        spec_details=SpecDetails(location=str(location), spec_file=spec_path_or_url),
        type=kind,
    )
