"""Validation results and the run outcome.

ValidationResult serializes (via as_dict) to the report format consumed by
surrounding tooling, so field aliases here must not change.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from swagger_mock_validator.location import LocatedValue, MockOwner, SpecOwner

CROSS_VALIDATION_SOURCE = "swagger-mock-validation"
SPEC_VALIDATION_SOURCE = "swagger-validation"


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class MockDetails(_WireModel):
    interaction_description: str | None = None
    interaction_state: str | None = None
    location: str
    mock_file: str
    value: Any = None


class SpecDetails(_WireModel):
    location: str
    path_method: str | None = None
    path_name: str | None = None
    spec_file: str
    value: Any = None


class ValidationResult(_WireModel):
    code: str
    message: str
    mock_details: MockDetails
    source: str
    spec_details: SpecDetails
    type: Literal["error", "warning"]

    def as_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class ValidationOutcome(BaseModel):
    """All errors and warnings of a run, in evaluation order."""

    errors: list[ValidationResult] = []
    warnings: list[ValidationResult] = []

    @property
    def success(self) -> bool:
        return not self.errors

    @classmethod
    def from_results(cls, results: list[ValidationResult]) -> "ValidationOutcome":
        return cls(
            errors=[r for r in results if r.type == "error"],
            warnings=[r for r in results if r.type == "warning"],
        )

    def as_dict(self) -> dict:
        return {
            "errors": [r.as_dict() for r in self.errors],
            "warnings": [r.as_dict() for r in self.warnings],
        }


def error(code: str, message: str, mock_segment: LocatedValue, spec_segment: LocatedValue) -> ValidationResult:
    return _result("error", code, message, mock_segment, spec_segment)


def warning(code: str, message: str, mock_segment: LocatedValue, spec_segment: LocatedValue) -> ValidationResult:
    return _result("warning", code, message, mock_segment, spec_segment)


def _result(
    kind: str, code: str, message: str, mock_segment: LocatedValue, spec_segment: LocatedValue
) -> ValidationResult:
    mock_owner: MockOwner = mock_segment.owner
    spec_owner: SpecOwner = spec_segment.owner
    return ValidationResult(
        code=code,
        message=message,
        mock_details=MockDetails(
            interaction_description=mock_owner.description,
            interaction_state=mock_owner.state,
            location=str(mock_segment.location),
            mock_file=mock_owner.mock_file,
            value=mock_segment.value,
        ),
        source=CROSS_VALIDATION_SOURCE,
        spec_details=SpecDetails(
            location=str(spec_segment.location),
            path_method=spec_owner.method,
            path_name=spec_owner.path_name,
            spec_file=spec_owner.spec_file,
            value=spec_segment.value,
        ),
        type=kind,
    )
