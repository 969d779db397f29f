"""Entry point: validate a mock document against a spec document."""

import logging
from concurrent.futures import ThreadPoolExecutor

from swagger_mock_validator.config import ValidatorOptions
from swagger_mock_validator.errors import MockIncompatibleError
from swagger_mock_validator.parser.base import ParsedMock, ParsedSpec
from swagger_mock_validator.parser.pact import parse_mock
from swagger_mock_validator.parser.swagger import parse_spec
from swagger_mock_validator.validation.interaction import validate_interaction
from swagger_mock_validator.validation.results import ValidationOutcome, ValidationResult
from swagger_mock_validator.validation.spec_document import SpecChecker, check_spec_document

logger = logging.getLogger(__name__)


def validate_swagger_and_mock(
    spec: ParsedSpec, mock: ParsedMock, options: ValidatorOptions | None = None
) -> ValidationOutcome:
    """Validate every interaction and collect the results in interaction order."""
    options = options or ValidatorOptions()

    def run(interaction) -> list[ValidationResult]:
        return validate_interaction(interaction, spec)

    if options.max_workers > 1 and len(mock.interactions) > 1:
        with ThreadPoolExecutor(max_workers=options.max_workers) as executor:
            batches = list(executor.map(run, mock.interactions))
    else:
        batches = [run(interaction) for interaction in mock.interactions]

    return ValidationOutcome.from_results([result for batch in batches for result in batch])


def validate(
    spec_json: dict,
    spec_path_or_url: str,
    mock_json: dict,
    mock_path_or_url: str,
    options: ValidatorOptions | None = None,
    spec_checker: SpecChecker | None = None,
) -> ValidationOutcome:
    """Validate a mock against a spec.

    Returns the outcome (warnings only) when compatible. Raises
    MockIncompatibleError carrying all errors and warnings otherwise;
    malformed documents raise before any interaction is checked.
    """
    spec_warnings = []
    if spec_checker is not None:
        spec_warnings = check_spec_document(spec_json, spec_path_or_url, mock_path_or_url, spec_checker)

    spec = parse_spec(spec_json, spec_path_or_url)
    mock = parse_mock(mock_json, mock_path_or_url)

    outcome = validate_swagger_and_mock(spec, mock, options)
    outcome = ValidationOutcome(errors=outcome.errors, warnings=spec_warnings + outcome.warnings)

    logger.info(
        "Validated %d interactions from %s: %d errors, %d warnings",
        len(mock.interactions), mock_path_or_url, len(outcome.errors), len(outcome.warnings),
    )

    if not outcome.success:
        raise MockIncompatibleError(
            f'"{mock_path_or_url}" is not compatible with "{spec_path_or_url}"',
            details=outcome.as_dict(),
        )
    return outcome
