"""Exceptions raised by the validator.

Parse failures are fatal and stop the run. Compatibility problems are
collected as ValidationResults and only surface as an exception once the
whole mock has been evaluated.
"""


class SwaggerMockValidatorError(Exception):
    """Base class; `details` holds the serialized errors and warnings, if any."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class MalformedDocumentError(SwaggerMockValidatorError):
    """A document is missing fields required to parse it at all."""


class MalformedSpecDocument(MalformedDocumentError):
    pass


class MalformedMockDocument(MalformedDocumentError):
    pass


class SpecValidationError(SwaggerMockValidatorError):
    """The spec document itself failed structural validation."""


class MockIncompatibleError(SwaggerMockValidatorError):
    """At least one interaction is incompatible with the spec."""
