"""Request and response header validation.

Header names compare case-insensitively. Content-Type is never reported;
content negotiation is outside what the parameter definitions describe.
"""

from swagger_mock_validator.location import LocatedValue
from swagger_mock_validator.parser.base import ParsedSpecParameter

from .parameters import incompatible_parameter, validate_parameter
from .results import ValidationResult, error, warning

CONTENT_TYPE = "content-type"

STANDARD_HTTP_HEADERS = frozenset({
    # request
    "accept", "accept-charset", "accept-datetime", "accept-encoding", "accept-language",
    "authorization", "cookie", "dnt", "expect", "forwarded", "from", "front-end-https",
    "host", "if-match", "if-modified-since", "if-none-match", "if-range",
    "if-unmodified-since", "max-forwards", "origin", "proxy-authorization",
    "proxy-connection", "range", "referer", "te", "user-agent", "x-att-deviceid",
    "x-correlation-id", "x-csrf-token", "x-forwarded-for", "x-forwarded-host",
    "x-forwarded-proto", "x-http-method-override", "x-request-id", "x-requested-with",
    "x-uidh", "x-wap-profile",
    # response
    "accept-patch", "accept-ranges", "access-control-allow-origin", "age", "allow",
    "alt-svc", "content-disposition", "content-encoding", "content-language",
    "content-location", "content-range", "content-security-policy", "etag", "expires",
    "last-modified", "link", "location", "p3p", "proxy-authenticate", "public-key-pins",
    "refresh", "retry-after", "server", "set-cookie", "status", "strict-transport-security",
    "trailer", "transfer-encoding", "tsv", "vary", "www-authenticate",
    "x-content-duration", "x-content-type-options", "x-frame-options", "x-powered-by",
    "x-ua-compatible", "x-xss-protection",
    # both
    "cache-control", "connection", "content-length", "content-md5", "content-type", "date",
    "pragma", "upgrade", "via", "warning",
})


def is_standard_header(name: str) -> bool:
    return name.lower() in STANDARD_HTTP_HEADERS


def validate_headers(
    mock_headers: dict[str, LocatedValue],
    spec_headers: dict[str, ParsedSpecParameter],
    *,
    kind: str,
    spec_anchor: LocatedValue,
    implied: frozenset[str] = frozenset(),
    document: dict | None = None,
) -> list[ValidationResult]:
    """Validate mock headers against their declarations.

    kind is "request" or "response". spec_anchor is cited for headers the
    spec does not declare; implied holds lower-cased names that count as
    declared without a definition (e.g. security headers).
    """
    results = []
    for name, header in mock_headers.items():
        key = name.lower()
        if key == CONTENT_TYPE:
            continue

        parameter = spec_headers.get(key)
        if parameter is None:
            if key in implied:
                continue
            if is_standard_header(key):
                results.append(warning(
                    f"spv.{kind}.header.unknown",
                    f"Standard http {kind} header is not defined in the swagger file: {key}",
                    header,
                    spec_anchor,
                ))
            else:
                results.append(error(
                    f"spv.{kind}.header.unknown",
                    f"{kind.capitalize()} header is not defined in the swagger file: {name}",
                    header,
                    spec_anchor,
                ))
            continue

        if parameter.value_schema.get("type") == "array":
            results.append(warning(
                f"spv.{kind}.header.unsupported",
                f"Validating parameters of type \"array\" are not supported, assuming value is valid: {name}",
                header,
                parameter,
            ))
            continue

        failures = validate_parameter(header, parameter, document)
        if failures:
            results.append(incompatible_parameter(f"spv.{kind}.header.incompatible", header, parameter, failures[0]))
    return results
