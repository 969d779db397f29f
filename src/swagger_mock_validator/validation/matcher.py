"""Matches a mock interaction to the spec operation it exercises.

Template segments match case-insensitively; `{name}` placeholders match
any segment text. When several operations match, the one with the fewest
placeholder segments wins:

    GET /users/me   matches  /users/me  over  /users/{id}
"""

import re
from functools import lru_cache
from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict

from swagger_mock_validator.location import LocatedValue
from swagger_mock_validator.parser.base import ParsedMockInteraction, ParsedSpec, ParsedSpecOperation

from .results import ValidationResult, error

_PLACEHOLDER = re.compile(r"\{([^{}/]+)\}")


class OperationMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    operation: ParsedSpecOperation | None = None
    path_values: dict[str, LocatedValue] = {}  # placeholder name -> captured segment text
    results: tuple[ValidationResult, ...] = ()


@lru_cache(maxsize=1024)
def _compile_segment(segment: str) -> tuple[re.Pattern, tuple[str, ...]]:
    names = []
    pattern = []
    position = 0
    for match in _PLACEHOLDER.finditer(segment):
        pattern.append(re.escape(segment[position:match.start()]))
        pattern.append("(.+?)")
        names.append(match.group(1))
        position = match.end()
    pattern.append(re.escape(segment[position:]))
    return re.compile("".join(pattern), re.IGNORECASE), tuple(names)


def _placeholder_count(operation: ParsedSpecOperation) -> int:
    return sum(1 for segment in operation.path_template if _PLACEHOLDER.search(segment))


def _match_segments(
    template: tuple[str, ...], segments: tuple[LocatedValue, ...]
) -> dict[str, LocatedValue] | None:
    values = {}
    for template_segment, segment in zip(template, segments):
        text = unquote(str(segment.value))
        pattern, names = _compile_segment(template_segment)
        found = pattern.fullmatch(text)
        if found is None:
            return None
        for index, name in enumerate(names):
            values[name] = LocatedValue(value=found.group(index + 1), location=segment.location, owner=segment.owner)
    return values


def _strip_base_path(segments: tuple[LocatedValue, ...], base_path: str) -> tuple[LocatedValue, ...]:
    base = [s for s in base_path.split("/") if s]
    if base and [s.value for s in segments[:len(base)]] == base:
        return segments[len(base):]
    return segments


def match_operation(interaction: ParsedMockInteraction, spec: ParsedSpec) -> OperationMatch:
    segments = _strip_base_path(interaction.request_path_segments, spec.base_path)
    method = interaction.request_method.value

    candidates = []
    for operation in spec.operations:
        if operation.method != method or len(operation.path_template) != len(segments):
            continue
        values = _match_segments(operation.path_template, segments)
        if values is not None:
            candidates.append((_placeholder_count(operation), operation, values))

    if not candidates:
        return OperationMatch(results=(error(
            "spv.request.path-or-method.unknown",
            f"Path or method not defined in swagger file: {method.upper()} {interaction.request_path.value}",
            interaction.request_path,
            spec.paths,
        ),))

    candidates.sort(key=lambda candidate: candidate[0])
    best_count, best, values = candidates[0]
    tied = [operation for count, operation, _ in candidates[1:] if count == best_count]
    if tied:
        locations = ", ".join(str(operation.location) for operation in [best] + tied)
        return OperationMatch(results=(error(
            "spv.request.path-or-method.ambiguous",
            f"Path or method matches more than one operation in swagger file: {locations}",
            interaction.request_path,
            best,
        ),))

    return OperationMatch(operation=best, path_values=values)
