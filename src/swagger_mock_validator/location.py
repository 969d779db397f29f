"""Structured document locations and located values.

Every datum pulled out of a spec or mock document is wrapped in a
LocatedValue so diagnostics can cite exactly where it came from:

    [swaggerRoot].paths./users/{id}.get.responses.200.headers.x-rate
    [pactRoot].interactions[0].response.body.items[2].id
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

PACT_ROOT = "[pactRoot]"
SWAGGER_ROOT = "[swaggerRoot]"

Step = str | int


class Location(BaseModel):
    """A root label plus the keys and indices walked to reach a value."""

    model_config = ConfigDict(frozen=True)

    root: str
    steps: tuple[Step, ...] = ()

    def child(self, *steps: Step) -> "Location":
        return Location(root=self.root, steps=self.steps + tuple(steps))

    def __str__(self) -> str:
        return self.root + format_steps(self.steps)


def format_steps(steps: tuple[Step, ...] | list[Step]) -> str:
    """Render steps as `.key` for fields and `[i]` for array indices."""
    parts = []
    for step in steps:
        if isinstance(step, int):
            parts.append(f"[{step}]")
        else:
            parts.append(f".{step}")
    return "".join(parts)


class MockOwner(BaseModel):
    """Identifies the interaction a mock value belongs to."""

    model_config = ConfigDict(frozen=True)

    mock_file: str
    description: str
    state: str


class SpecOwner(BaseModel):
    """Identifies the spec file, and operation if any, a spec value belongs to."""

    model_config = ConfigDict(frozen=True)

    spec_file: str
    path_name: str | None = None
    method: str | None = None


class LocatedValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: Any = None
    location: Location
    owner: MockOwner | SpecOwner


def locate_in_body(body: LocatedValue, steps: tuple[Step, ...] | list[Step]) -> LocatedValue:
    """Walk `steps` into a parsed body and return the nested value.

    The location always reflects the full path requested, even when the
    walk runs off the end of the document (e.g. a missing required
    property), in which case the value is None.
    """
    value = body.value
    for step in steps:
        if isinstance(step, int) and isinstance(value, list) and 0 <= step < len(value):
            value = value[step]
        elif isinstance(step, str) and isinstance(value, dict):
            value = value.get(step)
        else:
            value = None
    return LocatedValue(value=value, location=body.location.child(*steps), owner=body.owner)
