from swagger_mock_validator.location import (
    PACT_ROOT,
    SWAGGER_ROOT,
    LocatedValue,
    Location,
    MockOwner,
    format_steps,
    locate_in_body,
)

OWNER = MockOwner(mock_file="pact.json", description="d", state="[none]")


class TestLocation:
    def test_root_only(self):
        assert str(Location(root=SWAGGER_ROOT)) == "[swaggerRoot]"

    def test_fields_and_indices(self):
        location = Location(root=PACT_ROOT).child("interactions", 0).child("response", "headers", "x-custom-header")
        assert str(location) == "[pactRoot].interactions[0].response.headers.x-custom-header"

    def test_path_names_keep_their_slashes(self):
        location = Location(root=SWAGGER_ROOT).child("paths", "/users/{id}", "get", "responses", "200")
        assert str(location) == "[swaggerRoot].paths./users/{id}.get.responses.200"

    def test_child_does_not_modify_parent(self):
        parent = Location(root=PACT_ROOT, steps=("interactions",))
        parent.child(1)
        assert parent.steps == ("interactions",)

    def test_format_steps(self):
        assert format_steps(["items", 2, "id"]) == ".items[2].id"
        assert format_steps([]) == ""


class TestLocateInBody:
    def _body(self, value):
        location = Location(root=PACT_ROOT, steps=("interactions", 0, "request", "body"))
        return LocatedValue(value=value, location=location, owner=OWNER)

    def test_nested_field(self):
        found = locate_in_body(self._body({"items": [{"id": 7}]}), ("items", 0, "id"))
        assert found.value == 7
        assert str(found.location) == "[pactRoot].interactions[0].request.body.items[0].id"
        assert found.owner == OWNER

    def test_empty_path_returns_whole_body(self):
        found = locate_in_body(self._body({"a": 1}), ())
        assert found.value == {"a": 1}
        assert str(found.location) == "[pactRoot].interactions[0].request.body"

    def test_missing_field_keeps_location(self):
        found = locate_in_body(self._body({"a": 1}), ("b", "c"))
        assert found.value is None
        assert str(found.location) == "[pactRoot].interactions[0].request.body.b.c"
