"""Tests for the merge module."""

from cfgen.merge import is_reference, merge_into


def _accumulator():
    return {"type": "object", "properties": {}}


class TestMergeInto:
    """Test folding allOf members into one object schema."""

    def test_merge_precedence(self):
        """Later properties win; required is a first-seen union."""
        target = _accumulator()
        merge_into(target, {"properties": {"x": 1}, "required": ["a"]})
        merge_into(target, {"properties": {"x": 2}, "required": ["b"]})
        assert target["properties"] == {"x": 2}
        assert target["required"] == ["a", "b"]

    def test_required_no_duplicates(self):
        target = _accumulator()
        merge_into(target, {"required": ["id", "name"]})
        merge_into(target, {"required": ["name", "id", "status"]})
        assert target["required"] == ["id", "name", "status"]

    def test_other_keys_first_write_wins(self):
        target = _accumulator()
        merge_into(target, {"description": "first", "nullable": True})
        merge_into(target, {"description": "second", "title": "Zone"})
        assert target["description"] == "first"
        assert target["nullable"] is True
        assert target["title"] == "Zone"

    def test_accumulator_type_kept(self):
        target = _accumulator()
        merge_into(target, {"type": "string", "properties": {"a": {"type": "string"}}})
        assert target["type"] == "object"

    def test_reference_skipped(self):
        target = _accumulator()
        merge_into(target, {"$ref": "#/components/schemas/zone", "description": "ignored"})
        assert target == _accumulator()

    def test_non_mapping_skipped(self):
        target = _accumulator()
        merge_into(target, True)
        merge_into(target, ["not", "a", "schema"])
        assert target == _accumulator()

    def test_no_required_key_without_source_required(self):
        target = _accumulator()
        merge_into(target, {"properties": {"a": {"type": "string"}}})
        assert "required" not in target

    def test_values_are_copied(self):
        """Later in-place rewrites of the accumulator must not reach the source."""
        source = {"properties": {"a": {"type": "string", "enum": ["x"]}}}
        target = _accumulator()
        merge_into(target, source)
        target["properties"]["a"]["type"] = "integer"
        assert source["properties"]["a"]["type"] == "string"

    def test_key_order_is_merge_order(self):
        target = _accumulator()
        merge_into(target, {"properties": {"b": 1, "a": 2}})
        merge_into(target, {"properties": {"c": 3, "b": 4}})
        assert list(target["properties"]) == ["b", "a", "c"]


class TestIsReference:

    def test_ref(self):
        assert is_reference({"$ref": "#/components/schemas/zone"})

    def test_ref_with_siblings(self):
        assert is_reference({"$ref": "#/components/schemas/zone", "description": "x"})

    def test_not_ref(self):
        assert not is_reference({"type": "object"})
        assert not is_reference("$ref")
