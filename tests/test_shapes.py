import pytest

from strategy_engine.shapes import BOOLEAN, INTEGER, NUMBER, STRING, STRING_LIST, ShapeDescriptor, arr, obj, requiring

REPORT = requiring(
    obj(
        title=STRING,
        score=NUMBER,
        count=INTEGER,
        passes=BOOLEAN,
        tags=STRING_LIST,
        items=arr(obj(name=STRING, weight=NUMBER)),
    ),
    "title",
)


def test_conforming_value_has_no_issues():
    value = {
        "title": "t",
        "score": 1.5,
        "count": 3,
        "passes": False,
        "tags": ["a"],
        "items": [{"name": "x", "weight": 2}],
        "extra": {"anything": True},
    }
    assert REPORT.conformance_issues(value) == []


def test_null_counts_as_absent():
    assert REPORT.conformance_issues({"title": "t", "score": None, "items": None}) == []
    assert REPORT.conformance_issues({"title": None}) == ["$.title: required field missing"]


def test_type_mismatches_carry_paths():
    issues = REPORT.conformance_issues(
        {"title": "t", "score": True, "count": 1.5, "items": [{"name": "ok"}, {"name": 3}], "tags": "a"}
    )
    assert issues == [
        "$.score: expected number, got boolean",
        "$.count: expected integer, got number",
        "$.tags: expected array, got string",
        "$.items[1].name: expected string, got number",
    ]


def test_top_level_kind_mismatch():
    assert arr(STRING).conformance_issues({"a": 1}) == ["$: expected array, got object"]


def test_gemini_rendering_uses_upper_case_types():
    rendered = REPORT.to_gemini()
    assert rendered["type"] == "OBJECT"
    assert rendered["required"] == ["title"]
    assert rendered["properties"]["tags"] == {"type": "ARRAY", "items": {"type": "STRING"}}
    assert list(rendered["properties"]) == ["title", "score", "count", "passes", "tags", "items"]


def test_json_schema_rendering():
    assert obj(a=arr(INTEGER)).to_json_schema() == {
        "type": "object",
        "properties": {"a": {"type": "array", "items": {"type": "integer"}}},
    }


def test_with_field_replaces_and_appends():
    shape = obj(a=STRING, b=STRING).with_field("a", NUMBER).with_field("c", BOOLEAN)
    assert shape.field_names == ["b", "a", "c"]
    assert shape.field("a") is NUMBER


def test_invalid_descriptors_are_rejected():
    with pytest.raises(ValueError):
        ShapeDescriptor("array")
    with pytest.raises(ValueError):
        ShapeDescriptor("date")
    with pytest.raises(ValueError):
        requiring(obj(a=STRING), "b")
    with pytest.raises(ValueError):
        STRING.with_field("a", STRING)
