"""Declarative response shapes.

A ShapeDescriptor describes the JSON a report is expected to contain. It is
passed to the provider as a structured-output hint and can optionally be used
to check a decoded value after the fact.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

OBJECT = "object"
ARRAY = "array"
PRIMITIVE_KINDS = ("string", "number", "integer", "boolean")


@dataclass(frozen=True)
class ShapeDescriptor:
    kind: str
    properties: Tuple[Tuple[str, "ShapeDescriptor"], ...] = ()
    items: Optional["ShapeDescriptor"] = None
    required: Tuple[str, ...] = ()
    description: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in (OBJECT, ARRAY) + PRIMITIVE_KINDS:
            raise ValueError(f"Unknown shape kind: {self.kind}")
        if self.kind == ARRAY and self.items is None:
            raise ValueError("Array shapes need an item shape")
        names = {name for name, _ in self.properties}
        missing = [name for name in self.required if name not in names]
        if missing:
            raise ValueError(f"Required fields not declared: {', '.join(missing)}")

    @property
    def field_names(self) -> List[str]:
        return [name for name, _ in self.properties]

    def field(self, name: str) -> "ShapeDescriptor":
        for field_name, shape in self.properties:
            if field_name == name:
                return shape
        raise KeyError(name)

    def with_field(self, name: str, shape: "ShapeDescriptor") -> "ShapeDescriptor":
        """Returns a copy of an object shape with one more (or a replaced) field."""
        if self.kind != OBJECT:
            raise ValueError("Only object shapes have fields")
        kept = tuple((n, s) for n, s in self.properties if n != name)
        return ShapeDescriptor(
            kind=OBJECT,
            properties=kept + ((name, shape),),
            required=self.required,
            description=self.description,
        )

    def to_gemini(self) -> Dict[str, Any]:
        """Renders the Gemini responseSchema dialect (upper-case type names)."""
        schema: Dict[str, Any] = {"type": self.kind.upper()}
        if self.description:
            schema["description"] = self.description
        if self.kind == OBJECT:
            schema["properties"] = {name: shape.to_gemini() for name, shape in self.properties}
            if self.required:
                schema["required"] = list(self.required)
        elif self.kind == ARRAY:
            schema["items"] = self.items.to_gemini()
        return schema

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.kind}
        if self.description:
            schema["description"] = self.description
        if self.kind == OBJECT:
            schema["properties"] = {name: shape.to_json_schema() for name, shape in self.properties}
            if self.required:
                schema["required"] = list(self.required)
        elif self.kind == ARRAY:
            schema["items"] = self.items.to_json_schema()
        return schema

    def conformance_issues(self, value: Any, path: str = "$") -> List[str]:
        """Lists every place where value disagrees with this shape.

        Unknown object keys are tolerated and null counts as absent.
        """
        if self.kind == OBJECT:
            if not isinstance(value, dict):
                return [f"{path}: expected object, got {_type_name(value)}"]
            issues: List[str] = []
            for name in self.required:
                if value.get(name) is None:
                    issues.append(f"{path}.{name}: required field missing")
            for name, shape in self.properties:
                child = value.get(name)
                if child is None:
                    continue
                issues.extend(shape.conformance_issues(child, f"{path}.{name}"))
            return issues

        if self.kind == ARRAY:
            if not isinstance(value, list):
                return [f"{path}: expected array, got {_type_name(value)}"]
            issues = []
            for idx, item in enumerate(value):
                issues.extend(self.items.conformance_issues(item, f"{path}[{idx}]"))
            return issues

        if _matches_primitive(self.kind, value):
            return []
        return [f"{path}: expected {self.kind}, got {_type_name(value)}"]


def _matches_primitive(kind: str, value: Any) -> bool:
    if kind == "string":
        return isinstance(value, str)
    if kind == "boolean":
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if kind == "integer":
        return isinstance(value, int) or (isinstance(value, float) and value.is_integer())
    return isinstance(value, (int, float))


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (int, float)):
        return "number"
    return type(value).__name__


STRING = ShapeDescriptor("string")
NUMBER = ShapeDescriptor("number")
INTEGER = ShapeDescriptor("integer")
BOOLEAN = ShapeDescriptor("boolean")


def arr(items: ShapeDescriptor) -> ShapeDescriptor:
    return ShapeDescriptor(ARRAY, items=items)


def obj(**fields: ShapeDescriptor) -> ShapeDescriptor:
    return ShapeDescriptor(OBJECT, properties=tuple(fields.items()))


def requiring(shape: ShapeDescriptor, *names: str) -> ShapeDescriptor:
    """Marks fields of an object shape as required."""
    return ShapeDescriptor(
        OBJECT,
        properties=shape.properties,
        required=tuple(dict.fromkeys(shape.required + names)),
        description=shape.description,
    )


STRING_LIST = arr(STRING)
