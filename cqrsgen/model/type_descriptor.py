"""TypeDescriptor union and the domain-to-DTO rewrite rule."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

DTO_SUFFIX = "Dto"

# Type names that never get a DTO counterpart
SCALAR_TYPES = {
    "int", "long", "float", "double", "decimal", "bool", "string", "byte",
    "sbyte", "short", "char", "object",
    "DateTime", "DateTimeOffset", "DateOnly", "TimeOnly", "Guid", "TimeSpan",
    "Unit", "Uri", "Stream", "IFormFile",
}

# OpenAPI-style spellings accepted in descriptor documents
SCALAR_ALIASES = {
    "integer": "int",
    "int32": "int",
    "int64": "long",
    "number": "double",
    "boolean": "bool",
    "date": "DateOnly",
    "date-time": "DateTime",
    "time": "TimeOnly",
    "duration": "TimeSpan",
    "uuid": "Guid",
    "uri": "Uri",
    "binary": "Stream",
    "file": "IFormFile",
}


@dataclass(frozen=True)
class Scalar:
    name: str  # e.g. "int", "string", "DateTime", "Unit"


@dataclass(frozen=True)
class Reference:
    model_name: str  # e.g. "Pet" or, after rewriting, "PetDto"


@dataclass(frozen=True)
class ArrayOf:
    element: TypeDescriptor


@dataclass(frozen=True)
class MapOf:
    key: TypeDescriptor  # always a Scalar, never rewritten
    value: TypeDescriptor


TypeDescriptor = Union[Scalar, Reference, ArrayOf, MapOf]


def is_scalar_name(name: str) -> bool:
    base = name.rstrip("?")
    return base in SCALAR_TYPES or base in SCALAR_ALIASES


def scalar(name: str) -> Scalar:
    """Scalar for a recognised name, with aliases resolved ("uuid" -> Guid) and "?" kept."""
    base = name.rstrip("?")
    canonical = SCALAR_ALIASES.get(base, base)
    return Scalar(canonical + "?" if name.endswith("?") else canonical)


def rewrite_to_dto(t: TypeDescriptor) -> TypeDescriptor:
    """Map a domain-form descriptor to its DTO form.

    Scalars pass through, arrays and map values are rewritten recursively, and
    every Reference gains the Dto suffix unless it already has it. A Reference
    that names a scalar type ("Guid", "date-time") becomes that Scalar. Applying
    the rewrite twice gives the same result as applying it once.
    """
    if isinstance(t, Scalar):
        return t
    if isinstance(t, ArrayOf):
        return ArrayOf(rewrite_to_dto(t.element))
    if isinstance(t, MapOf):
        return MapOf(t.key, rewrite_to_dto(t.value))
    if isinstance(t, Reference):
        if is_scalar_name(t.model_name):
            return scalar(t.model_name)
        if t.model_name.endswith(DTO_SUFFIX):
            return t
        return Reference(t.model_name + DTO_SUFFIX)
    raise TypeError(f"not a TypeDescriptor: {t!r}")


def references(t: TypeDescriptor) -> Iterator[str]:
    """Yield every model name referenced inside t, depth-first.

    Map keys are skipped, as are references that name a scalar type.
    """
    if isinstance(t, Reference):
        if not is_scalar_name(t.model_name):
            yield t.model_name
    elif isinstance(t, ArrayOf):
        yield from references(t.element)
    elif isinstance(t, MapOf):
        yield from references(t.value)


def is_scalar_named(t: TypeDescriptor | None, name: str) -> bool:
    return isinstance(t, Scalar) and t.name == name
