"""Parse type strings into TypeDescriptors and format them back out.

Generic types are parsed structurally (outer container first, then the
arguments split on top-level commas), so "Dictionary<string, List<Pet>>"
never gets mangled by substring edits.
"""

from __future__ import annotations

from cqrsgen.errors import TypeParseError
from cqrsgen.model.type_descriptor import (
    ArrayOf,
    MapOf,
    Reference,
    Scalar,
    TypeDescriptor,
    is_scalar_name,
    scalar,
)

_SEQUENCE_WRAPPERS = {
    "List", "IList", "IEnumerable", "ICollection", "IReadOnlyList",
    "IReadOnlyCollection", "Collection", "array",
}
_MAP_WRAPPERS = {"Dictionary", "IDictionary", "IReadOnlyDictionary", "Map", "map"}


def is_identifier(name: str) -> bool:
    """True for a bare type or model name: letters, digits, "_", "." and "-", no leading dot."""
    return bool(name) and not name.startswith(".") and all(c.isalnum() or c in "_.-" for c in name)


def parse_type(text: str) -> TypeDescriptor:
    """Parse a type string such as "Pet", "List<Pet>", "Pet[]" or "Dictionary<string, int>"."""
    s = text.strip()
    if not s:
        raise TypeParseError(text, "empty type")

    # Nullable containers ("List<Pet>?", "int[]?") are treated as the container itself
    if s.endswith("?") and s[:-1].endswith((">", "]")):
        s = s[:-1]

    if s.endswith("[]"):
        return ArrayOf(parse_type(s[:-2]))

    if "<" in s or ">" in s:
        open_idx = s.find("<")
        if open_idx <= 0 or not s.endswith(">"):
            raise TypeParseError(text, "malformed generic")
        outer = s[:open_idx].strip()
        args = _split_top_level(s[open_idx + 1:-1], text)
        if outer in _SEQUENCE_WRAPPERS:
            if len(args) != 1:
                raise TypeParseError(text, f"{outer} takes one type argument")
            return ArrayOf(parse_type(args[0]))
        if outer in _MAP_WRAPPERS:
            if len(args) != 2:
                raise TypeParseError(text, f"{outer} takes two type arguments")
            key = parse_type(args[0])
            if not isinstance(key, Scalar):
                raise TypeParseError(text, f"{outer} key must be a scalar type")
            return MapOf(key, parse_type(args[1]))
        raise TypeParseError(text, f"unsupported generic container {outer!r}")

    if not is_identifier(s.rstrip("?")):
        raise TypeParseError(text, "invalid characters in type name")

    if is_scalar_name(s):
        return scalar(s)
    # Nullability of references is carried by the property, not the type
    return Reference(s.rstrip("?"))


def _split_top_level(inner: str, text: str) -> list[str]:
    """Split generic arguments on commas that are not nested inside <...>."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for c in inner:
        if c == "<":
            depth += 1
        elif c == ">":
            depth -= 1
            if depth < 0:
                raise TypeParseError(text, "unbalanced '>'")
        if c == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(c)
    if depth != 0:
        raise TypeParseError(text, "unbalanced '<'")
    parts.append("".join(current).strip())
    if any(not p for p in parts):
        raise TypeParseError(text, "empty type argument")
    return parts


def format_type(t: TypeDescriptor, sequence: str = "List", mapping: str = "Dictionary") -> str:
    """Render a descriptor as a type string.

    format_type(ArrayOf(Reference("PetDto")), sequence="IEnumerable") -> "IEnumerable<PetDto>"
    """
    if isinstance(t, Scalar):
        return t.name
    if isinstance(t, Reference):
        return t.model_name
    if isinstance(t, ArrayOf):
        return f"{sequence}<{format_type(t.element, sequence, mapping)}>"
    if isinstance(t, MapOf):
        key = format_type(t.key, sequence, mapping)
        value = format_type(t.value, sequence, mapping)
        return f"{mapping}<{key}, {value}>"
    raise TypeError(f"not a TypeDescriptor: {t!r}")
