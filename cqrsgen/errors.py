"""Exception hierarchy for the generator.

Everything raised here is fatal for a run. Per-artifact render/write failures are
not exceptions at this level; the writer records them in an EmissionReport.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for all fatal generator errors."""


class SchemaFormatError(GenerationError):
    """The descriptor document is structurally invalid (missing key, bad value)."""


class TypeParseError(SchemaFormatError):
    """A type string could not be parsed into a TypeDescriptor."""

    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"cannot parse type {text!r}: {reason}")
        self.text = text
        self.reason = reason


class SchemaInconsistencyError(GenerationError):
    """The descriptors reference something that does not exist or is unsupported."""


class NamingCollisionError(GenerationError):
    """Two distinct sources derive the same artifact name."""

    def __init__(self, name: str, first: str, second: str) -> None:
        super().__init__(
            f"derived name {name!r} is produced by both {first!r} and {second!r}"
        )
        self.name = name
        self.first = first
        self.second = second


class MissingTemplateError(GenerationError):
    """A planned artifact kind has no loadable template."""

    def __init__(self, template_kind: str, template_name: str) -> None:
        super().__init__(
            f"no template {template_name!r} for artifact kind {template_kind!r}"
        )
        self.template_kind = template_kind
        self.template_name = template_name
