"""Intermediate representation dataclasses for operations, models and the generation plan."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cqrsgen.model.type_descriptor import TypeDescriptor


# ─── Source descriptors (read-only to the engine) ───────────────────────────

@dataclass(frozen=True)
class ValidationConstraints:
    min_length: int | None = None
    max_length: int | None = None
    minimum: float | None = None
    maximum: float | None = None
    min_items: int | None = None
    max_items: int | None = None

    def is_empty(self) -> bool:
        return all(v is None for v in (
            self.min_length, self.max_length, self.minimum,
            self.maximum, self.min_items, self.max_items,
        ))


@dataclass
class ModelProperty:
    name: str
    type: TypeDescriptor
    nullable: bool = False
    required: bool = False
    constraints: ValidationConstraints = field(default_factory=ValidationConstraints)
    pattern: str | None = None  # as stored in the schema, possibly "/.../"-delimited
    description: str = ""


@dataclass
class ModelDefinition:
    name: str
    properties: list[ModelProperty] = field(default_factory=list)
    description: str = ""
    enum_values: list[str] = field(default_factory=list)  # non-empty for enum models


@dataclass
class Parameter:
    name: str
    location: str  # "path", "query", "header" or "body"
    type: TypeDescriptor
    required: bool = True
    description: str = ""


class ResponseShape(enum.Enum):
    VOID = "void"
    MODEL = "model"
    ARRAY = "array"
    MAP = "map"
    PRIMITIVE = "primitive"


@dataclass
class OperationDescriptor:
    operation_id: str
    http_method: str
    request_body: Parameter | None = None
    return_type: TypeDescriptor | None = None  # None means void
    parameters: list[Parameter] = field(default_factory=list)
    summary: str = ""
    tag: str = ""


@dataclass
class SchemaDocument:
    operations: list[OperationDescriptor] = field(default_factory=list)
    models: dict[str, ModelDefinition] = field(default_factory=dict)  # keyed by model name


# ─── Derived artifacts ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class DtoProperty:
    name: str
    type: TypeDescriptor  # DTO-rewritten
    nullable: bool
    required: bool
    constraints: ValidationConstraints
    pattern: str | None  # delimiters stripped
    description: str = ""


@dataclass(frozen=True)
class DtoDefinition:
    name: str  # e.g. "PetDto"
    source_model: str  # e.g. "Pet"
    properties: tuple[DtoProperty, ...] = ()
    description: str = ""
    enum_values: tuple[str, ...] = ()


class RequestKind(enum.Enum):
    COMMAND = "command"
    QUERY = "query"


@dataclass
class RequestArtifact:
    kind: RequestKind
    name: str  # e.g. "AddPetCommand"
    operation: OperationDescriptor
    parameters: list[Parameter]  # DTO-rewritten, body last
    response_type: TypeDescriptor
    dto_response_type: TypeDescriptor


@dataclass
class HandlerArtifact:
    name: str  # e.g. "AddPetCommandHandler"
    request: RequestArtifact


@dataclass
class ValidatorArtifact:
    name: str  # e.g. "PetDtoValidator"
    dto: DtoDefinition


@dataclass
class GenerationPlan:
    dtos: list[DtoDefinition] = field(default_factory=list)
    requests: list[RequestArtifact] = field(default_factory=list)
    handlers: list[HandlerArtifact] = field(default_factory=list)
    validators: list[ValidatorArtifact] = field(default_factory=list)


# ─── Emission ───────────────────────────────────────────────────────────────

class TemplateKind(enum.Enum):
    DTO = "dto"
    COMMAND = "command"
    QUERY = "query"
    HANDLER = "handler"
    VALIDATOR = "validator"


class WritePolicy(enum.Enum):
    ALWAYS = "always"  # overwrite unconditionally
    WRITE_ONCE = "write_once"  # create only if absent, never touch an existing file


@dataclass
class ArtifactTask:
    template_kind: TemplateKind
    artifact_name: str
    context: dict[str, Any]
    output_path: Path  # relative to the output root
    write_policy: WritePolicy


@dataclass
class EmissionReport:
    written: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failed: list[tuple[Path, str]] = field(default_factory=list)  # (path, reason)

    @property
    def ok(self) -> bool:
        return not self.failed
