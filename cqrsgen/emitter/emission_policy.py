"""Assign each planned artifact a write policy, a folder and an output path."""

from __future__ import annotations

from pathlib import Path

from cqrsgen.config import GeneratorOptions
from cqrsgen.errors import SchemaFormatError
from cqrsgen.model.ir import (
    ArtifactTask,
    GenerationPlan,
    RequestKind,
    TemplateKind,
    WritePolicy,
)
from cqrsgen.emitter.views import (
    dto_view,
    request_view,
    to_context,
    validator_view,
)
from cqrsgen.parser.type_parser import is_identifier

# Handlers carry hand-written business logic; everything else is a pure
# derivation of the schema and is regenerated on every run.
WRITE_POLICIES = {
    TemplateKind.DTO: WritePolicy.ALWAYS,
    TemplateKind.COMMAND: WritePolicy.ALWAYS,
    TemplateKind.QUERY: WritePolicy.ALWAYS,
    TemplateKind.VALIDATOR: WritePolicy.ALWAYS,
    TemplateKind.HANDLER: WritePolicy.WRITE_ONCE,
}

FOLDERS = {
    TemplateKind.DTO: "DTOs",
    TemplateKind.COMMAND: "Commands",
    TemplateKind.QUERY: "Queries",
    TemplateKind.VALIDATOR: "Validators",
    TemplateKind.HANDLER: "Handlers",
}


def output_path(kind: TemplateKind, name: str, options: GeneratorOptions) -> Path:
    """Relative output path for an artifact; a pure function of kind and name."""
    if not is_identifier(name):
        raise SchemaFormatError(f"invalid artifact name {name!r}")
    root = options.generated_folder
    if kind is TemplateKind.HANDLER and options.split_contract:
        root = options.implementation_folder
    return Path(root) / FOLDERS[kind] / f"{name}{options.file_extension}"


def _task(kind: TemplateKind, name: str, context: dict, options: GeneratorOptions) -> ArtifactTask:
    return ArtifactTask(
        template_kind=kind,
        artifact_name=name,
        context=context,
        output_path=output_path(kind, name, options),
        write_policy=WRITE_POLICIES[kind],
    )


def plan_tasks(plan: GenerationPlan, options: GeneratorOptions | None = None) -> list[ArtifactTask]:
    """Turn a GenerationPlan into ordered write instructions.

    Order: DTOs, then each request followed by its handler, then validators.
    """
    options = options or GeneratorOptions()
    shared = {
        "package_name": options.package_name,
        "use_records": options.use_records,
        "use_validators": options.use_validators,
    }
    tasks: list[ArtifactTask] = []

    for dto in plan.dtos:
        tasks.append(_task(TemplateKind.DTO, dto.name, to_context(dto_view(dto), **shared), options))

    for handler in plan.handlers:
        request = handler.request
        context = to_context(request_view(request, handler.name), **shared)
        kind = TemplateKind.QUERY if request.kind is RequestKind.QUERY else TemplateKind.COMMAND
        tasks.append(_task(kind, request.name, context, options))
        tasks.append(_task(TemplateKind.HANDLER, handler.name, context, options))

    for validator in plan.validators:
        context = to_context(validator_view(validator), **shared)
        tasks.append(_task(TemplateKind.VALIDATOR, validator.name, context, options))

    return tasks
