"""Compute the transitive, deduplicated, cycle-safe set of DTOs for a set of root models."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field

from cqrsgen.errors import NamingCollisionError, SchemaInconsistencyError
from cqrsgen.model.ir import (
    DtoDefinition,
    DtoProperty,
    ModelDefinition,
    ModelProperty,
    OperationDescriptor,
)
from cqrsgen.model.type_descriptor import references, rewrite_to_dto
from cqrsgen.parser.name_transform import dto_name

logger = logging.getLogger(__name__)

_PATTERN_DELIMITERS = ("/", '"', "'")


@dataclass
class ClosureState:
    """Accumulated closure for one generation run.

    visited holds derived DTO names; dtos preserves discovery order.
    """
    visited: set[str] = field(default_factory=set)
    dtos: dict[str, DtoDefinition] = field(default_factory=dict)


def strip_pattern_delimiters(pattern: str | None) -> str | None:
    """Remove one layer of matching delimiters: "/^[a-z]+$/" -> "^[a-z]+$"."""
    if pattern is None:
        return None
    for delim in _PATTERN_DELIMITERS:
        if len(pattern) >= 2 and pattern.startswith(delim) and pattern.endswith(delim):
            return pattern[1:-1]
    return pattern


def to_dto_property(prop: ModelProperty) -> DtoProperty:
    return DtoProperty(
        name=prop.name,
        type=rewrite_to_dto(prop.type),
        nullable=prop.nullable,
        required=prop.required,
        constraints=prop.constraints,
        pattern=strip_pattern_delimiters(prop.pattern),
        description=prop.description,
    )


def to_dto_definition(model: ModelDefinition) -> DtoDefinition:
    return DtoDefinition(
        name=dto_name(model.name),
        source_model=model.name,
        properties=tuple(to_dto_property(p) for p in model.properties),
        description=model.description,
        enum_values=tuple(model.enum_values),
    )


def operation_roots(op: OperationDescriptor) -> list[str]:
    """Model names referenced directly by an operation's body, response and parameters."""
    roots: list[str] = []
    if op.request_body is not None:
        roots.extend(references(op.request_body.type))
    if op.return_type is not None:
        roots.extend(references(op.return_type))
    for param in op.parameters:
        roots.extend(references(param.type))
    return roots


def _lookup(models: dict[str, ModelDefinition], name: str, referrer: str) -> ModelDefinition:
    model = models.get(name)
    if model is None:
        raise SchemaInconsistencyError(f"{referrer} references unknown model {name!r}")
    return model


def expand_closure(
    roots: Iterable[str],
    models: dict[str, ModelDefinition],
    state: ClosureState | None = None,
    referrer: str = "document",
) -> ClosureState:
    """Add the DTOs reachable from roots to state and return it.

    The worklist holds source model names. A name whose derived DTO name is
    already visited is skipped, which handles both shared models and cycles:
    A -> B -> A yields exactly one ADto and one BDto.
    """
    if state is None:
        state = ClosureState()

    worklist = deque((name, referrer) for name in roots)
    while worklist:
        name, source = worklist.popleft()
        derived = dto_name(name)
        if derived in state.visited:
            existing = state.dtos[derived]
            if existing.source_model != name:
                raise NamingCollisionError(derived, existing.source_model, name)
            continue

        model = _lookup(models, name, source)
        state.visited.add(derived)
        dto = to_dto_definition(model)
        state.dtos[derived] = dto
        logger.debug("Planned DTO %s from model %s", derived, name)

        for prop in model.properties:
            for ref in references(prop.type):
                worklist.append((ref, f"model {name!r}"))

    return state
