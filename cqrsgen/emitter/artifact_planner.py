"""Combine classification, naming and DTO closure into a GenerationPlan."""

from __future__ import annotations

import logging

from cqrsgen.config import GeneratorOptions
from cqrsgen.errors import NamingCollisionError, SchemaInconsistencyError
from cqrsgen.model.ir import (
    GenerationPlan,
    HandlerArtifact,
    OperationDescriptor,
    Parameter,
    RequestArtifact,
    RequestKind,
    SchemaDocument,
    ValidatorArtifact,
)
from cqrsgen.model.type_descriptor import rewrite_to_dto
from cqrsgen.parser.dto_closure import ClosureState, expand_closure, operation_roots
from cqrsgen.parser.name_transform import (
    command_name,
    handler_name,
    query_name,
    validator_name,
)
from cqrsgen.parser.response_classifier import (
    classify_role,
    dto_response_type,
    response_type,
)

logger = logging.getLogger(__name__)


def build_plan(document: SchemaDocument, options: GeneratorOptions | None = None) -> GenerationPlan:
    """Derive every artifact the document needs.

    Raises SchemaInconsistencyError for unknown models or HTTP methods and
    NamingCollisionError when two operationIds derive the same request name.
    """
    options = options or GeneratorOptions()
    plan = GenerationPlan()

    _check_references(document)
    _check_request_names(document.operations)

    state = ClosureState()
    for op in document.operations:
        request = build_request(op)
        plan.requests.append(request)
        plan.handlers.append(HandlerArtifact(name=handler_name(request.name), request=request))
        expand_closure(
            operation_roots(op), document.models, state,
            referrer=f"operation {op.operation_id!r}",
        )

    if options.include_all_models:
        expand_closure(document.models.keys(), document.models, state)

    plan.dtos = list(state.dtos.values())

    if options.use_validators:
        plan.validators = [
            ValidatorArtifact(name=validator_name(dto.name), dto=dto)
            for dto in plan.dtos
            if not dto.enum_values
        ]

    logger.info(
        "Planned %d requests, %d handlers, %d DTOs, %d validators",
        len(plan.requests), len(plan.handlers), len(plan.dtos), len(plan.validators),
    )
    return plan


def request_name(op: OperationDescriptor) -> str:
    if classify_role(op.http_method) is RequestKind.QUERY:
        return query_name(op.operation_id)
    return command_name(op.operation_id)


def build_request(op: OperationDescriptor) -> RequestArtifact:
    """Build the Command/Query for one operation with DTO-typed parameters."""
    params = [_dto_parameter(p) for p in op.parameters]
    if op.request_body is not None:
        params.append(_dto_parameter(op.request_body))
    return RequestArtifact(
        kind=classify_role(op.http_method),
        name=request_name(op),
        operation=op,
        parameters=params,
        response_type=response_type(op.http_method, op.return_type),
        dto_response_type=dto_response_type(op.http_method, op.return_type),
    )


def _dto_parameter(param: Parameter) -> Parameter:
    return Parameter(
        name=param.name,
        location=param.location,
        type=rewrite_to_dto(param.type),
        required=param.required,
        description=param.description,
    )


def _check_references(document: SchemaDocument) -> None:
    for op in document.operations:
        for name in operation_roots(op):
            if name not in document.models:
                raise SchemaInconsistencyError(
                    f"operation {op.operation_id!r} references unknown model {name!r}"
                )


def _check_request_names(operations: list[OperationDescriptor]) -> None:
    owners: dict[str, str] = {}
    for op in operations:
        name = request_name(op)
        if name in owners:
            raise NamingCollisionError(name, owners[name], op.operation_id)
        owners[name] = op.operation_id
