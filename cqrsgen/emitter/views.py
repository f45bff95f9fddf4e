"""Template-friendly views of planned artifacts."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from cqrsgen.model.ir import (
    DtoDefinition,
    DtoProperty,
    Parameter,
    RequestArtifact,
    RequestKind,
    ValidatorArtifact,
)
from cqrsgen.parser.name_transform import property_name, to_camel_case
from cqrsgen.parser.response_classifier import is_delete_with_bool, is_post, is_unit
from cqrsgen.parser.type_parser import format_type


@dataclass
class PropertyView:
    """Template-friendly view of a DtoProperty."""
    name: str  # PascalCase member name
    json_name: str  # name as it appears on the wire
    type_name: str  # rendered type, "?" appended when nullable
    required: bool
    description: str
    pattern: str | None
    min_length: int | None
    max_length: int | None
    minimum: int | float | None  # integral bounds rendered without ".0"
    maximum: int | float | None
    min_items: int | None
    max_items: int | None
    has_rules: bool  # anything a validator would check


@dataclass
class DtoView:
    """Template-friendly view of a DtoDefinition."""
    name: str
    source_model: str
    description: str
    is_enum: bool
    enum_values: list[str]
    properties: list[PropertyView] = field(default_factory=list)


@dataclass
class ParameterView:
    name: str  # PascalCase member name
    arg_name: str  # camelCase argument name
    json_name: str
    location: str
    type_name: str
    required: bool
    description: str


@dataclass
class RequestView:
    """Template-friendly view of a RequestArtifact (shared by handler templates)."""
    name: str
    handler_name: str
    kind: str  # "command" or "query"
    operation_id: str
    http_method: str
    summary: str
    response_type: str
    dto_response_type: str
    is_query: bool
    is_unit: bool
    is_post: bool
    is_delete_with_bool: bool
    has_body: bool
    parameters: list[ParameterView] = field(default_factory=list)
    body: ParameterView | None = None


@dataclass
class ValidatorView:
    name: str
    dto_name: str
    properties: list[PropertyView] = field(default_factory=list)


def property_view(prop: DtoProperty) -> PropertyView:
    type_name = format_type(prop.type)
    if prop.nullable and not type_name.endswith("?"):
        type_name += "?"
    c = prop.constraints
    return PropertyView(
        name=property_name(prop.name),
        json_name=prop.name,
        type_name=type_name,
        required=prop.required,
        description=prop.description,
        pattern=prop.pattern,
        min_length=c.min_length,
        max_length=c.max_length,
        minimum=_bound(c.minimum),
        maximum=_bound(c.maximum),
        min_items=c.min_items,
        max_items=c.max_items,
        has_rules=prop.required or bool(prop.pattern) or not c.is_empty(),
    )


def _bound(value: float | None) -> int | float | None:
    if value is not None and float(value).is_integer():
        return int(value)
    return value


def dto_view(dto: DtoDefinition) -> DtoView:
    return DtoView(
        name=dto.name,
        source_model=dto.source_model,
        description=dto.description,
        is_enum=bool(dto.enum_values),
        enum_values=list(dto.enum_values),
        properties=[property_view(p) for p in dto.properties],
    )


def parameter_view(param: Parameter) -> ParameterView:
    return ParameterView(
        name=property_name(param.name),
        arg_name=to_camel_case(param.name),
        json_name=param.name,
        location=param.location,
        type_name=format_type(param.type),
        required=param.required,
        description=param.description,
    )


def request_view(request: RequestArtifact, handler: str) -> RequestView:
    op = request.operation
    params = [parameter_view(p) for p in request.parameters]
    body = next((p for p in params if p.location == "body"), None)
    return RequestView(
        name=request.name,
        handler_name=handler,
        kind=request.kind.value,
        operation_id=op.operation_id,
        http_method=op.http_method.upper(),
        summary=op.summary,
        response_type=format_type(request.response_type, sequence="IEnumerable"),
        dto_response_type=format_type(request.dto_response_type, sequence="IEnumerable"),
        is_query=request.kind is RequestKind.QUERY,
        is_unit=is_unit(request.response_type),
        is_post=is_post(op.http_method),
        is_delete_with_bool=is_delete_with_bool(op.http_method, request.response_type),
        has_body=body is not None,
        parameters=params,
        body=body,
    )


def validator_view(validator: ValidatorArtifact) -> ValidatorView:
    return ValidatorView(
        name=validator.name,
        dto_name=validator.dto.name,
        properties=[v for v in (property_view(p) for p in validator.dto.properties) if v.has_rules],
    )


def to_context(view: Any, **shared: Any) -> dict[str, Any]:
    """Flatten a view dataclass into a template context dict."""
    context = asdict(view)
    context.update(shared)
    return context
