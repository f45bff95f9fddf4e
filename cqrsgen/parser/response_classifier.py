"""Classify an operation's HTTP semantics into a request role and response types."""

from __future__ import annotations

from cqrsgen.errors import SchemaInconsistencyError
from cqrsgen.model.ir import RequestKind, ResponseShape
from cqrsgen.model.type_descriptor import (
    ArrayOf,
    MapOf,
    Reference,
    Scalar,
    TypeDescriptor,
    is_scalar_named,
    rewrite_to_dto,
)

HTTP_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE"}

BOOL = Scalar("bool")
UNIT = Scalar("Unit")


def _normalize_method(http_method: str) -> str:
    method = http_method.upper()
    if method not in HTTP_METHODS:
        raise SchemaInconsistencyError(f"unsupported HTTP method {http_method!r}")
    return method


def classify_role(http_method: str) -> RequestKind:
    """GET is a read-only Query; every other method mutates and is a Command."""
    if _normalize_method(http_method) == "GET":
        return RequestKind.QUERY
    return RequestKind.COMMAND


def response_shape(return_type: TypeDescriptor | None) -> ResponseShape:
    if return_type is None:
        return ResponseShape.VOID
    if isinstance(return_type, ArrayOf):
        return ResponseShape.ARRAY
    if isinstance(return_type, MapOf):
        return ResponseShape.MAP
    if isinstance(return_type, Reference):
        return ResponseShape.MODEL
    return ResponseShape.PRIMITIVE


def response_type(http_method: str, return_type: TypeDescriptor | None) -> TypeDescriptor:
    """Response type for the internal request/handler contract.

    A void DELETE answers with a success/not-found bool; any other void
    operation answers with Unit. Arrays come back as ArrayOf(element), which
    templates render as an enumerable. Maps and single types are unchanged.
    """
    method = _normalize_method(http_method)
    shape = response_shape(return_type)
    if shape is ResponseShape.VOID:
        return BOOL if method == "DELETE" else UNIT
    if shape is ResponseShape.ARRAY:
        return ArrayOf(return_type.element)
    return return_type


def dto_response_type(http_method: str, return_type: TypeDescriptor | None) -> TypeDescriptor:
    """Same classification as response_type, with every model reference moved to its DTO."""
    return rewrite_to_dto(response_type(http_method, return_type))


def is_unit(t: TypeDescriptor) -> bool:
    return is_scalar_named(t, UNIT.name)


def is_delete_with_bool(http_method: str, t: TypeDescriptor) -> bool:
    return _normalize_method(http_method) == "DELETE" and is_scalar_named(t, BOOL.name)


def is_post(http_method: str) -> bool:
    return _normalize_method(http_method) == "POST"
