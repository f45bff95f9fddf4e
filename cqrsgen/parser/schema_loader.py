"""Load a normalized descriptor document (JSON) into IR objects.

The document is the output of an upstream schema parser, not an OpenAPI
file. Shape:

    {
      "models": [{"name": "Pet", "properties": [{"name": "id", "type": "long"}, ...]}],
      "operations": [{"operationId": "addPet", "httpMethod": "POST",
                      "requestBody": "Pet", "returnType": "Pet", "parameters": [...]}]
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from cqrsgen.config import to_bool
from cqrsgen.errors import SchemaFormatError
from cqrsgen.model.ir import (
    ModelDefinition,
    ModelProperty,
    OperationDescriptor,
    Parameter,
    SchemaDocument,
    ValidationConstraints,
)
from cqrsgen.model.type_descriptor import TypeDescriptor, references
from cqrsgen.parser.name_transform import to_camel_case
from cqrsgen.parser.type_parser import is_identifier, parse_type

_PARAM_LOCATIONS = {"path", "query", "header"}
_VOID = {"", "void", "none"}


def load_document(path: str | Path) -> SchemaDocument:
    """Read and parse a descriptor document from disk."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaFormatError(f"{path}: invalid JSON: {e}") from e
    return parse_document(data)


def parse_document(data: Any) -> SchemaDocument:
    if not isinstance(data, dict):
        raise SchemaFormatError("descriptor document must be a JSON object")

    models: dict[str, ModelDefinition] = {}
    for raw in _list(data, "models", "document"):
        model = parse_model(raw)
        if model.name in models:
            raise SchemaFormatError(f"duplicate model {model.name!r}")
        models[model.name] = model

    operations: list[OperationDescriptor] = []
    seen_ids: set[str] = set()
    for raw in _list(data, "operations", "document"):
        op = parse_operation(raw)
        if op.operation_id in seen_ids:
            raise SchemaFormatError(f"duplicate operationId {op.operation_id!r}")
        seen_ids.add(op.operation_id)
        operations.append(op)

    return SchemaDocument(operations=operations, models=models)


def parse_model(raw: Any) -> ModelDefinition:
    name = _str(raw, "name", "model")
    if not is_identifier(name):
        raise SchemaFormatError(f"model {name!r}: invalid characters in model name")
    where = f"model {name!r}"
    properties = [parse_property(p, where) for p in _list(raw, "properties", where)]
    enum_values = [str(v) for v in _list(raw, "enum", where)]
    return ModelDefinition(
        name=name,
        properties=properties,
        description=raw.get("description") or "",
        enum_values=enum_values,
    )


def parse_property(raw: Any, where: str) -> ModelProperty:
    name = _str(raw, "name", where)
    where = f"{where} property {name!r}"
    return ModelProperty(
        name=name,
        type=parse_type(_str(raw, "type", where)),
        nullable=_bool(raw, "nullable", where, False),
        required=_bool(raw, "required", where, False),
        constraints=ValidationConstraints(
            min_length=_opt_number(raw, "minLength", where, int),
            max_length=_opt_number(raw, "maxLength", where, int),
            minimum=_opt_number(raw, "minimum", where, float),
            maximum=_opt_number(raw, "maximum", where, float),
            min_items=_opt_number(raw, "minItems", where, int),
            max_items=_opt_number(raw, "maxItems", where, int),
        ),
        pattern=raw.get("pattern"),
        description=raw.get("description") or "",
    )


def parse_operation(raw: Any) -> OperationDescriptor:
    op_id = _str(raw, "operationId", "operation")
    where = f"operation {op_id!r}"
    parameters = [parse_parameter(p, where) for p in _list(raw, "parameters", where)]
    return OperationDescriptor(
        operation_id=op_id,
        http_method=_str(raw, "httpMethod", where),
        request_body=_parse_body(raw.get("requestBody"), where),
        return_type=_parse_return(raw.get("returnType"), where),
        parameters=parameters,
        summary=raw.get("summary") or "",
        tag=raw.get("tag") or "",
    )


def parse_parameter(raw: Any, where: str) -> Parameter:
    name = _str(raw, "name", where)
    location = _str(raw, "in", f"{where} parameter {name!r}")
    if location not in _PARAM_LOCATIONS:
        raise SchemaFormatError(
            f"{where} parameter {name!r}: unsupported location {location!r}"
        )
    return Parameter(
        name=name,
        location=location,
        type=parse_type(_str(raw, "type", f"{where} parameter {name!r}")),
        required=_bool(raw, "required", f"{where} parameter {name!r}", location == "path"),
        description=raw.get("description") or "",
    )


def _parse_body(raw: Any, where: str) -> Parameter | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        body_type = parse_type(raw)
        return Parameter(
            name=_default_body_name(body_type),
            location="body",
            type=body_type,
        )
    if isinstance(raw, dict):
        body_type = parse_type(_str(raw, "type", f"{where} requestBody"))
        return Parameter(
            name=raw.get("name") or _default_body_name(body_type),
            location="body",
            type=body_type,
            required=_bool(raw, "required", f"{where} requestBody", True),
            description=raw.get("description") or "",
        )
    raise SchemaFormatError(f"{where}: requestBody must be a type string or an object")


def _default_body_name(body_type: TypeDescriptor) -> str:
    refs = list(references(body_type))
    return to_camel_case(refs[0]) if refs else "body"


def _parse_return(raw: Any, where: str) -> TypeDescriptor | None:
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise SchemaFormatError(f"{where}: returnType must be a string")
    if raw.strip().lower() in _VOID:
        return None
    return parse_type(raw)


def _list(raw: Any, key: str, where: str) -> list[Any]:
    if not isinstance(raw, dict):
        raise SchemaFormatError(f"{where}: expected an object")
    value = raw.get(key, [])
    if value is None:
        return []
    if not isinstance(value, list):
        raise SchemaFormatError(f"{where}: {key!r} must be a list")
    return value


def _str(raw: Any, key: str, where: str) -> str:
    if not isinstance(raw, dict):
        raise SchemaFormatError(f"{where}: expected an object")
    value = raw.get(key)
    if not isinstance(value, str) or not value:
        raise SchemaFormatError(f"{where}: missing or empty {key!r}")
    return value


def _opt_number(raw: dict[str, Any], key: str, where: str, kind: type) -> Any:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaFormatError(f"{where}: {key!r} must be a number")
    return kind(value)


def _bool(raw: dict[str, Any], key: str, where: str, default: bool) -> bool:
    value = raw.get(key)
    if value is None:
        return default
    return to_bool(key, value, f"{where}:")
