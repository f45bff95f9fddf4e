"""Tests for cqrsgen.emitter.artifact_planner."""

from __future__ import annotations

import pytest

from cqrsgen.config import GeneratorOptions
from cqrsgen.emitter.artifact_planner import build_plan, build_request, request_name
from cqrsgen.errors import NamingCollisionError, SchemaInconsistencyError
from cqrsgen.model.ir import (
    ModelDefinition,
    ModelProperty,
    OperationDescriptor,
    Parameter,
    RequestKind,
    SchemaDocument,
)
from cqrsgen.model.type_descriptor import ArrayOf, Reference, Scalar


def _make_operation(
    operation_id: str,
    method: str = "GET",
    body: str | None = None,
    returns=None,
    parameters: list[Parameter] | None = None,
) -> OperationDescriptor:
    return OperationDescriptor(
        operation_id=operation_id,
        http_method=method,
        request_body=Parameter(name="body", location="body", type=Reference(body)) if body else None,
        return_type=returns,
        parameters=parameters or [],
    )


def _petstore() -> SchemaDocument:
    models = [
        ModelDefinition(name="Pet", properties=[
            ModelProperty(name="id", type=Scalar("long")),
            ModelProperty(name="category", type=Reference("Category")),
            ModelProperty(name="tags", type=ArrayOf(Reference("Tag"))),
        ]),
        ModelDefinition(name="Category", properties=[ModelProperty(name="name", type=Scalar("string"))]),
        ModelDefinition(name="Tag", properties=[ModelProperty(name="name", type=Scalar("string"))]),
        ModelDefinition(name="Order", properties=[ModelProperty(name="id", type=Scalar("long"))]),
        ModelDefinition(name="Status", enum_values=["available", "pending", "sold"]),
    ]
    operations = [
        _make_operation("addPet", "POST", body="Pet", returns=Reference("Pet")),
        _make_operation("updatePet", "PUT", body="Pet", returns=Reference("Pet")),
        _make_operation(
            "findPetsByStatus", "GET", returns=ArrayOf(Reference("Pet")),
            parameters=[Parameter(name="status", location="query", type=Reference("Status"))],
        ),
        _make_operation(
            "deletePet", "DELETE",
            parameters=[Parameter(name="petId", location="path", type=Scalar("long"))],
        ),
    ]
    return SchemaDocument(operations=operations, models={m.name: m for m in models})


class TestBuildPlan:
    def test_one_request_and_handler_per_operation(self):
        plan = build_plan(_petstore())
        assert [r.name for r in plan.requests] == [
            "AddPetCommand",
            "UpdatePetCommand",
            "FindPetsByStatusQuery",
            "DeletePetCommand",
        ]
        assert [h.name for h in plan.handlers] == [
            "AddPetCommandHandler",
            "UpdatePetCommandHandler",
            "FindPetsByStatusQueryHandler",
            "DeletePetCommandHandler",
        ]

    def test_dtos_deduplicated_across_operations(self):
        plan = build_plan(_petstore())
        names = [d.name for d in plan.dtos]
        assert names.count("PetDto") == 1
        assert names.count("CategoryDto") == 1
        assert sorted(names) == ["CategoryDto", "PetDto", "StatusDto", "TagDto"]

    def test_shared_category_across_bodies(self):
        models = {
            "Pet": ModelDefinition(name="Pet", properties=[ModelProperty(name="c", type=Reference("Category"))]),
            "Store": ModelDefinition(name="Store", properties=[ModelProperty(name="c", type=Reference("Category"))]),
            "Category": ModelDefinition(name="Category"),
        }
        doc = SchemaDocument(
            operations=[
                _make_operation("addPet", "POST", body="Pet"),
                _make_operation("addStore", "POST", body="Store"),
            ],
            models=models,
        )
        plan = build_plan(doc)
        assert [d.name for d in plan.dtos].count("CategoryDto") == 1

    def test_unreachable_model_excluded_by_default(self):
        plan = build_plan(_petstore())
        assert "OrderDto" not in [d.name for d in plan.dtos]

    def test_include_all_models(self):
        plan = build_plan(_petstore(), GeneratorOptions(include_all_models=True))
        assert "OrderDto" in [d.name for d in plan.dtos]

    def test_validators_only_when_enabled(self):
        assert build_plan(_petstore()).validators == []
        plan = build_plan(_petstore(), GeneratorOptions(use_validators=True))
        names = [v.name for v in plan.validators]
        assert "PetDtoValidator" in names
        # Enums have nothing to validate
        assert "StatusDtoValidator" not in names

    def test_unknown_body_model_is_fatal(self):
        doc = SchemaDocument(operations=[_make_operation("addPet", "POST", body="Pet")])
        with pytest.raises(SchemaInconsistencyError, match="addPet"):
            build_plan(doc)

    def test_request_name_collision_is_fatal(self):
        doc = SchemaDocument(operations=[
            _make_operation("add_pet", "POST"),
            _make_operation("addPet", "POST"),
        ])
        with pytest.raises(NamingCollisionError) as exc_info:
            build_plan(doc)
        assert exc_info.value.name == "AddPetCommand"
        assert {exc_info.value.first, exc_info.value.second} == {"add_pet", "addPet"}

    def test_same_id_different_role_no_collision(self):
        doc = SchemaDocument(operations=[
            _make_operation("pet", "GET"),
            _make_operation("Pet", "POST"),
        ])
        plan = build_plan(doc)
        assert [r.name for r in plan.requests] == ["PetQuery", "PetCommand"]


class TestBuildRequest:
    def test_query_role(self):
        req = build_request(_make_operation("getInventory", "GET"))
        assert req.kind is RequestKind.QUERY
        assert request_name(req.operation) == "GetInventoryQuery"

    def test_delete_returns_bool(self):
        req = build_request(_make_operation("deletePet", "DELETE"))
        assert req.response_type == Scalar("bool")
        assert req.dto_response_type == Scalar("bool")

    def test_put_void_returns_unit(self):
        req = build_request(_make_operation("updateUser", "PUT", body="User"))
        assert req.response_type == Scalar("Unit")

    def test_array_response(self):
        req = build_request(_make_operation("findPets", "GET", returns=ArrayOf(Reference("Pet"))))
        assert req.response_type == ArrayOf(Reference("Pet"))
        assert req.dto_response_type == ArrayOf(Reference("PetDto"))

    def test_parameters_rewritten_body_last(self):
        op = _make_operation(
            "updatePetWithForm", "POST", body="Pet",
            parameters=[
                Parameter(name="petId", location="path", type=Scalar("long")),
                Parameter(name="status", location="query", type=Reference("Status")),
            ],
        )
        req = build_request(op)
        assert [(p.name, p.type) for p in req.parameters] == [
            ("petId", Scalar("long")),
            ("status", Reference("StatusDto")),
            ("body", Reference("PetDto")),
        ]
        # Source operation is not mutated
        assert op.request_body.type == Reference("Pet")
