"""Tests for cqrsgen.model.type_descriptor: the domain-to-DTO rewrite rule."""

from __future__ import annotations

import pytest

from cqrsgen.model.type_descriptor import (
    ArrayOf,
    MapOf,
    Reference,
    Scalar,
    references,
    rewrite_to_dto,
)

_SAMPLES = [
    Scalar("int"),
    Scalar("DateTime"),
    Reference("Pet"),
    Reference("PetDto"),
    ArrayOf(Reference("Tag")),
    ArrayOf(ArrayOf(Scalar("string"))),
    MapOf(Scalar("string"), Scalar("int")),
    MapOf(Scalar("string"), ArrayOf(Reference("Order"))),
    ArrayOf(MapOf(Scalar("string"), Reference("Category"))),
    Reference("Guid"),
    ArrayOf(Reference("date-time")),
]


class TestRewriteToDto:
    def test_scalar_passes_through(self):
        assert rewrite_to_dto(Scalar("Guid")) == Scalar("Guid")

    def test_reference_gets_suffix(self):
        assert rewrite_to_dto(Reference("Pet")) == Reference("PetDto")

    def test_suffixed_reference_unchanged(self):
        assert rewrite_to_dto(Reference("PetDto")) == Reference("PetDto")

    @pytest.mark.parametrize("name, expected", [
        ("Guid", "Guid"),
        ("DateTime", "DateTime"),
        ("uuid", "Guid"),
        ("int64", "long"),
    ])
    def test_scalar_named_reference_becomes_scalar(self, name, expected):
        assert rewrite_to_dto(Reference(name)) == Scalar(expected)

    def test_scalar_named_reference_in_array(self):
        assert rewrite_to_dto(ArrayOf(Reference("DateTime"))) == ArrayOf(Scalar("DateTime"))

    def test_array_element_rewritten(self):
        assert rewrite_to_dto(ArrayOf(Reference("Tag"))) == ArrayOf(Reference("TagDto"))

    def test_map_value_rewritten_key_untouched(self):
        t = MapOf(Scalar("string"), Reference("Pet"))
        assert rewrite_to_dto(t) == MapOf(Scalar("string"), Reference("PetDto"))

    def test_scalar_map_unchanged(self):
        t = MapOf(Scalar("string"), Scalar("int"))
        assert rewrite_to_dto(t) == t

    def test_nested_containers(self):
        t = ArrayOf(MapOf(Scalar("string"), ArrayOf(Reference("Order"))))
        assert rewrite_to_dto(t) == ArrayOf(
            MapOf(Scalar("string"), ArrayOf(Reference("OrderDto")))
        )

    @pytest.mark.parametrize("t", _SAMPLES)
    def test_idempotent(self, t):
        once = rewrite_to_dto(t)
        assert rewrite_to_dto(once) == once

    def test_does_not_mutate_input(self):
        t = ArrayOf(Reference("Pet"))
        rewrite_to_dto(t)
        assert t == ArrayOf(Reference("Pet"))

    def test_rejects_non_descriptor(self):
        with pytest.raises(TypeError):
            rewrite_to_dto("Pet")


class TestReferences:
    def test_scalar_has_none(self):
        assert list(references(Scalar("int"))) == []

    def test_nested_order(self):
        t = MapOf(Scalar("string"), ArrayOf(Reference("Tag")))
        assert list(references(t)) == ["Tag"]

    def test_descriptors_are_hashable(self):
        assert len({Reference("Pet"), Reference("Pet"), ArrayOf(Reference("Pet"))}) == 2

    def test_map_key_not_walked(self):
        t = MapOf(Reference("Color"), Reference("Pet"))
        assert list(references(t)) == ["Pet"]

    def test_scalar_named_reference_skipped(self):
        assert list(references(ArrayOf(Reference("Guid")))) == []
