"""Name transformation utilities for deriving artifact names.

PascalCase normalization is deterministic but not injective: "add_pet" and
"addPet" both become "AddPet". The source schema guarantees unique
operationIds; collisions after normalization are detected by the planner,
not here.
"""

from __future__ import annotations

import re

from cqrsgen.model.type_descriptor import DTO_SUFFIX

COMMAND_SUFFIX = "Command"
QUERY_SUFFIX = "Query"
HANDLER_SUFFIX = "Handler"
VALIDATOR_SUFFIX = "Validator"

# Anything that is not a letter or digit separates words
_SEPARATOR_RE = re.compile(r"[^0-9A-Za-z]+")


def _split_words(s: str) -> list[str]:
    return [p for p in _SEPARATOR_RE.split(s) if p]


def _group_single_chars(parts: list[str]) -> list[str]:
    """Group consecutive single-character parts into acronyms.

    ['get', 'pet', 'u', 'u', 'i', 'd'] -> ['get', 'pet', 'UUID']
    ['get', 'c', 'p', 'u', 'type'] -> ['get', 'CPU', 'type']
    """
    grouped: list[str] = []
    i = 0
    while i < len(parts):
        if len(parts[i]) == 1:
            acronym = []
            while i < len(parts) and len(parts[i]) == 1:
                acronym.append(parts[i].upper())
                i += 1
            grouped.append("".join(acronym))
        else:
            grouped.append(parts[i])
            i += 1
    return grouped


def to_pascal_case(s: str) -> str:
    """Convert an identifier in any common convention to PascalCase.

    Examples:
        addPet -> AddPet
        find_pets_by_status -> FindPetsByStatus
        get-pet-by-id -> GetPetById
        get_pet_u_u_i_d -> GetPetUUID
        AddPet -> AddPet
    """
    words = _group_single_chars(_split_words(s))
    return "".join(w[0].upper() + w[1:] for w in words)


def to_camel_case(s: str) -> str:
    """Convert an identifier to camelCase.

    Examples:
        Pet -> pet
        pet_id -> petId
        X-Request-ID -> xRequestID
    """
    pascal = to_pascal_case(s)
    if not pascal:
        return pascal
    # Lower a leading acronym as a unit: "UUIDValue" -> "uuidValue"
    m = re.match(r"^[A-Z]+(?=[A-Z][a-z]|$)", pascal)
    if m and len(m.group(0)) > 1:
        head = m.group(0)
        return head.lower() + pascal[len(head):]
    return pascal[0].lower() + pascal[1:]


def property_name(name: str) -> str:
    """Member name for a DTO property (PascalCase)."""
    return to_pascal_case(name)


def command_name(operation_id: str) -> str:
    """addPet -> AddPetCommand"""
    return to_pascal_case(operation_id) + COMMAND_SUFFIX


def query_name(operation_id: str) -> str:
    """findPetsByStatus -> FindPetsByStatusQuery"""
    return to_pascal_case(operation_id) + QUERY_SUFFIX


def handler_name(request_name: str) -> str:
    """AddPetCommand -> AddPetCommandHandler"""
    return request_name + HANDLER_SUFFIX


def dto_name(model_name: str) -> str:
    """Pet -> PetDto. Already-suffixed names are returned unchanged."""
    if model_name.endswith(DTO_SUFFIX):
        return model_name
    return model_name + DTO_SUFFIX


def validator_name(dto: str) -> str:
    """PetDto -> PetDtoValidator"""
    return dto + VALIDATOR_SUFFIX
