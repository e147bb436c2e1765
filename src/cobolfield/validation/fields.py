"""Single-field checks driven by BMS-style field definitions.

Order: protected fields are skipped, then MUSTFILL, NUM, maximum length and
the PICIN picture. The first failing check wins for a field; all fields are
checked.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from cobolfield.attributes import FieldAttribute, FieldBehaviour, parse_attributes
from cobolfield.copybook.geometry import FieldGeometry
from cobolfield.picture.matcher import compile_picture
from cobolfield.validation.engine import ValidationFailure, is_blank

REQUIRED_MESSAGE = "This field is required"
NUMERIC_MESSAGE = "Only numeric characters are allowed"


@dataclass(frozen=True)
class FieldDefinition:
    name: str
    length: int | None = None
    picture: str | None = None
    attributes: frozenset[FieldAttribute] = field(default_factory=frozenset)
    mustfill: bool = False
    pic: str | None = None
    usage: str | None = None

    @property
    def behaviour(self) -> FieldBehaviour:
        return FieldBehaviour.from_attributes(self.attributes)

    @property
    def geometry(self) -> FieldGeometry | None:
        return FieldGeometry.from_picture(self.pic) if self.pic else None

    @staticmethod
    def from_mapping(payload: Mapping[str, Any]) -> FieldDefinition:
        return FieldDefinition(
            name=str(payload["name"]),
            length=int(payload["length"]) if payload.get("length") is not None else None,
            picture=payload.get("picture") or payload.get("picin"),
            attributes=parse_attributes(payload.get("attributes") or payload.get("attrb")),
            mustfill=bool(payload.get("mustfill", False)),
            pic=payload.get("pic"),
            usage=payload.get("usage"),
        )


def validate_field(definition: FieldDefinition, value: str | None) -> ValidationFailure | None:
    behaviour = definition.behaviour
    if behaviour.protected:
        return None
    if is_blank(value):
        if definition.mustfill:
            return ValidationFailure(definition.name, REQUIRED_MESSAGE)
        return None

    text = value or ""
    if behaviour.numeric and not (text.isascii() and text.isdigit()):
        return ValidationFailure(definition.name, NUMERIC_MESSAGE)
    if definition.length is not None and len(text) > definition.length:
        return ValidationFailure(
            definition.name, f"Maximum {definition.length} characters allowed"
        )
    if definition.picture is not None and not compile_picture(definition.picture).matches(text):
        return ValidationFailure(definition.name, f"Invalid format. Expected: {definition.picture}")
    return None


def validate_fields(
    definitions: Iterable[FieldDefinition], values: Mapping[str, str | None]
) -> list[ValidationFailure]:
    failures: list[ValidationFailure] = []
    for definition in definitions:
        failure = validate_field(definition, values.get(definition.name))
        if failure is not None:
            failures.append(failure)
    return failures
