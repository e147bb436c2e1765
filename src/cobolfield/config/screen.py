from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from cobolfield.validation.engine import CrossFieldRule, ValidationFailure, evaluate
from cobolfield.validation.fields import FieldDefinition, validate_fields
from cobolfield.validation.predicates import PREDICATES


def rule_from_mapping(payload: Mapping[str, Any]) -> CrossFieldRule:
    kind = str(payload["predicate"])
    if kind not in PREDICATES:
        raise ValueError(f"Unknown predicate {kind!r}; choose from {sorted(PREDICATES)}")
    options = dict(payload.get("options") or {})
    fields = tuple(str(name) for name in payload["fields"])
    return CrossFieldRule(
        name=str(payload.get("name") or kind),
        fields=fields,
        predicate=PREDICATES[kind](**options),
        message=str(payload.get("message") or "Invalid field combination"),
        primary_field=payload.get("primary_field"),
    )


@dataclass
class ScreenConfig:
    name: str
    fields: list[FieldDefinition] = field(default_factory=list)
    rules: list[CrossFieldRule] = field(default_factory=list)

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> ScreenConfig:
        return ScreenConfig(
            name=str(payload["name"]),
            fields=[FieldDefinition.from_mapping(item) for item in payload.get("fields") or []],
            rules=[rule_from_mapping(item) for item in payload.get("rules") or []],
        )

    def validate(self, values: Mapping[str, str | None]) -> list[ValidationFailure]:
        """Field checks first, then cross-field rules; nothing short-circuits."""
        return validate_fields(self.fields, values) + evaluate(self.rules, values)


def load_screen_config(path: Path) -> ScreenConfig:
    if path.suffix.lower() in {".yml", ".yaml"}:
        payload = yaml.safe_load(path.read_text())
    else:
        payload = json.loads(path.read_text())
    return ScreenConfig.from_mapping(payload)


def sample_screen_config() -> dict[str, Any]:
    return {
        "name": "COACTUP",
        "fields": [
            {"name": "acct_id", "length": 11, "picture": "99999999999", "mustfill": True},
            {"name": "ssn", "picture": "999-99-9999"},
            {"name": "state", "length": 2, "picture": "AA"},
            {"name": "zip", "length": 5, "attributes": "NUM,UNPROT"},
            {"name": "status", "length": 1, "attributes": "ASKIP,BRT"},
        ],
        "rules": [
            {
                "name": "state_zip_pair",
                "fields": ["state", "zip"],
                "predicate": "all_or_none",
                "primary_field": "zip",
                "message": "State and ZIP code must be provided together",
            },
            {
                "name": "credit_limit_order",
                "fields": ["cash_limit", "credit_limit"],
                "predicate": "decimal_order",
                "message": "Cash limit cannot exceed credit limit",
            },
        ],
    }
