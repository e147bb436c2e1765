"""Cross-field validation over named field values.

Rules are evaluated in order and every failure is collected; a broken
predicate becomes a failure on the rule's primary field instead of aborting
the pass.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from cobolfield.config.logging import get_logger

logger = get_logger(__name__)

GENERIC_FAILURE_MESSAGE = "Validation error occurred"

# Predicates receive the rule's field values positionally. True/None pass,
# False fails with the rule message, a string fails with that string.
Predicate = Callable[..., "bool | str | None"]


@dataclass(frozen=True)
class ValidationFailure:
    field: str
    message: str
    rule: str | None = None


@dataclass(frozen=True)
class CrossFieldRule:
    name: str
    fields: tuple[str, ...]
    predicate: Predicate
    message: str = "Invalid field combination"
    primary_field: str | None = None

    def __post_init__(self) -> None:
        if not self.fields:
            raise ValueError(f"Rule {self.name!r} must name at least one field")
        object.__setattr__(self, "fields", tuple(self.fields))

    @property
    def target(self) -> str:
        return self.primary_field or self.fields[0]


def is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def evaluate_rule(
    rule: CrossFieldRule, values: Mapping[str, str | None]
) -> ValidationFailure | None:
    gathered = [values.get(name) for name in rule.fields]
    if all(is_blank(value) for value in gathered):
        logger.debug("rule_skipped", rule=rule.name)
        return None
    try:
        outcome = rule.predicate(*gathered)
    except Exception:
        logger.warning("rule_predicate_failed", rule=rule.name, exc_info=True)
        return ValidationFailure(rule.target, GENERIC_FAILURE_MESSAGE, rule.name)
    if isinstance(outcome, str):
        return ValidationFailure(rule.target, outcome or rule.message, rule.name)
    if outcome is None or outcome:
        return None
    return ValidationFailure(rule.target, rule.message, rule.name)


def evaluate(
    rules: Iterable[CrossFieldRule], values: Mapping[str, str | None]
) -> list[ValidationFailure]:
    """Run every rule and return the complete list of failures."""
    failures: list[ValidationFailure] = []
    for rule in rules:
        failure = evaluate_rule(rule, values)
        if failure is not None:
            failures.append(failure)
    return failures
