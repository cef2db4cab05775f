from __future__ import annotations

import logging
from typing import Any, Hashable, Iterable, Optional

from fast_constraints.contracts.constraint import Constraint
from fast_constraints.core.outcome import ValidationOutcome, Violation
from fast_constraints.core.registry import ConstraintRegistry
from fast_constraints.exceptions import ValidationFailure
from fast_constraints.utils.path_resolver import resolve_path
from fast_constraints.utils.serialisation import describe_type_id

__all__ = ["Validator", "validate"]


def validate(instance: Any, constraints: Iterable[Constraint]) -> ValidationOutcome:
    """
    Evaluate every constraint against `instance`.

    Constraints are evaluated in the given order and evaluation never stops at
    the first failure: the outcome carries one violation per failed
    constraint (per list item for `[*]` paths).

    Args:
        instance: A mapping (decoded JSON, path or query parameters) or any
            object exposing the target paths as attributes.
        constraints: The ordered constraints, usually from `ConstraintRegistry.lookup`.

    Raises:
        MissingPathError: If a target path does not resolve on `instance`.
            This is a schema error, never a violation.
    """
    violations: list[Violation] = []
    for constraint in constraints:
        for field_name, value in resolve_path(instance, constraint.target_path):
            if constraint.is_satisfied(value):
                continue
            violations.append(Violation(
                field_name=field_name,
                message=constraint.render_message(value),
                rejected_value=value,
                kind=constraint.kind,
            ))
    return ValidationOutcome(tuple(violations))


class Validator:
    """Registry aware front of `validate`. Holds no state besides the (frozen) registry."""

    def __init__(self, registry: ConstraintRegistry) -> None:
        self.registry = registry

    def validate(self, instance: Any, type_id: Optional[Hashable] = None) -> ValidationOutcome:
        """
        Validate `instance` against the constraints of `type_id`.

        When `type_id` is omitted, the type of `instance` is used.

        Raises:
            UnknownTypeError: If nothing is registered for the type.
            MissingPathError: If a target path does not resolve on `instance`.
        """
        key = type(instance) if type_id is None else type_id
        outcome = validate(instance, self.registry.lookup(key))
        if not outcome.is_valid:
            logging.debug(
                f"Validation of `{describe_type_id(key)}` failed: "
                f"{', '.join(v.field_name for v in outcome)}"
            )
        return outcome

    def check(self, instance: Any, type_id: Optional[Hashable] = None, *, source: Optional[str] = None) -> Any:
        """
        Validate and raise on failure.

        Returns:
            The unchanged `instance`.

        Raises:
            ValidationFailure: If at least one constraint did not hold.
        """
        outcome = self.validate(instance, type_id)
        if not outcome.is_valid:
            raise ValidationFailure(outcome, source=source)
        return instance
