from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["Violation", "ValidationOutcome"]


class Violation(BaseModel):
    """Record of one constraint failing for one validation call."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    field_name: str = Field(description="Path of the offending field or parameter")
    message: str = Field(description="Rendered message")
    rejected_value: Any = Field(default=None, description="The value that failed the constraint")
    kind: str = Field(default="", description="Kind of the failed constraint")


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Complete result of one validation call.

    Violations are kept in evaluation order, consumers should not rely on it.
    """

    violations: tuple[Violation, ...] = ()

    # Rejected values may be lists or dicts, outcomes compare by value but are not hashable
    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def of(cls, violations: Iterable[Violation]) -> ValidationOutcome:
        return cls(tuple(violations))

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def field_names(self) -> list[str]:
        """Distinct offending field names, in first-seen order."""
        return list(dict.fromkeys(v.field_name for v in self.violations))

    def for_field(self, field_name: str) -> list[Violation]:
        return [v for v in self.violations if v.field_name == field_name]

    def merge(self, other: ValidationOutcome) -> ValidationOutcome:
        return ValidationOutcome(self.violations + other.violations)

    def __len__(self) -> int:
        return len(self.violations)

    def __iter__(self) -> Iterator[Violation]:
        return iter(self.violations)
