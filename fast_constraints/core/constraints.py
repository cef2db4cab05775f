"""Built-in constraint kinds."""

import math
import re
import typing
from collections.abc import Sized
from decimal import Decimal
from numbers import Real
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Field, TypeAdapter, ValidationError, field_validator, model_validator

from fast_constraints.contracts.constraint import Constraint
from fast_constraints.exceptions import SchemaError
from fast_constraints.utils.annotation_utils import unwrap_annotation

__all__ = [
    "Required",
    "NotEmpty",
    "NotBlank",
    "Range",
    "Pattern",
    "Email",
    "AnyConstraint",
    "parse_constraint",
    "EMAIL_REGEX",
]

# local-part@domain, domain made of dot separated labels with at least one dot
_ATOM = r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+"
_LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
EMAIL_REGEX = re.compile(rf"{_ATOM}(?:\.{_ATOM})*@{_LABEL}(?:\.{_LABEL})+")

Number = Union[int, float, Decimal]


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        return False
    if isinstance(value, Decimal):
        return not value.is_nan()
    return not (isinstance(value, float) and math.isnan(value))


class Required(Constraint):
    """Value must be present."""

    kind: Literal["required"] = "required"

    def is_satisfied(self, value: Any) -> bool:
        return value is not None

    def default_message(self) -> tuple[str, str]:
        return "validation.required", "must not be null"


class NotEmpty(Constraint):
    """Value must be a collection or string with at least one element."""

    kind: Literal["not_empty"] = "not_empty"

    def is_satisfied(self, value: Any) -> bool:
        return isinstance(value, Sized) and len(value) > 0

    def default_message(self) -> tuple[str, str]:
        return "validation.not_empty", "must not be empty"


class NotBlank(Constraint):
    """Value must be a string with at least one non-whitespace character."""

    kind: Literal["not_blank"] = "not_blank"

    def is_satisfied(self, value: Any) -> bool:
        return isinstance(value, str) and value.strip() != ""

    def default_message(self) -> tuple[str, str]:
        return "validation.not_blank", "must not be blank"


class Range(Constraint):
    """
    Inclusive numeric range. A missing bound is open (minus or plus infinity).

    `None` values pass, use `Required` to reject absence.
    """

    kind: Literal["range"] = "range"
    min: Optional[Number] = None
    max: Optional[Number] = None

    @field_validator("min", "max", mode="before")
    @classmethod
    def _check_bound(cls, value: Any) -> Any:
        if value is None:
            return value
        if not _is_number(value):
            raise SchemaError(f"[Range] bounds must be numbers (not NaN), got {value!r}")
        return value

    @model_validator(mode="after")
    def _check_bounds(self) -> "Range":
        if self.min is None and self.max is None:
            raise SchemaError(f"[Range] `{self.target_path}` needs at least one of min or max")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise SchemaError(f"[Range] `{self.target_path}` has min {self.min} greater than max {self.max}")
        return self

    def is_satisfied(self, value: Any) -> bool:
        if value is None:
            return True
        if not _is_number(value):
            return False
        if self.min is not None and not value >= self.min:
            return False
        if self.max is not None and not value <= self.max:
            return False
        return True

    def default_message(self) -> tuple[str, str]:
        if self.max is None:
            return "validation.range.min", "must be greater than or equal to {min}"
        if self.min is None:
            return "validation.range.max", "must be less than or equal to {max}"
        return "validation.range.between", "must be between {min} and {max}"

    def message_parameters(self) -> dict[str, Any]:
        return {"min": self.min, "max": self.max}

    def check_field_type(self, annotation: Any) -> None:
        field_type = unwrap_annotation(annotation)
        if field_type is Any or typing.get_origin(field_type) is not None or not isinstance(field_type, type):
            # Unions, generics and literals are not checked
            return

        if field_type is bool or not issubclass(field_type, (int, float, Decimal)):
            raise SchemaError(
                f"[Range] `{self.target_path}` is declared as {field_type.__name__}, which is not numeric"
            )

        for bound in (self.min, self.max):
            if bound is None or (isinstance(bound, float) and math.isinf(bound)):
                # Infinite bounds are open
                continue
            if issubclass(field_type, int) and not _is_integral(bound):
                raise SchemaError(
                    f"[Range] `{self.target_path}` is an int field but bound {bound!r} is fractional"
                )
            if issubclass(field_type, Decimal) and isinstance(bound, float):
                raise SchemaError(
                    f"[Range] `{self.target_path}` is a Decimal field but bound {bound!r} is a float"
                )


def _is_integral(bound: Any) -> bool:
    if isinstance(bound, int):
        return True
    if isinstance(bound, float):
        return bound.is_integer()
    if isinstance(bound, Decimal):
        return bound == bound.to_integral_value()
    return False


class Pattern(Constraint):
    """
    The entire string must match `regexp`.

    Matching is anchored at both ends, a valid substring followed by extra
    characters fails. `None` values pass.
    """

    kind: Literal["pattern"] = "pattern"
    regexp: str
    flags: int = 0

    @model_validator(mode="after")
    def _check_regexp(self) -> "Pattern":
        try:
            re.compile(self.regexp, self.flags)
        except re.error as e:
            raise SchemaError(f"[Pattern] `{self.target_path}` has an invalid regexp {self.regexp!r}: {e}") from e
        return self

    def is_satisfied(self, value: Any) -> bool:
        if value is None:
            return True
        if not isinstance(value, str):
            return False
        return re.fullmatch(self.regexp, value, self.flags) is not None

    def default_message(self) -> tuple[str, str]:
        return "validation.pattern", 'must match "{regexp}"'

    def message_parameters(self) -> dict[str, Any]:
        return {"regexp": self.regexp}


class Email(Constraint):
    """Conservative email address check: local-part@domain.tld. `None` values pass."""

    kind: Literal["email"] = "email"

    def is_satisfied(self, value: Any) -> bool:
        if value is None:
            return True
        return isinstance(value, str) and EMAIL_REGEX.fullmatch(value) is not None

    def default_message(self) -> tuple[str, str]:
        return "validation.email", "must be a well-formed email address"


AnyConstraint = Annotated[
    Union[Required, NotEmpty, NotBlank, Range, Pattern, Email],
    Field(discriminator="kind"),
]

_constraint_adapter: TypeAdapter = TypeAdapter(AnyConstraint)


def parse_constraint(data: dict) -> Constraint:
    """
    Build a constraint from its declarative form, e.g. `{"kind": "range", "target_path": "id", "min": 5}`.

    Raises:
        SchemaError: If the entry is malformed.
    """
    try:
        return _constraint_adapter.validate_python(data)
    except ValidationError as e:
        raise SchemaError(f"Invalid constraint declaration {data!r}: {e}") from e
