from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fast_constraints.core.localization import __, format_message
from fast_constraints.exceptions import SchemaError


class Constraint(BaseModel, ABC):
    """
    A single named rule bound to one field or parameter.

    Subclasses define a literal `kind`, their parameters as pydantic fields and
    the predicate in `is_satisfied`. Constraints are immutable and check their
    own parameters on construction, raising `SchemaError` when inconsistent.

        Range("number_between_one_and_ten", min=1, max=10)
        Pattern("ip_address", regexp=r"^[0-9]{1,3}\\.[0-9]{1,3}\\.[0-9]{1,3}\\.[0-9]{1,3}$")
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: str
    target_path: str = Field(..., description="Dotted path of the guarded field or parameter")
    message_template: Optional[str] = Field(
        default=None,
        description="Overrides the default message. May reference {value} and the constraint parameters.",
    )

    def __init__(self, target_path: Optional[str] = None, **data: Any) -> None:
        if target_path is not None:
            data["target_path"] = target_path
        if "target_path" not in data:
            raise SchemaError(f"[{type(self).__name__}] target path is required")
        super().__init__(**data)

    @field_validator("target_path", mode="before")
    @classmethod
    def _check_target_path(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise SchemaError(f"[{cls.__name__}] target path must be a non-empty string, got {value!r}")
        return value.strip()

    @abstractmethod
    def is_satisfied(self, value: Any) -> bool:
        """Return True when `value` holds for this constraint."""
        raise NotImplementedError

    @abstractmethod
    def default_message(self) -> tuple[str, str]:
        """Return the localization key and the English fallback template."""
        raise NotImplementedError

    def message_parameters(self) -> dict[str, Any]:
        """Placeholders available to the message template besides `{value}`."""
        return {}

    def render_message(self, value: Any) -> str:
        parameters = {**self.message_parameters(), "value": value}
        if self.message_template is not None:
            return format_message(self.message_template, parameters)

        key, default = self.default_message()
        return __(key, parameters, default=default)

    def check_field_type(self, annotation: Any) -> None:
        """
        Check this constraint against the declared type of its target field.

        Called at registration time when the input type is a pydantic model.
        Raises `SchemaError` on mismatch. No-op by default.
        """
        return None
