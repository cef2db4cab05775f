from __future__ import annotations

import inspect
import logging
import typing
from typing import Any, Callable, Hashable, Iterable, Optional, Type

from pydantic import BaseModel

from fast_constraints.contracts.constraint import Constraint
from fast_constraints.exceptions import DuplicateRegistrationError, SchemaError, UnknownTypeError
from fast_constraints.utils.annotation_utils import list_item_annotation, unwrap_annotation
from fast_constraints.utils.path_resolver import split_path
from fast_constraints.utils.serialisation import describe_type_id

__all__ = ["ConstraintRegistry"]


class ConstraintRegistry:
    """
    Maps an input type to its ordered constraints.

    A registry is populated once during start-up and then frozen. Population
    is not thread-safe. Once frozen, lookups need no synchronisation.

    Type identifiers are any hashable value: a pydantic model class, a route
    handler (for path parameters) or a plain string name.

        registry = ConstraintRegistry()
        registry.register(InputSchema, [Range("number_between_one_and_ten", min=1, max=10)])
        registry.register(get_by_id, [Range("id", min=5)])
        registry.freeze()
    """

    def __init__(self) -> None:
        self._constraints: dict[Hashable, tuple[Constraint, ...]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> ConstraintRegistry:
        """End the build phase. Further registrations raise `SchemaError`."""
        if not self._frozen:
            self._frozen = True
            logging.debug(f"Constraint registry frozen with {len(self._constraints)} type(s)")
        return self

    def register(
        self,
        type_id: Hashable,
        constraints: Iterable[Constraint],
        *,
        schema: Optional[Type[BaseModel]] = None,
    ) -> None:
        """
        Register the ordered constraints of an input type.

        Args:
            type_id: Identifier of the input type.
            constraints: Constraints in evaluation order.
            schema: Model describing the input shape. Defaults to `type_id`
                when it is a pydantic model class. When known, every target
                path and every Range bound is checked against its fields.

        Raises:
            DuplicateRegistrationError: If `type_id` is already registered.
            SchemaError: If the registry is frozen or a constraint does not fit the schema.
        """
        if self._frozen:
            raise SchemaError(
                f"Cannot register `{describe_type_id(type_id)}`, the constraint registry is frozen"
            )
        if type_id in self._constraints:
            raise DuplicateRegistrationError(type_id)

        ordered = tuple(constraints)
        for constraint in ordered:
            if not isinstance(constraint, Constraint):
                raise SchemaError(
                    f"`{describe_type_id(type_id)}` got {constraint!r}, expected a Constraint"
                )

        if schema is None and isinstance(type_id, type) and issubclass(type_id, BaseModel):
            schema = type_id
        if schema is not None:
            for constraint in ordered:
                self._check_against_schema(schema, constraint)
        elif callable(type_id) and not isinstance(type_id, type):
            for constraint in ordered:
                self._check_against_parameters(type_id, constraint)

        self._constraints[type_id] = ordered
        logging.debug(f"Registered {len(ordered)} constraint(s) for `{describe_type_id(type_id)}`")

    def register_schema(self, schema: Type[BaseModel]) -> None:
        """
        Register the constraints a model declares next to its fields:

            class InputSchema(BaseModel):
                ip_address: str

                class Meta:
                    constraints = [Pattern("ip_address", regexp=IPV4)]
        """
        meta = getattr(schema, "Meta", None)
        constraints = getattr(meta, "constraints", None)
        if constraints is None:
            raise SchemaError(f"`{schema.__name__}` does not declare Meta.constraints")
        self.register(schema, constraints)

    def lookup(self, type_id: Hashable) -> tuple[Constraint, ...]:
        try:
            return self._constraints[type_id]
        except KeyError:
            raise UnknownTypeError(type_id) from None

    def lookup_for(self, instance: Any) -> tuple[Constraint, ...]:
        """Lookup by the type of `instance`."""
        return self.lookup(type(instance))

    @property
    def type_ids(self) -> list[Hashable]:
        return list(self._constraints)

    def __contains__(self, type_id: Any) -> bool:
        try:
            return type_id in self._constraints
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._constraints)

    @staticmethod
    def _check_against_schema(schema: Type[BaseModel], constraint: Constraint) -> None:
        model: Any = schema
        annotation: Any = None
        for token in split_path(constraint.target_path):
            key = token[:-3] if token.endswith("[*]") else token
            fields = getattr(model, "model_fields", None)
            if fields is None:
                # Below a non-model type (dict, Any, ...), the shape is not known
                return
            if key not in fields:
                raise SchemaError(
                    f"[{type(constraint).__name__}] `{constraint.target_path}` is not a field of {schema.__name__}"
                )
            annotation = fields[key].annotation
            model = unwrap_annotation(annotation)
            if token.endswith("[*]"):
                annotation = list_item_annotation(annotation)
                model = unwrap_annotation(annotation)

        constraint.check_field_type(annotation)
    @staticmethod
    def _check_against_parameters(handler: Callable, constraint: Constraint) -> None:
        """Check a constraint registered under a handler against the handler's parameters."""
        try:
            parameters = inspect.signature(handler).parameters
        except (TypeError, ValueError):
            return
        try:
            hints = typing.get_type_hints(handler)
        except (NameError, TypeError):
            hints = {}

        tokens = split_path(constraint.target_path)
        key = tokens[0][:-3] if tokens[0].endswith("[*]") else tokens[0]
        if key not in parameters:
            if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in parameters.values()):
                return
            raise SchemaError(
                f"[{type(constraint).__name__}] `{constraint.target_path}` is not a parameter of "
                f"{describe_type_id(handler)}"
            )

        # Only direct parameters are checked, nested paths depend on the runtime value
        if len(tokens) == 1 and not tokens[0].endswith("[*]") and key in hints:
            constraint.check_field_type(hints[key])
