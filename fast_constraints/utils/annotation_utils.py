import types
import typing
from typing import Annotated, Any, Union


def unwrap_annotation(annotation: Any) -> Any:
    """Strip Annotated[...] and Optional[...] so the underlying field type remains."""
    origin = typing.get_origin(annotation)
    if origin is Annotated:
        return unwrap_annotation(typing.get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return unwrap_annotation(args[0])
    return annotation


def list_item_annotation(annotation: Any) -> Any:
    """`list[int]` -> `int`. Anything without type arguments -> `Any`."""
    args = typing.get_args(unwrap_annotation(annotation))
    return args[0] if args else Any
