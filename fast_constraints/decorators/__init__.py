from .validated_decorator import validated

__all__ = [
    "validated",
]
