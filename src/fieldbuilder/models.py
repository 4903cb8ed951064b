"""
Select options sourced from a pydantic model.

A select built without explicit options asks the bound model for them.
``ModelOptions`` adapts a pydantic model (class or instance) to the
``SelectOptionsProvider`` protocol using, in order:

    1. a ``get_<field>_options()`` method defined on the model
    2. the choices implied by a ``Literal[...]`` or ``Enum`` annotation

Usage:
    class UserSchema(BaseModel):
        gender: Literal["m", "f"] | None = None
        country: str

        @classmethod
        def get_country_options(cls):
            return {"es": "Spain", "mx": "Mexico"}

    fields.set_model(ModelOptions(UserSchema))
    fields.select("gender")   # options {"": ..., "m": "m", "f": "f"}
"""

from __future__ import annotations

import inspect
import logging
import types
from collections.abc import Mapping
from enum import Enum
from typing import Any, Literal, Union, get_args, get_origin

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ModelOptions:
    """SelectOptionsProvider backed by a pydantic model class or instance."""

    def __init__(self, model: type[BaseModel] | BaseModel) -> None:
        self.model = model

    def __repr__(self) -> str:
        return f"ModelOptions({self.model!r})"

    def options_for(self, name: str) -> dict[str, str]:
        is_class = isinstance(self.model, type)
        accessor_name = f"get_{name}_options"
        accessor = getattr(self.model, accessor_name, None)
        # On a model class only class and static methods can be called
        if is_class and not isinstance(
            inspect.getattr_static(self.model, accessor_name, None), (classmethod, staticmethod)
        ):
            accessor = None
        if callable(accessor):
            return _as_option_set(accessor())

        schema = self.model if is_class else type(self.model)
        field_info = schema.model_fields.get(name)
        if field_info is None:
            logger.debug("%s has no field %r, no options", schema.__name__, name)
            return {}

        annotation = field_info.annotation
        unwrapped = unwrap_optional(annotation)
        if unwrapped is not None:
            annotation = unwrapped

        choices = detect_choices(annotation)
        if choices is None:
            return {}
        return {str(value): label for value, label in choices}


def unwrap_optional(annotation: Any) -> type | None:
    """
    If annotation is Optional[X] or X | None, return X.
    Otherwise return None.
    """
    origin = get_origin(annotation)

    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        non_none_args = [a for a in args if a is not type(None)]
        if len(non_none_args) == 1 and type(None) in args:
            return non_none_args[0]

    return None


def detect_choices(annotation: Any) -> list[tuple[Any, str]] | None:
    """
    Return (value, label) pairs for a Literal or Enum annotation,
    or None for any other type.
    """
    if get_origin(annotation) is Literal:
        return [(val, str(val)) for val in get_args(annotation)]

    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return [(member.value, member.name.replace("_", " ").title()) for member in annotation]

    return None


def _as_option_set(options: Mapping[str, str] | Any) -> dict[str, str]:
    # Mappings and Django-style (value, label) pair lists both work with dict()
    return dict(options or {})
