"""
Conversion of validation results into the field-name -> messages store.

FieldBuilder only needs ``dict[str, list[str]]``. The helpers here accept
what a Django view usually has at hand:

    - a plain mapping (``{"email": ["Enter a valid email address."]}``)
    - a bound Django form (its ``errors`` ErrorDict is used)
    - a ``pydantic.ValidationError``
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from pydantic_core import ErrorDetails

ErrorStore = dict[str, list[str]]


def to_error_store(errors: Any) -> ErrorStore:
    """Normalize ``errors`` into an ErrorStore.

    Raises:
        TypeError: if ``errors`` is none of the supported shapes
    """
    if errors is None:
        return {}
    if isinstance(errors, PydanticValidationError):
        return from_validation_error(errors)
    if isinstance(errors, Mapping):
        return from_mapping(errors)
    # Bound Django form
    if hasattr(errors, "errors") and isinstance(errors.errors, Mapping):
        return from_mapping(errors.errors)
    raise TypeError(
        f"Cannot build field errors from {type(errors).__name__}; "
        "expected a mapping, a bound form or a pydantic ValidationError"
    )


def from_mapping(errors: Mapping[str, Any]) -> ErrorStore:
    """Copy a mapping of messages, treating a bare string as one message."""
    store: ErrorStore = {}
    for name, messages in errors.items():
        if isinstance(messages, str):
            store[name] = [messages]
        elif isinstance(messages, Iterable):
            store[name] = [str(message) for message in messages]
        else:
            store[name] = [str(messages)]
    return store


def from_validation_error(exc: PydanticValidationError) -> ErrorStore:
    """
    Attach each pydantic error to the field named by the first element of
    its location. Model-level errors (empty loc or ``__root__``) have no
    field to attach to and are skipped.
    """
    store: ErrorStore = {}
    for err in exc.errors():
        field_name = _error_field(err)
        if field_name is None:
            continue
        store.setdefault(field_name, []).append(err.get("msg", "Enter a valid value."))
    return store


def _error_field(error: ErrorDetails) -> str | None:
    loc = error.get("loc", ())
    if loc and loc[0] != "__root__":
        return str(loc[0])
    return None
