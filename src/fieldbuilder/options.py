"""Normalization of the attribute mapping callers pass to FieldBuilder."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .types import Attributes, FieldOptions

# Keys consumed by the builder itself; never rendered as HTML attributes.
META_KEYS = frozenset({"label", "template", "empty"})

# Keys consumed by the bundled access handler.
ACCESS_KEYS = frozenset({"allowed", "check", "can", "logged", "roles"})


def expand_abbreviations(attributes: Mapping[str, Any], abbreviations: Mapping[str, str]) -> Attributes:
    """Return a copy of ``attributes`` with aliased keys renamed.

    Values are left untouched and keys without an alias keep their name.
    """
    return {abbreviations.get(key, key): value for key, value in attributes.items()}


def normalize_options(
    attributes: Mapping[str, Any] | None,
    abbreviations: Mapping[str, str] | None = None,
) -> tuple[FieldOptions, Attributes]:
    """
    Split raw field attributes into builder options and HTML attributes.

    Abbreviations are expanded first. ``required`` is read as an option
    and also kept as an attribute, since it is a valid HTML attribute.
    A ``label`` of None counts as no label.

    Returns:
        (FieldOptions, attributes without the builder-only keys)
    """
    expanded = expand_abbreviations(attributes or {}, abbreviations or {})

    label = expanded.get("label")
    options = FieldOptions(
        label=str(label) if label is not None else None,
        template=expanded.get("template"),
        required=bool(expanded.get("required", False)),
        empty=expanded.get("empty"),
    )

    html_attributes = {
        key: value
        for key, value in expanded.items()
        if key not in META_KEYS and key not in ACCESS_KEYS
    }
    return options, html_attributes


def humanize(name: str) -> str:
    """Turn a field name into label text: ``first_name`` -> ``First name``."""
    text = name.replace("_", " ").replace(".", " ").strip()
    return text[:1].upper() + text[1:]
