"""
Project-wide FieldBuilder configuration from Django settings.

    # settings.py
    FIELDBUILDER = {
        "ABBREVIATIONS": {"ph": "placeholder"},
        "CSS_CLASSES": {"default": "form-control", "error": "is-invalid"},
        "TEMPLATES": {"checkbox": "checkbox"},
        "DEFAULT_TEMPLATE": "default",
        "THEME": "fieldbuilder",
        "HUMANIZE_LABELS": False,
    }

    # views.py
    fields = field_builder(model=ModelOptions(UserSchema), errors=form, user=request.user)
"""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings

from .backends import DjangoElementRenderer, DjangoTemplateRenderer, DjangoTranslator, PermissionAccessHandler
from .builder import FieldBuilder
from .types import SelectOptionsProvider

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "ABBREVIATIONS": {},
    "CSS_CLASSES": {},
    "TEMPLATES": {},
    "DEFAULT_TEMPLATE": "default",
    "THEME": "fieldbuilder",
    "HUMANIZE_LABELS": False,
}


def get_setting(name: str) -> Any:
    """Return ``settings.FIELDBUILDER[name]``, falling back to the default."""
    if name not in DEFAULTS:
        raise KeyError(f"Unknown FIELDBUILDER setting {name!r}")
    user_settings = getattr(settings, "FIELDBUILDER", {})
    return user_settings.get(name, DEFAULTS[name])


def field_builder(
    model: SelectOptionsProvider | None = None,
    errors: Any = None,
    user: Any = None,
) -> FieldBuilder:
    """
    Build a FieldBuilder wired with the Django backends and the project settings.

    Args:
        model: Options provider for selects built without options
        errors: Anything FieldBuilder.set_errors accepts
        user: When given, fields are gated by a PermissionAccessHandler for this user
    """
    builder = FieldBuilder(
        DjangoElementRenderer(model=model),
        DjangoTemplateRenderer(theme=get_setting("THEME")),
        DjangoTranslator(),
        access_handler=PermissionAccessHandler(user) if user is not None else None,
        humanize_labels=get_setting("HUMANIZE_LABELS"),
    )
    builder.set_abbreviations(get_setting("ABBREVIATIONS"))
    builder.set_css_classes(get_setting("CSS_CLASSES"))
    builder.set_templates(get_setting("TEMPLATES"))
    builder.set_default_template(get_setting("DEFAULT_TEMPLATE"))
    if errors is not None:
        builder.set_errors(errors)

    logger.debug("Configured FieldBuilder with theme %s", get_setting("THEME"))
    return builder
