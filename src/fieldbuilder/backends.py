"""
Django implementations of the FieldBuilder collaborators.

    DjangoElementRenderer    controls rendered with django.forms widgets
    DjangoTemplateRenderer   field templates rendered with a Django template Engine
    DjangoTranslator         gettext lookups
    DictTranslator           in-memory lookups (fixtures, simple projects)
    PermissionAccessHandler  access rules checked against a Django user
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from django import forms
from django.template import Context, Engine
from django.utils.translation import gettext

from .types import Attributes, OptionSet, SelectOptionsProvider

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


# Element rendering

INPUT_WIDGETS: dict[str, Callable[[], forms.Widget]] = {
    "text": forms.TextInput,
    "email": forms.EmailInput,
    "url": forms.URLInput,
    "number": forms.NumberInput,
    "date": lambda: forms.DateInput(attrs={"type": "date"}),
    "time": lambda: forms.TimeInput(attrs={"type": "time"}),
    "textarea": forms.Textarea,
}


class DjangoElementRenderer:
    """
    Renders bare controls with django.forms widgets.

    Attribute values of None or False are left out of the markup and True
    renders a bare boolean attribute (``required``, ``multiple``).

    Args:
        model: Provider of select options for the form's bound model
    """

    def __init__(self, model: SelectOptionsProvider | None = None) -> None:
        self.model = model

    def get_model(self) -> SelectOptionsProvider | None:
        return self.model

    def text(self, name: str, value: Any, attrs: Attributes) -> str:
        return self._input("text", name, value, attrs)

    def email(self, name: str, value: Any, attrs: Attributes) -> str:
        return self._input("email", name, value, attrs)

    def url(self, name: str, value: Any, attrs: Attributes) -> str:
        return self._input("url", name, value, attrs)

    def number(self, name: str, value: Any, attrs: Attributes) -> str:
        return self._input("number", name, value, attrs)

    def date(self, name: str, value: Any, attrs: Attributes) -> str:
        return self._input("date", name, value, attrs)

    def time(self, name: str, value: Any, attrs: Attributes) -> str:
        return self._input("time", name, value, attrs)

    def textarea(self, name: str, value: Any, attrs: Attributes) -> str:
        return self._input("textarea", name, value, attrs)

    def password(self, name: str, attrs: Attributes) -> str:
        return forms.PasswordInput(render_value=False).render(name, None, attrs=_html_attrs(attrs))

    def checkbox(self, name: str, value: Any, selected: bool, attrs: Attributes) -> str:
        widget = forms.CheckboxInput(check_test=lambda _value: selected)
        return widget.render(name, value, attrs=_html_attrs(attrs))

    def select(self, name: str, options: OptionSet, selected: Any, attrs: Attributes) -> str:
        html_attrs = _html_attrs(attrs)
        # SelectMultiple adds the multiple attribute itself
        multiple = html_attrs.pop("multiple", False)
        widget_class = forms.SelectMultiple if multiple else forms.Select
        return widget_class(choices=list(options.items())).render(name, selected, attrs=html_attrs)

    def radios(self, name: str, options: OptionSet, selected: Any, attrs: Attributes) -> str:
        widget = forms.RadioSelect(choices=list(options.items()))
        return widget.render(name, selected, attrs=_html_attrs(attrs))

    def checkboxes(self, name: str, options: OptionSet, selected: Any, attrs: Attributes) -> str:
        widget = forms.CheckboxSelectMultiple(choices=list(options.items()))
        return widget.render(name, selected, attrs=_html_attrs(attrs))

    def _input(self, kind: str, name: str, value: Any, attrs: Attributes) -> str:
        widget = INPUT_WIDGETS[kind]()
        return widget.render(name, value, attrs=_html_attrs(attrs))


def _html_attrs(attrs: Attributes) -> Attributes:
    return {key: value for key, value in attrs.items() if value is not None and value is not False}


# Field templates


class DjangoTemplateRenderer:
    """
    Renders field templates with a Django template Engine.

    The template name is ``<theme>/<template>.html`` where dots in the
    template (or family, when no override is given) become directories:
    ``fields.default`` -> ``fieldbuilder/fields/default.html``.

    Args:
        theme: Top-level template directory
        engine: Engine to render with; defaults to one searching the
            bundled templates. Pass ``django.template.engines["django"].engine``
            to honour the project's TEMPLATES setting.
    """

    def __init__(self, theme: str = "fieldbuilder", engine: Engine | None = None) -> None:
        self.theme = theme
        self.engine = engine or Engine(dirs=[str(TEMPLATES_DIR)], autoescape=True)

    def template_name(self, template: str | None, family: str) -> str:
        return f"{self.theme}/{(template or family).replace('.', '/')}.html"

    def render(self, template: str | None, context: Mapping[str, Any], family: str) -> str:
        name = self.template_name(template, family)
        logger.debug("Rendering field %r with %s", context.get("htmlName"), name)
        return self.engine.get_template(name).render(Context(dict(context)))


# Translation


class DjangoTranslator:
    """Looks keys up in the active gettext catalog; untranslated keys come back unchanged."""

    def get(self, key: str) -> str:
        return gettext(key)


class DictTranslator:
    """Looks keys up in a plain mapping."""

    def __init__(self, messages: Mapping[str, str] | None = None) -> None:
        self.messages = dict(messages or {})

    def get(self, key: str) -> str:
        return str(self.messages.get(key, key))


# Access control


class PermissionAccessHandler:
    """
    Checks field access rules against a Django user.

    Rules are read from the field attributes; a field without rules is
    always allowed:

        allowed  bool, False denies outright
        logged   True requires an authenticated user
        can      permission codename or list of them (all required)
        roles    group name or list of them (any is enough)
        check    callable receiving the user, returning bool

    Args:
        user: The request user, or None for anonymous requests
    """

    def __init__(self, user: Any = None) -> None:
        self.user = user

    @property
    def is_authenticated(self) -> bool:
        return bool(getattr(self.user, "is_authenticated", False))

    def check(self, attributes: Mapping[str, Any]) -> bool:
        if "allowed" in attributes and not attributes["allowed"]:
            return False

        if attributes.get("logged") and not self.is_authenticated:
            return False

        permissions = _as_list(attributes.get("can"))
        if permissions and not (self.is_authenticated and self.user.has_perms(permissions)):
            return False

        roles = _as_list(attributes.get("roles"))
        if roles and not (self.is_authenticated and self.user.groups.filter(name__in=roles).exists()):
            return False

        check = attributes.get("check")
        if callable(check) and not check(self.user):
            return False

        return True


def _as_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)
