"""
FieldBuilder: compose complete form fields from a name, a value and options.

A field is more than its control. Next to the ``<input>`` a template usually
needs a label, the field's validation errors, an error CSS class and, for
selects, an empty option. FieldBuilder resolves all of that and hands the
result to a template renderer, so form templates shrink to one call per
field.

Pipeline for every field:
    1. Abbreviation expansion
    2. Access check on the expanded attributes (denied fields render as ""
       with no collaborator call)
    3. Option normalization
    4. id, label, errors and CSS class resolution
    5. Option set resolution (select, radios, checkboxes)
    6. Control markup via the element renderer
    7. Field markup via the template renderer

Usage:
    from fieldbuilder import FieldBuilder
    from fieldbuilder.backends import (
        DjangoElementRenderer,
        DjangoTemplateRenderer,
        DjangoTranslator,
    )

    fields = FieldBuilder(DjangoElementRenderer(), DjangoTemplateRenderer(), DjangoTranslator())
    fields.set_errors(form)
    fields.text("name", "John", {"ph": "Your name"})
    fields.select("gender", {"m": "Male", "f": "Female"}, "m", {"empty": "Choose one"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .errors import ErrorStore, to_error_store
from .options import expand_abbreviations, humanize, normalize_options
from .types import (
    AccessHandler,
    Attributes,
    BindsModel,
    ElementRenderer,
    OptionSet,
    RenderingContext,
    SelectOptionsProvider,
    TemplateRenderer,
    Translator,
)

logger = logging.getLogger(__name__)


# Kinds rendered from a single value with the element renderer's (name, value, attrs) signature
INPUT_KINDS = ("text", "email", "url", "number", "date", "time", "textarea")

# Kinds that render a set of choices
CHOICE_KINDS = ("select", "select_multiple", "radios", "checkboxes")

FIELD_KINDS = (*INPUT_KINDS, *CHOICE_KINDS, "password", "checkbox")

DEFAULT_TEMPLATES: dict[str, str] = {
    "checkbox": "checkbox",
    "radios": "collections",
    "checkboxes": "collections",
}

DEFAULT_ERROR_CLASS = "error"


class FieldBuilder:
    """
    Builds form fields through injected collaborators.

    Args:
        elements: Renders the bare control (input, select, ...)
        theme: Renders the complete field from a RenderingContext
        translator: Resolves label and empty-option keys
        access_handler: Optional gate; fields it denies render as ""
        model: Optional provider of select options for fields built
            without an explicit option set
        humanize_labels: Replace untranslated labels with the humanized
            field name instead of echoing the translation key
    """

    def __init__(
        self,
        elements: ElementRenderer,
        theme: TemplateRenderer,
        translator: Translator,
        *,
        access_handler: AccessHandler | None = None,
        model: SelectOptionsProvider | None = None,
        humanize_labels: bool = False,
    ) -> None:
        self.elements = elements
        self.theme = theme
        self.translator = translator
        self.access_handler = access_handler
        self.model = model
        self.humanize_labels = humanize_labels

        self.errors: ErrorStore = {}
        self.abbreviations: dict[str, str] = {}
        self.css_classes: dict[str, str] = {}
        self.templates: dict[str, str] = dict(DEFAULT_TEMPLATES)
        self.default_template = "default"

    # Configuration

    def set_errors(self, errors: Any) -> None:
        """Replace the error store (mapping, bound Django form or pydantic ValidationError)."""
        self.errors = to_error_store(errors)

    def set_abbreviations(self, abbreviations: Mapping[str, str]) -> None:
        self.abbreviations = dict(abbreviations)

    def set_access_handler(self, handler: AccessHandler | None) -> None:
        self.access_handler = handler

    def set_model(self, model: SelectOptionsProvider | None) -> None:
        self.model = model

    def set_css_classes(self, classes: Mapping[str, str]) -> None:
        """
        Set default classes per field kind.

        The ``default`` key applies to kinds without their own entry and
        the ``error`` key replaces the class added to fields with errors.
        """
        self.css_classes = dict(classes)

    def set_templates(self, templates: Mapping[str, str]) -> None:
        """Map field kinds to template names, on top of the built-in ones."""
        self.templates = {**DEFAULT_TEMPLATES, **templates}

    def set_default_template(self, template: str) -> None:
        self.default_template = template

    def get_model(self) -> SelectOptionsProvider | None:
        """The explicitly set model, else the one bound to the element renderer."""
        if self.model is not None:
            return self.model
        if isinstance(self.elements, BindsModel):
            model = self.elements.get_model()
            if isinstance(model, SelectOptionsProvider):
                return model
        return None

    # Field kinds

    def text(self, name: str, value: Any = None, attributes: Mapping[str, Any] | None = None,
             extra: Mapping[str, Any] | None = None) -> str:
        return self.build("text", name, value, attributes, extra)

    def email(self, name: str, value: Any = None, attributes: Mapping[str, Any] | None = None,
              extra: Mapping[str, Any] | None = None) -> str:
        return self.build("email", name, value, attributes, extra)

    def url(self, name: str, value: Any = None, attributes: Mapping[str, Any] | None = None,
            extra: Mapping[str, Any] | None = None) -> str:
        return self.build("url", name, value, attributes, extra)

    def number(self, name: str, value: Any = None, attributes: Mapping[str, Any] | None = None,
               extra: Mapping[str, Any] | None = None) -> str:
        return self.build("number", name, value, attributes, extra)

    def date(self, name: str, value: Any = None, attributes: Mapping[str, Any] | None = None,
             extra: Mapping[str, Any] | None = None) -> str:
        return self.build("date", name, value, attributes, extra)

    def time(self, name: str, value: Any = None, attributes: Mapping[str, Any] | None = None,
             extra: Mapping[str, Any] | None = None) -> str:
        return self.build("time", name, value, attributes, extra)

    def textarea(self, name: str, value: Any = None, attributes: Mapping[str, Any] | None = None,
                 extra: Mapping[str, Any] | None = None) -> str:
        return self.build("textarea", name, value, attributes, extra)

    def password(self, name: str, attributes: Mapping[str, Any] | None = None,
                 extra: Mapping[str, Any] | None = None) -> str:
        """Password fields never echo a value back."""
        return self.build("password", name, None, attributes, extra)

    def checkbox(self, name: str, value: Any = 1, selected: bool = False,
                 attributes: Mapping[str, Any] | None = None, extra: Mapping[str, Any] | None = None) -> str:
        return self.build("checkbox", name, value, attributes, extra, options=selected)

    def select(self, name: str, options: Mapping[str, str] | None = None, selected: Any = None,
               attributes: Mapping[str, Any] | None = None, extra: Mapping[str, Any] | None = None) -> str:
        return self.build("select", name, selected, attributes, extra, options=options)

    def select_multiple(self, name: str, options: Mapping[str, str] | None = None, selected: Any = None,
                        attributes: Mapping[str, Any] | None = None,
                        extra: Mapping[str, Any] | None = None) -> str:
        return self.build("select_multiple", name, selected, attributes, extra, options=options)

    def radios(self, name: str, options: Mapping[str, str] | None = None, selected: Any = None,
               attributes: Mapping[str, Any] | None = None, extra: Mapping[str, Any] | None = None) -> str:
        return self.build("radios", name, selected, attributes, extra, options=options)

    def checkboxes(self, name: str, options: Mapping[str, str] | None = None, selected: Any = None,
                   attributes: Mapping[str, Any] | None = None, extra: Mapping[str, Any] | None = None) -> str:
        return self.build("checkboxes", name, selected, attributes, extra, options=options)

    # Pipeline

    def build(
        self,
        kind: str,
        name: str,
        value: Any = None,
        attributes: Mapping[str, Any] | None = None,
        extra: Mapping[str, Any] | None = None,
        options: Any = None,
    ) -> str:
        """
        Build a field of the given kind.

        ``value`` is the selection for choice kinds. ``options`` is the
        option set for choice kinds and the checked state for ``checkbox``.
        """
        if kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind {kind!r}; expected one of {', '.join(FIELD_KINDS)}")

        attributes = expand_abbreviations(attributes or {}, self.abbreviations)
        if self.access_handler is not None and not self.access_handler.check(dict(attributes)):
            logger.debug("Access denied to field %r", name)
            return ""

        # Already expanded; expanding twice would chain aliases
        field_options, attrs = normalize_options(attributes)

        html_id = attrs.get("id", name)
        label = self._label(name, field_options.label)
        errors = list(self.errors.get(name, []))

        attrs["class"] = self._classes(kind, attrs.get("class"), bool(errors))
        attrs["id"] = html_id

        if kind == "select_multiple":
            attrs["multiple"] = True
        elif kind == "select":
            attrs.pop("multiple", None)

        control = self._render_control(kind, name, value, attrs, options, field_options.empty)

        context: RenderingContext = {
            "htmlName": name,
            "id": html_id,
            "label": label,
            "input": control,
            "errors": errors,
            "hasErrors": bool(errors),
            "required": field_options.required,
        }
        family = "fields." + self.templates.get(kind, self.default_template)
        return self.theme.render(field_options.template, {**context, **(extra or {})}, family)

    def _render_control(self, kind: str, name: str, value: Any, attrs: Attributes,
                        options: Any, empty: str | bool | None) -> str:
        if kind in INPUT_KINDS:
            return getattr(self.elements, kind)(name, value, attrs)
        if kind == "password":
            return self.elements.password(name, attrs)
        if kind == "checkbox":
            return self.elements.checkbox(name, value, bool(options), attrs)

        option_set = self._options(name, options)
        if kind == "select":
            return self.elements.select(name, self._add_empty_option(name, option_set, empty), value, attrs)
        if kind == "select_multiple":
            return self.elements.select(name, option_set, value, attrs)
        return getattr(self.elements, kind)(name, option_set, value, attrs)

    def _label(self, name: str, explicit: str | None) -> str:
        if explicit is not None:
            return explicit
        key = f"validation.attributes.{name}"
        label = self.translator.get(key)
        if label == key and self.humanize_labels:
            return humanize(name)
        return label

    def _classes(self, kind: str, custom: Any, has_errors: bool) -> str:
        classes = [
            self.css_classes.get(kind, self.css_classes.get("default", "")),
            str(custom) if custom else "",
        ]
        if has_errors:
            classes.append(self.css_classes.get("error", DEFAULT_ERROR_CLASS))
        return " ".join(c for c in classes if c)

    def _options(self, name: str, options: Mapping[str, str] | None) -> OptionSet:
        if options is not None:
            return dict(options)
        model = self.get_model()
        if model is None:
            logger.debug("No model bound, field %r has no options", name)
            return {}
        return dict(model.options_for(name))

    def _add_empty_option(self, name: str, options: OptionSet, empty: str | bool | None) -> OptionSet:
        if empty is False:
            return options
        if isinstance(empty, str) and empty:
            caption = empty
        else:
            default_key = "validation.empty_option.default"
            caption = self._translate_first(f"validation.empty_option.{name}", default_key)
            if caption is None:
                # An untranslated default echoes its key, like any missing translation
                caption = default_key
        return {"": caption, **options}

    def _translate_first(self, *keys: str) -> str | None:
        """Return the first translation found among ``keys``, or None."""
        for key in keys:
            text = self.translator.get(key)
            if text != key:
                return text
        return None
