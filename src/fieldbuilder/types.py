"""
Collaborator protocols and value types used by FieldBuilder.

FieldBuilder never imports a concrete renderer, translator or model layer.
Everything it talks to is described here as a Protocol, so Django-backed
implementations (see ``fieldbuilder.backends``) and test doubles are
interchangeable.

Usage:
    from fieldbuilder import FieldBuilder
    from fieldbuilder.backends import DictTranslator

    class MyTheme:
        def render(self, template, context, family):
            return f"<div>{context['label']} {context['input']}</div>"

    fields = FieldBuilder(my_elements, MyTheme(), DictTranslator({}))
    fields.text("name", "John")
"""

from collections.abc import Mapping
from typing import Any, Protocol, TypedDict, runtime_checkable

from pydantic import BaseModel, ConfigDict

Attributes = dict[str, Any]
OptionSet = dict[str, str]


@runtime_checkable
class ElementRenderer(Protocol):
    """Produces raw control markup for a field (no label, no errors)."""

    def text(self, name: str, value: Any, attrs: Attributes) -> str: ...
    def select(self, name: str, options: OptionSet, selected: Any, attrs: Attributes) -> str: ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """Wraps control markup into the final field markup."""

    def render(self, template: str | None, context: Mapping[str, Any], family: str) -> str: ...


@runtime_checkable
class Translator(Protocol):
    """Key lookup. Must return the key itself when there is no translation."""

    def get(self, key: str) -> str: ...


@runtime_checkable
class AccessHandler(Protocol):
    """Decides whether a field may be rendered at all."""

    def check(self, attributes: Mapping[str, Any]) -> bool: ...


@runtime_checkable
class SelectOptionsProvider(Protocol):
    """Supplies choices for fields built without an explicit option set."""

    def options_for(self, name: str) -> Mapping[str, str]: ...


@runtime_checkable
class BindsModel(Protocol):
    """An element renderer that carries the model the form is bound to."""

    def get_model(self) -> SelectOptionsProvider | None: ...


class FieldOptions(BaseModel):
    """
    Builder-only options extracted from a field's attribute mapping.

    Attributes:
        label: Explicit label text; None means "look it up"
        template: Template override handed to the theme; None uses the family default
        required: Whether the field is flagged as required in the context
        empty: Select only. False disables the empty option, a non-empty
            string is used as its caption, anything else means "translate"
    """

    model_config = ConfigDict(frozen=True)

    label: str | None = None
    template: str | None = None
    required: bool = False
    empty: str | bool | None = None


class RenderingContext(TypedDict):
    """The variables every field template receives (plus any extras)."""

    htmlName: str
    id: str
    label: str
    input: str
    errors: list[str]
    hasErrors: bool
    required: bool
