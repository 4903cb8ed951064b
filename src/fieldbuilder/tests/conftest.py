"""Pytest configuration for FieldBuilder tests."""

from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Literal
from unittest.mock import Mock

import pytest
from pydantic import BaseModel

from fieldbuilder import FieldBuilder

ELEMENT_METHODS = [
    "text",
    "email",
    "url",
    "number",
    "date",
    "time",
    "textarea",
    "password",
    "checkbox",
    "select",
    "radios",
    "checkboxes",
]


def pytest_configure() -> None:
    """Configure minimal Django settings for widget and template rendering."""
    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            DATABASES={},
            INSTALLED_APPS=[
                "django.contrib.contenttypes",
            ],
            TEMPLATES=[
                {
                    "BACKEND": "django.template.backends.django.DjangoTemplates",
                    "DIRS": [],
                    "APP_DIRS": False,
                    "OPTIONS": {
                        "context_processors": [],
                    },
                }
            ],
            USE_I18N=True,
            USE_TZ=True,
        )
        django.setup()


class Role(str, Enum):
    """Sample enum for choice detection."""

    ADMIN = "admin"
    CONTENT_EDITOR = "editor"


class SampleUser(BaseModel):
    """Sample bound model: one accessor-backed field and two annotated choice fields."""

    name: str = ""
    gender: str | None = None
    language: Literal["en", "es"] = "en"
    role: Role | None = None

    def get_gender_options(self) -> dict[str, str]:
        return {"m": "Male", "f": "Female"}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def elements() -> Mock:
    """Element renderer double. It binds no model unless a test adds get_model."""
    renderer = Mock(spec=ELEMENT_METHODS)
    for method in ELEMENT_METHODS:
        getattr(renderer, method).return_value = f"<{method}>"
    return renderer


@pytest.fixture
def theme() -> Mock:
    renderer = Mock(spec=["render"])
    renderer.render.return_value = "html"
    return renderer


@pytest.fixture
def translator() -> Mock:
    """Translator double with no catalog: every key comes back unchanged."""
    lang = Mock(spec=["get"])
    lang.get.side_effect = lambda key: key
    return lang


@pytest.fixture
def builder(elements: Mock, theme: Mock, translator: Mock) -> FieldBuilder:
    return FieldBuilder(elements, theme, translator)


@pytest.fixture
def html_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for static HTML files."""
    html_path = tmp_path / "html"
    html_path.mkdir(exist_ok=True)
    return html_path


@pytest.fixture
def render_fields_to_file(html_dir: Path) -> Callable:
    """Write rendered fields into a complete HTML document.

    Returns a callable that accepts a list of field markup strings and an
    optional filename, and returns the written file path.
    """

    def _render(fields: list[str], filename: str = "fields.html") -> Path:
        html_content = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>FieldBuilder Test</title>
</head>
<body>
    <form method="post" id="test-form">
        {"".join(fields)}
        <button type="submit">Submit</button>
    </form>
</body>
</html>
"""
        file_path = html_dir / filename
        file_path.write_text(html_content)
        return file_path

    return _render


@pytest.fixture
def page_from_file(page):
    """Navigate a Playwright page to a local file.

    Returns a callable that accepts a file path, navigates to it using
    the file:// protocol, and returns the page ready for assertions.
    """

    def _navigate(file_path: Path):
        page.goto(f"file://{file_path.absolute()}")
        return page

    return _navigate
