from importlib.metadata import PackageNotFoundError, version

from .builder import FieldBuilder
from .models import ModelOptions
from .types import FieldOptions, RenderingContext

try:
    __version__ = version("django-fieldbuilder")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "FieldBuilder",
    "FieldOptions",
    "ModelOptions",
    "RenderingContext",
    "__version__",
]
