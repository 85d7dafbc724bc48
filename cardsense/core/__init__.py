"""Core package: provides models, database helpers, settings, errors, and shared utilities."""

from .errors import CardSenseError  # noqa: F401
from .models import Category, Direction, ParsedTransaction  # noqa: F401
from .settings import Settings, get_settings  # noqa: F401
from .utils import get_logger  # noqa: F401
