"""Parsers package: categorization, date normalization, and PDF/CSV statement extraction."""

from .categorizer import categorize  # noqa: F401
from .csv_parser import parse_csv  # noqa: F401
from .dates import normalize_date, parse_date  # noqa: F401
from .text_extractor import extract_transactions, infer_direction  # noqa: F401
