"""Tests for keyword-based merchant categorization."""

import pytest

from cardsense.core.models import Category
from cardsense.parsers.categorizer import CATEGORY_RULES, categorize


@pytest.mark.parametrize(
    ("description", "expected"),
    [
        ("SWIGGY ORDER 12345", Category.DINING),
        ("Starbucks Coffee Bandra", Category.DINING),
        ("FLIPKART INTERNET PVT", Category.SHOPPING),
        ("IRCTC E-TICKET", Category.TRAVEL),
        ("DMART AVENUE", Category.GROCERIES),
        ("NETFLIX.COM", Category.ENTERTAINMENT),
        ("BPCL FUEL STATION", Category.FUEL),
        ("TATA POWER ELECTRICITY", Category.UTILITIES),
        ("APOLLO PHARMACY", Category.HEALTHCARE),
        ("UDEMY COURSE", Category.EDUCATION),
    ],
)
def test_categorize_known_merchants(description: str, expected: Category) -> None:
    """Test each keyword group maps its merchants to the right category."""
    result = categorize(description)
    if result != expected:
        msg = f"Expected {expected} for {description!r}, got {result}"
        raise AssertionError(msg)


def test_categorize_defaults_to_other() -> None:
    """Test descriptions without any keyword fall back to other."""
    for description in ("NEFT TRANSFER TO SELF", "", None):
        if categorize(description) != Category.OTHER:
            msg = f"Expected other for {description!r}, got {categorize(description)}"
            raise AssertionError(msg)


def test_categorize_earlier_group_wins() -> None:
    """Test a description matching two groups takes the higher-priority category."""
    cases = {
        "SWIGGY INSTAMART GROCERY": Category.DINING,
        "AMAZON PRIME VIDEO": Category.SHOPPING,
        "UBER EATS FOOD": Category.DINING,
        "HOTEL BILL PAYMENT": Category.TRAVEL,
    }
    for description, expected in cases.items():
        if categorize(description) != expected:
            msg = f"Expected {expected} for {description!r}, got {categorize(description)}"
            raise AssertionError(msg)


def test_categorize_is_case_insensitive() -> None:
    """Test mixed-case input matches lower-case keywords."""
    if categorize("ZoMaTo") != Category.DINING:
        msg = "Expected mixed-case ZoMaTo to be dining"
        raise AssertionError(msg)


def test_fuel_keyword_needs_word_boundary() -> None:
    """Test 'hp' only counts as fuel at the end of a word."""
    if categorize("HP PETROL PUMP") != Category.FUEL:
        msg = "Expected HP PETROL PUMP to be fuel"
        raise AssertionError(msg)
    if categorize("WHPX") != Category.OTHER:
        msg = "Expected WHPX not to match the fuel group"
        raise AssertionError(msg)


def test_rule_order_is_fixed() -> None:
    """Test the priority order of the keyword groups."""
    order = [category for category, _ in CATEGORY_RULES]
    expected = [
        Category.DINING,
        Category.SHOPPING,
        Category.TRAVEL,
        Category.GROCERIES,
        Category.ENTERTAINMENT,
        Category.FUEL,
        Category.UTILITIES,
        Category.HEALTHCARE,
        Category.EDUCATION,
    ]
    if order != expected:
        msg = f"Unexpected rule order: {order}"
        raise AssertionError(msg)
