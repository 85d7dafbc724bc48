"""Keyword-based merchant categorization.

Descriptions are tested against one keyword group per category, in a fixed
priority order. The first group that matches decides the category, so a
description such as "SWIGGY INSTAMART GROCERY" is dining, not groceries.
"""

import re

from cardsense.core.models import Category

# Ordering matters: earlier matches win.
CATEGORY_RULES: list[tuple[Category, re.Pattern[str]]] = [
    (
        Category.DINING,
        re.compile(r"swiggy|zomato|restaurant|food|cafe|dining|dominos|pizza|mcdonald|kfc|starbucks|burger"),
    ),
    (Category.SHOPPING, re.compile(r"amazon|flipkart|myntra|ajio|shopping|meesho|nykaa|tata\s*cliq")),
    (
        Category.TRAVEL,
        re.compile(r"uber|ola|travel|irctc|makemytrip|flight|hotel|goibibo|yatra|cleartrip|airport"),
    ),
    (
        Category.GROCERIES,
        re.compile(r"bigbasket|grocery|supermarket|dmart|reliance|more|blinkit|zepto|jiomart|grofers"),
    ),
    (
        Category.ENTERTAINMENT,
        re.compile(r"netflix|movie|entertainment|hotstar|prime|spotify|disney|zee|sony\s*liv|jio\s*cinema"),
    ),
    (Category.FUEL, re.compile(r"petrol|fuel|hp\b|iocl|bpcl|indian\s*oil|bharat\s*petro|shell")),
    (
        Category.UTILITIES,
        re.compile(r"electricity|water|gas|broadband|recharge|jio|airtel|vi\b|postpaid|prepaid|bill|tata\s*power"),
    ),
    (Category.HEALTHCARE, re.compile(r"hospital|medical|pharmacy|doctor|diagnostic|apollo|medplus|healthcare")),
    (Category.EDUCATION, re.compile(r"school|college|university|tuition|course|udemy|education|exam")),
]


def categorize(description: str | None) -> Category:
    """Map a free-text transaction description to a spending category."""
    desc = (description or "").lower()
    for category, pattern in CATEGORY_RULES:
        if pattern.search(desc):
            return category
    return Category.OTHER
