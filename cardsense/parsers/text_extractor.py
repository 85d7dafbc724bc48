"""Line-based transaction extraction for free text pulled out of statement PDFs.

Every non-blank line is inspected on its own. A line becomes a transaction only
when it carries both a date-shaped token and an amount-shaped token; anything
else (headers, balances, page furniture) is skipped without complaint.
"""

import math
import re

from cardsense.core.models import Direction, ParsedTransaction
from cardsense.core.utils import get_logger
from cardsense.parsers.categorizer import categorize
from cardsense.parsers.dates import normalize_date

logger = get_logger("cardsense.parsers.text")

DATE_TOKEN = re.compile(r"\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}")
AMOUNT_TOKEN = re.compile(r"(?:₹|\b(?:rs|inr)\.?)?\s*(\d+(?:,\d+)*(?:\.\d{2})?)", re.IGNORECASE)
CREDIT_LINE_WORDS = ("credit", "deposit")
CREDIT_DESCRIPTION_WORDS = ("salary", "refund")


def parse_amount(token: str) -> float | None:
    """Strip thousands separators from a numeric token and parse it; overflowing digit runs are None."""
    value = float(token.replace(",", ""))
    return value if math.isfinite(value) else None


def infer_direction(line: str, description: str) -> Direction:
    """Guess debit/credit from keywords.

    Credit when the line mentions "credit" or "deposit", or the description
    mentions "salary" or "refund". This can misfire on merchants whose names
    contain those words; there is no ledger signal to check against.
    """
    lowered_line = line.lower()
    lowered_desc = description.lower()
    if any(word in lowered_line for word in CREDIT_LINE_WORDS) or any(
        word in lowered_desc for word in CREDIT_DESCRIPTION_WORDS
    ):
        return Direction.CREDIT
    return Direction.DEBIT


def _find_amount(line: str, date_span: tuple[int, int]) -> re.Match[str] | None:
    """Pick the amount token outside the date, preferring ones with a currency marker or paise."""
    start, end = date_span
    candidates = [m for m in AMOUNT_TOKEN.finditer(line) if m.end() <= start or m.start() >= end]
    for m in candidates:
        if "." in m.group(1) or not m.group(0).strip()[0].isdigit():
            return m
    return candidates[0] if candidates else None


def parse_line(line: str) -> ParsedTransaction | None:
    """Extract one transaction from a statement line, or None to skip the line."""
    date_match = DATE_TOKEN.search(line)
    if not date_match:
        return None
    amount_match = _find_amount(line, date_match.span())
    if not amount_match:
        return None
    amount = parse_amount(amount_match.group(1))
    if amount is None or amount <= 0:
        return None

    spans = sorted([date_match.span(), amount_match.span()])
    description = (line[: spans[0][0]] + line[spans[0][1] : spans[1][0]] + line[spans[1][1] :]).strip()
    raw_date = date_match.group(0)
    return ParsedTransaction(
        date=normalize_date(raw_date) or raw_date,
        description=description,
        amount=amount,
        direction=infer_direction(line, description),
        category=categorize(description),
    )


def extract_transactions(raw_text: str) -> list[ParsedTransaction]:
    """Extract transactions from raw statement text, keeping statement order."""
    lines = [line for line in raw_text.splitlines() if line.strip()]
    results = [parse_line(line) for line in lines]
    transactions = [txn for txn in results if txn is not None]
    logger.info(f"Extracted {len(transactions)} transactions from {len(lines)} lines")
    return transactions
