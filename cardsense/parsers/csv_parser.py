"""CSV bank statement parser.

Indian bank CSV exports differ in delimiter, preamble rows and column names.
The parser sniffs the delimiter, finds the header row by keyword, maps the
date/description/amount/debit/credit columns and then reads each data row.
Rows that cannot be read are reported in ``errors`` and skipped; the rest of
the file is still parsed.
"""

import csv
import math
import re

from cardsense.core.models import CsvParseResult, Direction, ParsedTransaction
from cardsense.core.utils import get_logger
from cardsense.parsers.categorizer import categorize
from cardsense.parsers.dates import parse_date

logger = get_logger("cardsense.parsers.csv")

DELIMITERS = (",", "\t", ";", "|")
DELIMITER_SAMPLE_LINES = 10
HEADER_SCAN_LINES = 15
MIN_COLUMNS = 3
MIN_LINES = 2
HEADER_MIN_MATCHES = 2
DEDUP_DESCRIPTION_LEN = 40

HEADER_KEYWORDS = re.compile(
    r"\b(date|txn\s*date|transaction\s*date|value\s*date|posting\s*date|narration|description|particulars"
    r"|details|remark|amount|debit|credit|withdrawal|deposit|dr|cr)\b",
    re.IGNORECASE,
)
DATE_COLUMN = re.compile(r"\b(date|txn\s*date|transaction\s*date|value\s*date|posting)\b")
DESCRIPTION_COLUMN = re.compile(r"\b(narration|description|particulars|details|remark|transaction\s*details)\b")
DEBIT_COLUMN = re.compile(r"\b(debit|withdrawal|dr)\b")
CREDIT_COLUMN = re.compile(r"\b(credit|deposit|cr)\b")
AMOUNT_COLUMN = re.compile(r"\b(amount|txn\s*amount|transaction\s*amount)\b")
PARENTHESISED = re.compile(r"\(([0-9.]+)\)")


class ColumnMap:
    """Positions of the interesting columns; ``None`` when a column is absent."""

    def __init__(self) -> None:
        """Start with every column unmapped."""
        self.date: int | None = None
        self.description: int | None = None
        self.amount: int | None = None
        self.debit: int | None = None
        self.credit: int | None = None

    @property
    def has_debit_credit(self) -> bool:
        """Whether separate debit or credit columns were found."""
        return self.debit is not None or self.credit is not None

    @property
    def has_amount(self) -> bool:
        """Whether a single signed amount column was found."""
        return self.amount is not None


def detect_delimiter(lines: list[str]) -> str:
    """Pick the delimiter that splits the leading lines into the most consistent columns."""
    sample = lines[:DELIMITER_SAMPLE_LINES]
    best = ","
    best_score = -1.0
    for delim in DELIMITERS:
        counts = [len(line.split(delim)) for line in sample]
        avg = sum(counts) / len(counts)
        score = avg * 2 if all(c == counts[0] for c in counts) else avg
        if score > best_score and avg >= MIN_COLUMNS:
            best_score = score
            best = delim
    return best


def detect_header_row(rows: list[list[str]]) -> int:
    """Return the index of the first row that looks like a header, defaulting to 0."""
    for idx, cols in enumerate(rows[:HEADER_SCAN_LINES]):
        matches = sum(1 for c in cols if HEADER_KEYWORDS.search(c.strip()))
        if matches >= HEADER_MIN_MATCHES:
            return idx
    return 0


def map_columns(header: list[str]) -> ColumnMap:
    """Map header cells to column roles; the first matching cell wins for each role."""
    col_map = ColumnMap()
    for idx, col in enumerate(header):
        c = col.strip().lower()
        if col_map.date is None and DATE_COLUMN.search(c):
            col_map.date = idx
        if col_map.description is None and DESCRIPTION_COLUMN.search(c):
            col_map.description = idx
        if col_map.debit is None and DEBIT_COLUMN.search(c) and "date" not in c:
            col_map.debit = idx
        if col_map.credit is None and CREDIT_COLUMN.search(c) and "date" not in c:
            col_map.credit = idx
        if col_map.amount is None and AMOUNT_COLUMN.search(c):
            col_map.amount = idx
    if col_map.description is None:
        taken = {col_map.date, col_map.debit, col_map.credit, col_map.amount}
        col_map.description = next((i for i in range(len(header)) if i not in taken), None)
    return col_map


def parse_amount(raw: str) -> float | None:
    """Parse an amount cell; ``(1234)`` is negative, blanks, dashes and non-finite values are None."""
    cleaned = re.sub(r"[\"'₹$,\s]", "", raw)
    cleaned = PARENTHESISED.sub(r"-\1", cleaned, count=1)
    if not cleaned or cleaned == "-":
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _cell(cols: list[str], idx: int | None) -> str:
    if idx is None or idx >= len(cols):
        return ""
    return cols[idx]


def _signed_amount(cols: list[str], col_map: ColumnMap) -> tuple[float, Direction]:
    """Read the signed amount column: negative is a debit, anything else a credit."""
    value = parse_amount(_cell(cols, col_map.amount))
    if value is None:
        return 0.0, Direction.DEBIT
    return abs(value), Direction.DEBIT if value < 0 else Direction.CREDIT


def _row_amount(cols: list[str], col_map: ColumnMap) -> tuple[float, Direction]:
    if col_map.has_debit_credit:
        debit = parse_amount(_cell(cols, col_map.debit))
        credit = parse_amount(_cell(cols, col_map.credit))
        if debit and debit > 0:
            return debit, Direction.DEBIT
        if credit and credit > 0:
            return credit, Direction.CREDIT
        if col_map.has_amount:
            return _signed_amount(cols, col_map)
        return 0.0, Direction.DEBIT
    return _signed_amount(cols, col_map)


def _dedup_key(txn: ParsedTransaction) -> str:
    return f"{txn.date}|{txn.amount}|{txn.description.lower()[:DEDUP_DESCRIPTION_LEN]}"


def _summarize(result: CsvParseResult) -> CsvParseResult:
    debits = [t for t in result.transactions if t.direction == Direction.DEBIT]
    breakdown: dict[str, float] = {}
    for txn in debits:
        breakdown[txn.category.value] = breakdown.get(txn.category.value, 0.0) + txn.amount
    result.total_spending = sum(t.amount for t in debits)
    result.category_breakdown = breakdown
    result.transaction_count = len(result.transactions)
    return result


def parse_csv(text: str) -> CsvParseResult:
    """Parse a CSV bank statement into transactions plus per-row error strings."""
    lines = [line for line in re.split(r"\r?\n", text) if line.strip()]
    if len(lines) < MIN_LINES:
        return CsvParseResult(errors=["File has too few rows"])

    delimiter = detect_delimiter(lines)
    rows = list(csv.reader(lines, delimiter=delimiter))
    header_idx = detect_header_row(rows)
    col_map = map_columns(rows[header_idx])
    logger.info(f"CSV layout: delimiter={delimiter!r}, header_row={header_idx}, columns={vars(col_map)}")

    if col_map.date is None:
        return CsvParseResult(errors=["Could not detect a date column"])
    if not col_map.has_debit_credit and not col_map.has_amount:
        return CsvParseResult(errors=["Could not detect amount, debit, or credit columns"])

    result = CsvParseResult()
    seen: set[str] = set()
    for row_number, cols in enumerate(rows[header_idx + 1 :], start=header_idx + 2):
        if len(cols) < MIN_COLUMNS:
            result.errors.append(f"Row {row_number}: expected at least {MIN_COLUMNS} columns, got {len(cols)}")
            continue
        date = parse_date(_cell(cols, col_map.date))
        if not date:
            result.errors.append(f"Row {row_number}: unrecognised date {_cell(cols, col_map.date)!r}")
            continue
        amount, direction = _row_amount(cols, col_map)
        if amount <= 0:
            result.errors.append(f"Row {row_number}: no usable amount")
            continue

        description = _cell(cols, col_map.description).strip().strip("\"'")
        txn = ParsedTransaction(
            date=date,
            description=description,
            amount=amount,
            direction=direction,
            category=categorize(description),
        )
        key = _dedup_key(txn)
        if key in seen:
            continue
        seen.add(key)
        result.transactions.append(txn)

    if result.errors:
        logger.warning(f"CSV parse skipped {len(result.errors)} rows: {result.errors[:5]}")
    return _summarize(result)
