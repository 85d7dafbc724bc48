"""Tests for the CSV bank statement parser."""

from cardsense.core.models import Category, Direction
from cardsense.parsers.csv_parser import detect_delimiter, map_columns, parse_amount, parse_csv

DEBIT_CREDIT_CSV = """Date,Narration,Debit,Credit,Balance
01/01/2024,SWIGGY ORDER,450.00,,10000.00
02/01/2024,AMAZON PAY,1200.00,,8800.00
03/01/2024,SALARY,,50000.00,58800.00
04/01/2024,UBER TRIP,300.00,,58500.00
05/01/2024,NETFLIX,649.00,,57851.00
not-a-date,BROKEN ROW,100.00,,1.00
06/01/2024,NO AMOUNT,,,57851.00
"""


def test_partial_success_keeps_valid_rows() -> None:
    """Test five valid rows survive two malformed ones, which are reported."""
    result = parse_csv(DEBIT_CREDIT_CSV)
    if len(result.transactions) != 5:
        msg = f"Expected 5 transactions, got {len(result.transactions)}: {result.errors}"
        raise AssertionError(msg)
    if len(result.errors) != 2:
        msg = f"Expected 2 errors, got {result.errors}"
        raise AssertionError(msg)
    if not result.errors[0].startswith("Row 7:") or not result.errors[1].startswith("Row 8:"):
        msg = f"Unexpected error rows: {result.errors}"
        raise AssertionError(msg)


def test_debit_credit_columns() -> None:
    """Test debit and credit columns set direction, amount and category."""
    result = parse_csv(DEBIT_CREDIT_CSV)
    first, salary = result.transactions[0], result.transactions[2]
    if (first.date, first.amount, first.direction, first.category) != (
        "2024-01-01",
        450.0,
        Direction.DEBIT,
        Category.DINING,
    ):
        msg = f"Unexpected first transaction: {first}"
        raise AssertionError(msg)
    if salary.direction != Direction.CREDIT or salary.amount != 50000.0:
        msg = f"Unexpected salary transaction: {salary}"
        raise AssertionError(msg)
    if result.total_spending != 2599.0 or result.category_breakdown.get("shopping") != 1200.0:
        msg = f"Unexpected summary: {result.total_spending}, {result.category_breakdown}"
        raise AssertionError(msg)


def test_signed_amount_column_with_preamble_and_semicolons() -> None:
    """Test a semicolon export with preamble rows and a single signed amount column."""
    text = (
        "Account statement;ICICI Bank;Savings\n"
        "Customer;A KUMAR;XXXX1234\n"
        "Transaction Date;Particulars;Amount;Balance\n"
        "12-Jan-2024;BIGBASKET ORDER;-1,250.50;8000\n"
        "13-Jan-2024;IMPS FROM FRIEND;2000;10000\n"
        "14-Jan-2024;APOLLO PHARMACY;(300.00);9700\n"
    )
    result = parse_csv(text)
    summary = [(t.date, t.amount, t.direction, t.category) for t in result.transactions]
    expected = [
        ("2024-01-12", 1250.5, Direction.DEBIT, Category.GROCERIES),
        ("2024-01-13", 2000.0, Direction.CREDIT, Category.OTHER),
        ("2024-01-14", 300.0, Direction.DEBIT, Category.HEALTHCARE),
    ]
    if summary != expected:
        msg = f"Unexpected transactions: {summary} (errors: {result.errors})"
        raise AssertionError(msg)


def test_quoted_fields_keep_embedded_delimiters() -> None:
    """Test quoted descriptions containing commas stay in one column."""
    text = 'Date,Description,Amount\n01/02/2024,"ZOMATO, BANGALORE",-320.00\n02/02/2024,"HP PETROL, MG ROAD",-1500\n'
    result = parse_csv(text)
    descriptions = [t.description for t in result.transactions]
    if descriptions != ["ZOMATO, BANGALORE", "HP PETROL, MG ROAD"]:
        msg = f"Unexpected descriptions: {descriptions}"
        raise AssertionError(msg)


def test_duplicate_rows_in_one_file_are_dropped() -> None:
    """Test identical rows within a single file are stored once."""
    text = "Date,Narration,Withdrawal,Deposit\n01/01/2024,DMART,500,\n01/01/2024,DMART,500,\n02/01/2024,DMART,500,\n"
    result = parse_csv(text)
    if len(result.transactions) != 2 or result.errors:
        msg = f"Expected 2 transactions and no errors, got {result.transactions} / {result.errors}"
        raise AssertionError(msg)


def test_unusable_layouts_report_errors() -> None:
    """Test whole-file failures come back as errors with no transactions."""
    cases = {
        "Date,Narration,Amount\n": "File has too few rows",
        "Narration,Amount,Balance\nSWIGGY,100,200\n": "Could not detect a date column",
        "Date,Narration,Balance\n01/01/2024,SWIGGY,200\n": "Could not detect amount, debit, or credit columns",
    }
    for text, error in cases.items():
        result = parse_csv(text)
        if result.transactions or result.errors != [error]:
            msg = f"Expected [{error!r}], got {result.errors}"
            raise AssertionError(msg)


def test_detect_delimiter() -> None:
    """Test tab, pipe and the comma default."""
    if detect_delimiter(["a\tb\tc", "1\t2\t3"]) != "\t":
        msg = "Expected tab delimiter"
        raise AssertionError(msg)
    if detect_delimiter(["a|b|c|d", "1|2|3|4"]) != "|":
        msg = "Expected pipe delimiter"
        raise AssertionError(msg)
    if detect_delimiter(["just text", "more text"]) != ",":
        msg = "Expected comma default"
        raise AssertionError(msg)


def test_map_columns_description_fallback() -> None:
    """Test the first unmapped column stands in for a missing description column."""
    col_map = map_columns(["Value Date", "Merchant", "Amount"])
    if (col_map.date, col_map.description, col_map.amount) != (0, 1, 2):
        msg = f"Unexpected mapping: {vars(col_map)}"
        raise AssertionError(msg)


def test_parse_amount_cells() -> None:
    """Test currency symbols, separators, parentheses and blanks."""
    cases = {"₹1,250.50": 1250.5, "(300.00)": -300.0, "-45": -45.0, "": None, "-": None, "abc": None}
    for raw, expected in cases.items():
        if parse_amount(raw) != expected:
            msg = f"Expected {expected} for {raw!r}, got {parse_amount(raw)}"
            raise AssertionError(msg)


def test_non_finite_amounts_are_row_errors() -> None:
    """Test NaN and infinite amount cells are reported per row while the rest of the file parses."""
    text = (
        "Date,Narration,Amount\n"
        "01/01/2024,SWIGGY,NaN\n"
        "02/01/2024,ZOMATO,-100\n"
        "03/01/2024,UBER,-inf\n"
        "04/01/2024,OLA,inf\n"
    )
    result = parse_csv(text)
    if [t.description for t in result.transactions] != ["ZOMATO"]:
        msg = f"Expected only ZOMATO, got {result.transactions}"
        raise AssertionError(msg)
    if result.errors != ["Row 2: no usable amount", "Row 4: no usable amount", "Row 5: no usable amount"]:
        msg = f"Unexpected errors: {result.errors}"
        raise AssertionError(msg)
    if result.total_spending != 100.0:
        msg = f"Expected a finite total of 100.0, got {result.total_spending}"
        raise AssertionError(msg)
    for raw in ("nan", "Infinity", "-inf", "1e400"):
        if parse_amount(raw) is not None:
            msg = f"Expected None for {raw!r}, got {parse_amount(raw)}"
            raise AssertionError(msg)
