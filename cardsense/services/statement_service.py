"""Statement upload orchestration.

Sequences one upload end to end: detect the file kind, extract transactions
from PDF text or CSV rows, summarize them, and persist them to the spending
store. Everything runs synchronously inside the request. Persistence is a
single attempt; a failure is reported to the caller and the summary computed
for that upload is dropped. Uploading the same statement twice stores the
transactions twice, since rows are not deduplicated across uploads.
"""

from collections.abc import Callable
from enum import StrEnum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from cardsense.core.db import SpendingRepository
from cardsense.core.errors import EmptyStatementError, PersistenceError, StatementParseError, UnsupportedFileError
from cardsense.core.models import (
    Direction,
    MerchantSpend,
    ParsedTransaction,
    StatementAnalysis,
    StatementPeriod,
    UploadResult,
    UploadSummary,
)
from cardsense.core.utils import get_logger, truncate
from cardsense.parsers.csv_parser import parse_csv
from cardsense.parsers.pdf import extract_text
from cardsense.parsers.text_extractor import extract_transactions

logger = get_logger("cardsense.statements")

MERCHANT_NAME_LEN = 255
DESCRIPTION_LEN = 500
TOP_MERCHANTS = 10
STATEMENT_SOURCE = "bank_statement"


class StatementKind(StrEnum):
    """Supported statement file kinds."""

    CSV = "csv"
    PDF = "pdf"


def detect_statement_kind(filename: str | None, content_type: str | None) -> StatementKind:
    """Route an upload by MIME type or extension, rejecting anything else before parsing."""
    name = (filename or "").lower()
    mime = (content_type or "").lower()
    if mime == "text/csv" or name.endswith(".csv"):
        return StatementKind.CSV
    if mime == "application/pdf" or name.endswith(".pdf"):
        return StatementKind.PDF
    msg = "Only CSV and PDF files are supported"
    raise UnsupportedFileError(msg)


def decode_text(data: bytes) -> str:
    """Decode uploaded CSV bytes, tolerating a BOM and stray bytes."""
    return data.decode("utf-8-sig", errors="replace")


def parse_statement(
    kind: StatementKind, data: bytes, pdf_to_text: Callable[[bytes], str] = extract_text
) -> list[ParsedTransaction]:
    """Extract transactions from statement bytes, failing when nothing usable comes out."""
    if kind == StatementKind.CSV:
        result = parse_csv(decode_text(data))
        if result.errors and not result.transactions:
            msg = f"Could not parse CSV: {', '.join(result.errors)}"
            raise StatementParseError(msg)
        transactions = result.transactions
    else:
        transactions = extract_transactions(pdf_to_text(data))
    if not transactions:
        msg = "No transactions could be extracted from the file"
        raise EmptyStatementError(msg)
    return transactions


def summarize(transactions: list[ParsedTransaction]) -> UploadSummary:
    """Total debit spend, per-category debit subtotals and debit/credit counts in one pass."""
    summary = UploadSummary(count=len(transactions))
    for txn in transactions:
        if txn.direction == Direction.CREDIT:
            summary.credits += 1
            continue
        summary.debits += 1
        summary.total += txn.amount
        summary.by_category[txn.category.value] = summary.by_category.get(txn.category.value, 0.0) + txn.amount
    return summary


def analyze_transactions(transactions: list[ParsedTransaction]) -> StatementAnalysis:
    """Quick statement overview: spend, categories, top merchants and period."""
    summary = summarize(transactions)
    merchant_spend: dict[str, float] = {}
    for txn in transactions:
        if txn.direction != Direction.DEBIT:
            continue
        # First word of the description stands in for the merchant.
        merchant = txn.description.split(" ")[0]
        merchant_spend[merchant] = merchant_spend.get(merchant, 0.0) + txn.amount
    top = sorted(merchant_spend.items(), key=lambda item: item[1], reverse=True)[:TOP_MERCHANTS]
    return StatementAnalysis(
        total_spending=summary.total,
        category_breakdown=summary.by_category,
        top_merchants=[MerchantSpend(name=name, amount=amount) for name, amount in top],
        transaction_count=len(transactions),
        period=StatementPeriod(
            start=transactions[0].date if transactions else None,
            end=transactions[-1].date if transactions else None,
        ),
    )


def to_rows(user_id: str, transactions: list[ParsedTransaction]) -> list[dict[str, Any]]:
    """Build spending-store rows for parsed transactions."""
    return [
        {
            "user_id": user_id,
            "amount": txn.amount,
            "category": txn.category.value,
            "merchant_name": truncate(txn.description, MERCHANT_NAME_LEN),
            "transaction_date": txn.date,
            "description": truncate(txn.description, DESCRIPTION_LEN),
            "source": STATEMENT_SOURCE,
        }
        for txn in transactions
    ]


class StatementService:
    """Runs the parse, summarize and persist pipeline for one statement upload."""

    def __init__(
        self, repository: SpendingRepository, pdf_to_text: Callable[[bytes], str] = extract_text
    ) -> None:
        """Initialize the service with a spending repository and a PDF text extractor."""
        self.repository = repository
        self.pdf_to_text = pdf_to_text

    def ingest(self, user_id: str, filename: str | None, content_type: str | None, data: bytes) -> UploadResult:
        """Parse an uploaded statement, persist its transactions and return the summary."""
        kind = detect_statement_kind(filename, content_type)
        logger.info(f"Ingesting {kind} statement {filename!r} ({len(data)} bytes) for user {user_id}")
        transactions = parse_statement(kind, data, self.pdf_to_text)
        summary = summarize(transactions)
        try:
            inserted = self.repository.insert_many(to_rows(user_id, transactions))
        except SQLAlchemyError as exc:
            logger.exception(f"Failed to insert {len(transactions)} transactions for user {user_id}")
            msg = "Failed to save transactions to database"
            raise PersistenceError(msg) from exc
        logger.info(f"Stored {len(inserted)} transactions: debits={summary.debits}, credits={summary.credits}")
        return UploadResult(inserted=len(inserted), summary=summary)
