"""Pydantic models for the CardSense statement service.

This module defines the transaction, summary and request/response models shared
by the parsers, the upload orchestrator and the API layer.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Category(StrEnum):
    """Fixed spending categories, in categorization priority order."""

    DINING = "dining"
    SHOPPING = "shopping"
    TRAVEL = "travel"
    GROCERIES = "groceries"
    ENTERTAINMENT = "entertainment"
    FUEL = "fuel"
    UTILITIES = "utilities"
    HEALTHCARE = "healthcare"
    EDUCATION = "education"
    OTHER = "other"


class Direction(StrEnum):
    """Whether money left (debit) or entered (credit) the account."""

    DEBIT = "debit"
    CREDIT = "credit"


class ParsedTransaction(BaseModel):
    """A transaction extracted from a statement, before persistence."""

    date: str
    description: str
    amount: float = Field(gt=0)
    direction: Direction = Direction.DEBIT
    category: Category = Category.OTHER


class CsvParseResult(BaseModel):
    """Outcome of parsing a CSV statement: extracted rows plus per-row diagnostics."""

    transactions: list[ParsedTransaction] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    total_spending: float = 0.0
    category_breakdown: dict[str, float] = Field(default_factory=dict)
    transaction_count: int = 0


class UploadSummary(BaseModel):
    """Aggregate totals for one upload. Totals and subtotals cover debits only."""

    model_config = ConfigDict(populate_by_name=True)

    total: float = 0.0
    by_category: dict[str, float] = Field(default_factory=dict, alias="byCategory")
    count: int = 0
    debits: int = 0
    credits: int = 0


class UploadResult(BaseModel):
    """Response body of a successful statement upload."""

    success: bool = True
    inserted: int
    summary: UploadSummary


class MerchantSpend(BaseModel):
    """Spend attributed to one merchant name."""

    name: str
    amount: float


class StatementPeriod(BaseModel):
    """First and last transaction dates of a statement, in statement order."""

    start: str | None = None
    end: str | None = None


class StatementAnalysis(BaseModel):
    """Quick, non-persisted analysis of a statement."""

    model_config = ConfigDict(populate_by_name=True)

    total_spending: float = Field(0.0, alias="totalSpending")
    category_breakdown: dict[str, float] = Field(default_factory=dict, alias="categoryBreakdown")
    top_merchants: list[MerchantSpend] = Field(default_factory=list, alias="topMerchants")
    transaction_count: int = Field(0, alias="transactionCount")
    period: StatementPeriod = Field(default_factory=StatementPeriod)


class SpendingTransactionIn(BaseModel):
    """Manually entered spending transaction."""

    amount: float = Field(gt=0)
    category: Category = Category.OTHER
    merchant_name: str | None = Field(None, max_length=255)
    transaction_date: str
    description: str | None = Field(None, max_length=500)
    card_used: str | None = None


class SpendingTransactionOut(BaseModel):
    """A persisted spending transaction as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    amount: float
    category: str
    merchant_name: str | None = None
    transaction_date: str
    description: str | None = None
    card_used: str | None = None


class SpendingAggregates(BaseModel):
    """Totals over a user's spending history."""

    total: float = 0.0
    by_category: dict[str, float] = Field(default_factory=dict)
    by_month: dict[str, float] = Field(default_factory=dict)
    count: int = 0
