"""Aggregation over a user's stored spending history."""

import pandas as pd

from cardsense.core.db import SpendingTransaction
from cardsense.core.models import SpendingAggregates


def summarize_history(transactions: list[SpendingTransaction]) -> SpendingAggregates:
    """Total, per-category and per-month (``YYYY-MM``) sums over stored transactions."""
    if not transactions:
        return SpendingAggregates()
    frame = pd.DataFrame(
        [
            {"amount": float(t.amount), "category": t.category, "transaction_date": t.transaction_date}
            for t in transactions
        ]
    )
    frame["month"] = frame["transaction_date"].str.slice(0, 7)
    by_category = frame.groupby("category")["amount"].sum().round(2)
    by_month = frame.groupby("month")["amount"].sum().round(2).sort_index()
    return SpendingAggregates(
        total=round(float(frame["amount"].sum()), 2),
        by_category={str(k): float(v) for k, v in by_category.items()},
        by_month={str(k): float(v) for k, v in by_month.items()},
        count=len(frame),
    )
