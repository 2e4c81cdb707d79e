"""Inflow/outflow totals."""
from decimal import Decimal
from typing import Iterable
from zcash_viewer.models.transaction import AggregateStats, Transaction, TransactionKind


def compute_stats(transactions: Iterable[Transaction]) -> AggregateStats:
    """Sum received and sent amounts. Recomputed on every call."""
    total_in = Decimal("0")
    total_out = Decimal("0")
    for tx in transactions:
        if tx.kind == TransactionKind.RECEIVED:
            total_in += tx.amount
        elif tx.kind == TransactionKind.SENT:
            total_out += tx.amount
    return AggregateStats(total_in=total_in, total_out=total_out)
