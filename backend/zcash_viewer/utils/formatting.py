"""Display formatting for ZEC amounts."""
from decimal import Decimal, ROUND_HALF_UP
from zcash_viewer.models.transaction import Transaction, TransactionKind

CURRENCY = "ZEC"


def format_zec(amount: Decimal, places: int = 4) -> str:
    """Fixed-point rendering, e.g. ``Decimal("5") -> "5.0000"``."""
    quantum = Decimal(1).scaleb(-places)
    return str(amount.quantize(quantum, rounding=ROUND_HALF_UP))


def format_signed(tx: Transaction, places: int = 4) -> str:
    """Amount with direction sign and currency, e.g. ``"+5.0000 ZEC"``."""
    sign = "+" if tx.kind == TransactionKind.RECEIVED else "-"
    return f"{sign}{format_zec(tx.amount, places)} {CURRENCY}"
