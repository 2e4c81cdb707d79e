"""Shielded wallet transaction model."""
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

NO_MEMO = "No Memo"
OUTGOING_MEMO = "Outgoing"
UNKNOWN_RECIPIENT = "Unknown Recipient"
CONFIRMED = "Confirmed"


class TransactionKind(str, Enum):
    """Direction of a wallet transaction."""
    RECEIVED = "received"
    SENT = "sent"


class Transaction(BaseModel):
    """One entry of the wallet history, as recovered from the sync diagnostics."""
    kind: TransactionKind = Field(..., description="Received or sent")
    amount: Decimal = Field(..., description="Amount in ZEC")
    memo: str = Field(..., description="Memo text, 'No Memo' or 'Outgoing'")
    txid: str = Field(..., description="Transaction identifier")
    recipient: Optional[str] = Field(None, description="Recipient address (sent only)")
    status: str = Field(default=CONFIRMED, description="Confirmation label")
    
    class Config:
        frozen = True
        json_encoders = {
            Decimal: str
        }


class AggregateStats(BaseModel):
    """Inflow and outflow totals over a transaction list."""
    total_in: Decimal = Field(default=Decimal("0"), description="Sum of received amounts in ZEC")
    total_out: Decimal = Field(default=Decimal("0"), description="Sum of sent amounts in ZEC")
    
    class Config:
        frozen = True
        json_encoders = {
            Decimal: str
        }
