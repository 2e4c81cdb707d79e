"""Wallet sync models."""
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, StrictInt, field_validator
from zcash_viewer.models.transaction import AggregateStats, Transaction


class SyncRequest(BaseModel):
    """Request model for a wallet sync."""
    viewing_key: str = Field(..., description="Unified full viewing key")
    is_testnet: bool = Field(default=True, description="Scan testnet instead of mainnet")
    birthday: Optional[int] = Field(None, ge=0, description="Start block height; network default when omitted")


class BackendSyncPayload(BaseModel):
    """Decoded response of the sync backend."""
    balance_zat: StrictInt = Field(..., description="Balance in zatoshis")
    balance_zec: Decimal = Field(..., description="Balance in ZEC")
    sync_height: str = Field(..., description="Server info reported at sync time")
    history_raw: str = Field(..., description="Debug dump of the transaction summaries")
    pretty_log: str = Field(..., description="Human readable diagnostic log")
    
    @field_validator("balance_zec", mode="before")
    @classmethod
    def _reject_bool(cls, value):
        # bool is an int subclass and would otherwise coerce to 0 or 1
        if isinstance(value, bool):
            raise ValueError("balance_zec must be a number")
        return value


class SessionState(str, Enum):
    """States of the sync session."""
    LOGGED_OUT = "logged_out"
    SYNCING = "syncing"
    DASHBOARD = "dashboard"


class NotificationKind(str, Enum):
    """Kinds of user-visible notifications."""
    VALIDATION = "validation"
    BACKEND_ERROR = "backend_error"
    MALFORMED_RESPONSE = "malformed_response"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


class SyncNotification(BaseModel):
    """Single notification shown after a rejected or failed sync."""
    kind: NotificationKind
    message: str


class DashboardSnapshot(BaseModel):
    """Everything a successful sync installs, replaced as one unit."""
    balance: Decimal
    balance_zat: int
    sync_height: str
    transactions: tuple[Transaction, ...]
    diagnostic_log: str
    is_testnet: bool
    birthday: int
    
    class Config:
        frozen = True


class TransactionView(BaseModel):
    """Transaction row with display strings."""
    transaction: Transaction
    display_amount: str
    expanded: bool = False


class DashboardView(BaseModel):
    """Response model for the dashboard."""
    network: str
    balance: Decimal
    display_balance: str
    stats: AggregateStats
    transactions: List[TransactionView]
    diagnostic_log: str


class SessionView(BaseModel):
    """Response model for the session state."""
    state: SessionState
    notification: Optional[SyncNotification] = None
    expanded_txid: Optional[str] = None
    dashboard: Optional[DashboardView] = None


class HistoryParseRequest(BaseModel):
    """Request model for stateless history parsing."""
    history_raw: str


class HistoryParseResponse(BaseModel):
    """Response model for stateless history parsing."""
    transactions: List[Transaction]
    stats: AggregateStats
