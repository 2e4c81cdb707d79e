"""Wallet sync session state machine.

The session is always in exactly one of three states:

- ``logged_out``: nothing loaded, the initial state and the state after an
  exit or a failed sync.
- ``syncing``: one backend call is in flight. Further sync requests are
  ignored until it settles.
- ``dashboard``: a ``DashboardSnapshot`` is installed. Balance, transactions
  and diagnostic log always come from the same snapshot.

Failures never leave partial data behind. They are reported through a single
``SyncNotification`` and the session drops back to ``logged_out``.
"""
import asyncio
import json
from decimal import Decimal
from typing import List, Optional
from pydantic import ValidationError as PydanticValidationError
from zcash_viewer.config import Settings, settings as default_settings
from zcash_viewer.models.transaction import AggregateStats, Transaction
from zcash_viewer.models.wallet import (
    BackendSyncPayload,
    DashboardSnapshot,
    NotificationKind,
    SessionState,
    SyncNotification,
)
from zcash_viewer.services.history_parser import HistoryParser
from zcash_viewer.services.stats_service import compute_stats
from zcash_viewer.services.sync_backends.base import SyncBackend
from zcash_viewer.services.transaction_normalizer import extract_transactions
from zcash_viewer.utils.errors import (
    BackendCallError,
    MalformedResponseError,
    SyncCancelledError,
    SyncTimeoutError,
    ValidationError,
    WalletViewerError,
)
from zcash_viewer.utils.logging_setup import get_logger

logger = get_logger(__name__)

NOTIFICATION_KINDS = {
    ValidationError: NotificationKind.VALIDATION,
    BackendCallError: NotificationKind.BACKEND_ERROR,
    MalformedResponseError: NotificationKind.MALFORMED_RESPONSE,
    SyncTimeoutError: NotificationKind.TIMEOUT,
    SyncCancelledError: NotificationKind.CANCELLED,
}


def decode_payload(raw: str) -> BackendSyncPayload:
    """
    Decode the backend's JSON response.
    
    Raises:
        BackendCallError: If the payload is an error report from the backend
        MalformedResponseError: If the payload is not valid JSON or lacks
            the expected fields
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Sync response is not valid JSON: {str(e)}")
    
    if not isinstance(data, dict):
        raise MalformedResponseError("Sync response is not a JSON object")
    
    if "error" in data:
        error = data["error"]
        message = error.get("message", "Unknown error") if isinstance(error, dict) else str(error)
        raise BackendCallError(f"Sync backend error: {message}")
    
    try:
        return BackendSyncPayload.model_validate(data)
    except PydanticValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MalformedResponseError(f"Sync response has missing or invalid fields: {fields}")


class SyncSessionController:
    """Owns the one sync session of the viewer."""
    
    def __init__(
        self,
        backend: SyncBackend,
        config: Optional[Settings] = None,
        parser: Optional[HistoryParser] = None
    ):
        self.backend = backend
        self.config = config or default_settings
        self.parser = parser or HistoryParser(self.config.recipient_lookup_scope)
        self.notification: Optional[SyncNotification] = None
        self.expanded_txid: Optional[str] = None
        self._state = SessionState.LOGGED_OUT
        self._dashboard: Optional[DashboardSnapshot] = None
        self._inflight: Optional[asyncio.Future] = None
        self._cancel_requested = False
    
    @property
    def state(self) -> SessionState:
        return self._state
    
    @property
    def dashboard(self) -> Optional[DashboardSnapshot]:
        return self._dashboard
    
    @property
    def is_loading(self) -> bool:
        return self._state == SessionState.SYNCING
    
    @property
    def balance(self) -> Optional[Decimal]:
        return self._dashboard.balance if self._dashboard else None
    
    @property
    def transactions(self) -> List[Transaction]:
        return list(self._dashboard.transactions) if self._dashboard else []
    
    @property
    def diagnostic_log(self) -> str:
        return self._dashboard.diagnostic_log if self._dashboard else ""
    
    @property
    def stats(self) -> AggregateStats:
        return compute_stats(self.transactions)
    
    async def request_sync(
        self,
        viewing_key: str,
        is_testnet: bool = True,
        birthday: Optional[int] = None
    ) -> SessionState:
        """
        Run one full sync and install its result.
        
        Args:
            viewing_key: Unified full viewing key
            is_testnet: Scan testnet instead of mainnet
            birthday: Start height; the network default when None
            
        Returns:
            The state the session ended up in
        """
        if self._state == SessionState.SYNCING:
            logger.info("[SYNC] Sync already in progress, ignoring request")
            return self._state
        
        if not viewing_key or not viewing_key.strip():
            self._notify(ValidationError("Please enter a viewing key"))
            return self._state
        
        if birthday is None:
            birthday = self.config.default_birthday(is_testnet)
        
        self._state = SessionState.SYNCING
        self._dashboard = None
        self.notification = None
        self._cancel_requested = False
        
        try:
            dashboard = await self._run_sync(viewing_key.strip(), is_testnet, birthday)
        except asyncio.CancelledError:
            if not self._cancel_requested:
                self._state = SessionState.LOGGED_OUT
                raise
            self._fail(SyncCancelledError("Sync cancelled"))
        except WalletViewerError as e:
            self._fail(e)
        else:
            self._dashboard = dashboard
            self._state = SessionState.DASHBOARD
            logger.info(
                f"[SYNC] Dashboard loaded: {dashboard.balance} ZEC, "
                f"{len(dashboard.transactions)} transactions"
            )
        finally:
            self._inflight = None
        
        return self._state
    
    async def _run_sync(self, viewing_key: str, is_testnet: bool, birthday: int) -> DashboardSnapshot:
        self._inflight = asyncio.ensure_future(
            self.backend.sync_wallet(viewing_key, is_testnet, birthday)
        )
        try:
            raw = await asyncio.wait_for(self._inflight, timeout=self.config.sync_timeout_seconds)
        except asyncio.TimeoutError:
            raise SyncTimeoutError(
                f"Sync did not finish within {self.config.sync_timeout_seconds:g} seconds"
            )
        except (WalletViewerError, asyncio.CancelledError):
            raise
        except Exception as e:
            raise BackendCallError(f"Sync backend failed: {str(e)}")
        
        payload = decode_payload(raw)
        transactions = extract_transactions(payload.history_raw, self.parser)
        return DashboardSnapshot(
            balance=payload.balance_zec,
            balance_zat=payload.balance_zat,
            sync_height=payload.sync_height,
            transactions=tuple(transactions),
            diagnostic_log=payload.pretty_log,
            is_testnet=is_testnet,
            birthday=birthday,
        )
    
    def cancel(self) -> bool:
        """Cancel the in-flight sync. Returns False when nothing is running."""
        if self._state != SessionState.SYNCING or self._inflight is None:
            return False
        self._cancel_requested = True
        self._inflight.cancel()
        return True
    
    def exit(self):
        """Leave the dashboard, discarding everything the last sync loaded."""
        if self._state == SessionState.SYNCING:
            # The pending sync settles into logged_out on its own
            self.cancel()
            return
        self._dashboard = None
        self._state = SessionState.LOGGED_OUT
    
    def toggle_expanded(self, txid: str) -> Optional[str]:
        """Expand a transaction row, or collapse it if already expanded."""
        self.expanded_txid = None if self.expanded_txid == txid else txid
        return self.expanded_txid
    
    def dismiss_notification(self):
        self.notification = None
    
    def _notify(self, error: WalletViewerError):
        kind = NOTIFICATION_KINDS.get(type(error), NotificationKind.BACKEND_ERROR)
        self.notification = SyncNotification(kind=kind, message=str(error))
        logger.warning(f"[SYNC] {kind.value}: {error}")
    
    def _fail(self, error: WalletViewerError):
        self._dashboard = None
        self._state = SessionState.LOGGED_OUT
        self._notify(error)
