"""Wallet sync session endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Request
from zcash_viewer.config import settings
from zcash_viewer.models.wallet import (
    DashboardView,
    NotificationKind,
    SessionState,
    SessionView,
    SyncRequest,
    TransactionView,
)
from zcash_viewer.services.sync_session import SyncSessionController
from zcash_viewer.utils.formatting import CURRENCY, format_signed, format_zec

router = APIRouter()

NOTIFICATION_STATUS = {
    NotificationKind.VALIDATION: 400,
    NotificationKind.BACKEND_ERROR: 502,
    NotificationKind.MALFORMED_RESPONSE: 502,
    NotificationKind.TIMEOUT: 504,
    NotificationKind.CANCELLED: 499,
}


def get_session(request: Request) -> SyncSessionController:
    """The application's single sync session."""
    return request.app.state.session


def build_session_view(session: SyncSessionController) -> SessionView:
    """Render the session for the client."""
    dashboard = None
    snapshot = session.dashboard
    if snapshot is not None:
        dashboard = DashboardView(
            network="testnet" if snapshot.is_testnet else "mainnet",
            balance=snapshot.balance,
            display_balance=f"{format_zec(snapshot.balance)} {CURRENCY}",
            stats=session.stats,
            transactions=[
                TransactionView(
                    transaction=tx,
                    display_amount=format_signed(tx),
                    expanded=tx.txid == session.expanded_txid
                )
                for tx in snapshot.transactions
            ],
            diagnostic_log=snapshot.diagnostic_log
        )
    
    return SessionView(
        state=session.state,
        notification=session.notification,
        expanded_txid=session.expanded_txid,
        dashboard=dashboard
    )


@router.get("/defaults")
async def get_defaults():
    """Network choices and default scan start heights."""
    return {
        "networks": [
            {"name": "testnet", "is_testnet": True, "default_birthday": settings.default_birthday_testnet},
            {"name": "mainnet", "is_testnet": False, "default_birthday": settings.default_birthday_mainnet},
        ]
    }


@router.get("", response_model=SessionView)
async def get_session_state(session: SyncSessionController = Depends(get_session)):
    """Current session state and, once synced, the dashboard."""
    return build_session_view(session)


@router.post("/sync", response_model=SessionView)
async def sync_wallet(request: SyncRequest, session: SyncSessionController = Depends(get_session)):
    """
    Sync the wallet for a viewing key and load the dashboard.
    
    Only one sync runs at a time; a request made while another is in
    flight is rejected with 409.
    """
    if session.state == SessionState.SYNCING:
        raise HTTPException(status_code=409, detail="A sync is already in progress")
    
    await session.request_sync(request.viewing_key, request.is_testnet, request.birthday)
    
    if session.notification is not None:
        raise HTTPException(
            status_code=NOTIFICATION_STATUS[session.notification.kind],
            detail=session.notification.message
        )
    
    return build_session_view(session)


@router.post("/cancel")
async def cancel_sync(session: SyncSessionController = Depends(get_session)):
    """Cancel the in-flight sync, if any."""
    return {"cancelled": session.cancel()}


@router.post("/exit", response_model=SessionView)
async def exit_wallet(session: SyncSessionController = Depends(get_session)):
    """Leave the dashboard and discard the loaded wallet data."""
    session.exit()
    return build_session_view(session)


@router.post("/transactions/{txid}/toggle", response_model=SessionView)
async def toggle_transaction(txid: str, session: SyncSessionController = Depends(get_session)):
    """Expand or collapse a transaction row."""
    session.toggle_expanded(txid)
    return build_session_view(session)


@router.delete("/notification", response_model=SessionView)
async def dismiss_notification(session: SyncSessionController = Depends(get_session)):
    """Clear the last sync notification."""
    session.dismiss_notification()
    return build_session_view(session)
