"""Stateless history parsing endpoints."""
from fastapi import APIRouter
from zcash_viewer.config import settings
from zcash_viewer.models.wallet import HistoryParseRequest, HistoryParseResponse
from zcash_viewer.services.history_parser import HistoryParser
from zcash_viewer.services.stats_service import compute_stats
from zcash_viewer.services.transaction_normalizer import extract_transactions

router = APIRouter()


@router.post("/parse", response_model=HistoryParseResponse)
async def parse_history(request: HistoryParseRequest):
    """Extract transactions and totals from a ``history_raw`` dump."""
    parser = HistoryParser(settings.recipient_lookup_scope)
    transactions = extract_transactions(request.history_raw, parser)
    return HistoryParseResponse(
        transactions=transactions,
        stats=compute_stats(transactions)
    )
