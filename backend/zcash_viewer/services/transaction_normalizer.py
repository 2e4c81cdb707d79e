"""Transaction normalization service."""
from decimal import Decimal
from typing import List, Optional
from zcash_viewer.models.transaction import (
    NO_MEMO,
    OUTGOING_MEMO,
    UNKNOWN_RECIPIENT,
    Transaction,
    TransactionKind,
)
from zcash_viewer.services.history_parser import HistoryParser, RawMatch
from zcash_viewer.utils.logging_setup import get_logger

logger = get_logger(__name__)

ZEC_DECIMALS = 8
ZATOSHIS_PER_ZEC = 10 ** ZEC_DECIMALS


def to_whole_coins(zatoshis: int) -> Decimal:
    """Convert zatoshis to ZEC without rounding."""
    return Decimal(zatoshis).scaleb(-ZEC_DECIMALS)


class TransactionNormalizer:
    """Service for turning raw history matches into transactions."""
    
    def normalize(
        self,
        received: List[RawMatch],
        sent: List[RawMatch]
    ) -> List[Transaction]:
        """
        Build the transaction list shown to the user.
        
        Received entries come first, then sent entries, and the combined
        list is reversed so the latest matches of either kind lead. The dump
        has no timestamps, so this is display order only.
        
        Args:
            received: Received matches in scan order
            sent: Sent matches in scan order
            
        Returns:
            Ordered list of transactions
        """
        transactions = [self._received(m) for m in received]
        transactions.extend(self._sent(m) for m in sent)
        transactions.reverse()
        return transactions
    
    def _received(self, match: RawMatch) -> Transaction:
        return Transaction(
            kind=TransactionKind.RECEIVED,
            amount=to_whole_coins(match.value),
            memo=match.memo or NO_MEMO,
            txid=match.txid,
        )
    
    def _sent(self, match: RawMatch) -> Transaction:
        return Transaction(
            kind=TransactionKind.SENT,
            amount=to_whole_coins(match.value),
            memo=OUTGOING_MEMO,
            txid=match.txid,
            recipient=match.recipient or UNKNOWN_RECIPIENT,
        )


def extract_transactions(
    history_raw: str,
    parser: Optional[HistoryParser] = None
) -> List[Transaction]:
    """
    Parse a diagnostic dump into an ordered transaction list.
    
    This is the only entry point the rest of the application uses, so the
    pattern matching can be replaced without touching callers.
    """
    parsed = (parser or HistoryParser()).parse(history_raw)
    transactions = TransactionNormalizer().normalize(parsed.received, parsed.sent)
    logger.debug(f"[NORMALIZE] {len(transactions)} transactions extracted")
    return transactions
