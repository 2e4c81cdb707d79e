"""Transaction extraction from the light client's diagnostic dump.

The sync backend hands back ``history_raw``, the ``Debug`` rendering of the
wallet's transaction summaries. It is not a structured format, so entries are
recovered with two independent whole-text scans: one for received entries and
one for sent entries. Both scans tolerate line breaks and unrelated fields
between the pieces they need, but never reach past the start of the next
``txid: TxId(`` entry.
"""
import re
from collections import Counter
from typing import List, Optional, Tuple
from zcash_viewer.models.transaction import UNKNOWN_RECIPIENT
from zcash_viewer.utils.errors import MalformedEntryError
from zcash_viewer.utils.logging_setup import get_logger

logger = get_logger(__name__)

ENTRY_MARKER = 'txid: TxId('

# Any text that does not start a new entry
_SAME_ENTRY = r'(?:(?!txid: TxId\().)*?'
_TXID = r'txid: TxId\("(?P<txid>[^"]*)"\)'
# Empty tokens are captured too, so they fail integer parsing
_VALUE = r'value: (?P<value>[^\s,)}\]]*)'
# Debug-escaped string body
_QUOTED = r'(?:[^"\\]|\\.)*'

RECEIVED_PATTERN = re.compile(
    _TXID
    + _SAME_ENTRY + r'kind: Received\b'
    + _SAME_ENTRY + _VALUE
    + r'(?:' + _SAME_ENTRY + r'memo: (?P<memo>Some\("(?P<memo_text>' + _QUOTED + r')"\)|None))?',
    re.DOTALL,
)

SENT_PATTERN = re.compile(
    _TXID
    + _SAME_ENTRY + r'kind: Sent(?:\(Send\)|(?!\())'
    + _SAME_ENTRY + _VALUE,
    re.DOTALL,
)

RECIPIENT_PATTERN = re.compile(r'recipient: "(?P<recipient>.*?)"')

_INTEGER = re.compile(r'\d+', re.ASCII)

_ESCAPE = re.compile(r'\\(u\{[0-9a-fA-F]{1,6}\}|.)', re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "0": "\0"}


def unescape_debug_string(text: str) -> str:
    """Undo the escaping applied by a ``Debug`` rendering of a string."""
    def replace(match):
        escaped = match.group(1)
        if escaped.startswith("u{"):
            return chr(int(escaped[2:-1], 16))
        return _SIMPLE_ESCAPES.get(escaped, escaped)
    return _ESCAPE.sub(replace, text)


class RawMatch:
    """One pattern hit in the diagnostic text."""
    
    def __init__(
        self,
        txid: str,
        value: int,
        position: int = 0,
        memo: Optional[str] = None,
        recipient: Optional[str] = None,
    ):
        self.txid = txid
        self.value = value
        self.position = position
        self.memo = memo
        self.recipient = recipient
    
    def __repr__(self) -> str:
        return f"RawMatch(txid={self.txid!r}, value={self.value}, memo={self.memo!r}, recipient={self.recipient!r})"


class ParsedHistory:
    """Received and sent matches, each in scan order."""
    
    def __init__(self, received: List[RawMatch], sent: List[RawMatch]):
        self.received = received
        self.sent = sent


class HistoryParser:
    """Pattern-based scanner for ``history_raw``."""
    
    def __init__(self, recipient_scope: str = "first_occurrence"):
        if recipient_scope not in ("first_occurrence", "entry"):
            raise ValueError(f"Unknown recipient lookup scope: {recipient_scope}")
        self.recipient_scope = recipient_scope
    
    def parse(self, raw: str) -> ParsedHistory:
        """
        Scan the diagnostic text for received and sent entries.
        
        Entries with an empty transaction id or an unparseable value are
        logged and skipped; the rest of the text is still scanned.
        
        Args:
            raw: Diagnostic text from the sync backend
            
        Returns:
            Received and sent matches in first-occurrence order
        """
        if not raw:
            return ParsedHistory([], [])
        
        received = self.scan_received(raw)
        sent = self.scan_sent(raw)
        self._check_unique_txids(received + sent)
        
        logger.info(f"[PARSE] Found {len(received)} received and {len(sent)} sent entries")
        return ParsedHistory(received, sent)
    
    def scan_received(self, raw: str) -> List[RawMatch]:
        """Scan for received entries, resolving each memo."""
        matches = []
        for match in RECEIVED_PATTERN.finditer(raw):
            try:
                txid, value = self._parse_entry(match)
            except MalformedEntryError as e:
                logger.warning(f"[PARSE] Skipping received entry: {e}")
                continue
            
            # Some("") is treated like None
            memo = None
            if match.group("memo_text"):
                memo = unescape_debug_string(match.group("memo_text"))
            matches.append(RawMatch(
                txid=txid,
                value=value,
                position=match.start(),
                memo=memo,
            ))
        return matches
    
    def scan_sent(self, raw: str) -> List[RawMatch]:
        """Scan for sent entries, resolving each recipient."""
        matches = []
        for match in SENT_PATTERN.finditer(raw):
            try:
                txid, value = self._parse_entry(match)
            except MalformedEntryError as e:
                logger.warning(f"[PARSE] Skipping sent entry: {e}")
                continue
            
            matches.append(RawMatch(
                txid=txid,
                value=value,
                position=match.start(),
                recipient=self.resolve_recipient(raw, txid, match.start()),
            ))
        return matches
    
    def resolve_recipient(self, raw: str, txid: str, position: Optional[int] = None) -> str:
        """
        Find the recipient address for a sent transaction.
        
        Looks up the first occurrence of ``txid`` in the whole text and takes
        the first ``recipient: "..."`` field after it. With the ``entry``
        scope the search starts at the entry itself (``position``, when
        known) and stops at the next transaction entry.
        
        Args:
            raw: Diagnostic text from the sync backend
            txid: Transaction identifier of the sent entry
            position: Offset of the entry's ``txid: TxId(`` marker
            
        Returns:
            Recipient address, or "Unknown Recipient"
        """
        if not txid:
            return UNKNOWN_RECIPIENT
        
        if self.recipient_scope == "entry" and position is not None:
            start = position
        else:
            start = raw.find(txid)
        if start < 0:
            return UNKNOWN_RECIPIENT
        
        end = len(raw)
        if self.recipient_scope == "entry":
            next_entry = raw.find(ENTRY_MARKER, start + 1)
            if next_entry >= 0:
                end = next_entry
        
        match = RECIPIENT_PATTERN.search(raw, start, end)
        if not match:
            return UNKNOWN_RECIPIENT
        return match.group("recipient")
    
    @staticmethod
    def _parse_entry(match: re.Match) -> Tuple[str, int]:
        txid = match.group("txid")
        if not txid:
            raise MalformedEntryError("<empty txid>", f"entry at offset {match.start()} has no transaction id")
        token = match.group("value")
        if not _INTEGER.fullmatch(token):
            raise MalformedEntryError(txid, f"value {token!r} is not an integer")
        return txid, int(token)
    
    @staticmethod
    def _check_unique_txids(matches: List[RawMatch]):
        # Recipient lookup assumes identifiers are unique within the dump
        counts = Counter(m.txid for m in matches)
        for txid, count in counts.items():
            if count > 1:
                logger.warning(f"[PARSE] Transaction id {txid} matched {count} times")
        for txid in counts:
            for other in counts:
                if txid != other and txid in other:
                    logger.warning(f"[PARSE] Transaction id {txid} is a substring of {other}")
