"""Custom error classes."""


class WalletViewerError(Exception):
    """Base exception for the wallet viewer application."""
    pass


class ValidationError(WalletViewerError):
    """Sync request rejected before reaching the backend (e.g. empty viewing key)."""
    pass


class BackendCallError(WalletViewerError):
    """The sync backend call itself failed."""
    pass


class MalformedResponseError(WalletViewerError):
    """The backend answered, but the payload could not be decoded."""
    pass


class MalformedEntryError(WalletViewerError):
    """A matched history entry carries an unusable field."""
    
    def __init__(self, txid: str, message: str):
        super().__init__(f"{txid}: {message}")
        self.txid = txid


class SyncTimeoutError(WalletViewerError):
    """The backend call did not finish within the configured timeout."""
    pass


class SyncCancelledError(WalletViewerError):
    """The in-flight sync was cancelled by the user."""
    pass
