"""Abstract base class for wallet sync backends."""
from abc import ABC, abstractmethod


class SyncBackend(ABC):
    """Abstract base class for the light client that scans the chain."""
    
    @abstractmethod
    async def sync_wallet(self, viewing_key: str, is_testnet: bool, birthday: int) -> str:
        """
        Rescan the wallet from ``birthday`` and report its state.
        
        Args:
            viewing_key: Unified full viewing key
            is_testnet: Scan testnet instead of mainnet
            birthday: Block height to start scanning from
            
        Returns:
            JSON text with balance_zat, balance_zec, sync_height,
            history_raw and pretty_log
        """
        pass
    
    async def aclose(self):
        """Release any resources held by the backend."""
        pass
