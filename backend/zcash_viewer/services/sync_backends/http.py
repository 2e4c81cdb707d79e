"""HTTP client for the light client sync sidecar."""
from typing import Any, Dict, Optional
import httpx
from zcash_viewer.config import Settings, settings as default_settings
from zcash_viewer.services.sync_backends.base import SyncBackend
from zcash_viewer.utils.errors import BackendCallError, SyncTimeoutError
from zcash_viewer.utils.logging_setup import get_logger

logger = get_logger(__name__)


class HttpSyncBackend(SyncBackend):
    """Sync backend reached over HTTP."""
    
    def __init__(
        self,
        base_url: Optional[str] = None,
        config: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.config = config or default_settings
        self.base_url = (base_url or self.config.sync_backend_url).rstrip("/")
        self.headers = {}
        if self.config.sync_backend_token:
            self.headers["Authorization"] = f"Bearer {self.config.sync_backend_token}"
        self.client = client or httpx.AsyncClient(timeout=self.config.sync_timeout_seconds)
    
    async def __aenter__(self):
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
    
    async def aclose(self):
        await self.client.aclose()
    
    def _build_payload(self, viewing_key: str, is_testnet: bool, birthday: int) -> Dict[str, Any]:
        return {
            "viewing_key": viewing_key,
            "is_testnet": is_testnet,
            "birthday": birthday,
            "server_uri": self.config.server_uri(is_testnet),
            "min_confirmations": self.config.min_confirmations(is_testnet),
        }
    
    async def sync_wallet(self, viewing_key: str, is_testnet: bool, birthday: int) -> str:
        """
        Ask the sidecar for a full rescan.
        
        The response body is returned undecoded; decoding problems are the
        caller's concern and are reported separately from call failures.
        """
        payload = self._build_payload(viewing_key, is_testnet, birthday)
        network = "testnet" if is_testnet else "mainnet"
        logger.info(f"[SYNC] Requesting {network} rescan from height {birthday}")
        
        try:
            response = await self.client.post(
                f"{self.base_url}/sync",
                json=payload,
                headers=self.headers
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise SyncTimeoutError(f"Sync backend timed out: {str(e) or type(e).__name__}")
        except httpx.HTTPStatusError as e:
            raise BackendCallError(
                f"Sync backend returned {e.response.status_code}: {self._error_message(e.response)}"
            )
        except httpx.HTTPError as e:
            raise BackendCallError(f"HTTP error calling sync backend: {str(e)}")
        
        return response.text
    
    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or "Unknown error"
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            return data["error"].get("message", "Unknown error")
        return response.text or "Unknown error"
