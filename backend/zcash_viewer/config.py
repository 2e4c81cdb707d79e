"""Configuration management for the application."""
from pydantic_settings import BaseSettings
from typing import Literal, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # API Configuration
    api_title: str = "Zcash Viewer API"
    api_version: str = "0.1.0"
    api_prefix: str = "/api/v1"
    
    # CORS Configuration
    cors_origins: list[str] = ["http://localhost:1420", "http://localhost:5173"]
    
    # Sync backend (light client sidecar)
    sync_backend_url: str = "http://127.0.0.1:9070"
    sync_backend_token: Optional[str] = None
    sync_timeout_seconds: float = 600.0  # full rescans are slow
    
    # Network Configuration
    testnet_server_uri: str = "https://testnet.zec.rocks:443"
    mainnet_server_uri: str = "https://mainnet.lightwalletd.com:9067"
    testnet_min_confirmations: int = 3
    mainnet_min_confirmations: int = 10
    
    # Scan start heights used when the user does not pick one
    default_birthday_testnet: int = 3700000
    default_birthday_mainnet: int = 2000000
    
    # History parsing
    recipient_lookup_scope: Literal["first_occurrence", "entry"] = "first_occurrence"
    
    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(name)s %(levelname)s %(message)s"
    
    class Config:
        env_file = ".env"
        env_prefix = "ZCASH_VIEWER_"
        case_sensitive = False
    
    def default_birthday(self, is_testnet: bool) -> int:
        """Default scan start height for the selected network."""
        return self.default_birthday_testnet if is_testnet else self.default_birthday_mainnet
    
    def server_uri(self, is_testnet: bool) -> str:
        """Lightwalletd server for the selected network."""
        return self.testnet_server_uri if is_testnet else self.mainnet_server_uri
    
    def min_confirmations(self, is_testnet: bool) -> int:
        """Confirmation depth for the selected network."""
        return self.testnet_min_confirmations if is_testnet else self.mainnet_min_confirmations


settings = Settings()
