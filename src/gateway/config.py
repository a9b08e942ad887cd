"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class UpstreamSettings(BaseSettings):
    """Synthos backend and AI analyzer connection settings."""

    model_config = SettingsConfigDict(env_prefix="SYNTHOS_")

    backend_url: str = "https://backend.synthos.fun"
    ai_analyzer_url: str = "https://ai.synthos.fun"
    api_key: SecretStr = SecretStr("")  # sent as X-API-Key when non-empty
    timeout_seconds: float = 20.0


class RpcSettings(BaseSettings):
    """JSON-RPC proxy targets."""

    model_config = SettingsConfigDict(env_prefix="RPC_")

    alchemy_url: str = ""
    tenderly_access_key: SecretStr = SecretStr("")
    tenderly_url_template: str = "https://scroll-mainnet.gateway.tenderly.co/{key}"


class EtherscanSettings(BaseSettings):
    """Etherscan multichain API settings for transaction history."""

    model_config = SettingsConfigDict(env_prefix="ETHERSCAN_")

    api_key: SecretStr = SecretStr("")
    api_url: str = "https://api.etherscan.io/v2/api"
    page_size: int = 100


class DatabaseSettings(BaseSettings):
    """Local record store location."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    path: str = "data/records.db"


class ServerSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    upstream: UpstreamSettings = UpstreamSettings()
    rpc: RpcSettings = RpcSettings()
    etherscan: EtherscanSettings = EtherscanSettings()
    database: DatabaseSettings = DatabaseSettings()
    server: ServerSettings = ServerSettings()
