from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300

    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"

    CORS_ORIGINS: list[str] = ["*"]

    WS_PATH: str = "/ws"

    WALLET_STORAGE_PATH: str = "~/.offchat/wallet.json"
    WALLET_DEVICE_KEY: str = ""
    WALLET_RESTORE_ATTEMPTS: int = 3
    WALLET_RESTORE_BACKOFF_SECONDS: float = 0.5
    WALLET_MAINTENANCE_HOURS: int = 24

    PRICE_FEED_TIMEOUT_SECONDS: float = 5.0
    RPC_URL_OVERRIDES: dict[str, str] = {}

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
