from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Non-pooling URL wins when both are set (pgbouncer chokes on DDL)
    POSTGRES_URL: str = ""
    POSTGRES_URL_NON_POOLING: str = ""
    DB_CA_CERT: Optional[str] = None
    DB_SSL: bool = True

    DB_CONNECT_TIMEOUT: float = 20.0
    DB_IDLE_TIMEOUT: int = 30
    DB_MAX_CONNECTIONS: int = 1

    SEED_MAX_RETRIES: int = 3
    SEED_RETRY_DELAY: float = 2.0
    SEED_CHUNK_SIZE: int = 10
    SEED_TRUNCATE: bool = True
    SEED_INDEPENDENT_TABLES: bool = True
    SEED_RATE_LIMIT: str = "10/minute"

    BCRYPT_ROUNDS: int = 10
    LOG_LEVEL: str = "INFO"

    @property
    def DATABASE_URL(self) -> str:
        return self.POSTGRES_URL_NON_POOLING or self.POSTGRES_URL

    def seed_config(self) -> "SeedConfig":
        return SeedConfig(
            database_url=self.DATABASE_URL,
            ca_cert=self.DB_CA_CERT,
            ssl=self.DB_SSL,
            connect_timeout=self.DB_CONNECT_TIMEOUT,
            pool_recycle=self.DB_IDLE_TIMEOUT,
            max_connections=self.DB_MAX_CONNECTIONS,
            max_retries=self.SEED_MAX_RETRIES,
            retry_delay=self.SEED_RETRY_DELAY,
            chunk_size=self.SEED_CHUNK_SIZE,
            truncate_before_seed=self.SEED_TRUNCATE,
            independent_tables=self.SEED_INDEPENDENT_TABLES,
            bcrypt_rounds=self.BCRYPT_ROUNDS,
        )


class SeedConfig(BaseModel):
    """Everything one seeding run needs to know, resolved up front.

    Handed to the seed services explicitly so a run never reads module
    level state, and tests can build one with tiny delays and a fake
    database URL.
    """

    model_config = ConfigDict(frozen=True)

    database_url: str
    ca_cert: Optional[str] = None
    ssl: bool = True

    connect_timeout: float = Field(20.0, gt=0)
    # Seconds before a pooled connection is replaced; 0 would reconnect on every checkout
    pool_recycle: int = Field(30, gt=0)
    max_connections: int = Field(1, ge=1)

    max_retries: int = Field(3, ge=1)
    retry_delay: float = Field(2.0, ge=0)
    chunk_size: int = Field(10, ge=1)
    truncate_before_seed: bool = True
    independent_tables: bool = True

    # bcrypt accepts 4..31
    bcrypt_rounds: int = Field(10, ge=4, le=31)


Config = Settings()
