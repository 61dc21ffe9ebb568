"""Configuration management for ecredit."""

from dataclasses import dataclass, field
from pathlib import Path

from ecredit.exceptions import ConfigurationError

BACKEND_KINDS = ("memory", "postgres")


@dataclass
class DatabaseConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "ecredit"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class StorageConfig:
    """Object storage configuration."""

    root_dir: Path = field(default_factory=lambda: Path("storage"))
    public_base_url: str = "http://localhost:8000/storage/v1/object/public"
    avatar_bucket: str = "avatars"
    id_document_bucket: str = "id-documents"


@dataclass
class LendingConfig:
    """Product rules for the primary lending product."""

    flat_monthly_rate: float = 0.15
    min_amount: float = 500
    max_amount: float = 500_000
    max_income_multiple: float = 5
    term_options: tuple[int, ...] = (1, 2, 3)
    summary_feed_limit: int = 5
    activity_feed_limit: int = 10
    admin_page_size: int = 20


@dataclass
class EcreditConfig:
    """Main configuration for ecredit."""

    backend: str = "memory"
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    lending: LendingConfig = field(default_factory=LendingConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    def __post_init__(self) -> None:
        if self.backend not in BACKEND_KINDS:
            raise ConfigurationError(
                f"Unknown backend {self.backend!r}; expected one of {', '.join(BACKEND_KINDS)}"
            )

    @classmethod
    def from_env(cls) -> "EcreditConfig":
        """Create config from environment variables."""
        import os

        try:
            database = DatabaseConfig(
                host=os.getenv("POSTGRES_HOST", "localhost"),
                port=int(os.getenv("POSTGRES_PORT", "5432")),
                database=os.getenv("POSTGRES_DB", "ecredit"),
                user=os.getenv("POSTGRES_USER", "postgres"),
                password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            )

            storage = StorageConfig(
                root_dir=Path(os.getenv("STORAGE_DIR", "storage")),
                public_base_url=os.getenv(
                    "STORAGE_PUBLIC_URL", StorageConfig.public_base_url
                ),
            )

            lending = LendingConfig(
                flat_monthly_rate=float(os.getenv("FLAT_MONTHLY_RATE", "0.15")),
            )

            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e

        return cls(
            backend=os.getenv("ECREDIT_BACKEND", "memory"),
            database=database,
            storage=storage,
            lending=lending,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
