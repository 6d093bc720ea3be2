"""Configuration management for service-billing."""

from dataclasses import dataclass, field
from pathlib import Path

from service_billing.exceptions import ConfigurationError

STORE_BACKENDS = ("memory", "json", "postgres")


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "service_billing"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class StoreConfig:
    """Persistence backend selection.

    Exactly one backend serves every collection of a deployment.
    """

    backend: str = "memory"
    json_path: Path = field(default_factory=lambda: Path("data/billing.json"))
    pretty_json: bool = False

    def __post_init__(self) -> None:
        if self.backend not in STORE_BACKENDS:
            raise ConfigurationError(
                f"Unknown store backend {self.backend!r}, expected one of {', '.join(STORE_BACKENDS)}"
            )


@dataclass
class ENotasConfig:
    """eNotas gateway configuration."""

    api_key: str | None = None
    base_url: str = "https://api.enotas.com.br"
    environment: str = "Homologacao"  # or "Producao"
    timeout: float = 30.0


@dataclass
class IbgeConfig:
    """IBGE localities API configuration."""

    base_url: str = "https://servicodados.ibge.gov.br/api/v1/localidades"
    timeout: float = 15.0


@dataclass
class ServiceBillingConfig:
    """Main configuration for service-billing."""

    store: StoreConfig = field(default_factory=StoreConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    enotas: ENotasConfig = field(default_factory=ENotasConfig)
    ibge: IbgeConfig = field(default_factory=IbgeConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "ServiceBillingConfig":
        """Create config from environment variables."""
        import os

        store = StoreConfig(
            backend=os.getenv("STORE_BACKEND", "memory"),
            json_path=Path(os.getenv("STORE_JSON_PATH", "data/billing.json")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "service_billing"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        enotas = ENotasConfig(
            api_key=os.getenv("ENOTAS_API_KEY") or None,
            base_url=os.getenv("ENOTAS_BASE_URL", "https://api.enotas.com.br"),
            environment=os.getenv("ENOTAS_ENVIRONMENT", "Homologacao"),
            timeout=float(os.getenv("ENOTAS_TIMEOUT", "30")),
        )

        ibge = IbgeConfig(
            base_url=os.getenv("IBGE_BASE_URL", "https://servicodados.ibge.gov.br/api/v1/localidades"),
            timeout=float(os.getenv("IBGE_TIMEOUT", "15")),
        )

        return cls(
            store=store,
            postgres=postgres,
            enotas=enotas,
            ibge=ibge,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
