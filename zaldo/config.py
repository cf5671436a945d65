"""Configuration management for zaldo."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

from zaldo.exceptions import ConfigurationError
from zaldo.ledger.fees import ADMIN_FEE_PERCENT
from zaldo.ledger.schedule import GRACE_PERIOD_DAYS


@dataclass
class LedgerConfig:
    """Ledger computation settings."""

    default_admin_fee_percent: Decimal = ADMIN_FEE_PERCENT
    grace_period_days: int = GRACE_PERIOD_DAYS

    def __post_init__(self) -> None:
        if not Decimal("0") <= self.default_admin_fee_percent <= Decimal("100"):
            raise ConfigurationError(
                f"Admin fee percent must be within 0..100, got {self.default_admin_fee_percent}"
            )
        if self.grace_period_days < 0:
            raise ConfigurationError(
                f"Grace period must not be negative, got {self.grace_period_days}"
            )


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "zaldo"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class OutputConfig:
    """Report output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("reports"))
    pretty_json: bool = False


@dataclass
class ZaldoConfig:
    """Main configuration for zaldo."""

    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "ZaldoConfig":
        """Create config from environment variables."""
        import os

        fee_str = os.getenv("ZALDO_ADMIN_FEE_PERCENT", str(ADMIN_FEE_PERCENT))
        try:
            fee_percent = Decimal(fee_str)
        except InvalidOperation as e:
            raise ConfigurationError(f"Invalid ZALDO_ADMIN_FEE_PERCENT: {fee_str!r}") from e

        ledger = LedgerConfig(
            default_admin_fee_percent=fee_percent,
            grace_period_days=int(os.getenv("ZALDO_GRACE_PERIOD_DAYS", str(GRACE_PERIOD_DAYS))),
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "zaldo"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "reports")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        return cls(
            ledger=ledger,
            postgres=postgres,
            output=output,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
