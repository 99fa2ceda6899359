"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shieldpool.core.field import FIELD_SIZE, UINT64_MAX, normalize_address


# keccak256("tornado") % FIELD_SIZE, shared with the withdraw circuit
DEFAULT_ZERO_VALUE = (
    19014214495641488759237505126948346942972912379615652741039992445865937985820
)


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class VerifierMode(str, Enum):
    """Proof verifier backend."""

    STATIC = "static"
    SNARKJS = "snarkjs"


class PoolSettings(BaseSettings):
    """Shielded pool parameters. Must match the withdraw circuit."""

    model_config = SettingsConfigDict(env_prefix="POOL_")

    levels: int = Field(default=31, ge=1, le=32)
    root_history_size: int = Field(default=30, ge=1)
    denomination: int = Field(default=10**18, gt=0, le=UINT64_MAX)
    zero_value: int = DEFAULT_ZERO_VALUE
    address: str = "0x0000000000000000000000000000000000000001"

    @field_validator("zero_value")
    @classmethod
    def zero_value_in_field(cls, v: int) -> int:
        """The empty-leaf seed must be a field element."""
        if not 0 <= v < FIELD_SIZE:
            raise ValueError("zero_value must be below the field size")
        return v

    @field_validator("address")
    @classmethod
    def address_is_hex(cls, v: str) -> str:
        """Normalise the pool principal to a lower-case 20-byte address."""
        return normalize_address(v)

    @property
    def capacity(self) -> int:
        """Maximum number of leaves."""
        return 2**self.levels


class LedgerSettings(BaseSettings):
    """Confidential ledger policy."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    # Route transfers from accounts without a balance handle through the
    # zero-amount path instead of raising ZeroBalance.
    uninitialized_sender_as_zero: bool = False


class VerifierSettings(BaseSettings):
    """Groth16 verifier configuration."""

    model_config = SettingsConfigDict(env_prefix="VERIFIER_")

    mode: VerifierMode = VerifierMode.STATIC
    verification_key: Path = Path("circuits/circuit_artifacts/verification_key.json")
    snarkjs_command: str = "npx snarkjs"
    timeout_seconds: int = 60

    # Verdict returned by the static verifier (development only)
    static_result: bool = True


class DisclosureSettings(BaseSettings):
    """Decryption oracle configuration."""

    model_config = SettingsConfigDict(env_prefix="DISCLOSURE_")

    signing_key: SecretStr = SecretStr("shieldpool-dev-disclosure-key-change-me")


class JWTSettings(BaseSettings):
    """Account token configuration."""

    model_config = SettingsConfigDict(env_prefix="JWT_")

    secret_key: SecretStr = SecretStr("shieldpool-dev-jwt-secret-change-me")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into list."""
        return [o.strip() for o in self.origins.split(",") if o.strip()]


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO
    api_port: int = Field(default=8010, alias="POOL_API_PORT")

    # Protocol
    pool: PoolSettings = Field(default_factory=PoolSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    verifier: VerifierSettings = Field(default_factory=VerifierSettings)
    disclosure: DisclosureSettings = Field(default_factory=DisclosureSettings)

    # Security
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()
