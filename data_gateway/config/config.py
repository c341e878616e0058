import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Load environment variables from .env file if it exists
load_dotenv()


class DatabaseConfig(BaseModel):
    """Configuration for the database engine and gateway behaviour."""

    database_url: str = Field(
        default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///:memory:"),
        description="SQLAlchemy database URL"
    )

    # Table configuration
    table_prefix: str = Field(
        default_factory=lambda: os.getenv("DATA_GATEWAY_TABLE_PREFIX", ""),
        description="Prefix to add to every derived table name"
    )

    # Connection settings
    pool_size: int = Field(
        default=5,
        description="Number of connections kept in the engine's pool"
    )

    pool_pre_ping: bool = Field(
        default=True,
        description="Test pooled connections for liveness before use"
    )

    timeout_seconds: float = Field(
        default=30.0,
        description="Seconds to wait for a pooled connection"
    )

    # Environment settings
    environment: str = Field(
        default_factory=lambda: os.getenv("ENVIRONMENT", "dev"),
        description="Current environment (dev, staging, prod, test)"
    )

    # Logging settings
    enable_debug_logging: bool = Field(
        default_factory=lambda: os.getenv("DATA_GATEWAY_DEBUG_LOGGING", "false").lower() == "true",
        description="Echo every SQL statement through the sqlalchemy.engine logger"
    )

    model_config = ConfigDict(
        validate_assignment=True
    )

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v):
        """Validate database URL."""
        if not v:
            raise ValueError("Database URL is required")
        return v

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        valid_environments = ['dev', 'staging', 'prod', 'test']
        if v not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def engine_options(self) -> dict:
        """Keyword arguments for sqlalchemy.create_engine."""
        options = {
            'echo': self.enable_debug_logging,
            'pool_pre_ping': self.pool_pre_ping,
        }
        # SQLite uses a singleton/static pool that rejects sizing arguments
        if not self.is_sqlite:
            options['pool_size'] = self.pool_size
            options['pool_timeout'] = self.timeout_seconds
        return options

    @classmethod
    def from_env(cls) -> 'DatabaseConfig':
        """Create configuration from environment variables."""
        return cls()

    @classmethod
    def for_local_development(cls) -> 'DatabaseConfig':
        """Create configuration for a local SQLite file database."""
        return cls(
            database_url="sqlite:///./data_gateway.db",
            environment="dev",
            enable_debug_logging=True
        )
