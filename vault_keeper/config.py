"""
Centralized configuration management for the vault.

This module provides a unified configuration system with support for:
- Environment variables
- Validation using Pydantic
- A process-wide instance that is read once at startup
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .constants import DEFAULT_TOKEN_TTL_SECONDS, EnvironmentVariable, LogLevel
from .exceptions import ErrorCode, ValidationError


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class ServerConfig(BaseModel):
    """HTTP listener configuration."""

    host: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.HOST.value, "localhost"),
        description="Interface to bind",
    )
    port: int = Field(
        default_factory=lambda: int(os.getenv(EnvironmentVariable.PORT.value, "8080")),
        description="Port to bind",
    )
    tls_cert_file: Optional[str] = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.TLS_CERT_FILE.value),
        description="PEM certificate passed to the server for TLS",
    )
    tls_key_file: Optional[str] = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.TLS_KEY_FILE.value),
        description="PEM private key passed to the server for TLS",
    )

    @field_validator("port")
    def validate_port(cls, v: int) -> int:
        """Validate port is in range."""
        if not 0 < v < 65536:
            raise ValueError(f"Invalid port: {v}")
        return v


class DatabaseSettings(BaseModel):
    """Database connection configuration."""

    url: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.DATABASE_URL.value, "sqlite:///./vault_keeper.db"
        ),
        description="Database connection string",
    )
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")


class SecurityConfig(BaseModel):
    """Signing and encryption keys."""

    jwt_sign_key: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.JWT_SIGN_KEY.value, ""),
        description="Symmetric key used to sign session tokens",
    )
    field_cipher_key: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.FIELD_CIPHER_KEY.value, ""),
        description="Symmetric key for field encryption; defaults to the JWT sign key",
    )
    jwt_algorithm: str = Field(default="HS256", description="Session token signing algorithm")
    token_ttl_seconds: int = Field(
        default_factory=lambda: int(
            os.getenv(
                EnvironmentVariable.TOKEN_TTL_SECONDS.value, str(DEFAULT_TOKEN_TTL_SECONDS)
            )
        ),
        description="Session token lifetime",
    )
    legacy_fixed_iv: bool = Field(
        default_factory=lambda: _env_flag(EnvironmentVariable.LEGACY_FIXED_IV.value),
        description="Encrypt with the fixed IV for compatibility with previously stored data",
    )

    @field_validator("token_ttl_seconds")
    def validate_ttl(cls, v: int) -> int:
        """Validate token lifetime is positive."""
        if v <= 0:
            raise ValueError("token_ttl_seconds must be positive")
        return v

    @property
    def sign_key_bytes(self) -> bytes:
        return self.jwt_sign_key.encode("utf-8")

    @property
    def cipher_key_bytes(self) -> bytes:
        return (self.field_cipher_key or self.jwt_sign_key).encode("utf-8")

    def require_keys(self) -> None:
        """Fail fast at startup when no signing key is configured."""
        if not self.jwt_sign_key:
            raise ValidationError(
                f"{EnvironmentVariable.JWT_SIGN_KEY.value} is required",
                field="jwt_sign_key",
                error_code=ErrorCode.MISSING_REQUIRED,
            )


class ObjectStoreConfig(BaseModel):
    """File payload storage configuration."""

    root_dir: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.OBJECT_STORE_DIR.value, "./objects"),
        description="Directory holding the buckets",
    )
    bucket_name: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.BUCKET_NAME.value, "vault"),
        description="Bucket the file payloads are written to",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.LOG_LEVEL.value, LogLevel.INFO.value),
        description="Logging level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    @field_validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {level.value for level in LogLevel}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class AppConfig(BaseModel):
    """Main application configuration."""

    environment: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.APP_ENV.value, "development"),
        description="Application environment",
    )
    debug: bool = Field(
        default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true",
        description="Debug mode",
    )

    server: ServerConfig = Field(default_factory=ServerConfig, description="Server configuration")
    database: DatabaseSettings = Field(
        default_factory=DatabaseSettings, description="Database configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )
    object_store: ObjectStoreConfig = Field(
        default_factory=ObjectStoreConfig, description="Object store configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
