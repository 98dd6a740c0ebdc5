"""
Constants and enums for the vault.

This module centralizes the magic strings used across the vault so that the
HTTP layer, services and tests agree on them.
"""

from enum import Enum


class LogLevel(str, Enum):
    """Standard logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Standard environment variable names."""

    APP_ENV = "APP_ENV"
    LOG_LEVEL = "LOG_LEVEL"
    DATABASE_URL = "DATABASE_URL"
    HOST = "VAULT_HOST"
    PORT = "VAULT_PORT"
    TLS_CERT_FILE = "TLS_CERT_FILE"
    TLS_KEY_FILE = "TLS_KEY_FILE"
    JWT_SIGN_KEY = "JWT_SIGNKEY"
    FIELD_CIPHER_KEY = "FIELD_CIPHER_KEY"
    TOKEN_TTL_SECONDS = "TOKEN_TTL_SECONDS"
    LEGACY_FIXED_IV = "LEGACY_FIXED_IV"
    OBJECT_STORE_DIR = "OBJECT_STORE_DIR"
    BUCKET_NAME = "BUCKET_NAME"


class Header(str, Enum):
    """HTTP header names used by the API."""

    AUTHORIZATION = "Authorization"
    CORRELATION_ID = "X-Correlation-Id"
    FILE_NAME = "x-file-name"
    FILE_TITLE = "x-file-title"
    FILE_DESCRIPTION = "x-file-description"


BEARER_PREFIX = "Bearer"

# Claim names of the session token payload
CLAIM_LOGIN = "Login"
CLAIM_USER_ID = "UserID"

DEFAULT_TOKEN_TTL_SECONDS = 24 * 60 * 60

# List views show only the last four digits of a card number
CARD_MASK = "************"
CARD_VISIBLE_DIGITS = 4

# Routes reachable without a bearer token
PUBLIC_PATHS = frozenset({"/api/user/register", "/api/user/login", "/health"})
