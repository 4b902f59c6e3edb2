"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for everything except the token
signing secret, which has no safe default: ``validate`` raises when it
is missing so the application refuses to start instead of silently
signing tokens with a well-known key.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Bazaar Ramadhan API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")
    secret_key: str = os.getenv("SECRET_KEY", "")
    # Tokens are long-lived bearer credentials; there is no refresh flow.
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 30)))
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "reviews.db")

    def validate(self) -> None:
        """Fail fast when required settings are absent."""
        if not self.secret_key:
            raise RuntimeError("SECRET_KEY must be set before starting the API")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# therefore be set before importing this module.
settings = Settings()
