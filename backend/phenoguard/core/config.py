"""
Configuration for the PhenoGuard service.

Values come from the environment (a .env file is honoured) and can be
overridden at runtime or from a JSON file. Only the application entry points
read this module; the interpretation pipeline receives its settings through
constructor arguments.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel, Field

# Load .env file (walks up directories to find it)
load_dotenv(find_dotenv())

BACKEND_DIR = Path(__file__).resolve().parent.parent.parent


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class DatabaseConfig(BaseModel):
    """PostgreSQL connection settings."""

    host: str = Field(default_factory=lambda: os.getenv("DB_HOST", "localhost"))
    port: int = Field(default_factory=lambda: int(os.getenv("DB_PORT", "5432")))
    name: str = Field(default_factory=lambda: os.getenv("DB_NAME", "phenoguard"))
    user: str = Field(default_factory=lambda: os.getenv("DB_USER", "postgres"))
    password: Optional[str] = Field(default_factory=lambda: os.getenv("DB_PASSWORD"))

    min_connections: int = Field(default=0, ge=0, description="Connections opened at startup")
    max_connections: int = Field(
        default_factory=lambda: int(os.getenv("DB_POOL_MAX", "10")),
        ge=1,
        description="Upper bound on pooled connections"
    )
    connect_timeout: int = Field(default=10, ge=1, description="Seconds")


class PhenoGuardConfig(BaseModel):
    """Main configuration for the service."""

    store: str = Field(
        default_factory=lambda: os.getenv("PHENOGUARD_STORE", "memory"),
        description="Reference data backend: 'memory' or 'postgres'"
    )

    reference_data_path: str = Field(
        default_factory=lambda: os.getenv("PHENOGUARD_REFERENCE_DATA", "data/reference_data.json"),
        description="Reference data JSON for the memory store (relative to backend root)"
    )

    strict: bool = Field(
        default_factory=lambda: _env_flag("PHENOGUARD_STRICT"),
        description="Fail on overlapping phenotype rules or duplicate guidelines instead of taking the first"
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    allowed_origins: List[str] = Field(
        default_factory=lambda: os.getenv("PHENOGUARD_ALLOWED_ORIGINS", "*").split(","),
        description="CORS origins"
    )

    # Logging
    log_level: str = Field(default_factory=lambda: os.getenv("PHENOGUARD_LOG_LEVEL", "INFO"))

    def resolved_reference_data_path(self) -> Path:
        path = Path(self.reference_data_path)
        return path if path.is_absolute() else BACKEND_DIR / path


# Global configuration instance
_config: PhenoGuardConfig = PhenoGuardConfig()


def get_config() -> PhenoGuardConfig:
    """Get the global configuration instance."""
    return _config


def update_config(**kwargs) -> PhenoGuardConfig:
    """Update configuration parameters. Nested keys use dots, e.g. 'database.host'."""
    global _config
    current_dict = _config.model_dump()

    for key, value in kwargs.items():
        if '.' in key:
            parts = key.split('.')
            current = current_dict
            for part in parts[:-1]:
                current = current[part]
            current[parts[-1]] = value
        else:
            current_dict[key] = value

    _config = PhenoGuardConfig(**current_dict)
    return _config


def load_config_from_file(filepath: str) -> PhenoGuardConfig:
    """Load configuration from a JSON file."""
    import json
    global _config

    with open(filepath, 'r') as f:
        config_dict = json.load(f)

    _config = PhenoGuardConfig(**config_dict)
    return _config


def save_config_to_file(filepath: str):
    """Save current configuration to a JSON file. The database password is left out."""
    import json

    data = _config.model_dump()
    data["database"].pop("password", None)
    with open(filepath, 'w') as f:
        json.dump(data, f, indent=2)
