"""
Centralized settings and path configuration for checkout pricing.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


PACKAGE_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_RULES_CSV = PACKAGE_ROOT / 'rules' / 'default_rules.csv'

_ENV_PREFIX = "CHECKOUT_"


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to the directory holding the package
    return PACKAGE_ROOT.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    project_root: Path
    rules_csv: Path = DEFAULT_RULES_CSV

    # HTTP API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    log_level: str = "INFO"

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from defaults, overridden by CHECKOUT_* environment variables."""
        root = project_root or get_project_root()

        rules_csv = DEFAULT_RULES_CSV
        env_rules = os.environ.get(f"{_ENV_PREFIX}RULES_CSV")
        if env_rules:
            rules_csv = Path(env_rules)
            if not rules_csv.is_absolute():
                rules_csv = root / rules_csv

        api_port = 8000
        env_port = os.environ.get(f"{_ENV_PREFIX}API_PORT")
        if env_port:
            try:
                api_port = int(env_port)
            except ValueError:
                raise ValueError(f"{_ENV_PREFIX}API_PORT must be an integer, got {env_port!r}") from None

        return cls(
            project_root=root,
            rules_csv=rules_csv,
            api_port=api_port,
            log_level=os.environ.get(f"{_ENV_PREFIX}LOG_LEVEL", "INFO").upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def refresh_settings() -> Settings:
    """Drop the cached settings and reload them from the environment."""
    global _settings
    _settings = None
    return get_settings()
