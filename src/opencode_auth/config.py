"""
Configuration management for the OpenCode auth store.
Uses Pydantic for type-safe configuration with YAML file support.
"""

import os
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml


class AuthStoreConfig(BaseSettings):
    """Main application configuration."""
    model_config = SettingsConfigDict(
        env_prefix="OPENCODE_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    data_dir: Optional[str] = None
    auth_file_name: str = "auth.json"
    backup_suffix: str = ".openchamber.backup"
    json_indent: int = 2

    # Server configuration
    host: str = "127.0.0.1"
    port: int = 8318

    # Logging and debugging
    debug: bool = False

    @field_validator("data_dir", mode="before")
    @classmethod
    def expand_data_dir(cls, v: Optional[str]) -> Optional[str]:
        """Expand ~ in data directory path."""
        if isinstance(v, Path):
            v = str(v)
        if v and v.startswith("~"):
            return os.path.expanduser(v)
        return v

    @classmethod
    def from_file(cls, config_file: str) -> "AuthStoreConfig":
        """Load configuration from a YAML file."""
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f)

        if not yaml_config:
            yaml_config = {}

        return cls(**yaml_config)

    def save_to_file(self, config_file: str) -> None:
        """Save configuration to a YAML file."""
        config_path = Path(config_file)
        config_dict = self.model_dump(exclude_none=True)

        # Ensure directory exists
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not (1 <= self.port <= 65535):
            errors.append(f"Port {self.port} is out of valid range (1-65535)")

        if not self.auth_file_name:
            errors.append("Auth file name is empty")
        elif os.sep in self.auth_file_name or "/" in self.auth_file_name:
            errors.append(f"Auth file name must not contain a path separator: {self.auth_file_name}")

        if not self.backup_suffix:
            errors.append("Backup suffix is empty")
        elif os.sep in self.backup_suffix or "/" in self.backup_suffix:
            errors.append(f"Backup suffix must not contain a path separator: {self.backup_suffix}")

        if self.json_indent < 0:
            errors.append(f"JSON indent must not be negative: {self.json_indent}")

        return errors


# Global configuration instance
_config: Optional[AuthStoreConfig] = None


def get_config() -> AuthStoreConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        raise RuntimeError("Configuration not initialized. Call load_config() first.")
    return _config


def load_config(config_file: Optional[str] = None) -> AuthStoreConfig:
    """Load configuration from file or environment."""
    global _config

    if config_file:
        _config = AuthStoreConfig.from_file(config_file)
    else:
        config_locations = [
            "config.yaml",
            "config/config.yaml",
            os.path.expanduser("~/.config/opencode-auth/config.yaml"),
        ]

        for location in config_locations:
            if Path(location).exists():
                _config = AuthStoreConfig.from_file(location)
                break
        else:
            # No config file found, use defaults
            _config = AuthStoreConfig()

    errors = _config.validate_config()
    if errors:
        print("Configuration errors:", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)

    return _config


def reload_config(config_file: Optional[str] = None) -> AuthStoreConfig:
    """Reload configuration from file."""
    global _config
    _config = None
    return load_config(config_file)
