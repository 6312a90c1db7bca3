"""
Centralized Configuration System for Student Portal

This module provides a single source of truth for all configuration values.
Configuration is loaded from:
1. Default values (hardcoded)
2. Environment variables
3. Settings file (~/.student-portal/settings.json)

Priority: Settings file > Environment variables > Defaults
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional

from src.auth.validation import ALLOWED_TLDS

logger = logging.getLogger(__name__)


# === Default Configuration Values ===

@dataclass
class StorageConfig:
    """Configuration for the key-value storage backing the user list."""
    data_dir: Path = field(default_factory=lambda: Path.home() / ".student-portal")
    storage_file: str = "local_storage.json"
    users_key: str = "users"
    ephemeral: bool = False  # keep everything in memory, nothing written to disk

    @property
    def storage_path(self) -> Path:
        return self.data_dir / self.storage_file


@dataclass
class ServerConfig:
    """Configuration for the portal web server."""
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=lambda: [
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ])


@dataclass
class AuthConfig:
    """Configuration for signup/login rules."""
    allowed_tlds: List[str] = field(default_factory=lambda: list(ALLOWED_TLDS))
    prefill_on_not_found: bool = True  # carry the attempted email to signup


@dataclass
class Config:
    """Main configuration container."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)


# === Configuration Loading ===

SETTINGS_FILE = Path.home() / ".student-portal" / "settings.json"


def _load_from_env(config: Config) -> None:
    """Load configuration from environment variables."""
    # Server config
    if os.environ.get("STUDENT_PORTAL_HOST"):
        config.server.host = os.environ["STUDENT_PORTAL_HOST"]
    if os.environ.get("STUDENT_PORTAL_PORT"):
        config.server.port = int(os.environ["STUDENT_PORTAL_PORT"])

    # Storage config
    if os.environ.get("STUDENT_PORTAL_STORAGE"):
        storage_path = Path(os.environ["STUDENT_PORTAL_STORAGE"]).expanduser()
        config.storage.data_dir = storage_path.parent
        config.storage.storage_file = storage_path.name


def _load_from_file(config: Config) -> None:
    """Load configuration from settings file."""
    if not SETTINGS_FILE.exists():
        return

    try:
        settings = json.loads(SETTINGS_FILE.read_text())

        # Server settings
        if "server" in settings:
            srv = settings["server"]
            if "host" in srv:
                config.server.host = srv["host"]
            if "port" in srv:
                config.server.port = int(srv["port"])
            if "cors_origins" in srv:
                config.server.cors_origins = list(srv["cors_origins"])

        # Storage settings
        if "storage" in settings:
            stor = settings["storage"]
            if "data_dir" in stor:
                config.storage.data_dir = Path(stor["data_dir"]).expanduser()
            if "storage_file" in stor:
                config.storage.storage_file = stor["storage_file"]
            if "users_key" in stor:
                config.storage.users_key = stor["users_key"]

        # Auth settings
        if "auth" in settings:
            auth = settings["auth"]
            if "allowed_tlds" in auth and auth["allowed_tlds"]:
                config.auth.allowed_tlds = [str(t) for t in auth["allowed_tlds"]]
            if "prefill_on_not_found" in auth:
                config.auth.prefill_on_not_found = bool(auth["prefill_on_not_found"])

    except Exception as e:
        logger.warning(f"Failed to load settings file: {e}")


def load_config() -> Config:
    """
    Load configuration from all sources.

    Priority: Settings file > Environment variables > Defaults
    """
    config = Config()

    # Load from environment first
    _load_from_env(config)

    # Load from file (overrides env)
    _load_from_file(config)

    return config


def save_config(config: Config) -> bool:
    """Save configuration to settings file."""
    try:
        SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)

        settings = {
            "server": {
                "host": config.server.host,
                "port": config.server.port,
                "cors_origins": config.server.cors_origins,
            },
            "storage": {
                "data_dir": str(config.storage.data_dir),
                "storage_file": config.storage.storage_file,
                "users_key": config.storage.users_key,
            },
            "auth": {
                "allowed_tlds": config.auth.allowed_tlds,
                "prefill_on_not_found": config.auth.prefill_on_not_found,
            },
        }

        SETTINGS_FILE.write_text(json.dumps(settings, indent=2))
        return True
    except Exception as e:
        logger.error(f"Failed to save config: {e}")
        return False


# === Global Config Instance ===

_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Reload configuration from sources."""
    global _config
    _config = load_config()
    return _config
