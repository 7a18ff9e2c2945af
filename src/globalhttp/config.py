"""
Configuration management for GlobalHTTP.

Loads client defaults from environment variables or a .env file.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from globalhttp import __version__
from globalhttp.options import RequestOptions


ENV_LOCATIONS = [
    Path.home() / ".globalhttp" / ".env",
    Path.home() / ".config" / "globalhttp" / ".env",
    Path.cwd() / ".env",
]


def load_env_files() -> Path | None:
    """Load the first .env file found in the common locations."""
    for env_path in ENV_LOCATIONS:
        if env_path.exists():
            load_dotenv(env_path)
            return env_path
    return None


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """HTTP client configuration and serialization defaults."""

    # Base URL handed to URL builder functions
    base_url: str = ""

    # Transport
    timeout: float = 30.0
    verify_ssl: bool = True
    follow_redirects: bool = True
    user_agent: str = f"globalhttp/{__version__}"

    # Raise HTTPStatusError on 4xx/5xx responses
    raise_for_status: bool = True

    # Format=XML, Serializer=contract, Encoding=UTF-8 unless overridden
    defaults: RequestOptions = field(default_factory=RequestOptions)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration from environment variables."""
        load_env_files()
        defaults = RequestOptions(
            format=os.getenv("GLOBALHTTP_FORMAT") or "xml",
            serializer=os.getenv("GLOBALHTTP_SERIALIZER") or "contract",
            payload_encoding=os.getenv("GLOBALHTTP_ENCODING") or "utf-8",
        )
        return cls(
            base_url=os.getenv("GLOBALHTTP_BASE_URL", ""),
            timeout=float(os.getenv("GLOBALHTTP_TIMEOUT") or 30.0),
            verify_ssl=_env_bool("GLOBALHTTP_VERIFY_SSL", True),
            follow_redirects=_env_bool("GLOBALHTTP_FOLLOW_REDIRECTS", True),
            raise_for_status=_env_bool("GLOBALHTTP_RAISE_FOR_STATUS", True),
            defaults=defaults,
        )


# Global config instance
_config: ClientConfig | None = None


def get_config() -> ClientConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ClientConfig.from_env()
    return _config


def set_config(config: ClientConfig | None) -> None:
    """Set the global configuration instance (None reloads from the environment)."""
    global _config
    _config = config
