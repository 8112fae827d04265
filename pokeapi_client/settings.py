"""
Initializes the Dynaconf settings object for the client.
This module is the single source of truth for all configuration.
"""

from pathlib import Path
from typing import Any, Dict

from dynaconf import Dynaconf, Validator

PROJECT_ROOT = Path(__file__).parent.parent

settings = Dynaconf(
    root_path=PROJECT_ROOT,
    settings_files=["config/settings.toml"],
    secrets=["config/.secrets.toml"],
    envvar_prefix="POKEAPI",
    validators=[
        Validator("client.base_url", default="https://pokeapi.co/api/v2"),
        Validator("client.timeout", default=10.0, gt=0),
        Validator("client.page_size", default=20, gte=1),
        Validator("client.show_progress", default=False),
        Validator(
            "cache.policy", default="none", is_in=["none", "size", "ttl"]
        ),
        Validator("cache.max_entries", default=1024, gte=1),
        Validator("cache.ttl_seconds", default=3600, gt=0),
        Validator("logging.level", default="INFO"),
    ],
)


def settings_to_dict(source: Dynaconf = settings) -> Dict[str, Any]:
    """Collects the recognized options into a plain dict for the DI container."""
    return {
        "client": {
            "base_url": source.get("client.base_url"),
            "timeout": float(source.get("client.timeout")),
            "page_size": int(source.get("client.page_size")),
            "show_progress": bool(source.get("client.show_progress")),
        },
        "cache": {
            "policy": source.get("cache.policy"),
            "max_entries": int(source.get("cache.max_entries")),
            "ttl_seconds": float(source.get("cache.ttl_seconds")),
        },
        "logging": {
            "level": source.get("logging.level"),
        },
    }
