"""ConfigLoader — YAML file per environment, env vars override."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from resptime_filter.config.settings import ENV_PREFIX, Settings

_BUNDLED_ROOT = Path(__file__).resolve().parent


class ConfigLoader:
    """Load filter settings from ``<root>/<env>/settings.yaml`` plus env vars.

    ``RESPTIME_ENV`` picks the environment (default ``dev``) and
    ``RESPTIME_CONFIG_DIR`` replaces the bundled config root.
    """

    @staticmethod
    def config_root() -> Path:
        """Directory holding one sub-directory per environment."""
        override = os.environ.get(f"{ENV_PREFIX}CONFIG_DIR")
        return Path(override) if override else _BUNDLED_ROOT

    @staticmethod
    def _load_yaml(env: str) -> dict[str, Any]:
        path = ConfigLoader.config_root() / env / "settings.yaml"
        if not path.exists():
            return {}
        with path.open() as config_file:
            data = yaml.safe_load(config_file)
        return data if isinstance(data, dict) else {}

    @staticmethod
    def load_settings(**overrides: Any) -> Settings:
        """Build Settings with priority: overrides > env vars > YAML > defaults."""
        yaml_values = ConfigLoader._load_yaml(os.environ.get(f"{ENV_PREFIX}ENV", "dev"))
        # Init kwargs beat env vars in pydantic-settings, so a YAML key
        # must not be passed when its env var is set.
        from_yaml = {
            key: value
            for key, value in yaml_values.items()
            if f"{ENV_PREFIX}{key.upper()}" not in os.environ
        }
        return Settings(**{**from_yaml, **overrides})
