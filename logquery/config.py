import copy
import logging
import os

import yaml

from logquery.validator import DEFAULT_SCHEMA_PATH

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager that loads from YAML and merges with defaults."""

    DEFAULTS = {
        "server": {
            "host": "0.0.0.0",
            "port": 3000,
            "debug": False,
        },
        "storage": {
            "path": "data/logs.json",
        },
        "query": {
            "default_limit": 50,
            "max_limit": 1000,
        },
        "validation": {
            "schema_path": DEFAULT_SCHEMA_PATH,
        },
        "cors": {
            "origins": "*",
        },
        "logging": {
            "level": "INFO",
        },
    }

    # env var -> (section, key, cast)
    ENV_OVERRIDES = {
        "PORT": ("server", "port", int),
        "LOG_STORE_PATH": ("storage", "path", str),
        "LOG_LEVEL": ("logging", "level", str.upper),
    }

    def __init__(self, config_path=None):
        self._config = copy.deepcopy(self.DEFAULTS)

        if config_path is not None:
            try:
                with open(config_path, "r") as f:
                    user_config = yaml.safe_load(f)

                if user_config and isinstance(user_config, dict):
                    self._config = self._deep_merge(self._config, user_config)
            except FileNotFoundError:
                pass
            except yaml.YAMLError:
                logger.warning("Invalid YAML in %s, using defaults", config_path)

    @staticmethod
    def _deep_merge(base, override):
        """Recursively merge override dict into base dict."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
        return result

    def apply_env(self, environ):
        """Override individual settings from environment variables."""
        for var, (section, key, cast) in self.ENV_OVERRIDES.items():
            raw = environ.get(var)
            if raw:
                self._config.setdefault(section, {})[key] = cast(raw)
        return self

    def __getitem__(self, key):
        return self._config[key]


def load_config(config_path=None):
    """Build Config from ``CONFIG_PATH`` (default ``config.yaml``) plus env overrides."""
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config.yaml")
    return Config(config_path).apply_env(os.environ)
