"""Configuration sources for the protocol bindings.

Settings are read from JSON or YAML files, from environment variables named
``<PREFIX>_<KEY>`` and from plain dictionaries, then merged so that the
environment wins over the file and the file wins over the base dictionary.
"""

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Union
import logging

import yaml

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "CLOUDEVENTS"

_BOOLEANS = {"true": True, "false": False}


def _parse_unknown(content: str) -> Any:
    # YAML accepts most JSON documents but not all of them, try JSON first
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        return yaml.safe_load(content)


_PARSERS: Dict[str, Callable[[str], Any]] = {
    ".json": json.loads,
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
}


class ConfigLoader:
    """Reads configuration dictionaries and merges them."""

    @staticmethod
    def load_from_file(file_path: Union[str, Path]) -> Dict[str, Any]:
        """Read a configuration mapping from ``file_path``.

        The parser is chosen by extension (``.json``, ``.yaml``, ``.yml``);
        files with another extension are read as JSON, then as YAML. An empty
        file is an empty mapping.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the content cannot be parsed or is not a mapping.
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")
        if not content.strip():
            return {}

        parser = _PARSERS.get(path.suffix.lower(), _parse_unknown)
        try:
            loaded = parser(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Cannot parse configuration file {path}: {e}") from e

        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration file {path} must hold a mapping, not {type(loaded).__name__}")
        return loaded

    @staticmethod
    def load_from_env(prefix: str = DEFAULT_ENV_PREFIX, sections: Iterable[str] = ()) -> Dict[str, Any]:
        """Collect ``<prefix>_*`` environment variables into a mapping.

        Names lose the prefix and are lowercased. When the first word of a
        name is one of ``sections``, the value is nested under that section:
        with ``sections=("kafka",)``, ``CLOUDEVENTS_KAFKA_TOPIC=events``
        becomes ``{"kafka": {"topic": "events"}}``.
        """
        marker = prefix + "_"
        nested = frozenset(sections)
        config: Dict[str, Any] = {}

        for name in sorted(os.environ):
            if not name.startswith(marker):
                continue
            key = name[len(marker):].lower()
            value = ConfigLoader._parse_env_value(os.environ[name])

            head, sep, rest = key.partition("_")
            if sep and rest and head in nested:
                config.setdefault(head, {})[rest] = value
            else:
                config[key] = value

        return config

    @staticmethod
    def _parse_env_value(value: str) -> Any:
        """Turn an environment string into a bool, an int, a float, a list or itself."""
        if value.lower() in _BOOLEANS:
            return _BOOLEANS[value.lower()]

        for number in (int, float):
            try:
                return number(value)
            except ValueError:
                continue

        if "," in value:
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @staticmethod
    def merge_configs(*configs: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Merge mappings left to right, later values winning, nested mappings merged key by key."""
        merged: Dict[str, Any] = {}
        for config in configs:
            if config:
                merged = ConfigLoader._deep_merge(merged, config)
        return merged

    @staticmethod
    def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        merged = dict(base)
        for key, value in override.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                value = ConfigLoader._deep_merge(current, value)
            merged[key] = value
        return merged

    @staticmethod
    def load_config(
        config_file: Optional[Union[str, Path]] = None,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        base_config: Optional[Dict[str, Any]] = None,
        sections: Iterable[str] = ()
    ) -> Dict[str, Any]:
        """Merge ``base_config``, ``config_file`` and the environment, in rising priority.

        Raises:
            FileNotFoundError: If config_file is given but doesn't exist.
            ValueError: If config_file cannot be parsed.
        """
        file_config: Dict[str, Any] = {}
        if config_file:
            try:
                file_config = ConfigLoader.load_from_file(config_file)
            except (FileNotFoundError, ValueError) as e:
                logger.error(f"Failed to load configuration file {config_file}: {e}")
                raise
            logger.info(f"Loaded configuration from file: {config_file}")

        env_config = ConfigLoader.load_from_env(env_prefix, sections)
        if env_config:
            logger.info(f"Loaded {len(env_config)} configuration keys from {env_prefix}_* environment variables")

        return ConfigLoader.merge_configs(base_config, file_config, env_config)
