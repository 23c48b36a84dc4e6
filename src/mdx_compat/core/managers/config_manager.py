# src/mdx_compat/core/managers/config_manager.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from mdx_compat.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merges 'override' into a copy of 'base'. Lists are replaced, not merged."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _coerce(value: Any, like: Any) -> Any:
    """Casts 'value' to the type of the value it replaces; lists, dicts and None are taken as-is."""
    if like is None or isinstance(like, (list, dict)) or isinstance(value, type(like)):
        return value
    if isinstance(like, bool) and isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return type(like)(value)


class ConfigManager:
    """
    Singleton holding the effective configuration of the tool.

    Layers, lowest first:
      1. the bundled settings.json (next to the package)
      2. an optional .mdx-compat.json in the directory the command runs from
      3. in-memory changes made through set_nested()
    reset() drops layer 3 and re-reads the files.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance.reset()
            cls._instance = instance
            logger.debug("ConfigManager initialized.")
        return cls._instance

    @staticmethod
    def _keys(key_path: str) -> List[str]:
        return [k for k in key_path.split(".") if k]

    def get_all(self) -> Dict[str, Any]:
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """Looks up a dotted key such as 'transformer.link_prefix'."""
        node: Any = self._config
        for key in self._keys(key_path):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return default if node is None else node

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Changes a dotted key in memory, creating intermediate sections as needed.
        A scalar keeps the type of the value it replaces ('20' -> 20 for an int).
        """
        *parents, leaf = self._keys(key_path)
        section = self._config
        for key in parents:
            section = section.setdefault(key, {})
            if not isinstance(section, dict):
                logger.error("Cannot set '%s': '%s' is not a section.", key_path, key)
                return False

        try:
            section[leaf] = _coerce(value, section.get(leaf))
        except (TypeError, ValueError):
            logger.warning("Could not cast '%s' to %s; storing it unchanged.",
                           key_path, type(section.get(leaf)).__name__)
            section[leaf] = value

        logger.info("Configuration updated: %s = %s", key_path, section[leaf])
        return True

    def reset(self) -> None:
        """Re-reads settings.json and applies the override file when present."""
        self._config = self._load_json(PathUtils.get_settings_file(), required=True)

        override_path = PathUtils.get_user_settings_file()
        if override_path.exists():
            override = self._load_json(override_path, required=False)
            if override:
                self._config = _deep_merge(self._config, override)
                logger.info("Applied configuration overrides from %s", override_path)

    @staticmethod
    def _load_json(path: Path, required: bool) -> Dict[str, Any]:
        if not path.exists():
            if required:
                logger.warning("settings.json not found at %s. Using empty config.", path)
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.error("Configuration file %s does not contain a JSON object.", path)
            return {}
        return data


config_manager = ConfigManager()
