"""
promptsmith configuration management (YAML-only).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

from promptsmith.core.exceptions import ConfigurationError
from promptsmith.core.schemas.validation import SchemaValidationError, validate_payload
from promptsmith.core.utils.io import read_yaml
from promptsmith.core.utils.merge import deep_merge
from promptsmith.data import get_data_path

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILENAME = "promptsmith.yaml"


class ConfigManager:
    """Load, merge, and validate promptsmith configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: PROMPTSMITH_*
    2. Source tree config: <source_root>/promptsmith.yaml
    3. Bundled defaults: promptsmith.data/config/defaults.yaml
    """

    ENV_PREFIX = "PROMPTSMITH_"

    def __init__(self, source_root: Optional[Path] = None) -> None:
        self.source_root = Path(source_root or Path.cwd()).resolve()
        self.core_config_path = get_data_path("config", "defaults.yaml")
        self.project_config_path = self.source_root / PROJECT_CONFIG_FILENAME

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Invalid YAML is an error, never an empty layer.
        if not path.exists():
            return {}
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise ConfigurationError(
                f"Cannot parse configuration file {path}: {exc}",
                context={"path": str(path)},
            ) from exc
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file {path} must contain a mapping, got {type(data).__name__}",
                context={"path": str(path)},
            )
        return data

    def validate_schema(self, config: Dict[str, Any], schema_name: str = "config") -> None:
        try:
            validate_payload(config, schema_name)
        except SchemaValidationError as exc:
            raise ConfigurationError(str(exc), context={"schema": schema_name}) from exc

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value

    def _parse_env_key(self, raw: str) -> List[str]:
        segs = raw.split("__") if "__" in raw else [raw]
        if any(seg == "" for seg in segs):
            raise ConfigurationError(
                f"Malformed {self.ENV_PREFIX}* key: empty segment in '{raw}'",
                context={"key": raw},
            )
        return [seg.lower() for seg in segs]

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(self.ENV_PREFIX):
                continue
            raw = key[len(self.ENV_PREFIX):]
            if not raw:
                continue
            yield self._parse_env_key(raw), self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        # Segments match existing keys case-insensitively so camelCase keys stay canonical.
        cur: Dict[str, Any] = root
        for i, part in enumerate(path):
            candidates = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            key = candidates.get(part, part)
            if i == len(path) - 1:
                cur[key] = value
                return
            nxt = cur.get(key)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[key] = nxt
            cur = nxt

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, typed_value in self._iter_env_overrides():
            logger.debug("Config override from environment: %s", ".".join(path))
            self._set_nested(cfg, path, typed_value)

    # ========== Loading ==========

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load the merged configuration.

        Raises:
            ConfigurationError: If a file cannot be parsed, an environment key
                is malformed, or the merged result violates the settings schema.
        """
        cfg = self.load_yaml(self.core_config_path)
        if self.project_config_path.exists():
            logger.debug("Loading source tree config %s", self.project_config_path)
            cfg = deep_merge(cfg, self.load_yaml(self.project_config_path))
        self.apply_env_overrides(cfg)
        if validate:
            self.validate_schema(cfg)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-notation key.

        Example:
            >>> manager.get('output.root')
            'output'
        """
        current: Any = self.load_config(validate=False)
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


__all__ = ["ConfigManager", "PROJECT_CONFIG_FILENAME"]
