"""Engine configuration loading.

Settings come from, in increasing priority:
- YAML files listed in the PHPCORE_CONFIG environment variable
  (separated by os.pathsep)
- an explicit YAML file passed to load_config()
- php.ini style ``key=value`` directives (the CLI's ``-d`` option)

Example config file:

    display_errors: false
    output_encoding: latin-1
    directives:
      memory_limit: 128M

Keys the engine does not know about are kept as plain directives.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

__all__ = [
    "PHPCORE_CONFIG",
    "EngineConfig",
    "load_config",
    "parse_directive",
    "parse_bool",
]

logger = logging.getLogger(__name__)

# Environment variable name for site-wide config files
PHPCORE_CONFIG = "PHPCORE_CONFIG"

_TRUE_WORDS = {"1", "on", "true", "yes"}
_FALSE_WORDS = {"0", "off", "false", "no", "none", ""}


def parse_bool(value: Any) -> bool:
    """Interpret an ini-style flag such as ``1``, ``off`` or ``True``."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"Invalid boolean setting: {value!r}")


def parse_directive(text: str) -> Tuple[str, str]:
    """Split a ``key=value`` directive; raises ValueError without ``=``."""
    if "=" not in text:
        raise ValueError(f"Invalid directive format: {text} (expected key=value)")
    key, value = text.split("=", 1)
    key = key.strip()
    if not key:
        raise ValueError(f"Invalid directive format: {text} (empty key)")
    return key, value.strip()


@dataclass
class EngineConfig:
    """Settings for an Engine instance."""
    display_errors: bool = True
    output_encoding: str = "utf-8"
    variables_capacity: int = 64
    functions_capacity: int = 32
    directives: Dict[str, str] = field(default_factory=dict)

    def apply(self, key: str, value: Any) -> None:
        """Apply one setting, keeping unknown keys as directives."""
        if key == "display_errors":
            self.display_errors = parse_bool(value)
        elif key == "output_encoding":
            self.output_encoding = str(value)
        elif key in ("variables_capacity", "functions_capacity"):
            capacity = int(value)
            if capacity < 1:
                raise ValueError(f"{key} must be positive, got {capacity}")
            setattr(self, key, capacity)
        elif key == "directives":
            if not isinstance(value, Mapping):
                raise ValueError("'directives' must be a mapping")
            for name, setting in value.items():
                self.apply(str(name), setting)
        else:
            self.directives[key] = "" if value is None else str(value)

    def update(self, data: Mapping[str, Any]) -> None:
        for key, value in data.items():
            self.apply(str(key), value)

    def apply_directives(self, directives: Iterable[str]) -> None:
        """Apply ``key=value`` strings in order."""
        for text in directives:
            key, value = parse_directive(text)
            self.apply(key, value)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Look up a plain directive."""
        return self.directives.get(key, default)


def _env_config_paths(environ: Mapping[str, str]) -> List[Path]:
    raw = environ.get(PHPCORE_CONFIG, "")
    return [Path(p).expanduser() for p in raw.split(os.pathsep) if p.strip()]


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    return data


def load_config(
    path: Optional[Path | str] = None,
    directives: Iterable[str] = (),
    environ: Optional[Mapping[str, str]] = None,
) -> EngineConfig:
    """Build an EngineConfig from env files, an optional file and directives.

    Args:
        path: Optional YAML config file. Must exist if given.
        directives: ``key=value`` overrides applied last.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        The merged EngineConfig.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: For malformed files or settings.
    """
    if environ is None:
        environ = os.environ

    config = EngineConfig()

    for env_path in _env_config_paths(environ):
        if env_path.is_file():
            logger.debug("loading config from %s (%s)", env_path, PHPCORE_CONFIG)
            config.update(_read_yaml(env_path))
        else:
            logger.warning("config file from %s not found: %s", PHPCORE_CONFIG, env_path)

    if path is not None:
        config_path = Path(path)
        if not config_path.is_file():
            raise FileNotFoundError(f"config file not found: {config_path}")
        logger.debug("loading config from %s", config_path)
        config.update(_read_yaml(config_path))

    config.apply_directives(directives)
    return config
