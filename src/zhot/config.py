"""Configuration management for zhot.

Configuration priority (highest to lowest):
1. Overrides (passed to load_config)
2. Environment variables (ZHOT_*)
3. Config file (~/.config/zhot/config.yaml)
4. Built-in defaults
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from platformdirs import user_config_dir

from .tools import DEFAULT_VIEWERS

log = logging.getLogger(__name__)

ENV_PREFIX = "ZHOT"
CONFIG_DIR = Path(user_config_dir("zhot"))
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.yaml"


def resolve_home(env: Optional[Mapping[str, str]] = None) -> Path:
    """Home directory from HOME in `env` (default: the process environment)."""
    env = os.environ if env is None else env
    return Path(env["HOME"]) if env.get("HOME") else Path.home()


def _default_output_dir(home: Optional[Path] = None) -> Path:
    return (home or Path.home()) / "Pictures" / "Screenshots"


@dataclass
class Config:
    """zhot configuration."""

    # Output settings
    output_dir: Path = field(default_factory=_default_output_dir)
    timestamp_format: str = "%Y-%m-%d_%H-%M-%S"

    # Alias installation
    alias_name: str = "zhot"
    install_path: Path = field(default_factory=lambda: Path("/usr/local/bin/zhot"))

    # Helper programs
    notifier: str = "notify-send"
    dialog: str = "zenity"
    viewers: list[str] = field(default_factory=lambda: list(DEFAULT_VIEWERS))

    # Behavior
    enable_notification: bool = True
    emit_events: bool = True
    debug: bool = False

    # Hooks
    hooks_dir: Optional[Path] = field(default_factory=lambda: CONFIG_DIR / "hooks")

    def __post_init__(self):
        for key in PATH_KEYS:
            value = getattr(self, key)
            if isinstance(value, str):
                setattr(self, key, Path(value))
        self.viewers = list(self.viewers)


PATH_KEYS = {"output_dir", "install_path", "hooks_dir"}


def _env(name: str) -> Optional[str]:
    return os.environ.get(f"{ENV_PREFIX}_{name}")


def _config_path_from_env() -> Optional[Path]:
    value = _env("CONFIG")
    if value:
        return Path(value).expanduser()
    return None


def _load_config_file(path: Path, strict: bool = False) -> dict:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        if strict:
            raise ValueError(f"Failed to parse config file {path}: {exc}")
        log.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}

    if not isinstance(data, dict):
        if strict:
            raise ValueError(f"Config file {path} must be a mapping")
        log.warning("Ignoring config file %s: not a mapping", path)
        return {}

    return data


def _expand_path(value: Any) -> Any:
    if value is None:
        return value
    return str(Path(value).expanduser())


def config_defaults(home: Optional[Path] = None) -> dict:
    return {
        "output_dir": str(_default_output_dir(home)),
        "timestamp_format": "%Y-%m-%d_%H-%M-%S",
        "alias_name": "zhot",
        "install_path": "/usr/local/bin/zhot",
        "notifier": "notify-send",
        "dialog": "zenity",
        "viewers": list(DEFAULT_VIEWERS),
        "enable_notification": True,
        "emit_events": True,
        "debug": False,
        "hooks_dir": str(CONFIG_DIR / "hooks"),
    }


def _load_env_overrides() -> dict:
    config: dict[str, Any] = {}

    mapping = {
        "OUTPUT_DIR": "output_dir",
        "TIMESTAMP_FORMAT": "timestamp_format",
        "ALIAS_NAME": "alias_name",
        "INSTALL_PATH": "install_path",
        "NOTIFIER": "notifier",
        "DIALOG": "dialog",
        "HOOKS_DIR": "hooks_dir",
    }

    for env_name, key in mapping.items():
        value = _env(env_name)
        if value is None:
            continue
        if key in PATH_KEYS:
            config[key] = _expand_path(value)
        else:
            config[key] = value

    viewers = _env("VIEWERS")
    if viewers is not None:
        config["viewers"] = [v.strip() for v in viewers.split(",") if v.strip()]

    for env_name, key in [
        ("ENABLE_NOTIFICATION", "enable_notification"),
        ("EMIT_EVENTS", "emit_events"),
        ("DEBUG", "debug"),
    ]:
        value = _env(env_name)
        if value is None:
            continue
        config[key] = value.lower() in ("true", "1", "yes", "on")

    return config


def resolve_config_path(config_path: Optional[Path] = None) -> Path:
    return config_path or _config_path_from_env() or DEFAULT_CONFIG_PATH


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[dict] = None,
    strict: bool = False,
    home: Optional[Path] = None,
) -> Config:
    """Load configuration from all sources.

    `home` anchors the default output directory; None uses Path.home().
    """
    resolved_path = resolve_config_path(config_path)

    config_dict = config_defaults(home)
    file_config = _load_config_file(resolved_path, strict=strict)

    errors = validate_config_dict(file_config)
    if errors:
        if strict:
            raise ValueError(f"Invalid config file {resolved_path}: {'; '.join(errors)}")
        for error in errors:
            log.warning("%s: %s", resolved_path, error)
        file_config = {
            k: v for k, v in file_config.items() if not validate_config_dict({k: v})
        }

    config_dict.update(file_config)
    config_dict.update(_load_env_overrides())

    if overrides:
        for key, value in overrides.items():
            if value is not None:
                config_dict[key] = value

    for key in PATH_KEYS:
        if key in config_dict and config_dict[key] is not None:
            config_dict[key] = _expand_path(config_dict[key])

    return Config(**config_dict)


def config_schema() -> dict:
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": {
            "output_dir": {"type": "string"},
            "timestamp_format": {"type": "string"},
            "alias_name": {"type": "string"},
            "install_path": {"type": "string"},
            "notifier": {"type": "string"},
            "dialog": {"type": "string"},
            "viewers": {"type": "array", "items": {"type": "string"}},
            "enable_notification": {"type": "boolean"},
            "emit_events": {"type": "boolean"},
            "debug": {"type": "boolean"},
            "hooks_dir": {"type": ["string", "null"]},
        },
        "additionalProperties": False,
    }


def validate_config_dict(data: Any) -> list[str]:
    errors: list[str] = []
    if not isinstance(data, dict):
        return ["Config must be a mapping/object"]

    props = config_schema().get("properties", {})

    for key in data.keys():
        if key not in props:
            errors.append(f"Unknown config key: {key}")

    for key, value in data.items():
        if key not in props:
            continue
        expected = props[key].get("type")
        if isinstance(expected, list):
            if value is None and "null" in expected:
                continue
            if "string" in expected and isinstance(value, str):
                continue
            errors.append(f"{key} must be one of types: {', '.join(expected)}")
        elif expected == "string" and not isinstance(value, str):
            errors.append(f"{key} must be a string")
        elif expected == "boolean" and not isinstance(value, bool):
            errors.append(f"{key} must be a boolean")
        elif expected == "array":
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                errors.append(f"{key} must be a list of strings")

        if key == "alias_name" and isinstance(value, str) and not value.strip():
            errors.append("alias_name must not be empty")

    return errors


def validate_config_file(config_path: Optional[Path] = None) -> list[str]:
    """Errors in the config file; an absent file is valid.

    Raises:
        ValueError: The file is not YAML or not a mapping
    """
    path = resolve_config_path(config_path)
    if not path.exists():
        return []
    data = _load_config_file(path, strict=True)
    return validate_config_dict(data)


def config_to_dict(config: Config) -> dict:
    def _format(value: Any) -> Any:
        if isinstance(value, Path):
            return str(value)
        return value

    return {
        "output_dir": _format(config.output_dir),
        "timestamp_format": config.timestamp_format,
        "alias_name": config.alias_name,
        "install_path": _format(config.install_path),
        "notifier": config.notifier,
        "dialog": config.dialog,
        "viewers": list(config.viewers),
        "enable_notification": config.enable_notification,
        "emit_events": config.emit_events,
        "debug": config.debug,
        "hooks_dir": _format(config.hooks_dir) if config.hooks_dir else None,
    }
