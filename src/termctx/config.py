"""Settings persistence (TOML) and config schema."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

import tomli_w

from termctx.events import normalize_modifier

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# ---------------------------------------------------------------------------
# Config schema
# ---------------------------------------------------------------------------


@dataclass
class MenuConfig:
    # Modifier that must be held on secondary click: ctrl, alt, shift, cmd
    trigger_modifier: str = "ctrl"
    default_layout: str = "qwerty"
    layouts: list[str] = field(default_factory=lambda: ["qwerty", "dvorak", "colemak"])


@dataclass
class HooksConfig:
    # Also dismiss on clicks outside the application window (pynput)
    global_pointer: bool = False


@dataclass
class AppConfig:
    menu: MenuConfig = field(default_factory=MenuConfig)
    hooks: HooksConfig = field(default_factory=HooksConfig)
    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def get_config_path() -> Path:
    """Return the path to the config file (~/.termctx/config.toml)."""
    return Path.home() / ".termctx" / "config.toml"


def _merge_into_dataclass(cls: type, data: dict) -> object:
    """Create a dataclass instance from *data*, ignoring unknown keys."""
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


def _deep_merge(defaults: dict, overrides: dict) -> dict:
    """Recursively merge *overrides* into *defaults* (non-destructive)."""
    merged = defaults.copy()
    for key, value in overrides.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _section(data: dict, name: str) -> dict:
    """Return the ``[name]`` table of *data*, or ``{}`` when absent."""
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be a table, got {value!r}")
    return value


def _dict_to_config(data: dict) -> AppConfig:
    """Build an AppConfig from a plain dict (e.g. parsed TOML).

    Raises:
        ValueError: If a section is not a table.
    """
    menu = _merge_into_dataclass(MenuConfig, _section(data, "menu"))
    hooks = _merge_into_dataclass(HooksConfig, _section(data, "hooks"))
    log_level = data.get("log_level", "INFO")
    if isinstance(log_level, str):
        log_level = log_level.upper()
    return AppConfig(menu=menu, hooks=hooks, log_level=log_level)  # type: ignore[arg-type]


def _config_to_dict(config: AppConfig) -> dict:
    """Convert an AppConfig to a plain dict suitable for TOML serialization."""
    return asdict(config)


def validate_config(config: AppConfig) -> None:
    """Check the menu, hooks and logging settings.

    Raises:
        ValueError: If the layout list is empty or not a list of strings, the
            default layout is not in it, the trigger modifier is unknown, or
            a value has the wrong type.
    """
    menu = config.menu
    if not isinstance(menu.trigger_modifier, str):
        raise ValueError(f"menu.trigger_modifier must be a string, got {menu.trigger_modifier!r}")
    if not isinstance(menu.default_layout, str):
        raise ValueError(f"menu.default_layout must be a string, got {menu.default_layout!r}")
    if not isinstance(menu.layouts, list) or not all(isinstance(x, str) for x in menu.layouts):
        raise ValueError(f"menu.layouts must be a list of strings, got {menu.layouts!r}")
    if not menu.layouts:
        raise ValueError("menu.layouts must not be empty")
    if menu.default_layout not in menu.layouts:
        raise ValueError(
            f"menu.default_layout {menu.default_layout!r} is not one of {menu.layouts}"
        )
    normalize_modifier(menu.trigger_modifier)

    if not isinstance(config.hooks.global_pointer, bool):
        raise ValueError(
            f"hooks.global_pointer must be true or false, got {config.hooks.global_pointer!r}"
        )
    if config.log_level not in _LOG_LEVELS:
        raise ValueError(f"log_level must be one of {list(_LOG_LEVELS)}, got {config.log_level!r}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: Path | None = None) -> AppConfig:
    """Load config from file, merge with defaults.

    Creates a default config file if one does not exist.  Falls back to the
    defaults when the file cannot be parsed or fails validation.
    """
    path = path or get_config_path()

    if not path.exists():
        config = AppConfig()
        save_config(config, path)
        return config

    try:
        with open(path, "rb") as f:
            file_data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to read config %s: %s; using defaults", path, exc)
        return AppConfig()

    default_data = _config_to_dict(AppConfig())
    merged = _deep_merge(default_data, file_data)

    try:
        config = _dict_to_config(merged)
        validate_config(config)
    except ValueError as exc:
        logger.warning("Invalid config %s: %s; using defaults", path, exc)
        return AppConfig()
    return config


def save_config(config: AppConfig, path: Path | None = None) -> None:
    """Save *config* to the TOML config file.

    Creates the parent directory if it does not exist.
    """
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)
    with open(path, "wb") as f:
        tomli_w.dump(data, f)
