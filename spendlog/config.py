"""Configuration file management for spendlog."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from spendlog.domain.summary import DANGER_THRESHOLD, WARNING_THRESHOLD

DEFAULT_CONFIG: dict[str, Any] = {
    "currency_symbol": "₹",
    "export_dir": ".",
    "sort_key": "date",
    "sort_direction": "desc",
    "warning_threshold": WARNING_THRESHOLD,
    "danger_threshold": DANGER_THRESHOLD,
}


@dataclass(frozen=True)
class Settings:
    """Immutable user settings with defaults applied."""

    currency_symbol: str
    export_dir: Path
    sort_key: str
    sort_direction: str
    warning_threshold: float
    danger_threshold: float


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "spendlog" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with owner-only permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(DEFAULT_CONFIG, f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If config file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def set_value(key: str, value: Any, config_path: Path | None = None) -> None:
    """Set a single configuration value.

    Args:
        key: Config key (must be one of the known keys).
        value: New value.
        config_path: Path to config file. If None, uses default location.

    Raises:
        KeyError: If key is not a known setting.
    """
    if key not in DEFAULT_CONFIG:
        raise KeyError(key)

    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = dict(DEFAULT_CONFIG)

    config[key] = value
    save_config(config, config_path)


def get_settings(config_path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults for anything not configured.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Settings with defaults merged under the file's values.

    Raises:
        tomllib.TOMLDecodeError: If config file is not valid TOML.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {}

    merged = {**DEFAULT_CONFIG, **config}

    return Settings(
        currency_symbol=str(merged["currency_symbol"]),
        export_dir=Path(str(merged["export_dir"])).expanduser(),
        sort_key=str(merged["sort_key"]),
        sort_direction=str(merged["sort_direction"]),
        warning_threshold=float(merged["warning_threshold"]),
        danger_threshold=float(merged["danger_threshold"]),
    )
