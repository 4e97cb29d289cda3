"""Project-local TOML configuration for QuickFile Recall.

A workspace may carry ``.quickfile-recall/config.toml`` to override settings
for that project only, the same way editors keep per-folder settings::

    [history]
    max_size = 50

    [terminal]
    editor = "nvim"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import tomli

from quickfile_recall.core.exceptions import ConfigError


CONFIG_DIR_NAME = ".quickfile-recall"
CONFIG_FILE_NAME = "config.toml"


def find_config_file(project_dir: Path | None = None) -> Path | None:
    """Find the nearest .quickfile-recall/config.toml file.

    Searches upward from project_dir (or the current directory).

    Returns:
        Path to config file if found, None otherwise.
    """
    start_dir = Path(project_dir).expanduser().resolve() if project_dir else Path.cwd()

    current_dir = start_dir
    while True:
        config_path = current_dir / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if config_path.is_file():
            return config_path
        if current_dir == current_dir.parent:
            return None
        current_dir = current_dir.parent


def load_config(config_path: Path | None = None) -> Dict[str, Any]:
    """Load a TOML configuration file.

    Args:
        config_path: Path to TOML file. If None, searches for nearest config.

    Returns:
        Parsed configuration. Empty dict if no file exists.

    Raises:
        ConfigError: If the file exists but is not valid TOML.
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path is None or not config_path.exists():
        return {}

    try:
        with open(config_path, "rb") as f:
            return tomli.load(f)
    except (OSError, tomli.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load config from {config_path}: {e}") from e


def settings_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Map the TOML layout onto Settings field names"""
    overrides: Dict[str, Any] = {}

    history = config.get("history")
    if isinstance(history, dict) and "max_size" in history:
        overrides["max_history_size"] = history["max_size"]

    terminal = config.get("terminal")
    if isinstance(terminal, dict) and isinstance(terminal.get("editor"), str):
        overrides["editor"] = terminal["editor"]

    return overrides
