"""
skills_hub.config

Paths, logging and user settings for the skills hub.

Environment (optional):
- SKILLS_DIR: override path to the skills directory (default: ~/.ai-skills-hub/skills)
- SKILLS_HUB_SETTINGS: override path to the user settings file (default: ~/.ai-skills-hub/settings.yaml)
- LOG_FILE: override log file path (default: ~/.ai-skills-hub/logs/skills_hub.log)

Settings file (YAML mapping):
- auto_execute_scripts: bool   Allow helper scripts bundled with skills to run without confirmation

Everything here is resolved once at startup and handed to the server and CLI explicitly.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import yaml


# --- Paths & constants ---
HUB_HOME = Path.home() / ".ai-skills-hub"
DEFAULT_SKILLS_DIR = HUB_HOME / "skills"
DEFAULT_SETTINGS_FILE = HUB_HOME / "settings.yaml"
DEFAULT_LOG_DIR = HUB_HOME / "logs"
DEFAULT_LOG_FILE = DEFAULT_LOG_DIR / "skills_hub.log"
LOGGER_NAME = "skills_hub"

DEFAULT_SETTINGS: dict[str, Any] = {"auto_execute_scripts": False}


# --- Logging setup ---
def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """
    function_purpose: Configure package-wide logging to stderr and a rotating file.

    - Creates the log directory if needed.
    - Never logs to stdout, which belongs to the stdio transport.
    - Safe to call more than once; handlers are only attached the first time.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    log_file = resolve_log_file()
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s"
    )

    # Console handler (stderr)
    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(formatter)
    logger.addHandler(sh)

    # Rotating file handler (5 files, 5MB each)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5)
    except OSError as exc:
        logger.warning("File logging disabled, cannot open %s: %s", log_file, exc)
    else:
        fh.setLevel(level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    logger.info("Logging initialized. File: %s", str(log_file))
    return logger


def resolve_log_file() -> Path:
    log_file_env = os.environ.get("LOG_FILE")
    return Path(log_file_env) if log_file_env else DEFAULT_LOG_FILE


def resolve_skills_dir() -> Path:
    """
    function_purpose: Resolve skills directory from environment or default location.
    """
    env_dir = os.environ.get("SKILLS_DIR")
    return Path(env_dir).expanduser().resolve() if env_dir else DEFAULT_SKILLS_DIR


def resolve_settings_file() -> Path:
    env_file = os.environ.get("SKILLS_HUB_SETTINGS")
    return Path(env_file).expanduser() if env_file else DEFAULT_SETTINGS_FILE


# --- User settings ---
def load_settings(path: Path | None = None) -> dict[str, Any]:
    """
    function_purpose: Read the user settings file, falling back to defaults.

    A missing file is the normal unconfigured state. A file that cannot be read or
    does not parse to a mapping is reported and ignored rather than stopping startup.
    """
    logger = logging.getLogger(__name__)
    settings_file = path if path is not None else resolve_settings_file()
    settings = dict(DEFAULT_SETTINGS)

    if not settings_file.exists():
        return settings

    try:
        loaded = yaml.safe_load(settings_file.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", settings_file, exc)
        return settings

    if not isinstance(loaded, dict):
        logger.warning("Ignoring settings file %s: not a mapping", settings_file)
        return settings

    auto_execute = loaded.get("auto_execute_scripts", False)
    if not isinstance(auto_execute, bool):
        logger.warning(
            "Setting auto_execute_scripts must be true or false, got %r; treating as false",
            auto_execute,
        )
        auto_execute = False
    settings["auto_execute_scripts"] = auto_execute
    return settings
