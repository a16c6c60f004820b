"""Configuration file loader for lockkeeper.

Supports two formats:

- ``lockkeeper.toml`` with settings under a ``[lockkeeper]`` table
- ``pyproject.toml`` with settings under a ``[tool.lockkeeper]`` table

Discovery order:

1. Explicit path from ``--config`` or ``LOCKKEEPER_CONFIG``
2. ``lockkeeper.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.lockkeeper]`` section

Configuration precedence: defaults < config file < CLI args.

Example (``lockkeeper.toml``)::

    [lockkeeper]
    lockfile = "frontend/yarn.lock"
    ignore_packages = ["@types/*", "typescript"]
    backup = true
"""

from __future__ import annotations

import tomli as tomllib
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from lockkeeper.exceptions import ConfigError
from lockkeeper.utils.logger import get_logger
from lockkeeper.constants import DEFAULT_BACKUP, DEFAULT_LOCKFILE_NAME

logger = get_logger("config")

CONFIG_FILE_NAME = "lockkeeper.toml"
SECTION_NAME = "lockkeeper"


@dataclass
class LockKeeperConfig:
    """Parsed and validated lockkeeper configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        lockfile: Lockfile used when a command is given no path.
        ignore_packages: ``fnmatch`` patterns of package names that
            ``dedupe`` leaves alone.
        backup: Keep a timestamped backup whenever a lockfile is rewritten.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    lockfile: str = DEFAULT_LOCKFILE_NAME
    ignore_packages: List[str] = field(default_factory=list)
    backup: bool = DEFAULT_BACKUP

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def is_ignored(self, name: str) -> bool:
        """Return True if ``name`` matches one of ``ignore_packages``."""
        return any(fnmatchcase(name, pattern) for pattern in self.ignore_packages)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging."""
        return {
            "lockfile": self.lockfile,
            "ignore_packages": list(self.ignore_packages),
            "backup": self.backup,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    ``pyproject.toml`` is only used when it has a ``[tool.lockkeeper]``
    section.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    own_file = cwd / CONFIG_FILE_NAME
    if own_file.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, own_file)
        return own_file

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.lockkeeper] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Check if pyproject.toml contains a ``[tool.lockkeeper]`` section.

    An unreadable pyproject.toml counts as having no section.
    """
    try:
        raw = _read_toml(path)
    except ConfigError as exc:
        logger.debug("Ignoring %s: %s", path, exc)
        return False
    return SECTION_NAME in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> LockKeeperConfig:
    """Load and validate lockkeeper configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`LockKeeperConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return LockKeeperConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get(SECTION_NAME, {})
    else:
        section = raw.get(SECTION_NAME, {})

    if not section:
        logger.debug("Config file has no lockkeeper section, using defaults")
        return LockKeeperConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> LockKeeperConfig:
    """Validate a ``[lockkeeper]`` or ``[tool.lockkeeper]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    config = LockKeeperConfig()

    unknown = set(section) - {"lockfile", "ignore_packages", "backup"}
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    if "lockfile" in section:
        val = section["lockfile"]
        if not isinstance(val, str) or not val:
            raise ConfigError(
                f"lockfile must be a non-empty string, got {type(val).__name__}",
                config_path=config_path,
                option="lockfile",
            )
        config.lockfile = val

    if "ignore_packages" in section:
        val = section["ignore_packages"]
        if not isinstance(val, list) or not all(isinstance(p, str) for p in val):
            raise ConfigError(
                "ignore_packages must be a list of strings",
                config_path=config_path,
                option="ignore_packages",
            )
        config.ignore_packages = list(val)

    if "backup" in section:
        val = section["backup"]
        if not isinstance(val, bool):
            raise ConfigError(
                f"backup must be a boolean, got {type(val).__name__}",
                config_path=config_path,
                option="backup",
            )
        config.backup = val

    return config
