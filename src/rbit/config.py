"""
Configuration loading and settings resolution

Resolution order per field (highest to lowest priority):
1. CLI arguments
2. Config file
3. Default value

Config file problems never abort a run: a missing, unreadable or malformed
file is logged at debug level and treated as an empty configuration.
"""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from rbit.errors import ConfigurationError
from rbit.models import SessionSettings

DEFAULT_HOST = 'http://127.0.0.1:8080'
DEFAULT_LOG_LEVEL = 'INFO'

CONFIG_DIR_NAME = 'rbit'
CONFIG_FILE_NAME = 'config.yml'
LOCAL_CONFIG_FILE = Path('rbit.yml')

DEFAULTS = {
    'host': DEFAULT_HOST,
    'username': None,
    'password': None,
    'default_save_path': None,
    'verbose': False,
    'dry_run': False,
}

# Maps settings fields to dot-notation keys in the config file
CONFIG_KEY_MAP = {
    'host': 'qbittorrent.host',
    'username': 'qbittorrent.username',
    'password': 'qbittorrent.password',
    'default_save_path': 'default_save_path',
}


def get_nested_config(config: Optional[Dict[str, Any]], key: str) -> Optional[Any]:
    """
    Get nested configuration value using dot notation

    Args:
        config: Configuration dictionary
        key: Dot-notation key (e.g., 'qbittorrent.host')

    Returns:
        Configuration value or None if not found

    Examples:
        >>> config = {'qbittorrent': {'host': 'http://nas:8080'}}
        >>> get_nested_config(config, 'qbittorrent.host')
        'http://nas:8080'
        >>> get_nested_config(config, 'qbittorrent.missing')
        None
    """
    keys = key.split('.')
    value = config

    for k in keys:
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return None

    return value


def parse_bool(value: Any) -> bool:
    """
    Parse boolean from various formats

    Examples:
        >>> parse_bool('yes')
        True
        >>> parse_bool(None)
        False
    """
    if value is None:
        return False

    if isinstance(value, bool):
        return value

    if isinstance(value, int):
        return value != 0

    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')

    return bool(value)


def normalize_host(host: str) -> str:
    """Strip trailing slashes so endpoints can be appended directly"""
    return host.rstrip('/')


def resolve_config(
    cli_value: Optional[Any],
    config: Optional[Dict[str, Any]],
    config_key: str,
    default: Optional[Any] = None
) -> Any:
    """
    Resolve one configuration value

    Resolution order:
    1. CLI argument (if provided)
    2. Config file value
    3. Default value

    Args:
        cli_value: Value from CLI argument (None if not provided)
        config: Loaded configuration dictionary (may be empty or None)
        config_key: Dot-notation key for config file (e.g., 'qbittorrent.host')
        default: Default value if no source provides a value

    Returns:
        Resolved configuration value
    """
    # 1. CLI argument takes highest priority
    if cli_value is not None:
        return cli_value

    # 2. Config file value
    if config:
        value = get_nested_config(config, config_key)
        if value is not None and not isinstance(value, (dict, list)):
            logging.debug(f"Loaded config from file: {config_key}")
            return value

    # 3. Default value
    return default


def resolve_settings(
    cli_overrides: Optional[Dict[str, Any]] = None,
    file_config: Optional[Dict[str, Any]] = None,
    defaults: Optional[Dict[str, Any]] = None
) -> SessionSettings:
    """
    Merge CLI overrides, config file values and defaults into SessionSettings

    Never raises: every field falls back to its default.

    Args:
        cli_overrides: Values from CLI flags, None meaning "not given"
        file_config: Parsed config file ({} or None when unavailable)
        defaults: Built-in defaults, DEFAULTS when omitted

    Returns:
        Effective settings for this invocation
    """
    cli_overrides = cli_overrides or {}
    if not isinstance(file_config, dict):
        file_config = {}
    merged_defaults = dict(DEFAULTS)
    if defaults:
        merged_defaults.update(defaults)

    def field(name: str) -> Optional[Any]:
        return resolve_config(
            cli_overrides.get(name),
            file_config,
            CONFIG_KEY_MAP[name],
            default=merged_defaults.get(name)
        )

    host = field('host')
    username = field('username')
    password = field('password')
    save_path = field('default_save_path')

    return SessionSettings(
        host=normalize_host(str(host if host is not None else DEFAULT_HOST)),
        username=str(username) if username is not None else None,
        password=str(password) if password is not None else None,
        default_save_path=Path(str(save_path)).expanduser() if save_path is not None else None,
        verbose=parse_bool(cli_overrides.get('verbose', merged_defaults['verbose'])),
        dry_run=parse_bool(cli_overrides.get('dry_run', merged_defaults['dry_run'])),
    )


def resolve_save_path(dest: Optional[Union[str, Path]], settings: SessionSettings) -> Path:
    """
    Pick the destination folder for a new torrent

    CLI destination > config default_save_path > current working directory
    """
    if dest is not None:
        return Path(dest)
    if settings.default_save_path is not None:
        return settings.default_save_path
    return Path.cwd()


def user_config_path() -> Path:
    """~/.config/rbit/config.yml, honouring XDG_CONFIG_HOME"""
    config_home = os.environ.get('XDG_CONFIG_HOME')
    base = Path(config_home) if config_home else Path.home() / '.config'
    return base / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def default_config_paths() -> List[Path]:
    """Config files read when --config is not given, lowest priority first"""
    return [user_config_path(), LOCAL_CONFIG_FILE]


def load_yaml_file(file_path: Path) -> Dict[str, Any]:
    """
    Load YAML file with error handling

    Args:
        file_path: Path to YAML file

    Returns:
        Parsed YAML as dictionary

    Raises:
        ConfigurationError: If file cannot be loaded
    """
    if not file_path.exists():
        raise ConfigurationError(str(file_path), "File does not exist")

    try:
        with open(file_path, 'r') as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(str(file_path), f"Invalid YAML syntax: {str(e)}")
    except PermissionError:
        raise ConfigurationError(str(file_path), "Permission denied - cannot read file")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(str(file_path), f"Cannot read file: {str(e)}")

    if content is None:
        raise ConfigurationError(str(file_path), "File is empty")

    if not isinstance(content, dict):
        raise ConfigurationError(str(file_path), "Top level must be a mapping")

    return content


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two config dictionaries, override wins"""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config_file(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load the config file(s), degrading to {} on any problem

    With an explicit path only that file is read. Otherwise the user config
    (~/.config/rbit/config.yml) is read and ./rbit.yml is merged over it.

    Args:
        config_path: Explicit config file from --config

    Returns:
        Parsed configuration dictionary (possibly empty)
    """
    paths = [Path(config_path).expanduser()] if config_path is not None else default_config_paths()

    config: Dict[str, Any] = {}
    for path in paths:
        try:
            content = load_yaml_file(path)
        except ConfigurationError as e:
            logging.debug(f"Ignoring config file {path}: {e.details.get('Problem')}")
            continue

        logging.debug(f"Loaded config from {path}")
        config = merge_config(config, content)

    return config


def get_log_level(cli_value: Optional[str], file_config: Optional[Dict[str, Any]]) -> str:
    """Get logging level (CLI > logging.level > INFO)"""
    return str(resolve_config(cli_value, file_config, 'logging.level', DEFAULT_LOG_LEVEL)).upper()


def get_log_file(file_config: Optional[Dict[str, Any]]) -> Optional[Path]:
    """Get optional log file path from logging.file"""
    value = resolve_config(None, file_config, 'logging.file')
    return Path(str(value)).expanduser() if value is not None else None


def get_trace_mode(cli_value: Optional[bool], file_config: Optional[Dict[str, Any]]) -> bool:
    """Check if trace mode is enabled (detailed file logging with module/function/line)"""
    return parse_bool(resolve_config(cli_value or None, file_config, 'logging.trace_mode', False))
