"""
Configuration loading for device-faker-templates.

Settings come from three layers, later layers winning: built-in defaults, the
YAML configuration file in the platformdirs config directory, and environment
variables prefixed with DEVICE_FAKER_TEMPLATES_.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import platformdirs
import yaml

from device_faker_templates.constants import (
    APP_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_API_BASE,
    DEFAULT_CLI_PATH,
    DEFAULT_MAX_CONCURRENT,
    DEFAULT_REPO_BRANCH,
    DEFAULT_REPO_NAME,
    DEFAULT_REPO_OWNER,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TEMP_DIR,
    DEFAULT_WEB_BASE,
    ENV_VAR_PREFIX,
)
from device_faker_templates.exceptions import ConfigFileError, ConfigValidationError
from device_faker_templates.log_utils import logger

CONFIG_DIR = platformdirs.user_config_dir(APP_NAME)
CONFIG_FILE = os.path.join(CONFIG_DIR, CONFIG_FILE_NAME)

CONFIG_KEYS = (
    "REPO_OWNER",
    "REPO_NAME",
    "REPO_BRANCH",
    "API_BASE",
    "WEB_BASE",
    "REQUEST_TIMEOUT",
    "MAX_CONCURRENT",
    "CLI_PATH",
    "TEMP_DIR",
    "LOG_LEVEL",
    "LOG_DIR",
)


def _quote_path(path: str) -> str:
    return quote(path.strip("/"), safe="/")


@dataclass(frozen=True)
class RepositoryCoordinates:
    """Location of the template repository and the URLs derived from it."""

    owner: str = DEFAULT_REPO_OWNER
    name: str = DEFAULT_REPO_NAME
    branch: str = DEFAULT_REPO_BRANCH
    api_base: str = DEFAULT_API_BASE
    web_base: str = DEFAULT_WEB_BASE

    def contents_url(self, path: str) -> str:
        """Structured contents API URL listing the children of `path`."""
        return (
            f"{self.api_base.rstrip('/')}/repos/{self.owner}/{self.name}"
            f"/contents/{_quote_path(path)}?ref={self.branch}"
        )

    def tree_url(self, path: str) -> str:
        """Directory-browsing HTML page for `path`."""
        return (
            f"{self.web_base.rstrip('/')}/{self.owner}/{self.name}"
            f"/tree/{self.branch}/{_quote_path(path)}"
        )

    def raw_url(self, path: str) -> str:
        """Raw file download URL for `path`."""
        return (
            f"{self.web_base.rstrip('/')}/{self.owner}/{self.name}"
            f"/raw/{self.branch}/{_quote_path(path)}"
        )


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    repository: RepositoryCoordinates = RepositoryCoordinates()
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_concurrent: int = DEFAULT_MAX_CONCURRENT
    cli_path: str = DEFAULT_CLI_PATH
    temp_dir: str = DEFAULT_TEMP_DIR
    log_level: Optional[str] = None
    log_dir: Optional[str] = None


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the YAML configuration file.

    Parameters:
        path (str | None): Explicit config file path; defaults to CONFIG_FILE.

    Returns:
        dict: Parsed configuration mapping, empty when the file does not exist.

    Raises:
        ConfigFileError: If the file cannot be read, is not valid YAML, or its
            top level is not a mapping.
    """
    config_path = path or CONFIG_FILE
    if not os.path.exists(config_path):
        logger.debug(f"No configuration file at {config_path}; using defaults")
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigFileError(
            f"Failed to load configuration from {config_path}", details=str(e)
        ) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigFileError(
            f"Configuration in {config_path} must be a mapping",
            details=f"got {type(config).__name__}",
        )

    unknown = sorted(k for k in config if k not in CONFIG_KEYS)
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")
    return config


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    overrides = {}
    for key in CONFIG_KEYS:
        value = env.get(f"{ENV_VAR_PREFIX}{key}")
        if value is not None and value.strip():
            overrides[key] = value.strip()
    return overrides


def _positive_number(key: str, value: Any, cast: type) -> Any:
    try:
        parsed = cast(value)
    except (TypeError, ValueError):
        raise ConfigValidationError(
            f"{key} must be a number", key=key, value=value
        ) from None
    if parsed <= 0:
        raise ConfigValidationError(f"{key} must be > 0", key=key, value=value)
    return parsed


def _text(key: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigValidationError(
            f"{key} must be a non-empty string", key=key, value=value
        )
    return value.strip()


def load_settings(
    path: Optional[str] = None, env: Optional[Mapping[str, str]] = None
) -> Settings:
    """
    Build Settings from defaults, the config file and environment overrides.

    Parameters:
        path (str | None): Explicit config file path.
        env (Mapping | None): Environment to read overrides from; defaults to os.environ.

    Raises:
        ConfigFileError: If the config file is unreadable or malformed.
        ConfigValidationError: If a value has the wrong type or range.
    """
    merged = dict(load_config(path))
    merged.update(_env_overrides(os.environ if env is None else env))

    defaults = RepositoryCoordinates()
    repository = RepositoryCoordinates(
        owner=_text("REPO_OWNER", merged.get("REPO_OWNER", defaults.owner)),
        name=_text("REPO_NAME", merged.get("REPO_NAME", defaults.name)),
        branch=_text("REPO_BRANCH", merged.get("REPO_BRANCH", defaults.branch)),
        api_base=_text("API_BASE", merged.get("API_BASE", defaults.api_base)),
        web_base=_text("WEB_BASE", merged.get("WEB_BASE", defaults.web_base)),
    )

    log_dir = merged.get("LOG_DIR")
    log_level = merged.get("LOG_LEVEL")
    return Settings(
        repository=repository,
        request_timeout=_positive_number(
            "REQUEST_TIMEOUT",
            merged.get("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
            float,
        ),
        max_concurrent=_positive_number(
            "MAX_CONCURRENT", merged.get("MAX_CONCURRENT", DEFAULT_MAX_CONCURRENT), int
        ),
        cli_path=_text("CLI_PATH", merged.get("CLI_PATH", DEFAULT_CLI_PATH)),
        temp_dir=_text("TEMP_DIR", merged.get("TEMP_DIR", DEFAULT_TEMP_DIR)),
        log_level=str(log_level) if log_level else None,
        log_dir=str(log_dir) if log_dir else None,
    )
