"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
configuration file (~/.svccat/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from svccat.domain.exceptions import ConfigurationError
from svccat.domain.models.catalog import DEFAULT_PROVISION_TAGS, Tag, tags_from_mapping
from svccat.domain.models.retry import RetryPolicy

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".svccat"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "SVCCAT_"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}  # For testing purposes
_loaded = False


def load_configuration(
    config_file: Path = DEFAULT_CONFIG_FILE,
    env_file: Optional[Path] = None,
    force: bool = False,
) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables (SVCCAT_ prefix)
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
        force: Reload even if configuration was already loaded.
    """
    global _config, _loaded
    if _loaded and not force:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. Load from YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, "r") as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(yaml_config)
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: real environment variables take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug(".env file not found at or above current directory.")

    # 3. Environment Variables (Highest priority) are handled in get_config

    _loaded = True
    logger.debug("Configuration loading process completed.")


def _env_key(key: str) -> str:
    return ENV_PREFIX + key.upper().replace(".", "_")


def _coerce_env_value(value: str) -> Any:
    """Converts common scalar representations found in environment variables."""
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        if "." in value:
            return float(value)
        return int(value)
    except (ValueError, TypeError):
        return value


def _lookup_loaded(key: str) -> Any:
    """Looks a dotted key up in the loaded YAML, flat keys first, then nested."""
    if key in _config:
        return _config[key]
    node: Any = _config
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def get_config(key: str, default: Any = None) -> Any:
    """Get a configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (SVCCAT_<KEY>, dots replaced by underscores)
    3. YAML config
    4. Default value

    Args:
        key: The configuration key, e.g. 'retry.max_attempts'
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = _env_key(key)
    if env_key in os.environ:
        return _coerce_env_value(os.environ[env_key])

    value = _lookup_loaded(key)
    if value is not None:
        return value

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


# --- Convenience Functions ---

def get_aws_region() -> Optional[str]:
    """Region for the catalog client. None lets boto3 resolve its own default."""
    region = get_config("aws.region")
    return str(region) if region else None


def get_aws_profile() -> Optional[str]:
    """Named AWS profile to build the boto3 session from, if any."""
    profile = get_config("aws.profile")
    return str(profile) if profile else None


def get_retry_policy() -> RetryPolicy:
    """Builds the retry policy from the 'retry.*' settings.

    Raises:
        ConfigurationError: If a value has the wrong type or violates the policy bounds.
    """
    defaults = RetryPolicy()
    max_elapsed = get_config("retry.max_elapsed", defaults.max_elapsed)
    try:
        return RetryPolicy(
            max_attempts=int(get_config("retry.max_attempts", defaults.max_attempts)),
            base_delay=float(get_config("retry.base_delay", defaults.base_delay)),
            max_delay=float(get_config("retry.max_delay", defaults.max_delay)),
            jitter_factor=float(get_config("retry.jitter_factor", defaults.jitter_factor)),
            max_elapsed=float(max_elapsed) if max_elapsed is not None else None,
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid retry configuration: {e}") from e


def get_provision_tags() -> List[Tag]:
    """Tags appended to every ProvisionProduct request.

    Reads a mapping from 'provisioning.tags'; falls back to Accelerator=PBMM.
    """
    tags = get_config("provisioning.tags", DEFAULT_PROVISION_TAGS)
    if not isinstance(tags, dict):
        raise ConfigurationError(f"'provisioning.tags' must be a mapping, got {type(tags).__name__}")
    return tags_from_mapping(tags)


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """Set configuration values for testing purposes.

    These values override any other configuration source.
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")


# Load configuration when the module is imported
load_configuration()
