"""Configuration template substitution utilities."""

import os
import re
from collections.abc import Mapping
from pathlib import Path

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.bookshelf.runtime.config.config_data import ConfigData
from src.bookshelf.runtime.settings import EnvironmentVariables


def substitute_env_vars(text: str, fallback: Mapping[str, str] | None = None) -> str:
    """
    Substitute environment variable placeholders in text.

    Supports formats:
    - ${VAR_NAME} - required variable (raises error if missing)
    - ${VAR_NAME:-default} - optional with default value
    - ${VAR_NAME:?error_message} - required with custom error message

    Variables are looked up in the process environment first, then in ``fallback``.
    """
    fallback = fallback or {}

    def lookup(var_name: str) -> str | None:
        value = os.getenv(var_name)
        if value is None:
            value = fallback.get(var_name)
        return value

    def replacer(match):
        var_expr = match.group(1)

        # Handle default values: ${VAR:-default}
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            value = lookup(var_name)
            return default if value is None or value == "" else value

        # Handle error messages: ${VAR:?message}
        elif ":?" in var_expr:
            var_name, error_msg = var_expr.split(":?", 1)
            value = lookup(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name}: {error_msg}")
            return value

        # Handle required variables: ${VAR}
        else:
            var_name = var_expr
            value = lookup(var_name)
            if value is None:
                raise ValueError(f"Required environment variable {var_name} not set")
            return value

    # Match ${...} patterns
    pattern = r'\$\{([^}]+)\}'
    return re.sub(pattern, replacer, text)


def load_templated_yaml(file_path: Path) -> ConfigData:
    """
    Load a YAML file with environment variable substitution.

    Args:
        file_path: Path to the YAML file

    Returns:
        Parsed configuration. Model defaults are used when the file does not exist.

    Raises:
        ValueError: If required environment variables are missing or the file is invalid
    """
    if not file_path.exists():
        logger.warning("Configuration file {} not found, using defaults", file_path)
        return ConfigData()

    with open(file_path) as f:
        content = f.read()

    env = EnvironmentVariables()
    logger.info("Loading configuration for environment: {}", env.app_environment)

    substituted_content = substitute_env_vars(content, env.as_substitutions())

    try:
        loaded = yaml.safe_load(substituted_content)
        if not loaded:
            raise ValueError("Failed to parse YAML")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e

    try:
        # Extract the 'config' section from the YAML structure
        config_data = loaded.get('config', {})
        return ConfigData(**config_data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
