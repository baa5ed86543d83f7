"""Process-wide configuration holder.

The active ``ConfigData`` lives in a ContextVar so tests (and any task that
needs different settings) can swap it for the duration of a ``with`` block.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from src.bookshelf.runtime.config.config_data import ConfigData
from src.bookshelf.runtime.config.config_template import load_templated_yaml

CONFIG_PATH = Path("config.yaml")

_active_config: ContextVar[ConfigData] = ContextVar(
    "bookshelf_config", default=load_templated_yaml(CONFIG_PATH)
)


def _explicit_fields(model: BaseModel) -> dict[str, Any]:
    """Dump only the fields that were set on ``model``, at every nesting level."""
    dumped: dict[str, Any] = {}
    for name in type(model).model_fields:
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            nested = _explicit_fields(value)
            if nested:
                dumped[name] = nested
            elif name in model.model_fields_set:
                dumped[name] = value.model_dump()
        elif name in model.model_fields_set:
            dumped[name] = value
    return dumped


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_config(base: ConfigData, override: ConfigData) -> ConfigData:
    """Apply the explicitly set fields of ``override`` on top of ``base``."""
    return ConfigData.model_validate(
        _deep_merge(base.model_dump(), _explicit_fields(override))
    )


@contextmanager
def with_context(config_override: ConfigData | None = None):
    """Temporarily override parts of the active configuration.

    Example:
        with with_context(ConfigData(app=AppConfig(session_max_age=5))):
            assert get_config().app.session_max_age == 5
    """
    if config_override is None:
        yield
        return

    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    token = _active_config.set(merge_config(get_config(), config_override))
    try:
        yield
    finally:
        _active_config.reset(token)


def get_config() -> ConfigData:
    return _active_config.get()
