"""Resolve a ``TypeFitConfig`` from files, environment and call-site overrides.

Later sources win:

    built-in defaults
    ~/.config/typefit/config.yaml
    <repo>/.typefit/config.yaml
    TYPEFIT__<SECTION>__<KEY> environment variables
    keyword arguments to load_config()

YAML layers are deep-merged, so a repo file can override one key of a
section and inherit the rest from the global file.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from typefit.config.models import (
    IndexConfig,
    IndexerConfig,
    LoggingConfig,
    MatchingConfig,
    TypeFitConfig,
    WatcherConfig,
)
from typefit.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/typefit/config.yaml").expanduser()
REPO_CONFIG_DIR = ".typefit"
REPO_CONFIG_FILE = "config.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    """Mapping in ``path``; empty when the file is absent or blank."""
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """``override`` on top of ``base``; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class _YamlLayer(PydanticBaseSettingsSource):
    """Already-merged YAML, as the lowest-priority settings source."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(
        self,
        field: FieldInfo,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, dict)

    def __call__(self) -> dict[str, Any]:
        return {name: value for name, value in self._data.items() if value is not None}


def _settings_for(yaml_data: dict[str, Any]) -> type[BaseSettings]:
    # The YAML layer is bound at class creation, so one class per call
    class _TypeFitSettings(BaseSettings):
        model_config = SettingsConfigDict(
            env_prefix="TYPEFIT__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        matching: MatchingConfig = MatchingConfig()
        index: IndexConfig = IndexConfig()
        indexer: IndexerConfig = IndexerConfig()
        watcher: WatcherConfig = WatcherConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            return (init_settings, env_settings, _YamlLayer(settings_cls, yaml_data))

    return _TypeFitSettings


def config_paths(repo_root: Path) -> list[Path]:
    """YAML files consulted for ``repo_root``, lowest priority first."""
    return [GLOBAL_CONFIG_PATH, repo_root / REPO_CONFIG_DIR / REPO_CONFIG_FILE]


def load_config(repo_root: Path | None = None, **overrides: Any) -> TypeFitConfig:
    """Build the effective configuration for a project.

    Args:
        repo_root: Project root holding ``.typefit/config.yaml``. Defaults
            to the current directory.
        **overrides: Section values that beat every other source, e.g.
            ``matching=MatchingConfig(max_suggestions=1)``.

    Raises:
        ConfigError: A YAML file is malformed or a value fails validation.
    """
    yaml_data: dict[str, Any] = {}
    for path in config_paths(repo_root or Path.cwd()):
        yaml_data = _deep_merge(yaml_data, _load_yaml(path))

    try:
        settings = _settings_for(yaml_data)(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ConfigError.invalid_value(location, first.get("input"), first["msg"]) from e
    return TypeFitConfig.model_validate(settings.model_dump())
