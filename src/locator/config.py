"""Settings for handler resolution and logging.

This module defines `LocatorSettings`, loaded from initialization
arguments, environment variables and an optional YAML file named by the
``LOCATOR_CONFIG_FILE`` setting.
"""

import logging
from pathlib import Path
from typing import Any, Literal, cast

from pydantic import Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
import yaml

from .exceptions import ConfigLoadError

logger = logging.getLogger(__name__)

HANDLER_PKGS_SEPARATOR = "|"


class YamlFileFromFieldSource(PydanticBaseSettingsSource):
    """Load settings from the YAML file named by the ``config_file`` field.

    Must run after the sources that can set ``config_file``.

    Attributes:
        yaml_file_encoding: Encoding to use when reading the YAML file.
        yaml_data: Data loaded from the file.
    """

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file_encoding: str | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file_encoding = yaml_file_encoding or "utf-8"
        self.yaml_data: dict[str, Any] = {}

    def _get_yaml_path(self) -> Path | None:
        field_info = self.settings_cls.model_fields["config_file"]
        value = self.current_state.get("config_file")
        if value in (None, PydanticUndefined) and isinstance(
            field_info.validation_alias, str
        ):
            value = self.current_state.get(field_info.validation_alias)

        match value:
            case None:
                return None
            case Path():
                return value.expanduser()
            case str() if value.strip():
                return Path(value).expanduser()
            case str():
                return None
            case _:
                raise TypeError(
                    "Field 'config_file' must resolve to a Path or string, "
                    f"received type '{type(value).__name__}'"
                )

    def _read_yaml_file(self, file_path: Path) -> dict[str, Any]:
        with Path.open(file_path, encoding=self.yaml_file_encoding) as f:
            loaded = yaml.safe_load(f)

        if loaded is None:
            logger.info(
                "YAML configuration file is empty.",
                extra={"file_path": str(file_path)},
            )
            return {}
        if not isinstance(loaded, dict):
            raise TypeError(
                f"Invalid YAML config format: expected dict, got {type(loaded).__name__}"
            )
        return cast(dict[str, Any], loaded)

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        return self.yaml_data.get(field_name), field_name, self.field_is_complex(field)

    def __call__(self) -> dict[str, Any]:
        try:
            yaml_path = self._get_yaml_path()
        except TypeError as e:
            raise ConfigLoadError(
                "Failed to resolve YAML configuration file path."
            ) from e

        if yaml_path is None:
            self.yaml_data = {}
            return {}

        logger.debug("Loading YAML configuration.", extra={"file_path": str(yaml_path)})
        try:
            self.yaml_data = self._read_yaml_file(yaml_path)
        except (TypeError, OSError, yaml.YAMLError) as e:
            raise ConfigLoadError(
                "Failed to load or parse YAML configuration file.",
                config_file=str(yaml_path),
            ) from e
        return self.yaml_data.copy()


class LocatorSettings(BaseSettings):
    """Settings for handler resolution and logging.

    Attributes:
        handler_pkgs: Extra handler package prefixes separated by ``|``,
            searched before the built-in handlers.
        log_format: Format for logs (human or json).
        log_level: Logging level for the ``locator`` logger.
        log_include_stacktrace: Include full stack traces in error logs.
        config_file: Optional path to a YAML file providing these settings.
    """

    handler_pkgs: str | None = Field(
        default=None,
        validation_alias="LOCATOR_HANDLER_PKGS",
        description="Extra handler package prefixes separated by '|' (e.g. 'myapp.protocols|vendor.handlers').",
    )
    log_format: Literal["human", "json"] = Field(
        default="human",
        validation_alias="LOG_FORMAT",
        description="Format for logs ('human' or 'json').",
    )
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (e.g. DEBUG, INFO, WARNING). Case-insensitive.",
    )
    log_include_stacktrace: bool = Field(
        default=False,
        validation_alias="LOG_INCLUDE_STACKTRACE",
        description="Include full stack traces in error logs (true/false).",
    )
    config_file: Path | None = Field(
        default=None,
        validation_alias="LOCATOR_CONFIG_FILE",
        description="Optional path to a YAML settings file.",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("handler_pkgs", mode="before")
    @classmethod
    def blank_handler_pkgs_to_none(cls, v: Any) -> Any:
        """Treat an empty or whitespace-only search path as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def handler_prefixes(self) -> list[str]:
        """Return the configured handler package prefixes in search order."""
        if self.handler_pkgs is None:
            return []
        return [
            prefix.strip()
            for prefix in self.handler_pkgs.split(HANDLER_PKGS_SEPARATOR)
            if prefix.strip()
        ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Read the YAML file after the sources that may name it."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlFileFromFieldSource(settings_cls=settings_cls),
            file_secret_settings,
        )
