"""
Settings management.

Loads migration settings from YAML files, applies environment overrides and
validates the result with Pydantic.
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

ENV_PREFIX = "CONTENT_VERIFY_"


class FieldAliases(BaseModel):
    """Historically used spellings of each payload field, tried in order."""

    marked_source: list[str] = Field(
        default_factory=lambda: ["checkresultstr", "checkResultStr", "check_result_str"],
        min_length=1,
    )
    corrections: list[str] = Field(
        default_factory=lambda: ["checkresultjson", "checkResultJson", "check_result_json"],
        min_length=1,
    )
    marked_result: list[str] = Field(
        default_factory=lambda: ["replace_text", "replaceText", "replacetext"],
        min_length=1,
    )
    checklist: list[str] = Field(
        default_factory=lambda: ["checklist", "checkList", "check_list"],
        min_length=1,
    )


class ProcessorSettings(BaseModel):
    """
    Per-record processing options.

    Attributes:
        legacy_fallback: Fall back to a first-occurrence replace when a legacy
            correction does not match at its position
        legacy_position_unit: Unit of legacy ``pos`` values
        legacy_style: Style keyword of legacy highlight spans
        revised_class: Class name of revised wrapper spans
        fields: Field name spellings
    """

    legacy_fallback: bool = True
    legacy_position_unit: Literal["byte", "codepoint"] = "byte"
    legacy_style: str = Field("background-color", min_length=1)
    revised_class: str = Field("error", min_length=1)
    fields: FieldAliases = Field(default_factory=FieldAliases)


class DatabaseSettings(BaseModel):
    """PostgreSQL connection settings. The password may also come from DB_PASSWORD."""

    host: str = "localhost"
    port: int = 5432
    database: str = "datawarehouse"
    user: str = "pipeline"
    password: str | None = None
    min_size: int = Field(1, ge=1)
    max_size: int = Field(4, ge=1)
    timeout: float = Field(30.0, gt=0)


class SourceSettings(BaseModel):
    """Source table layout and filtering."""

    table: str = "tbl_verify_content"
    id_column: str = "id"
    task_id_column: str = "taskId"
    content_column: str = "content"
    task_id: str | None = None  # only read rows of this task
    prefilter: bool = False  # drop rows that match neither schema before processing


class SinkSettings(BaseModel):
    """Destination table options."""

    table: str = "processed_content"
    recreate: bool = False  # drop and recreate the table before a run


class MigrationSettings(BaseSettings):
    """
    Top-level settings for a migration run.

    Values come from the YAML document passed as keyword arguments. The
    environment takes precedence: ``CONTENT_VERIFY_`` plus the upper-cased
    key path joined by ``__``, e.g. ``CONTENT_VERIFY_SOURCE_DB__HOST``.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        extra="ignore",
    )

    source_db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    sink_db: DatabaseSettings | None = None  # defaults to source_db
    source: SourceSettings = Field(default_factory=SourceSettings)
    sink: SinkSettings = Field(default_factory=SinkSettings)
    processor: ProcessorSettings = Field(default_factory=ProcessorSettings)
    batch_size: int = Field(100, ge=1)
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # environment over the YAML document
        return env_settings, init_settings, file_secret_settings

    @property
    def sink_database(self) -> DatabaseSettings:
        return self.sink_db or self.source_db


class SettingsLoader:
    """
    Loads MigrationSettings from a YAML file.

    Expected YAML format:
    ```yaml
    source_db:
      host: localhost
      database: verify
    source:
      task_id: 430aa1b775c143e6bfcf1d5f78c115ce
    sink:
      recreate: true
    processor:
      legacy_fallback: true
    batch_size: 200
    ```

    Environment variables override the file, e.g.
    ``CONTENT_VERIFY_SOURCE_DB__HOST`` or ``CONTENT_VERIFY_BATCH_SIZE``.
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the settings loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

    def load(self) -> MigrationSettings:
        """
        Load, override and validate settings.

        Returns:
            MigrationSettings instance

        Raises:
            ValueError: If the YAML is malformed or fails validation
        """
        with open(self.config_path, encoding="utf-8") as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {self.config_path}: {e}") from e

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ValueError("Configuration file must contain a mapping at the top level")

        try:
            return MigrationSettings(**config)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration in {self.config_path}: {e}") from e
