"""Configuration management for kysely-codegen."""

import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

DEFAULT_OUT_FILE = "db.d.ts"
CONFIG_FILE_NAME = ".kysely-codegenrc.json"


class NumericParser(str, Enum):
    NUMBER = "number"
    NUMBER_OR_STRING = "number-or-string"
    STRING = "string"


class DateParser(str, Enum):
    STRING = "string"
    TIMESTAMP = "timestamp"


class RuntimeEnumsStyle(str, Enum):
    PASCAL_CASE = "pascal-case"
    SCREAMING_SNAKE_CASE = "screaming-snake-case"


class LogLevel(str, Enum):
    SILENT = "silent"
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class DialectName(str, Enum):
    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    DUCKDB = "duckdb"
    MSSQL = "mssql"


def _find_env_file() -> Optional[str]:
    """Find .env file in multiple locations.

    Search order:
    1. Current working directory
    2. ~/.kysely-codegen/.env
    """
    if os.path.exists(".env"):
        return ".env"

    user_env = Path.home() / ".kysely-codegen" / ".env"
    if user_env.exists():
        return str(user_env)

    return None


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    database_url: Optional[str] = Field(
        default=None,
        description="Connection URL used when no --url is given"
    )
    dialect: Optional[str] = Field(
        default=None,
        validation_alias="KYSELY_CODEGEN_DIALECT",
        description="Dialect used when no --dialect is given"
    )

    model_config = SettingsConfigDict(
        env_file=_find_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Load settings, optionally from an explicit .env file."""
    if env_file:
        if not os.path.exists(env_file):
            raise ConfigError(f"Environment file '{env_file}' does not exist", path=["envFile"])
        return Settings(_env_file=env_file)
    return Settings()


class Overrides(BaseModel):
    """Explicit replacements for generated names and types.

    ``columns`` maps ``table.column`` or ``schema.table.column`` to a
    TypeScript type expression. ``tables`` maps ``table`` or
    ``schema.table`` to an interface name.
    """

    model_config = ConfigDict(extra="forbid")

    columns: Dict[StrictStr, StrictStr] = Field(default_factory=dict)
    tables: Dict[StrictStr, StrictStr] = Field(default_factory=dict)


class CodegenConfig(BaseModel):
    """Validated option bundle for one generation run.

    Accepts both snake_case names and the camelCase keys used in
    ``.kysely-codegenrc.json`` files.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    dialect: Optional[DialectName] = None
    url: Optional[StrictStr] = None
    camel_case: StrictBool = False
    singularize: Union[StrictBool, Dict[StrictStr, StrictStr]] = False
    default_schemas: List[StrictStr] = Field(default_factory=list)
    include_pattern: Optional[StrictStr] = None
    exclude_pattern: Optional[StrictStr] = None
    numeric_parser: NumericParser = NumericParser.STRING
    date_parser: DateParser = DateParser.TIMESTAMP
    domains: StrictBool = False
    partitions: StrictBool = False
    runtime_enums: Optional[RuntimeEnumsStyle] = None
    overrides: Overrides = Field(default_factory=Overrides)
    type_only_imports: StrictBool = True
    out_file: Optional[StrictStr] = DEFAULT_OUT_FILE
    print_output: StrictBool = Field(default=False, alias="print")
    verify: StrictBool = False
    log_level: LogLevel = LogLevel.INFO
    env_file: Optional[StrictStr] = None

    @field_validator("runtime_enums", mode="before")
    @classmethod
    def _runtime_enums_flag(cls, value: Any) -> Any:
        # `true` selects SCREAMING_SNAKE_CASE member names
        if value is True:
            return RuntimeEnumsStyle.SCREAMING_SNAKE_CASE
        if value is False:
            return None
        return value


def validate_config(values: Dict[str, Any]) -> CodegenConfig:
    """Validate a raw option mapping.

    Raises:
        ConfigError: For the first invalid option, with its path
    """
    try:
        return CodegenConfig.model_validate(values)
    except ValidationError as e:
        error = e.errors()[0]
        path = [str(part) for part in error.get("loc", ())]
        raise ConfigError(error["msg"], path=path) from e


def load_config_file(path: Optional[str] = None) -> Dict[str, Any]:
    """Read a JSON config file.

    Without a path, ``.kysely-codegenrc.json`` in the working directory is
    used when it exists; otherwise an empty mapping is returned.
    """
    if path is None:
        if not os.path.exists(CONFIG_FILE_NAME):
            return {}
        path = CONFIG_FILE_NAME

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file '{path}' does not exist", path=["configFile"])

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file '{path}' is not valid JSON: {e}", path=["configFile"]) from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file '{path}' must contain a JSON object", path=["configFile"])
    return data


def resolve_config(
    file_values: Optional[Dict[str, Any]] = None,
    cli_values: Optional[Dict[str, Any]] = None,
    settings: Optional[Settings] = None,
) -> CodegenConfig:
    """Merge option sources and validate the result.

    Precedence: CLI flags > config file > environment > defaults. CLI values
    that are None are treated as not given.
    """
    config = CodegenConfig.model_validate({}) if not file_values else validate_config(file_values)
    merged = config.model_dump(by_alias=False, exclude_unset=True)
    for key, value in (cli_values or {}).items():
        if value is not None:
            merged[key] = value

    if settings is not None:
        if not merged.get("url") and settings.database_url:
            merged["url"] = settings.database_url
        if not merged.get("dialect") and settings.dialect:
            merged["dialect"] = settings.dialect

    return validate_config(merged)
