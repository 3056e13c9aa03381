"""Tests for configuration loading and validation."""

import json

import pytest

from kysely_codegen.config import (
    CodegenConfig,
    DateParser,
    DialectName,
    NumericParser,
    RuntimeEnumsStyle,
    Settings,
    load_config_file,
    load_settings,
    resolve_config,
    validate_config,
)
from kysely_codegen.errors import ConfigError


class TestCodegenConfig:
    """Test option validation."""

    def test_defaults(self):
        config = CodegenConfig()
        assert config.camel_case is False
        assert config.singularize is False
        assert config.numeric_parser == NumericParser.STRING
        assert config.date_parser == DateParser.TIMESTAMP
        assert config.runtime_enums is None
        assert config.type_only_imports is True
        assert config.out_file == "db.d.ts"
        assert config.default_schemas == []

    def test_camel_case_keys(self):
        config = validate_config({
            "camelCase": True,
            "defaultSchemas": ["public", "cli"],
            "runtimeEnums": "pascal-case",
            "numericParser": "number-or-string",
            "typeOnlyImports": False,
            "print": True,
        })
        assert config.camel_case is True
        assert config.default_schemas == ["public", "cli"]
        assert config.runtime_enums == RuntimeEnumsStyle.PASCAL_CASE
        assert config.numeric_parser == NumericParser.NUMBER_OR_STRING
        assert config.type_only_imports is False
        assert config.print_output is True

    def test_runtime_enums_true_means_screaming_snake_case(self):
        assert CodegenConfig(runtime_enums=True).runtime_enums == RuntimeEnumsStyle.SCREAMING_SNAKE_CASE

    def test_runtime_enums_false(self):
        assert CodegenConfig(runtime_enums=False).runtime_enums is None

    def test_singularize_rules(self):
        config = validate_config({"singularize": {"/(bacch)(?:us|i)$/i": "$1us"}})
        assert config.singularize == {"/(bacch)(?:us|i)$/i": "$1us"}

    def test_singularize_rejects_strings(self):
        with pytest.raises(ConfigError):
            validate_config({"singularize": "yes"})

    def test_unknown_option(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_config({"bogus": 1})
        assert exc_info.value.path == ["bogus"]

    def test_invalid_enum_value(self):
        with pytest.raises(ConfigError) as exc_info:
            validate_config({"numericParser": "float"})
        assert exc_info.value.path == ["numericParser"]
        assert str(exc_info.value).startswith("numericParser: ")

    def test_strict_booleans(self):
        with pytest.raises(ConfigError):
            validate_config({"camelCase": "true"})

    def test_overrides(self):
        config = validate_config({
            "overrides": {"columns": {"users.meta": "Json"}, "tables": {"users": "Account"}},
        })
        assert config.overrides.columns == {"users.meta": "Json"}
        assert config.overrides.tables == {"users": "Account"}

    def test_unknown_override_section(self):
        with pytest.raises(ConfigError):
            validate_config({"overrides": {"enums": {}}})

    def test_dialect(self):
        assert validate_config({"dialect": "sqlite"}).dialect == DialectName.SQLITE
        with pytest.raises(ConfigError):
            validate_config({"dialect": "oracle"})

    def test_frozen(self):
        config = CodegenConfig()
        with pytest.raises(Exception):
            config.camel_case = True


class TestConfigFile:
    """Test reading JSON config files."""

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "codegen.json"
        path.write_text(json.dumps({"camelCase": True}), encoding="utf-8")
        assert load_config_file(str(path)) == {"camelCase": True}

    def test_default_file_in_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".kysely-codegenrc.json").write_text('{"domains": true}', encoding="utf-8")
        assert load_config_file() == {"domains": True}

    def test_no_default_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config_file() == {}

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_config_file(str(tmp_path / "missing.json"))
        assert exc_info.value.path == ["configFile"]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{camelCase: true", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config_file(str(path))

    def test_non_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config_file(str(path))


class TestSettings:
    """Test environment settings."""

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("KYSELY_CODEGEN_DIALECT", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("DATABASE_URL=sqlite:///app.db\nKYSELY_CODEGEN_DIALECT=sqlite\n", encoding="utf-8")

        settings = load_settings(str(env_file))
        assert settings.database_url == "sqlite:///app.db"
        assert settings.dialect == "sqlite"

    def test_environment_variable(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://localhost/app")
        assert Settings().database_url == "postgres://localhost/app"

    def test_missing_env_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_settings(str(tmp_path / "missing.env"))
        assert exc_info.value.path == ["envFile"]


class TestResolveConfig:
    """Test precedence between CLI flags, config file and environment."""

    def test_cli_overrides_file(self):
        config = resolve_config({"camelCase": True, "domains": True}, {"camel_case": False})
        assert config.camel_case is False
        assert config.domains is True

    def test_none_cli_values_are_ignored(self):
        config = resolve_config({"camelCase": True}, {"camel_case": None, "url": None})
        assert config.camel_case is True

    def test_environment_fills_url_and_dialect(self):
        settings = Settings(database_url="postgres://localhost/app", dialect="postgres")
        config = resolve_config({}, {}, settings)
        assert config.url == "postgres://localhost/app"
        assert config.dialect == DialectName.POSTGRES

    def test_file_url_beats_environment(self):
        settings = Settings(database_url="postgres://localhost/env")
        config = resolve_config({"url": "postgres://localhost/file"}, {}, settings)
        assert config.url == "postgres://localhost/file"

    def test_file_values_survive_merge(self):
        config = resolve_config({
            "runtimeEnums": "pascal-case",
            "overrides": {"tables": {"users": "Account"}},
            "print": True,
        }, {})
        assert config.runtime_enums == RuntimeEnumsStyle.PASCAL_CASE
        assert config.overrides.tables == {"users": "Account"}
        assert config.print_output is True

    def test_invalid_cli_value(self):
        with pytest.raises(ConfigError):
            resolve_config({}, {"date_parser": "epoch"})
