"""Tests for the kysely-codegen command line."""

import json
import logging

import pytest
from typer.testing import CliRunner

from kysely_codegen import __version__
from kysely_codegen.config import RuntimeEnumsStyle
from kysely_codegen.errors import ConfigError
from kysely_codegen.main import app, check_deprecated_flags, parse_overrides, parse_runtime_enums

runner = CliRunner()


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    """Run each command in an empty directory without a DATABASE_URL."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("KYSELY_CODEGEN_DIALECT", raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _run(*args):
    return runner.invoke(app, ["--log-level", "silent", *args])


class TestOutputModes:
    """Test printing and writing generated types."""

    def test_print(self, sqlite_db, workdir):
        result = _run("--url", str(sqlite_db), "--print")
        assert result.exit_code == 0
        assert "This file was generated by kysely-codegen." in result.output
        assert "export interface DB {" in result.output
        assert not (workdir / "db.d.ts").exists()

    def test_default_out_file(self, sqlite_db, workdir):
        result = _run("--url", str(sqlite_db))
        assert result.exit_code == 0
        assert "Generated types written to" in result.output
        assert "export interface Users {" in (workdir / "db.d.ts").read_text(encoding="utf-8")

    def test_out_file_creates_directories(self, sqlite_db, workdir):
        result = _run("--url", str(sqlite_db), "--out-file", "src/types/db.d.ts")
        assert result.exit_code == 0
        assert (workdir / "src" / "types" / "db.d.ts").exists()

    def test_options_reach_the_output(self, sqlite_db):
        result = _run("--url", str(sqlite_db), "--print", "--camel-case", "--singularize", "--include-pattern", "users")
        assert result.exit_code == 0
        assert "export interface User {" in result.output
        assert "  createdAt: Timestamp | null;" in result.output
        assert "UserTag" not in result.output

    def test_overrides_flag(self, sqlite_db):
        overrides = json.dumps({"columns": {"users.email": "`${string}@${string}`"}})
        result = _run("--url", str(sqlite_db), "--print", "--overrides", overrides)
        assert result.exit_code == 0
        assert "  email: `${string}@${string}`;" in result.output

    def test_config_file(self, sqlite_db, workdir):
        (workdir / "codegen.json").write_text(
            json.dumps({"url": str(sqlite_db), "camelCase": True, "print": True}),
            encoding="utf-8",
        )
        result = _run("--config-file", "codegen.json")
        assert result.exit_code == 0
        assert "  createdAt: Timestamp | null;" in result.output

    def test_env_file(self, sqlite_db, workdir):
        (workdir / "codegen.env").write_text(f"DATABASE_URL={sqlite_db}\n", encoding="utf-8")
        result = _run("--env-file", "codegen.env", "--print")
        assert result.exit_code == 0
        assert "export interface DB {" in result.output


class TestRuntimeEnumsFlags:
    """Test that the runtime enum switch and its style reach the config."""

    @pytest.fixture
    def captured(self, monkeypatch):
        configs = []

        def fake_generate(config):
            configs.append(config)
            return "export interface DB {}\n"

        monkeypatch.setattr("kysely_codegen.main.generate", fake_generate)
        return configs

    def test_switch_does_not_take_the_next_flag(self, captured):
        result = _run("--url", "app.sqlite", "--runtime-enums", "--print")
        assert result.exit_code == 0
        assert "export interface DB {}" in result.output
        assert captured[0].runtime_enums == RuntimeEnumsStyle.SCREAMING_SNAKE_CASE
        assert captured[0].print_output

    def test_style(self, captured):
        result = _run("--url", "app.sqlite", "--runtime-enums-style", "pascal-case", "--print")
        assert result.exit_code == 0
        assert captured[0].runtime_enums == RuntimeEnumsStyle.PASCAL_CASE

    def test_switched_off_over_config_file(self, captured, workdir):
        (workdir / "codegen.json").write_text(json.dumps({"runtimeEnums": "pascal-case"}), encoding="utf-8")
        result = _run("--url", "app.sqlite", "--config-file", "codegen.json", "--no-runtime-enums", "--print")
        assert result.exit_code == 0
        assert captured[0].runtime_enums is None

    def test_invalid_style(self, captured):
        result = _run("--url", "app.sqlite", "--runtime-enums-style", "kebab-case")
        assert result.exit_code == 1
        assert captured == []


class TestVerify:
    """Test --verify against files on disk."""

    def test_up_to_date(self, sqlite_db, workdir):
        assert _run("--url", str(sqlite_db)).exit_code == 0
        result = _run("--url", str(sqlite_db), "--verify")
        assert result.exit_code == 0
        assert "Generated types are up-to-date" in result.output

    def test_out_of_date(self, sqlite_db, workdir):
        assert _run("--url", str(sqlite_db)).exit_code == 0
        path = workdir / "db.d.ts"
        path.write_text(path.read_text(encoding="utf-8").replace("email: string;", "email: number;"), encoding="utf-8")

        result = _run("--url", str(sqlite_db), "--verify")
        assert result.exit_code == 1
        assert "Generated types are not up-to-date" in result.output
        assert "-  email: number;" in result.output
        assert "+  email: string;" in result.output
        assert "email: number;" in path.read_text(encoding="utf-8")

    def test_missing_file(self, sqlite_db):
        result = _run("--url", str(sqlite_db), "--verify", "--out-file", "missing.d.ts")
        assert result.exit_code == 1


class TestErrors:
    """Test failures reported on the command line."""

    def test_missing_url(self):
        result = _run("--print")
        assert result.exit_code == 1
        assert "A connection URL is required" in result.output

    def test_invalid_option_value(self, sqlite_db):
        result = _run("--url", str(sqlite_db), "--numeric-parser", "float")
        assert result.exit_code == 1
        assert "numericParser" in result.output or "numeric_parser" in result.output

    def test_deprecated_schema_flag(self, sqlite_db):
        result = _run("--url", str(sqlite_db), "--schema", "public")
        assert result.exit_code == 1
        assert "has been deprecated" in result.output

    def test_deprecated_singular_flag(self, sqlite_db):
        result = _run("--url", str(sqlite_db), "--singular")
        assert result.exit_code == 1
        assert "has been deprecated" in result.output

    def test_unknown_dialect(self):
        result = _run("--url", "oracle://localhost/app")
        assert result.exit_code == 1
        assert "Cannot infer the dialect" in result.output

    def test_missing_config_file(self):
        result = _run("--config-file", "nope.json")
        assert result.exit_code == 1
        assert "does not exist" in result.output


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"kysely-codegen {__version__}" in result.output


class TestFlagParsing:
    """Test the helpers that turn flag strings into option values."""

    @pytest.mark.parametrize("enabled,style,expected", [
        (None, None, None),
        (True, None, True),
        (False, None, False),
        (None, "Pascal-Case", "pascal-case"),
        (True, "screaming-snake-case", "screaming-snake-case"),
        (False, "pascal-case", False),
    ])
    def test_runtime_enums(self, enabled, style, expected):
        assert parse_runtime_enums(enabled, style) == expected

    def test_overrides(self):
        assert parse_overrides('{"tables": {"users": "Account"}}') == {"tables": {"users": "Account"}}
        assert parse_overrides(None) is None

    @pytest.mark.parametrize("value", ["{broken", "[1, 2]"])
    def test_invalid_overrides(self, value):
        with pytest.raises(ConfigError) as exc_info:
            parse_overrides(value)
        assert exc_info.value.path == ["overrides"]

    def test_deprecated_flags(self):
        check_deprecated_flags(schema=None, singular=None)
        with pytest.raises(ConfigError, match="Use 'default-schema' instead"):
            check_deprecated_flags(schema="public", singular=None)
