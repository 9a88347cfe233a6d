"""Tests for the RuleForge CLI."""

import json

import pytest
from click.testing import CliRunner

from ruleforge.cli.main import cli
from ruleforge.messages import MessageDictionary
from ruleforge.registry import ValidatorRegistry


@pytest.fixture(autouse=True)
def reset_registries(monkeypatch):
    """Restore the seeded registry and dictionary, and isolate the environment."""
    monkeypatch.delenv("RULEFORGE_LOCALE", raising=False)
    monkeypatch.delenv("RULEFORGE_LOCALE_DIR", raising=False)
    ValidatorRegistry.reset()
    MessageDictionary.reset()
    yield
    ValidatorRegistry.reset()
    MessageDictionary.reset()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("email: required|email\nname: required|min:3\n", encoding="utf-8")
    return path


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestCheck:
    def test_valid_data(self, runner, rules_file, tmp_path):
        data = write_json(tmp_path / "data.json", {"email": "foo@bar.com", "name": "John Snow"})

        result = runner.invoke(cli, ["check", str(rules_file), str(data)])

        assert result.exit_code == 0
        assert "All fields are valid" in result.output

    def test_invalid_data(self, runner, rules_file, tmp_path):
        data = write_json(tmp_path / "data.json", {"email": "foo@bar.c", "name": ""})

        result = runner.invoke(cli, ["check", str(rules_file), str(data)])

        assert result.exit_code == 1
        assert "email: The email must be a valid email." in result.output
        assert "name: The name is required." in result.output
        assert "name: The name must be at least 3 characters." in result.output
        assert "3 error(s) found" in result.output

    def test_yaml_data_and_locale_messages(self, runner, rules_file, tmp_path):
        data = tmp_path / "data.yaml"
        data.write_text("email: foo@bar.com\nname: ''\n", encoding="utf-8")
        messages = tmp_path / "locales"
        messages.mkdir()
        (messages / "fr.yaml").write_text("required: \"Le champ {field} est obligatoire.\"\n", encoding="utf-8")

        result = runner.invoke(
            cli,
            ["check", str(rules_file), str(data), "--locale", "fr", "--messages", str(messages)],
        )

        assert result.exit_code == 1
        assert "Le champ name est obligatoire." in result.output
        # no French entry for min: English fallback
        assert "The name must be at least 3 characters." in result.output

    def test_locale_dir_from_environment(self, runner, rules_file, tmp_path, monkeypatch):
        locales = tmp_path / "env_locales"
        locales.mkdir()
        (locales / "de.yaml").write_text("required: \"{field} fehlt\"\n", encoding="utf-8")
        monkeypatch.setenv("RULEFORGE_LOCALE_DIR", str(locales))
        monkeypatch.setenv("RULEFORGE_LOCALE", "de")
        data = write_json(tmp_path / "data.json", {"email": "foo@bar.com"})

        result = runner.invoke(cli, ["check", str(rules_file), str(data)])

        assert result.exit_code == 1
        assert "name: name fehlt" in result.output

    def test_bad_locale_dir(self, runner, rules_file, tmp_path, monkeypatch):
        monkeypatch.setenv("RULEFORGE_LOCALE_DIR", str(tmp_path / "missing"))
        data = write_json(tmp_path / "data.json", {})

        result = runner.invoke(cli, ["check", str(rules_file), str(data)])

        assert result.exit_code == 2
        assert "Locale directory not found" in result.output

    def test_data_must_be_a_mapping(self, runner, rules_file, tmp_path):
        data = write_json(tmp_path / "data.json", [1, 2, 3])

        result = runner.invoke(cli, ["check", str(rules_file), str(data)])

        assert result.exit_code != 0
        assert "must contain a mapping" in result.output

    def test_null_rules_mean_no_rules(self, runner, tmp_path):
        rules = tmp_path / "rules.yaml"
        rules.write_text("nickname:\nname: required\n", encoding="utf-8")
        data = write_json(tmp_path / "data.json", {"name": "John Snow"})

        result = runner.invoke(cli, ["check", str(rules), str(data)])

        assert result.exit_code == 0
        assert "All fields are valid (2 checked)." in result.output
        assert "unknown rule" not in result.output


class TestParse:
    def test_shows_rules(self, runner):
        result = runner.invoke(cli, ["parse", "required|in:1,2|nope"])

        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines == ["required()", "in('1', '2')", "nope() (unknown)"]

    def test_empty_expression(self, runner):
        result = runner.invoke(cli, ["parse", ""])
        assert "No rules." in result.output


class TestValidators:
    def test_lists_builtins(self, runner):
        result = runner.invoke(cli, ["validators"])

        assert result.exit_code == 0
        names = result.output.split()
        assert "required" in names
        assert names == sorted(names)
