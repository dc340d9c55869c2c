# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from sugarlint.config import Config, ConfigError, load_config


def _write(path: Path, obj: object) -> Path:
	path.write_text(json.dumps(obj), encoding="utf-8")
	return path


def test_missing_implicit_config_gives_defaults(tmp_path: Path) -> None:
	config = load_config(cwd=tmp_path)
	assert config == Config()
	assert config.severity_for("syntactic_sugar") == "warning"


def test_implicit_config_is_read_from_cwd(tmp_path: Path) -> None:
	_write(
		tmp_path / ".sugarlint.json",
		{
			"severity": "error",
			"disabled_rules": ["other_rule"],
			"rules": {"syntactic_sugar": {"severity": "warning"}},
			"included": ["Sources"],
			"excluded": ["Sources/Generated"],
		},
	)
	config = load_config(cwd=tmp_path)
	assert config.severity == "error"
	assert config.disabled_rules == ("other_rule",)
	assert config.severity_for("syntactic_sugar") == "warning"
	assert config.severity_for("other_rule") == "error"
	assert config.included == ("Sources",)
	assert config.excluded == ("Sources/Generated",)


def test_explicit_config_must_exist(tmp_path: Path) -> None:
	with pytest.raises(ConfigError, match="cannot read configuration"):
		load_config(tmp_path / "nope.json")


def test_invalid_json_is_a_config_error(tmp_path: Path) -> None:
	path = tmp_path / "bad.json"
	path.write_text("{not json", encoding="utf-8")
	with pytest.raises(ConfigError, match="invalid JSON"):
		load_config(path)


@pytest.mark.parametrize(
	("obj", "message"),
	[
		([], "must be a JSON object"),
		({"severity": "fatal"}, "severity must be one of warning, error"),
		({"disabled_rules": "syntactic_sugar"}, "disabled_rules must be a list of strings"),
		({"rules": {"syntactic_sugar": "error"}}, "rules.syntactic_sugar must be a JSON object"),
		({"rules": {"syntactic_sugar": {"severity": "loud"}}}, "rules.syntactic_sugar.severity"),
	],
)
def test_invalid_values_are_rejected(tmp_path: Path, obj: object, message: str) -> None:
	path = _write(tmp_path / "config.json", obj)
	with pytest.raises(ConfigError, match=message):
		load_config(path)


def test_unknown_keys_are_warned_about(tmp_path: Path, caplog) -> None:
	caplog.set_level(logging.WARNING, logger="sugarlint")
	config = load_config(_write(tmp_path / "config.json", {"colour": "blue"}))
	assert config == Config()
	assert "ignoring unknown configuration key 'colour'" in caplog.text
