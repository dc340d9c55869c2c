# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
sugarlint configuration.

Format (JSON, `.sugarlint.json` in the working directory or `--config PATH`):
{
  "severity": "warning",                       // default severity, optional
  "disabled_rules": ["syntactic_sugar"],       // optional
  "rules": {"syntactic_sugar": {"severity": "error"}},  // optional overrides
  "included": ["Sources"],                     // optional, paths to lint
  "excluded": ["Sources/Generated"]            // optional, paths to skip
}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

from sugarlint.core.diagnostics import SEVERITIES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = ".sugarlint.json"

_KNOWN_KEYS = {"severity", "disabled_rules", "rules", "included", "excluded"}


class ConfigError(ValueError):
	"""User-facing error for an unreadable or invalid configuration file."""


@dataclass(frozen=True)
class Config:
	severity: str = "warning"
	disabled_rules: Tuple[str, ...] = ()
	rule_severities: Dict[str, str] = field(default_factory=dict)
	included: Tuple[str, ...] = ()
	excluded: Tuple[str, ...] = ()

	def severity_for(self, rule_id: str) -> str:
		return self.rule_severities.get(rule_id, self.severity)

	@classmethod
	def from_dict(cls, obj: object, *, source: str = "<config>") -> "Config":
		if not isinstance(obj, dict):
			raise ConfigError(f"{source}: configuration must be a JSON object")
		for key in obj:
			if key not in _KNOWN_KEYS:
				logger.warning("%s: ignoring unknown configuration key %r", source, key)

		severity = _severity(obj.get("severity", "warning"), f"{source}: severity")

		rule_severities: Dict[str, str] = {}
		rules_obj = obj.get("rules") or {}
		if not isinstance(rules_obj, dict):
			raise ConfigError(f"{source}: rules must be a JSON object")
		for rule_id, rule_obj in rules_obj.items():
			if not isinstance(rule_obj, dict):
				raise ConfigError(f"{source}: rules.{rule_id} must be a JSON object")
			if "severity" in rule_obj:
				rule_severities[rule_id] = _severity(rule_obj["severity"], f"{source}: rules.{rule_id}.severity")

		return cls(
			severity=severity,
			disabled_rules=_string_list(obj, "disabled_rules", source),
			rule_severities=rule_severities,
			included=_string_list(obj, "included", source),
			excluded=_string_list(obj, "excluded", source),
		)


def _severity(value: object, what: str) -> str:
	if value not in SEVERITIES:
		raise ConfigError(f"{what} must be one of {', '.join(SEVERITIES)} (got {value!r})")
	return str(value)


def _string_list(obj: dict, key: str, source: str) -> Tuple[str, ...]:
	value = obj.get(key) or []
	if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
		raise ConfigError(f"{source}: {key} must be a list of strings")
	return tuple(value)


def load_config(path: Optional[Path] = None, *, cwd: Optional[Path] = None) -> Config:
	"""
	Load configuration from `path`, or from `.sugarlint.json` in `cwd`.

	An explicit `path` must exist; the implicit file is optional.
	"""
	if path is None:
		candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_NAME
		if not candidate.is_file():
			return Config()
		path = candidate
	try:
		obj = json.loads(path.read_text(encoding="utf-8"))
	except OSError as err:
		raise ConfigError(f"cannot read configuration {path}: {err.strerror or err}") from err
	except json.JSONDecodeError as err:
		raise ConfigError(f"{path}: invalid JSON: {err}") from err
	return Config.from_dict(obj, source=str(path))


__all__ = ["Config", "ConfigError", "DEFAULT_CONFIG_NAME", "load_config"]
