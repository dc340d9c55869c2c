# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command line front-end: `sugarlint [paths...] [--fix] [--json]`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Tuple

from sugarlint.config import Config, ConfigError, load_config
from sugarlint.core.diagnostics import Correction, Diagnostic
from sugarlint.core.source_file import SourceFile
from sugarlint.core.span import Span
from sugarlint.rules import enabled_rules

logger = logging.getLogger(__name__)

SWIFT_SUFFIX = ".swift"


def _diag_to_json(diag: Diagnostic) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	return {
		"code": diag.code,
		"message": diag.message,
		"severity": diag.severity,
		"file": diag.span.file,
		"line": diag.span.line,
		"column": diag.span.column,
		"notes": list(diag.notes),
	}


def _correction_to_json(correction: Correction) -> dict:
	return {
		"rule": correction.rule_id,
		"description": correction.description,
		"file": correction.span.file,
		"line": correction.span.line,
		"column": correction.span.column,
	}


def _is_excluded(path: Path, excluded: List[Path]) -> bool:
	resolved = path.resolve()
	return any(resolved == ex or ex in resolved.parents for ex in excluded)


def collect_sources(paths: List[Path], config: Config, cwd: Path) -> Tuple[List[Path], List[Diagnostic]]:
	"""
	Expand `paths` (files or directories) into a deduplicated list of Swift files.

	Directories are searched recursively for `*.swift`; explicitly named files
	are taken as they are. Missing paths become error diagnostics.
	"""
	if not paths:
		paths = [cwd / p for p in config.included] or [cwd]
	excluded = [(cwd / p).resolve() for p in config.excluded]

	sources: List[Path] = []
	seen: set[Path] = set()
	diagnostics: List[Diagnostic] = []

	def _add(candidate: Path) -> None:
		key = candidate.resolve()
		if key in seen or _is_excluded(candidate, excluded):
			return
		seen.add(key)
		sources.append(candidate)

	for path in paths:
		if path.is_dir():
			for candidate in sorted(path.rglob(f"*{SWIFT_SUFFIX}")):
				if candidate.is_file():
					_add(candidate)
		elif path.is_file():
			_add(path)
		else:
			diagnostics.append(
				Diagnostic(
					message="no such file or directory",
					code="io",
					severity="error",
					span=Span(file=str(path)),
				)
			)
	return sources, diagnostics


def _lint_file(path: Path, rules, *, fix: bool, max_passes: int) -> Tuple[List[Diagnostic], List[Correction]]:
	try:
		file = SourceFile.from_path(path)
	except (OSError, UnicodeDecodeError) as err:
		return [Diagnostic(message=f"cannot read file: {err}", code="io", severity="error", span=Span(file=str(path)))], []

	corrections: List[Correction] = []
	if fix:
		# Nested long forms are rewritten one level per pass.
		for _ in range(max_passes):
			applied = [c for rule in rules for c in rule.correct(file)]
			if not applied:
				break
			corrections.extend(applied)

	diagnostics: List[Diagnostic] = []
	for rule in rules:
		diagnostics.extend(rule.validate(file))
	return diagnostics, corrections


def main(argv: list[str] | None = None) -> int:
	"""
	Lint (or with --fix, rewrite) Swift sources.

	With --json, prints `{"exit_code", "diagnostics", "corrections"}` to stdout;
	otherwise corrections go to stdout and diagnostics to stderr as
	`file:line:col: severity: message [rule]`. Exit code 1 means an error
	diagnostic remains or no Swift file was found; 2 means a bad configuration.
	"""
	parser = argparse.ArgumentParser(prog="sugarlint", description="Prefer shorthand Swift container syntax")
	parser.add_argument("paths", type=Path, nargs="*", help="Swift files or directories (default: configured `included`, else .)")
	parser.add_argument("--fix", action="store_true", help="Rewrite violations in place")
	parser.add_argument("--json", action="store_true", help="Emit diagnostics as JSON")
	parser.add_argument("--config", type=Path, help="Configuration file (default: ./.sugarlint.json)")
	parser.add_argument(
		"--max-passes",
		type=int,
		default=10,
		help="Upper bound on --fix passes per file (nested long forms need one pass per level)",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr")
	args = parser.parse_args(argv)
	if args.max_passes < 1:
		parser.error("--max-passes must be at least 1")

	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s: %(name)s: %(message)s",
	)

	cwd = Path.cwd()
	try:
		config = load_config(args.config, cwd=cwd)
	except ConfigError as err:
		if args.json:
			payload = {
				"exit_code": 2,
				"diagnostics": [_diag_to_json(Diagnostic(message=str(err), code="config", severity="error"))],
				"corrections": [],
			}
			print(json.dumps(payload))
		else:
			print(f"sugarlint: error: {err}", file=sys.stderr)
		return 2

	rules = enabled_rules(config)
	sources, diagnostics = collect_sources(list(args.paths), config, cwd)
	logger.debug("linting %d file(s) with %d rule(s)", len(sources), len(rules))
	corrections: List[Correction] = []
	for path in sources:
		file_diags, file_corrections = _lint_file(path, rules, fix=args.fix, max_passes=args.max_passes)
		diagnostics.extend(file_diags)
		corrections.extend(file_corrections)

	exit_code = 0
	if not sources or any(d.severity == "error" for d in diagnostics):
		exit_code = 1

	if args.json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [_diag_to_json(d) for d in diagnostics],
			"corrections": [_correction_to_json(c) for c in corrections],
		}
		print(json.dumps(payload))
		return exit_code

	for c in corrections:
		print(f"{c.span.render()}: corrected: {c.description} [{c.rule_id}]")
	for d in diagnostics:
		print(f"{d.span.render()}: {d.severity}: {d.message} [{d.code}]", file=sys.stderr)
	if not sources:
		print("sugarlint: no Swift files found", file=sys.stderr)
	return exit_code
