"""Rule registry."""

from __future__ import annotations

from typing import List

from sugarlint.config import Config

from .syntactic_sugar import SyntacticSugarRule

RULES = {SyntacticSugarRule.identifier: SyntacticSugarRule}


def enabled_rules(config: Config) -> List[SyntacticSugarRule]:
	return [
		rule_cls(severity=config.severity_for(rule_id))
		for rule_id, rule_cls in RULES.items()
		if rule_id not in config.disabled_rules
	]


__all__ = ["RULES", "SyntacticSugarRule", "enabled_rules"]
