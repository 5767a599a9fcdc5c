"""Boundary rules: models, synthesis and checking."""

from aibrain.rules.checker import check_rules
from aibrain.rules.models import (
    HARD,
    SOFT,
    UNKNOWN,
    CheckResult,
    Rule,
    Rules,
    RulesPolicy,
    Violation,
    rule_from_dict,
    rule_id_for,
)
from aibrain.rules.synthesizer import synthesize_rules

__all__ = [
    "HARD",
    "SOFT",
    "UNKNOWN",
    "CheckResult",
    "Rule",
    "Rules",
    "RulesPolicy",
    "Violation",
    "check_rules",
    "rule_from_dict",
    "rule_id_for",
    "synthesize_rules",
]
