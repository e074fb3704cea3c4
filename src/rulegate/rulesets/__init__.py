"""Rule sets module - The Declaration Layer.

Rule sets are caller-owned documents that specify:
- Which rule types apply
- Which document fields they target
- Priorities, severities and messages

They contain no evaluation logic.
"""

from rulegate.rulesets.base import RuleSet, RuleSetBuilder, RuleSpec, build_rule
from rulegate.rulesets.loader import RULESET_SCHEMA, RuleSetLoader, load_ruleset

__all__ = [
    "RuleSet",
    "RuleSetBuilder",
    "RuleSpec",
    "build_rule",
    "RULESET_SCHEMA",
    "RuleSetLoader",
    "load_ruleset",
]
