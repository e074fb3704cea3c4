"""
Rulegate - A composable business-rule validation engine with a gated action pipeline.

Small reusable rules are combined into trees, evaluated against arbitrary
targets, and their aggregated verdict decides whether a unit of business
work may proceed.
"""

__version__ = "0.1.0"

from rulegate.rules.base import CompositeRule, LeafRule, RenderType, Rule, RuleResult, Severity
from rulegate.engine.validation_context import ValidationContext, ValidationContextState
from rulegate.actions.base import Action, ActionBuilder, ActionOutcome, ActionResult, Phase
from rulegate.rulesets.base import RuleSet, RuleSetBuilder

__all__ = [
    "CompositeRule",
    "LeafRule",
    "RenderType",
    "Rule",
    "RuleResult",
    "Severity",
    "ValidationContext",
    "ValidationContextState",
    "Action",
    "ActionBuilder",
    "ActionOutcome",
    "ActionResult",
    "Phase",
    "RuleSet",
    "RuleSetBuilder",
]
