"""Rules module - the Rule Layer."""

from rulegate.rules.base import (
    CompositeRule,
    LeafRule,
    PredicateRule,
    RenderType,
    Rule,
    RuleKind,
    RuleResult,
    Severity,
    iter_violations,
)
from rulegate.rules.composite import AllOf, AnyOf, Range, StringIsNotNullEmptyRange
from rulegate.rules.leaf import (
    AreEqual,
    AreNotEqual,
    IsFalse,
    IsNotNull,
    IsNull,
    IsTrue,
    Max,
    MaxLength,
    Min,
    MinLength,
    StringLengthRange,
)
from rulegate.rules.registry import RuleRegistry, get_global_rule_registry

__all__ = [
    "CompositeRule",
    "LeafRule",
    "PredicateRule",
    "RenderType",
    "Rule",
    "RuleKind",
    "RuleResult",
    "Severity",
    "iter_violations",
    "AllOf",
    "AnyOf",
    "Range",
    "StringIsNotNullEmptyRange",
    "AreEqual",
    "AreNotEqual",
    "IsFalse",
    "IsNotNull",
    "IsNull",
    "IsTrue",
    "Max",
    "MaxLength",
    "Min",
    "MinLength",
    "StringLengthRange",
    "RuleRegistry",
    "get_global_rule_registry",
]
