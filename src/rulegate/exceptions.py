"""Exception hierarchy for rulegate.

Rule violations are never raised; they are recorded as rule results. The
exceptions below cover defects in how rules, rule sets or actions are wired.
"""


class RulegateError(Exception):
    """Base class for all rulegate errors."""


class RuleConfigurationError(RulegateError):
    """A rule's evaluation logic raised instead of reporting a verdict."""

    def __init__(self, rule_name: str, cause: BaseException):
        self.rule_name = rule_name
        self.cause = cause
        super().__init__(f"Rule '{rule_name}' failed during evaluation: {cause!r}")


class RuleSetError(RulegateError):
    """A rule-set document is malformed or references an unknown rule type."""


class ActionStateError(RulegateError):
    """An action was driven outside its single-use lifecycle."""
