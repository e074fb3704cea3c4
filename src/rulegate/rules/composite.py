"""Stock composite rules built from the standard leaf rules."""

from typing import Any, Iterable

from rulegate.rules.base import CompositeRule, RenderType, Rule
from rulegate.rules.leaf import IsNotNull, Max, Min, StringLengthRange


class Range(CompositeRule):
    """Valid when the target is present and within ``[start, end]``.

    Children, in order: presence check, minimum, maximum.
    """

    def __init__(
        self,
        name: str,
        message: str,
        target: Any = None,
        start: Any = 0,
        end: Any = 0,
        **options: Any,
    ):
        self.start = start
        self.end = end
        super().__init__(name, message, target, **options)

    def configure_rules(self, target: Any) -> None:
        shared = {"is_displayable": self.is_displayable, "severity": self.severity}
        self.add_rule(IsNotNull(
            f"{self.name}.not_null", f"{self.name} is required.", target, priority=0, **shared
        ))
        self.add_rule(Min(
            f"{self.name}.min", f"{self.name} must be at least {self.start}.", target,
            minimum=self.start, priority=1, **shared,
        ))
        self.add_rule(Max(
            f"{self.name}.max", f"{self.name} must be at most {self.end}.", target,
            maximum=self.end, priority=2, **shared,
        ))


class StringIsNotNullEmptyRange(CompositeRule):
    """Valid when the target is a present string of bounded length.

    Stops at the first failing child, so an absent string reports only
    the presence failure.
    """

    render_type = RenderType.EXIT_ON_FIRST_FALSE_EVALUATION

    def __init__(
        self,
        name: str,
        message: str,
        target: Any = None,
        min_length: int = 0,
        max_length: int = 0,
        **options: Any,
    ):
        self.min_length = min_length
        self.max_length = max_length
        super().__init__(name, message, target, **options)

    def configure_rules(self, target: Any) -> None:
        shared = {"is_displayable": self.is_displayable, "severity": self.severity}
        self.add_rule(IsNotNull(
            f"{self.name}.not_null", f"{self.name} is required.", target, priority=0, **shared
        ))
        self.add_rule(StringLengthRange(
            f"{self.name}.length",
            f"{self.name} must be between {self.min_length} and {self.max_length} characters.",
            target,
            min_length=self.min_length,
            max_length=self.max_length,
            priority=1,
            **shared,
        ))


class AllOf(CompositeRule):
    """Groups independent rules; valid iff every rule is valid.

    Each child keeps its own target, so the absent-target guard is off.
    """

    guard_absent_target = False

    def __init__(self, name: str, message: str, rules: Iterable[Rule] = (), **options: Any):
        self._declared = list(rules)
        super().__init__(name, message, None, **options)

    def configure_rules(self, target: Any) -> None:
        for rule in self._declared:
            self.add_rule(rule)


class AnyOf(AllOf):
    """Groups alternative rules; valid as soon as one rule is valid.

    Alternatives that failed before the passing one are kept in the
    result's ``children``. They do not count as violations: a passing
    any-of leaves its ValidationContext ``EVALUATED``.
    """

    render_type = RenderType.EXIT_ON_FIRST_TRUE_EVALUATION
