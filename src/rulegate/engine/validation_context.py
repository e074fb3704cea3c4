"""Validation Context - Orchestrates a rule evaluation run.

The Validation Context:
- Holds the top-level rules of one validation request
- Evaluates them in ascending priority order
- Keeps the results of the last run and the aggregate state
"""

from enum import Enum
from typing import Any

from rulegate.config import EngineSettings, get_global_settings
from rulegate.logging import get_logger
from rulegate.reporting import ReportingSink, report
from rulegate.rules.base import Rule, RuleResult, iter_violations

logger = get_logger(__name__)


class ValidationContextState(str, Enum):
    """Aggregate state of a validation context."""

    NOT_EVALUATED = "not_evaluated"
    EVALUATED = "evaluated"
    HAS_VIOLATIONS = "has_violations"


class ValidationContext:
    """A mutable collection of rules and the results of evaluating them.

    A context is created per validation request, evaluated by a single
    caller and discarded once its verdict is consumed.

    The verdict is decided by the top-level results. Nested detail can only
    turn it into a violation through its aggregate, so an ``AnyOf`` that
    passes after a failed alternative leaves the context ``EVALUATED``. The
    failed alternative stays readable in the aggregate's ``children`` but
    is not listed by ``violations``.
    """

    def __init__(
        self,
        source: str = "",
        sink: ReportingSink | None = None,
        settings: EngineSettings | None = None,
    ):
        """Initialize the context.

        Args:
            source: Label used when reporting violations (e.g. an action name)
            sink: Optional reporting collaborator
            settings: Engine settings; the global settings when omitted
        """
        self.source = source
        self.sink = sink
        self.settings = settings or get_global_settings()
        self._rules: list[Rule] = []
        self._results: list[RuleResult] = []
        self.state = ValidationContextState.NOT_EVALUATED

    @property
    def rules(self) -> list[Rule]:
        """Top-level rules in insertion order."""
        return list(self._rules)

    @property
    def results(self) -> list[RuleResult]:
        """Results of the last run in evaluation order."""
        return list(self._results)

    @property
    def is_valid(self) -> bool:
        return self.state == ValidationContextState.EVALUATED

    def add_rule(self, rule: Rule) -> "ValidationContext":
        """Append a top-level rule. Duplicates are not checked."""
        self._rules.append(rule)
        return self

    def add_rules(self, *rules: Rule) -> "ValidationContext":
        for rule in rules:
            self.add_rule(rule)
        return self

    def render_rules(self) -> "ValidationContext":
        """Evaluate every rule and update the aggregate state.

        Rules run in ascending priority order; ties keep insertion order.
        Each run replaces the results of the previous one. Errors raised by
        a rule's own logic propagate unchanged.

        Returns:
            This context, for chained inspection
        """
        results = [rule.evaluate() for rule in sorted(self._rules, key=lambda r: r.priority)]

        self._results = results
        if any(not r.is_valid for r in results):
            self.state = ValidationContextState.HAS_VIOLATIONS
        else:
            self.state = ValidationContextState.EVALUATED

        logger.debug(
            "rules_rendered",
            source=self.source,
            rule_count=len(results),
            state=self.state.value,
        )
        self._report_violations()
        return self

    def has_rule_violations(self) -> bool:
        """True iff some top-level result of the last run is invalid."""
        return self.state == ValidationContextState.HAS_VIOLATIONS

    def violations(self, displayable_only: bool = False) -> list[RuleResult]:
        """All invalid results of the last run, including nested composite detail."""
        return list(iter_violations(self._results, displayable_only))

    def displayable_violations(self) -> list[RuleResult]:
        return self.violations(displayable_only=True)

    def summary(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "state": self.state.value,
            "rule_count": len(self._rules),
            "violation_count": len(self.violations()),
            "results": [r.to_dict() for r in self._results],
        }

    def _report_violations(self) -> None:
        for result in self.violations():
            if result.is_composite and result.children:
                # Leaf detail is reported instead of the aggregate.
                continue
            if not result.is_displayable and not self.settings.report_non_displayable:
                continue
            report(self.sink, self.source, result.severity, f"{result.name}: {result.message}")
