"""Base classes for rules - the Rule Layer.

A rule is the atomic unit of business validation. Rules are:
- Evaluated against a target value they never mutate
- Either a leaf (a single check) or a composite (an ordered group of rules)
- Pure and synchronous; anything I/O-bound is resolved before construction

Every evaluation produces an immutable RuleResult.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator

from rulegate.exceptions import RuleConfigurationError


class Severity(str, Enum):
    """How a failing rule should be treated downstream."""

    EXCEPTION = "exception"
    WARNING = "warning"
    INFORMATION = "information"


class RenderType(str, Enum):
    """Policy governing how a composite walks its children."""

    EVALUATE_ALL_RULES = "evaluate_all_rules"
    EXIT_ON_FIRST_FALSE_EVALUATION = "exit_on_first_false_evaluation"
    EXIT_ON_FIRST_TRUE_EVALUATION = "exit_on_first_true_evaluation"


class RuleKind(str, Enum):
    """Variant tag of a rule."""

    LEAF = "leaf"
    COMPOSITE = "composite"


# Marks "use the rule's own target" since None is a meaningful target.
_UNSET: Any = object()


@dataclass(frozen=True)
class RuleResult:
    """The outcome of evaluating one rule."""

    rule: "Rule"
    is_valid: bool
    message: str = ""
    target: Any = None
    children: tuple["RuleResult", ...] = field(default_factory=tuple)

    @property
    def name(self) -> str:
        return self.rule.name

    @property
    def severity(self) -> Severity:
        return self.rule.severity

    @property
    def is_displayable(self) -> bool:
        return self.rule.is_displayable

    @property
    def is_composite(self) -> bool:
        return self.rule.kind == RuleKind.COMPOSITE

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "kind": self.rule.kind.value,
            "is_valid": self.is_valid,
            "message": self.message,
            "severity": self.severity.value,
            "is_displayable": self.is_displayable,
        }
        if self.is_composite:
            data["children"] = [c.to_dict() for c in self.children]
        return data


def iter_violations(
    results: "list[RuleResult] | tuple[RuleResult, ...]",
    displayable_only: bool = False,
) -> Iterator[RuleResult]:
    """Walk results depth-first and yield every invalid one.

    A failing composite is yielded itself (subject to ``displayable_only``)
    and then descended into, so nested detail is never hidden behind the
    aggregate.

    Args:
        results: Results to walk, in evaluation order
        displayable_only: Only yield results whose rule may be shown to a user

    Yields:
        Invalid results in evaluation order
    """
    for result in results:
        if result.is_valid:
            continue
        if result.is_displayable or not displayable_only:
            yield result
        if result.is_composite:
            yield from iter_violations(result.children, displayable_only)


class Rule(ABC):
    """Abstract base class for all rules.

    Attributes:
        kind: Variant tag, LEAF or COMPOSITE
        requires_target: Whether the rule is meaningless for an absent target.
            Composites skip such children when their own target is None.
    """

    kind: RuleKind
    requires_target: bool = True

    def __init__(
        self,
        name: str,
        message: str,
        target: Any = None,
        *,
        priority: int = 0,
        is_displayable: bool = True,
        severity: Severity = Severity.EXCEPTION,
    ):
        """Initialize the rule.

        Args:
            name: Identifier of the rule, unique within its context
            message: Text reported when the rule fails
            target: The value to check; kept by reference
            priority: Lower values evaluate first among siblings
            is_displayable: Whether a violation may be shown to an end user
            severity: How a failure should be treated downstream
        """
        self.name = name
        self.message = message
        self.target = target
        self.priority = priority
        self.is_displayable = is_displayable
        self.severity = Severity(severity)

    @abstractmethod
    def evaluate(self, target: Any = _UNSET) -> RuleResult:
        """Evaluate the rule.

        Args:
            target: Value to check for this call only; the rule's own
                target is used when omitted

        Returns:
            The result of this evaluation
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={self.priority})"


class LeafRule(Rule):
    """A rule performing a single check over its target.

    Subclasses implement ``check``. It must not raise for a None target;
    absence is itself a condition many rules test for.
    """

    kind = RuleKind.LEAF

    @abstractmethod
    def check(self, target: Any) -> bool:
        """Return True if the target satisfies this rule."""
        pass

    def evaluate(self, target: Any = _UNSET) -> RuleResult:
        value = self.target if target is _UNSET else target
        try:
            is_valid = bool(self.check(value))
        except Exception as e:
            raise RuleConfigurationError(self.name, e) from e

        return RuleResult(
            rule=self,
            is_valid=is_valid,
            message="" if is_valid else self.message,
            target=value,
        )


class PredicateRule(LeafRule):
    """A leaf rule whose check is a plain callable."""

    def __init__(
        self,
        name: str,
        message: str,
        target: Any = None,
        predicate: Callable[[Any], bool] | None = None,
        *,
        requires_target: bool = True,
        **options: Any,
    ):
        if predicate is None:
            raise ValueError(f"PredicateRule '{name}' requires a predicate")
        super().__init__(name, message, target, **options)
        self.predicate = predicate
        self.requires_target = requires_target

    def check(self, target: Any) -> bool:
        return self.predicate(target)


class CompositeRule(Rule):
    """A rule made of an ordered group of child rules.

    Children are declared once, at construction, by ``configure_rules``.
    Subclasses that need extra constructor arguments must store them before
    calling ``super().__init__`` so they are available there.

    The composite's verdict is always derived from its children:
    - EVALUATE_ALL_RULES: every child runs; valid iff all are valid
    - EXIT_ON_FIRST_FALSE_EVALUATION: stops at the first failure
    - EXIT_ON_FIRST_TRUE_EVALUATION: stops at the first success; valid iff
      some child succeeded

    When the composite's target is None and ``guard_absent_target`` is set,
    children with ``requires_target`` are skipped and produce no result.
    """

    kind = RuleKind.COMPOSITE
    render_type: RenderType = RenderType.EVALUATE_ALL_RULES
    guard_absent_target: bool = True

    def __init__(
        self,
        name: str,
        message: str,
        target: Any = None,
        *,
        render_type: RenderType | None = None,
        **options: Any,
    ):
        super().__init__(name, message, target, **options)
        if render_type is not None:
            self.render_type = RenderType(render_type)
        self._rules: list[Rule] = []
        self._results: list[RuleResult] = []
        self.configure_rules(target)

    def configure_rules(self, target: Any) -> None:
        """Declare child rules. Called once from the constructor.

        Args:
            target: The composite's own target
        """
        pass

    def add_rule(self, rule: Rule) -> "CompositeRule":
        self._rules.append(rule)
        return self

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules)

    @property
    def results(self) -> list[RuleResult]:
        """Child results of the last evaluation, in evaluation order."""
        return list(self._results)

    @property
    def has_errors(self) -> bool:
        return any(not r.is_valid for r in self._results)

    def evaluate(self, target: Any = _UNSET) -> RuleResult:
        """Evaluate children in ascending priority order.

        An explicit ``target`` is forwarded to every child; otherwise each
        child checks its own target.
        """
        value = self.target if target is _UNSET else target
        results: list[RuleResult] = []

        for rule in sorted(self._rules, key=lambda r: r.priority):
            if value is None and self.guard_absent_target and rule.requires_target:
                continue

            result = rule.evaluate() if target is _UNSET else rule.evaluate(value)
            results.append(result)

            if (
                self.render_type == RenderType.EXIT_ON_FIRST_FALSE_EVALUATION
                and not result.is_valid
            ):
                break
            if (
                self.render_type == RenderType.EXIT_ON_FIRST_TRUE_EVALUATION
                and result.is_valid
            ):
                break

        if self.render_type == RenderType.EXIT_ON_FIRST_TRUE_EVALUATION:
            is_valid = any(r.is_valid for r in results)
        else:
            is_valid = all(r.is_valid for r in results)

        self._results = results
        return RuleResult(
            rule=self,
            is_valid=is_valid,
            message="" if is_valid else self.message,
            target=value,
            children=tuple(results),
        )
