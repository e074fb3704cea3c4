"""Tests for the Validation Context."""

import pytest

from rulegate.config import EngineSettings
from rulegate.engine.validation_context import ValidationContext, ValidationContextState
from rulegate.exceptions import RuleConfigurationError
from rulegate.rules.base import PredicateRule, Severity
from rulegate.rules.composite import AnyOf, Range
from rulegate.rules.leaf import IsNotNull, IsTrue, Min, StringLengthRange


class RecordingSink:
    """Sink that keeps every recorded event."""

    def __init__(self):
        self.events = []

    def record(self, source, severity, message):
        self.events.append((source, severity, message))


@pytest.fixture
def sink():
    return RecordingSink()


class TestValidationContext:
    """Tests for ValidationContext."""

    def test_initial_state(self):
        context = ValidationContext()

        assert context.state == ValidationContextState.NOT_EVALUATED
        assert not context.has_rule_violations()
        assert not context.is_valid
        assert context.results == []

    def test_passing_rules(self):
        context = ValidationContext()
        context.add_rule(IsNotNull("title", "Title is required.", "Algebra"))
        context.add_rule(Min("capacity", "Too small.", 10, minimum=1))

        assert context.render_rules() is context
        assert context.state == ValidationContextState.EVALUATED
        assert context.is_valid
        assert not context.has_rule_violations()
        assert len(context.results) == 2

    def test_failing_rule_sets_violation_state(self):
        context = ValidationContext().add_rules(
            IsNotNull("title", "Title is required.", None),
            Min("capacity", "Too small.", 10, minimum=1),
        )
        context.render_rules()

        assert context.state == ValidationContextState.HAS_VIOLATIONS
        assert context.has_rule_violations()
        assert [r.name for r in context.violations()] == ["title"]

    def test_evaluation_follows_priority(self):
        context = ValidationContext()
        context.add_rule(IsTrue("twenty", "m", True, priority=20))
        context.add_rule(IsTrue("five", "m", True, priority=5))
        context.add_rule(IsTrue("ten", "m", True, priority=10))
        context.render_rules()

        assert [r.name for r in context.results] == ["five", "ten", "twenty"]
        assert [r.name for r in context.rules] == ["twenty", "five", "ten"]

    def test_results_flattened_one_level(self):
        context = ValidationContext().add_rule(
            Range("capacity", "Capacity out of range.", 15, start=1, end=10)
        )
        context.render_rules()

        assert len(context.results) == 1
        assert context.results[0].is_composite
        assert [r.name for r in context.violations()] == ["capacity", "capacity.max"]

    def test_rerender_is_idempotent(self):
        context = ValidationContext().add_rules(
            Range("capacity", "Capacity out of range.", 15, start=1, end=10),
            StringLengthRange("title", "Bad title.", "ab", min_length=3, max_length=20),
            IsNotNull("owner", "Owner required.", "ada"),
        )
        first = context.render_rules().results
        first_state = context.state
        second = context.render_rules().results

        assert first == second
        assert context.state == first_state

    def test_rerender_replaces_results(self):
        target = {"ok": False}
        context = ValidationContext().add_rule(
            PredicateRule("flag", "Flag must be set.", target, predicate=lambda t: t["ok"])
        )
        context.render_rules()
        assert context.has_rule_violations()

        target["ok"] = True
        context.render_rules()
        assert len(context.results) == 1
        assert context.state == ValidationContextState.EVALUATED

    def test_violation_state_matches_nested_detail(self):
        context = ValidationContext().add_rules(
            Range("a", "A out of range.", 5, start=1, end=10),
            Range("b", "B out of range.", 50, start=1, end=10),
        )
        context.render_rules()

        nested_invalid = any(
            not child.is_valid for r in context.results for child in r.children
        )
        assert context.has_rule_violations() == nested_invalid

    def test_any_of_aggregate_governs_state(self):
        context = ValidationContext().add_rule(AnyOf("contact", "Need contact.", rules=[
            IsNotNull("email", "Email missing.", None),
            IsNotNull("phone", "Phone missing.", "555-0100"),
        ]))
        context.render_rules()

        assert not context.has_rule_violations()
        assert context.state == ValidationContextState.EVALUATED
        assert context.violations() == []
        contact = context.results[0]
        assert [(r.name, r.is_valid) for r in contact.children] == [("email", False), ("phone", True)]

    def test_configuration_defect_propagates(self):
        context = ValidationContext().add_rule(
            PredicateRule("broken", "m", None, predicate=lambda t: t["missing"])
        )

        with pytest.raises(RuleConfigurationError):
            context.render_rules()
        assert context.state == ValidationContextState.NOT_EVALUATED

    def test_displayable_violations(self):
        context = ValidationContext().add_rules(
            IsNotNull("shown", "Shown.", None),
            IsNotNull("hidden", "Hidden.", None, is_displayable=False),
        )
        context.render_rules()

        assert [r.name for r in context.displayable_violations()] == ["shown"]
        assert len(context.violations()) == 2

    def test_summary(self):
        context = ValidationContext(source="course").add_rule(IsNotNull("title", "Required.", None))
        context.render_rules()
        summary = context.summary()

        assert summary["source"] == "course"
        assert summary["state"] == "has_violations"
        assert summary["violation_count"] == 1


class TestViolationReporting:
    """Tests for forwarding violations to a reporting sink."""

    def test_violations_forwarded(self, sink):
        context = ValidationContext(source="create_course", sink=sink).add_rules(
            IsNotNull("title", "Title is required.", None),
            Range("capacity", "Out of range.", 50, start=1, end=10, severity=Severity.WARNING),
        )
        context.render_rules()

        assert sink.events == [
            ("create_course", Severity.EXCEPTION, "title: Title is required."),
            ("create_course", Severity.WARNING, "capacity.max: capacity must be at most 10."),
        ]

    def test_non_displayable_reporting_follows_settings(self, sink):
        settings = EngineSettings(report_non_displayable=False)
        context = ValidationContext(sink=sink, settings=settings).add_rule(
            IsNotNull("hidden", "Hidden.", None, is_displayable=False)
        )
        context.render_rules()

        assert sink.events == []
        assert context.has_rule_violations()

    def test_failing_sink_does_not_change_verdict(self):
        class BrokenSink:
            def record(self, source, severity, message):
                raise RuntimeError("sink down")

        context = ValidationContext(sink=BrokenSink()).add_rule(IsNotNull("title", "Required.", None))
        context.render_rules()

        assert context.has_rule_violations()

    def test_nothing_reported_when_valid(self, sink):
        context = ValidationContext(sink=sink).add_rule(IsNotNull("title", "Required.", "x"))
        context.render_rules()

        assert sink.events == []
