"""Tests for the Rule Sets module."""

import tempfile
from pathlib import Path

import pytest

from rulegate.exceptions import RuleSetError
from rulegate.rules.base import RenderType, Severity
from rulegate.rules.composite import AnyOf, Range
from rulegate.rules.leaf import Min
from rulegate.rules.registry import RuleRegistry, get_global_rule_registry
from rulegate.rulesets.base import RuleSet, RuleSetBuilder, RuleSpec
from rulegate.rulesets.loader import RuleSetLoader, load_ruleset

RULESET_YAML = """
name: course_rules
description: Rules for creating a course
version: "2.0"
rules:
  - type: string_range
    name: title
    message: Title must be 3-200 characters.
    field: course.title
    params:
      min_length: 3
      max_length: 200
  - type: range
    name: capacity
    message: Capacity must be between 1 and 30.
    field: course.capacity
    priority: 5
    params:
      start: 1
      end: 30
  - type: any_of
    name: contact
    message: An email or phone is required.
    priority: 10
    rules:
      - type: not_null
        name: email
        field: owner.email
      - type: not_null
        name: phone
        field: owner.phone
"""


@pytest.fixture
def loader():
    return RuleSetLoader()


@pytest.fixture
def course():
    return {
        "course": {"title": "Linear Algebra", "capacity": 25},
        "owner": {"email": None, "phone": "555-0100"},
    }


class TestRuleSetLoader:
    """Tests for RuleSetLoader."""

    def test_load_from_string(self, loader):
        ruleset = loader.load_from_string(RULESET_YAML)

        assert ruleset.name == "course_rules"
        assert ruleset.version == "2.0"
        assert [r.name for r in ruleset.rules] == ["title", "capacity", "contact"]
        assert ruleset.get_rule("capacity").params == {"start": 1, "end": 30}
        assert [r.name for r in ruleset.get_rule("contact").rules] == ["email", "phone"]

    def test_missing_rules_rejected(self, loader):
        with pytest.raises(RuleSetError):
            loader.load_from_string("name: empty\n")

    def test_unknown_key_rejected(self, loader):
        content = "name: x\nrules:\n  - type: min\n    name: a\n    target: 3\n"
        with pytest.raises(RuleSetError):
            loader.load_from_string(content)

    def test_bad_severity_rejected(self, loader):
        content = "name: x\nrules:\n  - type: min\n    name: a\n    severity: fatal\n"
        with pytest.raises(RuleSetError):
            loader.load_from_string(content)

    def test_check_reports_problems(self, loader):
        problems = loader.check({"name": "x", "rules": [{"type": "min"}]})

        assert len(problems) == 1
        assert problems[0].startswith("rules.0")

    def test_check_accepts_valid_document(self, loader):
        import yaml

        assert loader.check(yaml.safe_load(RULESET_YAML)) == []

    def test_save_and_load(self, loader):
        ruleset = loader.load_from_string(RULESET_YAML)

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "rules.yaml"
            loader.save_file(ruleset, path)
            loaded = load_ruleset(path)

        assert loaded == ruleset

    def test_load_missing_file(self, loader):
        with pytest.raises(FileNotFoundError):
            loader.load_file("/nonexistent/rules.yaml")


class TestRuleSet:
    """Tests for building rules from a RuleSet."""

    def test_build_rules(self, loader, course):
        rules = loader.load_from_string(RULESET_YAML).build_rules(course)

        assert isinstance(rules[1], Range)
        assert rules[1].target == 25
        assert rules[1].priority == 5
        assert isinstance(rules[2], AnyOf)

    def test_build_context_valid_document(self, loader, course):
        context = loader.load_from_string(RULESET_YAML).build_context(course)
        context.render_rules()

        assert context.source == "course_rules"
        assert not context.has_rule_violations()

    def test_build_context_reports_violations(self, loader):
        data = {"course": {"title": "ab", "capacity": 40}, "owner": {}}
        context = loader.load_from_string(RULESET_YAML).build_context(data)
        context.render_rules()

        names = [r.name for r in context.displayable_violations() if not r.is_composite]
        assert names == ["title.length", "capacity.max", "email", "phone"]

    def test_absent_field_is_absent_target(self, loader):
        context = loader.load_from_string(RULESET_YAML).build_context({})
        context.render_rules()

        title = context.results[0]
        assert [r.name for r in title.children] == ["title.not_null"]

    def test_unknown_type(self):
        ruleset = RuleSet(name="x", rules=[RuleSpec(type="checksum", name="a")])

        with pytest.raises(RuleSetError, match="Unknown rule type"):
            ruleset.build_rules({})

    def test_bad_params(self):
        ruleset = RuleSet(name="x", rules=[RuleSpec(type="min", name="a", params={"limit": 3})])

        with pytest.raises(RuleSetError, match="Cannot build rule"):
            ruleset.build_rules({})

    def test_render_type_applied(self):
        ruleset = RuleSet(name="x", rules=[RuleSpec(
            type="all_of",
            name="group",
            render_type=RenderType.EXIT_ON_FIRST_FALSE_EVALUATION,
            rules=[RuleSpec(type="not_null", name="a", field="a")],
        )])
        group = ruleset.build_rules({"a": 1})[0]

        assert group.render_type == RenderType.EXIT_ON_FIRST_FALSE_EVALUATION

    def test_children_on_leaf_rejected(self):
        ruleset = RuleSet(name="x", rules=[RuleSpec(
            type="min",
            name="age",
            field="age",
            params={"minimum": 18},
            rules=[RuleSpec(type="not_null", name="a", field="a")],
        )])

        with pytest.raises(RuleSetError, match="does not accept: rules"):
            ruleset.build_rules({"age": 20})

    def test_field_and_params_on_group_rejected(self):
        ruleset = RuleSet(name="x", rules=[RuleSpec(
            type="any_of",
            name="contact",
            field="owner",
            params={"minimum": 1},
            rules=[RuleSpec(type="not_null", name="email", field="owner.email")],
        )])

        with pytest.raises(RuleSetError, match="does not accept: field, params"):
            ruleset.build_rules({"owner": {}})

    def test_render_type_on_leaf_rejected(self):
        ruleset = RuleSet(name="x", rules=[RuleSpec(
            type="not_null",
            name="a",
            field="a",
            render_type=RenderType.EVALUATE_ALL_RULES,
        )])

        with pytest.raises(RuleSetError, match="does not accept: render_type"):
            ruleset.build_rules({"a": 1})

    def test_render_type_on_stock_composite(self):
        ruleset = RuleSet(name="x", rules=[RuleSpec(
            type="range",
            name="capacity",
            field="capacity",
            render_type=RenderType.EXIT_ON_FIRST_FALSE_EVALUATION,
            params={"start": 1, "end": 10},
        )])
        capacity = ruleset.build_rules({"capacity": 50})[0]

        assert capacity.render_type == RenderType.EXIT_ON_FIRST_FALSE_EVALUATION

    def test_custom_registry(self):
        registry = RuleRegistry()
        registry.register("at_least", Min)
        ruleset = RuleSet(name="x", rules=[
            RuleSpec(type="at_least", name="age", field="age", params={"minimum": 18}),
        ])

        context = ruleset.build_context({"age": 12}, registry=registry)
        context.render_rules()

        assert context.has_rule_violations()
        assert context.results[0].message == "age is invalid."


class TestRuleSetBuilder:
    """Tests for RuleSetBuilder."""

    def test_build(self):
        ruleset = (
            RuleSetBuilder("signup")
            .description("Signup rules")
            .version("1.1.0")
            .rule("min", "age", "Must be an adult.", field="age", minimum=18, severity="warning")
            .group(
                "any_of",
                "contact",
                RuleSpec(type="not_null", name="email", field="email"),
                RuleSpec(type="not_null", name="phone", field="phone"),
                message="Contact required.",
            )
            .tag("users")
            .metadata(owner="identity")
            .build()
        )

        assert ruleset.version == "1.1.0"
        assert ruleset.rules[0].params == {"minimum": 18}
        assert ruleset.rules[0].severity == Severity.WARNING
        assert len(ruleset.rules[1].rules) == 2
        assert ruleset.metadata == {"owner": "identity"}

        context = ruleset.build_context({"age": 30, "phone": "555-0100"})
        assert not context.render_rules().has_rule_violations()

    def test_group_options(self):
        ruleset = (
            RuleSetBuilder("signup")
            .group(
                "all_of",
                "profile",
                RuleSpec(type="not_null", name="email", field="email"),
                RuleSpec(type="not_null", name="phone", field="phone"),
                message="Profile is incomplete.",
                severity="warning",
                displayable=False,
                render_type="exit_on_first_false_evaluation",
            )
            .build()
        )
        spec = ruleset.rules[0]

        assert spec.severity == Severity.WARNING
        assert spec.displayable is False
        assert spec.render_type == RenderType.EXIT_ON_FIRST_FALSE_EVALUATION

        context = ruleset.build_context({}).render_rules()
        profile = context.results[0]
        assert not profile.is_valid
        assert profile.severity == Severity.WARNING
        assert not profile.is_displayable
        assert [r.name for r in profile.children] == ["email"]

    def test_rule_render_type(self):
        ruleset = (
            RuleSetBuilder("course")
            .rule("range", "capacity", field="capacity", start=1, end=10,
                  render_type=RenderType.EXIT_ON_FIRST_FALSE_EVALUATION)
            .build()
        )
        capacity = ruleset.build_rules({"capacity": 0})[0]

        assert ruleset.rules[0].params == {"start": 1, "end": 10}
        assert capacity.render_type == RenderType.EXIT_ON_FIRST_FALSE_EVALUATION


class TestRuleRegistry:
    """Tests for RuleRegistry."""

    def test_defaults_registered(self):
        registry = RuleRegistry()

        assert "range" in registry
        assert registry.get("min") is Min
        assert len(registry) == 15

    def test_unregister(self):
        registry = RuleRegistry()

        assert registry.unregister("range")
        assert not registry.unregister("range")
        assert registry.get("range") is None

    def test_global_registry_is_singleton(self):
        assert get_global_rule_registry() is get_global_rule_registry()
