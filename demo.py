#!/usr/bin/env python3
"""
Demo script showing basic usage of rulegate.

Run this script after installing the package:
    pip install -e .
    python demo.py
"""

from rulegate.actions.base import ActionBuilder, Phase
from rulegate.engine.validation_context import ValidationContext
from rulegate.reporting import LoggingSink
from rulegate.rules.base import Severity
from rulegate.rules.composite import AnyOf, Range, StringIsNotNullEmptyRange
from rulegate.rules.leaf import IsNotNull, IsTrue
from rulegate.rulesets.base import RuleSetBuilder


class CourseRepository:
    """Stand-in for a persistence collaborator."""

    def __init__(self):
        self.saved = []

    def create(self, course):
        self.saved.append(course)
        return {"id": len(self.saved), **course}


def course_rules(course):
    return [
        StringIsNotNullEmptyRange(
            "title", "Title must be 3-200 characters.", course.get("title"),
            min_length=3, max_length=200,
        ),
        Range("capacity", "Capacity must be between 1 and 30.", course.get("capacity"), start=1, end=30),
        AnyOf("contact", "An email or phone is required.", priority=5, rules=[
            IsNotNull("email", "Email is missing.", course.get("email")),
            IsNotNull("phone", "Phone is missing.", course.get("phone")),
        ]),
        IsTrue("published", "Course is not published yet.", course.get("published"),
               severity=Severity.WARNING, priority=10),
    ]


def demo_validation_context():
    """Demonstrate evaluating rules directly."""
    print("=" * 60)
    print("1. VALIDATION CONTEXT")
    print("=" * 60)

    course = {"title": "ab", "capacity": 45, "phone": "555-0100", "published": True}
    context = ValidationContext(source="course").add_rules(*course_rules(course))
    context.render_rules()

    print(f"State: {context.state.value}")
    for result in context.violations():
        print(f"  - {result.name}: {result.message}")
    print()


def demo_action(course):
    """Demonstrate a gated action."""
    print("=" * 60)
    print("2. GATED ACTION")
    print("=" * 60)

    repository = CourseRepository()
    action = (
        ActionBuilder("create_course")
        .rules(lambda a: course_rules(course))
        .delegate(lambda: repository.create(course))
        .on(Phase.FINISH, lambda a: print(f"  finished: {a.action_result.value}"))
        .sink(LoggingSink())
        .build()
    )
    outcome = action.execute()

    print(f"Result: {outcome.result.value}")
    print(f"Saved: {repository.saved}")
    for message in outcome.user_messages:
        print(f"  - {message}")
    print()


def demo_ruleset():
    """Demonstrate a declarative rule set."""
    print("=" * 60)
    print("3. RULE SET")
    print("=" * 60)

    ruleset = (
        RuleSetBuilder("signup")
        .rule("string_range", "username", "Username must be 3-20 characters.",
              field="user.name", min_length=3, max_length=20)
        .rule("min", "age", "Must be at least 18.", field="user.age", minimum=18)
        .build()
    )
    context = ruleset.build_context({"user": {"name": "ada", "age": 16}})
    context.render_rules()

    print(f"Rule set: {ruleset.name}")
    print(f"Violations: {[r.name for r in context.violations()]}")
    print()


if __name__ == "__main__":
    demo_validation_context()
    demo_action({"title": "Algebra", "capacity": 45, "email": "ada@example.com", "published": True})
    demo_action({"title": "Algebra", "capacity": 20, "email": "ada@example.com", "published": True})
    demo_ruleset()
