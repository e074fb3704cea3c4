"""Base classes for Rule Sets - the Declaration Layer.

A rule set declares, as data, which rules apply to which fields of a
document. It holds no evaluation logic: building a rule set against a
document yields ordinary rules inside a ValidationContext.
"""

from typing import Any

from pydantic import BaseModel, Field

from rulegate.config import EngineSettings
from rulegate.engine.validation_context import ValidationContext
from rulegate.exceptions import RuleSetError
from rulegate.reporting import ReportingSink
from rulegate.rules.base import CompositeRule, RenderType, Rule, Severity
from rulegate.rules.composite import AllOf
from rulegate.rules.registry import RuleRegistry, get_global_rule_registry
from rulegate.utils.helpers import resolve_path


class RuleSpec(BaseModel):
    """Declaration of one rule."""

    type: str = Field(..., description="Registered rule type name, e.g. 'min'")
    name: str = Field(..., description="Rule name, unique within the rule set")
    message: str = Field(default="", description="Message reported on failure")
    field: str = Field(
        default="",
        description="Dotted path of the target in the document; empty for the whole document",
    )
    priority: int = Field(default=0, description="Lower values evaluate first")
    severity: Severity = Field(default=Severity.EXCEPTION, description="Failure severity")
    displayable: bool = Field(default=True, description="Whether a violation may be shown to users")
    render_type: RenderType | None = Field(
        default=None,
        description="Walking policy for composite rules",
    )
    params: dict[str, Any] = Field(
        default_factory=dict,
        description="Rule-specific constructor arguments",
    )
    rules: list["RuleSpec"] = Field(
        default_factory=list,
        description="Child declarations for all_of / any_of groups",
    )

    def get_message(self) -> str:
        return self.message or f"{self.name} is invalid."


class RuleSet(BaseModel):
    """A named, versioned list of rule declarations."""

    name: str = Field(..., description="Rule set name")
    description: str = Field(default="", description="Rule set description")
    version: str = Field(default="1.0.0", description="Rule set version")
    rules: list[RuleSpec] = Field(default_factory=list, description="Rule declarations")
    tags: list[str] = Field(default_factory=list, description="Tags for categorization")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional metadata")

    def get_rule(self, name: str) -> RuleSpec | None:
        for spec in self.rules:
            if spec.name == name:
                return spec
        return None

    def add_rule(self, spec: RuleSpec) -> None:
        self.rules.append(spec)

    def build_rules(
        self,
        data: Any,
        registry: RuleRegistry | None = None,
    ) -> list[Rule]:
        """Instantiate every declared rule against a document.

        Args:
            data: The document whose fields become rule targets
            registry: Rule registry; the global registry when omitted

        Returns:
            Rules in declaration order

        Raises:
            RuleSetError: If a declaration names an unknown type or has
                arguments its rule class does not accept
        """
        registry = registry or get_global_rule_registry()
        return [build_rule(spec, data, registry) for spec in self.rules]

    def build_context(
        self,
        data: Any,
        sink: ReportingSink | None = None,
        settings: EngineSettings | None = None,
        registry: RuleRegistry | None = None,
    ) -> ValidationContext:
        """Build a ValidationContext holding this rule set's rules."""
        context = ValidationContext(source=self.name, sink=sink, settings=settings)
        context.add_rules(*self.build_rules(data, registry))
        return context


def build_rule(spec: RuleSpec, data: Any, registry: RuleRegistry) -> Rule:
    """Instantiate a single declaration, recursing into groups.

    Raises:
        RuleSetError: If the type is unknown, a key does not apply to the
            type (``rules`` outside a group, ``field`` or ``params`` on a
            group, ``render_type`` on a leaf), or the rule rejects its params
    """
    rule_class = registry.get(spec.type)
    if rule_class is None:
        raise RuleSetError(f"Unknown rule type '{spec.type}' for rule '{spec.name}'")

    is_group = issubclass(rule_class, AllOf)
    misplaced = []
    if is_group:
        if spec.field:
            misplaced.append("field")
        if spec.params:
            misplaced.append("params")
    else:
        if spec.rules:
            misplaced.append("rules")
        if spec.render_type is not None and not issubclass(rule_class, CompositeRule):
            misplaced.append("render_type")
    if misplaced:
        raise RuleSetError(
            f"Rule '{spec.name}' of type '{spec.type}' does not accept: {', '.join(misplaced)}"
        )

    options: dict[str, Any] = {
        "priority": spec.priority,
        "is_displayable": spec.displayable,
        "severity": spec.severity,
    }
    if spec.render_type is not None:
        options["render_type"] = spec.render_type

    try:
        if is_group:
            children = [build_rule(child, data, registry) for child in spec.rules]
            return rule_class(spec.name, spec.get_message(), rules=children, **options)

        target = resolve_path(data, spec.field)
        return rule_class(spec.name, spec.get_message(), target, **spec.params, **options)
    except (TypeError, ValueError) as e:
        raise RuleSetError(f"Cannot build rule '{spec.name}' of type '{spec.type}': {e}") from e


class RuleSetBuilder:
    """Fluent builder for creating RuleSets."""

    def __init__(self, name: str):
        self._name = name
        self._description = ""
        self._version = "1.0.0"
        self._rules: list[RuleSpec] = []
        self._tags: list[str] = []
        self._metadata: dict[str, Any] = {}

    def description(self, description: str) -> "RuleSetBuilder":
        self._description = description
        return self

    def version(self, version: str) -> "RuleSetBuilder":
        self._version = version
        return self

    def rule(
        self,
        rule_type: str,
        name: str,
        message: str = "",
        field: str = "",
        priority: int = 0,
        severity: Severity | str = Severity.EXCEPTION,
        displayable: bool = True,
        render_type: RenderType | str | None = None,
        **params: Any,
    ) -> "RuleSetBuilder":
        self._rules.append(
            RuleSpec(
                type=rule_type,
                name=name,
                message=message,
                field=field,
                priority=priority,
                severity=Severity(severity),
                displayable=displayable,
                render_type=render_type,
                params=params,
            )
        )
        return self

    def group(
        self,
        rule_type: str,
        name: str,
        *rules: RuleSpec,
        message: str = "",
        priority: int = 0,
        severity: Severity | str = Severity.EXCEPTION,
        displayable: bool = True,
        render_type: RenderType | str | None = None,
    ) -> "RuleSetBuilder":
        self._rules.append(
            RuleSpec(
                type=rule_type,
                name=name,
                message=message,
                priority=priority,
                severity=Severity(severity),
                displayable=displayable,
                render_type=render_type,
                rules=list(rules),
            )
        )
        return self

    def tag(self, *tags: str) -> "RuleSetBuilder":
        self._tags.extend(tags)
        return self

    def metadata(self, **kwargs: Any) -> "RuleSetBuilder":
        self._metadata.update(kwargs)
        return self

    def build(self) -> RuleSet:
        return RuleSet(
            name=self._name,
            description=self._description,
            version=self._version,
            rules=self._rules,
            tags=self._tags,
            metadata=self._metadata,
        )
