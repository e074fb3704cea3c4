"""Rule Registry for looking up rule classes by type name."""

from typing import Type

from rulegate.rules.base import Rule


class RuleRegistry:
    """Registry of rule classes.

    Maps short type names, as used in rule-set documents, to rule classes.
    """

    def __init__(self):
        self._rules: dict[str, Type[Rule]] = {}
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register the standard rules."""
        from rulegate.rules import composite, leaf

        self.register("not_null", leaf.IsNotNull)
        self.register("null", leaf.IsNull)
        self.register("is_true", leaf.IsTrue)
        self.register("is_false", leaf.IsFalse)
        self.register("min", leaf.Min)
        self.register("max", leaf.Max)
        self.register("equal", leaf.AreEqual)
        self.register("not_equal", leaf.AreNotEqual)
        self.register("min_length", leaf.MinLength)
        self.register("max_length", leaf.MaxLength)
        self.register("length_range", leaf.StringLengthRange)
        self.register("range", composite.Range)
        self.register("string_range", composite.StringIsNotNullEmptyRange)
        self.register("all_of", composite.AllOf)
        self.register("any_of", composite.AnyOf)

    def register(self, type_name: str, rule_class: Type[Rule]) -> None:
        """Register a rule class under a type name.

        Args:
            type_name: Name used to refer to the rule
            rule_class: The rule class to register
        """
        self._rules[type_name] = rule_class

    def get(self, type_name: str) -> Type[Rule] | None:
        return self._rules.get(type_name)

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return list(self._rules.keys())

    def unregister(self, type_name: str) -> bool:
        """Remove a rule class from the registry.

        Returns:
            True if removed, False if not found
        """
        if type_name in self._rules:
            del self._rules[type_name]
            return True
        return False

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._rules

    def __len__(self) -> int:
        return len(self._rules)


_global_registry: RuleRegistry | None = None


def get_global_rule_registry() -> RuleRegistry:
    """Get the global rule registry singleton."""
    global _global_registry
    if _global_registry is None:
        _global_registry = RuleRegistry()
    return _global_registry
