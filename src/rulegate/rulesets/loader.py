"""Rule Set Loader for loading rule sets from YAML files."""

from pathlib import Path
from typing import Any

import jsonschema
import yaml

from rulegate.exceptions import RuleSetError
from rulegate.rules.base import RenderType, Severity
from rulegate.rulesets.base import RuleSet, RuleSpec

RULE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["type", "name"],
    "properties": {
        "type": {"type": "string", "minLength": 1},
        "name": {"type": "string", "minLength": 1},
        "message": {"type": "string"},
        "field": {"type": "string"},
        "priority": {"type": "integer"},
        "severity": {"enum": [s.value for s in Severity]},
        "displayable": {"type": "boolean"},
        "render_type": {"enum": [r.value for r in RenderType]},
        "params": {"type": "object"},
        "rules": {"type": "array", "items": {"$ref": "#/$defs/rule"}},
    },
    "additionalProperties": False,
}

RULESET_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["name", "rules"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "description": {"type": "string"},
        "version": {"type": "string"},
        "rules": {"type": "array", "items": {"$ref": "#/$defs/rule"}},
        "tags": {"type": "array", "items": {"type": "string"}},
        "metadata": {"type": "object"},
    },
    "$defs": {"rule": RULE_SCHEMA},
}


class RuleSetLoader:
    """Loads rule sets from YAML files."""

    def load_file(self, path: Path | str) -> RuleSet:
        """Load a rule set from a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            Loaded RuleSet instance
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Rule set file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return self._parse_ruleset(data)

    def load_from_string(self, content: str) -> RuleSet:
        """Load a rule set from a YAML string.

        Args:
            content: YAML content as string

        Returns:
            Loaded RuleSet instance
        """
        data = yaml.safe_load(content)
        return self._parse_ruleset(data)

    def check(self, data: Any) -> list[str]:
        """Return structural problems of a rule-set document, if any."""
        validator = jsonschema.Draft202012Validator(RULESET_SCHEMA)
        problems = []
        for error in sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path)):
            location = ".".join(str(p) for p in error.absolute_path) or "<root>"
            problems.append(f"{location}: {error.message}")
        return problems

    def _parse_ruleset(self, data: Any) -> RuleSet:
        """Parse rule set data from YAML structure."""
        try:
            jsonschema.validate(data, RULESET_SCHEMA)
        except jsonschema.ValidationError as e:
            path = ".".join(str(p) for p in e.absolute_path) or "<root>"
            raise RuleSetError(f"Invalid rule set at {path}: {e.message}") from e

        return RuleSet(
            name=data["name"],
            description=data.get("description", ""),
            version=str(data.get("version", "1.0.0")),
            rules=[self._parse_rule(r) for r in data["rules"]],
            tags=data.get("tags", []),
            metadata=data.get("metadata", {}),
        )

    def _parse_rule(self, data: dict[str, Any]) -> RuleSpec:
        return RuleSpec(
            type=data["type"],
            name=data["name"],
            message=data.get("message", ""),
            field=data.get("field", ""),
            priority=data.get("priority", 0),
            severity=Severity(data.get("severity", Severity.EXCEPTION.value)),
            displayable=data.get("displayable", True),
            render_type=RenderType(data["render_type"]) if "render_type" in data else None,
            params=data.get("params", {}),
            rules=[self._parse_rule(r) for r in data.get("rules", [])],
        )

    def save_file(self, ruleset: RuleSet, path: Path | str) -> None:
        """Save a rule set to a YAML file.

        Args:
            ruleset: The rule set to save
            path: Path for the output file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self._ruleset_to_dict(ruleset)

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def _ruleset_to_dict(self, ruleset: RuleSet) -> dict[str, Any]:
        """Convert a RuleSet to a dictionary for YAML serialization."""
        return {
            "name": ruleset.name,
            "description": ruleset.description,
            "version": ruleset.version,
            "rules": [self._rule_to_dict(r) for r in ruleset.rules],
            "tags": ruleset.tags,
            "metadata": ruleset.metadata,
        }

    def _rule_to_dict(self, spec: RuleSpec) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": spec.type,
            "name": spec.name,
            "message": spec.message,
            "field": spec.field,
            "priority": spec.priority,
            "severity": spec.severity.value,
            "displayable": spec.displayable,
        }
        if spec.render_type is not None:
            data["render_type"] = spec.render_type.value
        if spec.params:
            data["params"] = spec.params
        if spec.rules:
            data["rules"] = [self._rule_to_dict(r) for r in spec.rules]
        return data


def load_ruleset(path: Path | str) -> RuleSet:
    """Convenience function to load a rule set from a file.

    Args:
        path: Path to the YAML file

    Returns:
        Loaded RuleSet instance
    """
    loader = RuleSetLoader()
    return loader.load_file(path)
