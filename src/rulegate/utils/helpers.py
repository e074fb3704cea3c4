"""Utility helper functions."""

from typing import Any


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values in override take precedence over base.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value

    return result


def resolve_path(data: Any, path: str, separator: str = ".") -> Any:
    """Look up a dotted path in nested mappings and sequences.

    Integer segments index into lists. Any missing segment yields None,
    so an absent field reaches rules as an absent target.

    Args:
        data: Root mapping or sequence
        path: Dotted path such as ``"course.sessions.0.title"``
        separator: Segment separator

    Returns:
        The value at the path, or None
    """
    if not path:
        return data

    current = data
    for part in path.split(separator):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, (list, tuple)) and part.lstrip("-").isdigit():
            index = int(part)
            current = current[index] if -len(current) <= index < len(current) else None
        else:
            return None
        if current is None:
            return None

    return current
