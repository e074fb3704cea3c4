"""Standard leaf rules.

Each rule performs one check and treats a None target as a reportable
condition, never as an error.
"""

from typing import Any

from rulegate.rules.base import LeafRule


class IsNotNull(LeafRule):
    """Valid when the target is present."""

    requires_target = False

    def check(self, target: Any) -> bool:
        return target is not None


class IsNull(LeafRule):
    """Valid when the target is absent."""

    requires_target = False

    def check(self, target: Any) -> bool:
        return target is None


class IsTrue(LeafRule):
    def check(self, target: Any) -> bool:
        return target is True


class IsFalse(LeafRule):
    def check(self, target: Any) -> bool:
        return target is False


class Min(LeafRule):
    """Valid when the target is greater than or equal to ``minimum``."""

    def __init__(self, name: str, message: str, target: Any = None, minimum: Any = 0, **options: Any):
        super().__init__(name, message, target, **options)
        self.minimum = minimum

    def check(self, target: Any) -> bool:
        return target is not None and target >= self.minimum


class Max(LeafRule):
    """Valid when the target is less than or equal to ``maximum``."""

    def __init__(self, name: str, message: str, target: Any = None, maximum: Any = 0, **options: Any):
        super().__init__(name, message, target, **options)
        self.maximum = maximum

    def check(self, target: Any) -> bool:
        return target is not None and target <= self.maximum


class AreEqual(LeafRule):
    """Valid when the target equals ``comparison``."""

    requires_target = False

    def __init__(self, name: str, message: str, target: Any = None, comparison: Any = None, **options: Any):
        super().__init__(name, message, target, **options)
        self.comparison = comparison

    def check(self, target: Any) -> bool:
        return target == self.comparison


class AreNotEqual(LeafRule):
    """Valid when the target differs from ``comparison``."""

    requires_target = False

    def __init__(self, name: str, message: str, target: Any = None, comparison: Any = None, **options: Any):
        super().__init__(name, message, target, **options)
        self.comparison = comparison

    def check(self, target: Any) -> bool:
        return target != self.comparison


class MinLength(LeafRule):
    def __init__(self, name: str, message: str, target: Any = None, min_length: int = 0, **options: Any):
        super().__init__(name, message, target, **options)
        self.min_length = min_length

    def check(self, target: Any) -> bool:
        return target is not None and len(target) >= self.min_length


class MaxLength(LeafRule):
    def __init__(self, name: str, message: str, target: Any = None, max_length: int = 0, **options: Any):
        super().__init__(name, message, target, **options)
        self.max_length = max_length

    def check(self, target: Any) -> bool:
        return target is not None and len(target) <= self.max_length


class StringLengthRange(LeafRule):
    """Valid when ``min_length <= len(target) <= max_length``.

    Both bounds are inclusive. A None target is invalid.
    """

    def __init__(
        self,
        name: str,
        message: str,
        target: Any = None,
        min_length: int = 0,
        max_length: int = 0,
        **options: Any,
    ):
        if min_length > max_length:
            raise ValueError(
                f"Rule '{name}': min_length {min_length} exceeds max_length {max_length}"
            )
        super().__init__(name, message, target, **options)
        self.min_length = min_length
        self.max_length = max_length

    def check(self, target: Any) -> bool:
        if target is None:
            return False
        return self.min_length <= len(target) <= self.max_length
