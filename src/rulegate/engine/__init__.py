"""Engine module - Evaluation layer.

Contains:
- Validation Context: evaluates rules and exposes the aggregate verdict
"""

from rulegate.engine.validation_context import ValidationContext, ValidationContextState

__all__ = [
    "ValidationContext",
    "ValidationContextState",
]
