"""Actions module - Gated command pipeline."""

from rulegate.actions.base import (
    PHASES,
    Action,
    ActionBuilder,
    ActionOutcome,
    ActionResult,
    Phase,
)
from rulegate.actions.messages import MessageType, ServiceContext, ServiceMessage

__all__ = [
    "PHASES",
    "Action",
    "ActionBuilder",
    "ActionOutcome",
    "ActionResult",
    "Phase",
    "MessageType",
    "ServiceContext",
    "ServiceMessage",
]
