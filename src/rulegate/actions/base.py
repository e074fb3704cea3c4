"""Actions - gated, multi-phase units of business work.

An action owns one ValidationContext and runs a fixed sequence of phases:

    start -> audit -> pre_validate_action -> evaluate_rules
    -> post_validate_action -> pre_execute_action -> perform_action
    -> post_execute_action -> validate_action_result -> finish

Concrete behaviour is usually injected as hook callables keyed by phase.
Every phase is also a method of ``Action``, a no-op except for the built-in
steps, so a subclass may override it instead. Each phase runs its method
first, then its hook. ``perform_action`` runs only while
``allow_execution`` is true; it is the single point where the execution
delegate is called. ``finish`` always runs.
"""

import asyncio
import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable

from rulegate.actions.messages import MessageType, ServiceContext, ServiceMessage
from rulegate.config import EngineSettings, get_global_settings
from rulegate.engine.validation_context import ValidationContext
from rulegate.exceptions import ActionStateError
from rulegate.logging import get_logger
from rulegate.reporting import ReportingSink, report
from rulegate.rules.base import Rule, Severity

logger = get_logger(__name__)


class ActionResult(str, Enum):
    """Final verdict of an action."""

    UNKNOWN = "unknown"
    SUCCESS = "success"
    FAIL = "fail"


class Phase(str, Enum):
    """Lifecycle phases, in execution order."""

    START = "start"
    AUDIT = "audit"
    PRE_VALIDATE_ACTION = "pre_validate_action"
    EVALUATE_RULES = "evaluate_rules"
    POST_VALIDATE_ACTION = "post_validate_action"
    PRE_EXECUTE_ACTION = "pre_execute_action"
    PERFORM_ACTION = "perform_action"
    POST_EXECUTE_ACTION = "post_execute_action"
    VALIDATE_ACTION_RESULT = "validate_action_result"
    FINISH = "finish"


PHASES: tuple[Phase, ...] = tuple(Phase)
_BEFORE_PERFORM = PHASES[:PHASES.index(Phase.PERFORM_ACTION)]
_AFTER_PERFORM = PHASES[PHASES.index(Phase.PERFORM_ACTION) + 1:PHASES.index(Phase.FINISH)]

Hook = Callable[["Action"], None]
RuleFactory = Callable[["Action"], Iterable[Rule]]
Delegate = Callable[[], Any]

_MESSAGE_TYPES = {
    Severity.EXCEPTION: MessageType.ERROR,
    Severity.WARNING: MessageType.WARNING,
    Severity.INFORMATION: MessageType.INFORMATION,
}


@dataclass
class ActionOutcome:
    """What a caller reads once an action has finished."""

    action_name: str
    result: ActionResult
    messages: list[ServiceMessage] = field(default_factory=list)
    value: Any = None
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.result == ActionResult.SUCCESS

    @property
    def user_messages(self) -> list[str]:
        """Texts of messages that may be shown to an end user, in order."""
        return [m.message for m in self.messages if m.display_to_user]

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action_name,
            "result": self.result.value,
            "messages": [m.to_dict() for m in self.messages],
            "error": repr(self.error) if self.error else None,
        }


class Action:
    """A single-use command whose effect runs only if its validation passes.

    Example:
        action = Action(
            "create_course",
            rules=lambda a: [StringLengthRange("title", "Title is too short.", title, 3, 200)],
            delegate=lambda: repository.create(course),
        )
        outcome = action.execute()
    """

    def __init__(
        self,
        name: str,
        delegate: Delegate | None = None,
        rules: RuleFactory | None = None,
        hooks: dict[Phase | str, Hook] | None = None,
        sink: ReportingSink | None = None,
        settings: EngineSettings | None = None,
    ):
        """Initialize the action.

        Args:
            name: Name used as the source of messages and reports
            delegate: Zero-argument callable performing the effect; may
                return an awaitable
            rules: Called during pre_validate_action to produce the rules
                to register
            hooks: Callables run after the method of each phase
            sink: Optional reporting collaborator
            settings: Engine settings; the global settings when omitted
        """
        self.name = name
        self.settings = settings or get_global_settings()
        self.sink = sink
        self.validation_context = ValidationContext(source=name, sink=sink, settings=self.settings)
        self.service_context = ServiceContext()
        self.allow_execution = True
        self.action_result = ActionResult.UNKNOWN
        self.value: Any = None
        self.error: BaseException | None = None
        self.executed_phases: list[Phase] = []

        self._delegate = delegate
        self._rule_factory = rules
        self._hooks: dict[Phase, Hook] = {Phase(k): v for k, v in (hooks or {}).items()}
        self._executed = False

    def execute(self) -> ActionOutcome:
        """Run every phase in order and return the outcome.

        An awaitable returned by the delegate is run to completion with
        ``asyncio.run``; use ``execute_async`` inside a running event loop.

        Raises:
            ActionStateError: If the action was already executed, or the
                delegate returned an awaitable while an event loop is running
        """
        self._begin()
        try:
            self._run_phases(_BEFORE_PERFORM)
            if self._enter_perform():
                self.perform_action()
                self._run_hook(Phase.PERFORM_ACTION)
            self._run_phases(_AFTER_PERFORM)
        except Exception:
            self.action_result = ActionResult.FAIL
            raise
        finally:
            self._run_phase(Phase.FINISH)
        return self.outcome()

    async def execute_async(self) -> ActionOutcome:
        """Run every phase in order, awaiting the delegate if it is async.

        The perform step is ``perform_action_async`` here; a subclass that
        replaces the effect for both entry points overrides both methods.
        """
        self._begin()
        try:
            self._run_phases(_BEFORE_PERFORM)
            if self._enter_perform():
                await self.perform_action_async()
                self._run_hook(Phase.PERFORM_ACTION)
            self._run_phases(_AFTER_PERFORM)
        except Exception:
            self.action_result = ActionResult.FAIL
            raise
        finally:
            self._run_phase(Phase.FINISH)
        return self.outcome()

    def outcome(self) -> ActionOutcome:
        return ActionOutcome(
            action_name=self.name,
            result=self.action_result,
            messages=self.service_context.messages,
            value=self.value,
            error=self.error,
        )

    # Phase steps, overridable by subclasses

    def start(self) -> None:
        pass

    def audit(self) -> None:
        pass

    def pre_validate_action(self) -> None:
        """Register the rules produced by the rule factory."""
        if self._rule_factory is not None:
            self.validation_context.add_rules(*self._rule_factory(self))

    def evaluate_rules(self) -> None:
        self.validation_context.render_rules()

    def post_validate_action(self) -> None:
        """Distill violations into messages and close the execution gate."""
        if not self.validation_context.has_rule_violations():
            return

        for result in self.validation_context.violations():
            if not result.is_displayable:
                logger.info(
                    "hidden_rule_violation",
                    action=self.name,
                    rule=result.name,
                    message=result.message,
                )
                continue
            if not result.message:
                continue
            self.service_context.add_message(ServiceMessage(
                name=result.name,
                message=result.message,
                message_type=_MESSAGE_TYPES[result.severity],
                source=self.name,
            ))

        self.allow_execution = False

    def pre_execute_action(self) -> None:
        pass

    def perform_action(self) -> None:
        """Call the execution delegate; only reached while the gate is open."""
        self._call_delegate()

    async def perform_action_async(self) -> None:
        await self._call_delegate_async()

    def post_execute_action(self) -> None:
        pass

    def validate_action_result(self) -> None:
        if self.validation_context.has_rule_violations() or not self.allow_execution:
            self.action_result = ActionResult.FAIL
        elif self.service_context.has_errors():
            self.action_result = ActionResult.FAIL
        else:
            self.action_result = ActionResult.SUCCESS

    def finish(self) -> None:
        pass

    # Phase driving

    def _begin(self) -> None:
        if self._executed:
            raise ActionStateError(f"Action '{self.name}' has already been executed")
        self._executed = True

    def _run_phases(self, phases: Iterable[Phase]) -> None:
        for phase in phases:
            self._run_phase(phase)

    def _run_phase(self, phase: Phase) -> None:
        self._enter(phase)
        getattr(self, phase.value)()
        self._run_hook(phase)

    def _enter_perform(self) -> bool:
        self._enter(Phase.PERFORM_ACTION)
        if not self.allow_execution:
            logger.info("action_execution_skipped", action=self.name)
        return self.allow_execution

    def _enter(self, phase: Phase) -> None:
        self.executed_phases.append(phase)
        logger.debug("action_phase", action=self.name, phase=phase.value)
        if self.settings.report_phases:
            report(self.sink, self.name, Severity.INFORMATION, f"phase {phase.value}")

    def _run_hook(self, phase: Phase) -> None:
        hook = self._hooks.get(phase)
        if hook is not None:
            hook(self)

    def _call_delegate(self) -> None:
        if self._delegate is None:
            return
        try:
            value = self._delegate()
        except Exception as e:
            self._record_failure(e)
            return

        if inspect.isawaitable(value):
            if _loop_is_running():
                if hasattr(value, "close"):
                    value.close()
                raise ActionStateError(
                    f"Action '{self.name}' has an async delegate and an event loop is running; "
                    "use execute_async()"
                )
            try:
                value = asyncio.run(_await(value))
            except Exception as e:
                self._record_failure(e)
                return

        self.value = value

    async def _call_delegate_async(self) -> None:
        if self._delegate is None:
            return
        try:
            value = self._delegate()
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            self._record_failure(e)
        else:
            self.value = value

    def _record_failure(self, error: Exception) -> None:
        self.error = error
        logger.error("action_delegate_failed", action=self.name, exc_info=error)
        self.service_context.add_message(ServiceMessage(
            name=self.name,
            message=f"{type(error).__name__}: {error}",
            message_type=MessageType.ERROR,
            source=self.name,
            display_to_user=False,
        ))
        report(self.sink, self.name, Severity.EXCEPTION, f"delegate failed: {error!r}")

    def __repr__(self) -> str:
        return f"Action(name={self.name!r}, result={self.action_result.value})"


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _loop_is_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class ActionBuilder:
    """Fluent builder for creating Actions."""

    def __init__(self, name: str):
        self._name = name
        self._delegate: Delegate | None = None
        self._rules: RuleFactory | None = None
        self._hooks: dict[Phase, Hook] = {}
        self._sink: ReportingSink | None = None
        self._settings: EngineSettings | None = None

    def delegate(self, delegate: Delegate) -> "ActionBuilder":
        self._delegate = delegate
        return self

    def rules(self, factory: RuleFactory) -> "ActionBuilder":
        self._rules = factory
        return self

    def on(self, phase: Phase | str, hook: Hook) -> "ActionBuilder":
        self._hooks[Phase(phase)] = hook
        return self

    def sink(self, sink: ReportingSink) -> "ActionBuilder":
        self._sink = sink
        return self

    def settings(self, settings: EngineSettings) -> "ActionBuilder":
        self._settings = settings
        return self

    def build(self) -> Action:
        return Action(
            self._name,
            delegate=self._delegate,
            rules=self._rules,
            hooks=self._hooks,
            sink=self._sink,
            settings=self._settings,
        )
