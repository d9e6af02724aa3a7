"""Tool Dispatcher.

Routes invocations to registered tools. Arguments are validated against the
tool's schema before anything runs, confirmation-gated tools ask the injected
gate first, and every failure is normalised to a :class:`ToolError` carried in
a :class:`DispatchResult`. Nothing raised by a tool escapes ``dispatch``.

Async tools run as independent ``asyncio`` tasks. ``dispatch`` answers with a
``pending`` result and the final result is delivered exactly once to the
``on_async_result`` continuation, tagged with the invocation's correlation id.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any, Awaitable, Callable, Mapping, Protocol, Union

from ..introspection.spans import UnsupportedLanguageError
from .errors import (
    ConfirmationDeclinedError,
    ConfirmationRequiredError,
    DuplicateInvocationError,
    ToolError,
    ToolNotFoundError,
    ToolRuntimeError,
    UnsupportedLanguageToolError,
)
from .registry import ToolRegistration, ToolRegistry
from .results import DispatchResult, ResultStatus, render_value, truncate_text
from .types import ToolInvocation, ToolSpec
from .validation import validate_arguments

__all__ = [
    "AsyncResultCallback",
    "ConfirmationGate",
    "DispatchListener",
    "ToolDispatcher",
]

LOGGER = logging.getLogger(__name__)

AsyncResultCallback = Callable[[DispatchResult], Union[None, Awaitable[None]]]


# -----------------------------------------------------------------------------
# Collaborator protocols
# -----------------------------------------------------------------------------


class ConfirmationGate(Protocol):
    """Operator approval for tools declared with ``confirm=True``."""

    def __call__(self, spec: ToolSpec, invocation: ToolInvocation) -> bool | Awaitable[bool]:
        ...


class DispatchListener(Protocol):
    """Callback protocol for dispatch events."""

    def on_tool_start(self, tool_name: str, arguments: Mapping[str, Any]) -> None:
        """Called when a tool starts execution."""
        ...

    def on_tool_complete(self, result: DispatchResult) -> None:
        """Called when a tool completes."""
        ...

    def on_tool_error(self, tool_name: str, error: ToolError) -> None:
        """Called when a tool fails."""
        ...


# -----------------------------------------------------------------------------
# Tool Dispatcher
# -----------------------------------------------------------------------------


class ToolDispatcher:
    """Dispatches tool invocations to registered handlers.

    Example:
        dispatcher = ToolDispatcher(registry, on_async_result=deliver)
        result = await dispatcher.dispatch(ToolInvocation("symbol_exists", {"symbol": "car"}))
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        confirmation_gate: ConfirmationGate | None = None,
        on_async_result: AsyncResultCallback | None = None,
        listener: DispatchListener | None = None,
        max_result_chars: int = 0,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Tools available for dispatch.
            confirmation_gate: Approves confirmation-gated tools. Without a
                gate those tools are never run.
            on_async_result: Continuation receiving async results. Without one,
                async tools are awaited inline and answered directly.
            listener: Dispatch event listener.
            max_result_chars: Truncate text results longer than this (0 = off).
        """
        self._registry = registry
        self._confirmation_gate = confirmation_gate
        self._on_async_result = on_async_result
        self._listener = listener
        self._max_result_chars = max(0, int(max_result_chars))
        self._pending: dict[str, asyncio.Task[DispatchResult]] = {}

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def set_listener(self, listener: DispatchListener | None) -> None:
        self._listener = listener

    def set_confirmation_gate(self, gate: ConfirmationGate | None) -> None:
        self._confirmation_gate = gate

    def set_async_result_callback(self, callback: AsyncResultCallback | None) -> None:
        self._on_async_result = callback

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def call(
        self,
        tool_name: str,
        arguments: Mapping[str, Any] | None = None,
    ) -> DispatchResult:
        """Shorthand for dispatching a fresh invocation."""
        return await self.dispatch(ToolInvocation(tool_name, dict(arguments or {})))

    async def dispatch(self, invocation: ToolInvocation) -> DispatchResult:
        """Dispatch one invocation.

        Returns:
            The final result for synchronous tools, or a ``pending`` result
            when the tool was scheduled asynchronously.
        """
        start = time.perf_counter()
        tool_name = invocation.name
        self._notify_start(tool_name, invocation.arguments)

        registration = self._registry.get_registration(tool_name)
        if registration is None or not registration.enabled:
            error = ToolNotFoundError(
                message=f"Tool '{tool_name}' is not registered or disabled.",
                tool_name=tool_name,
            )
            return self._finish_error(invocation, error, start)

        spec = registration.spec
        problem = validate_arguments(spec, invocation.arguments)
        if problem is not None:
            LOGGER.debug("Rejected %s arguments: %s", tool_name, problem.problems)
            return self._finish_error(invocation, problem, start)

        if spec.confirm:
            refusal = await self._confirm(spec, invocation)
            if refusal is not None:
                return self._finish_error(invocation, refusal, start)

        if spec.is_async and self._on_async_result is not None:
            if invocation.correlation_id in self._pending:
                error = DuplicateInvocationError(
                    message=(
                        f"Invocation '{invocation.correlation_id}' of '{tool_name}' "
                        "is still running."
                    ),
                )
                return self._finish_error(invocation, error, start)
            self._schedule(registration, invocation, start)
            return DispatchResult(
                status=ResultStatus.PENDING,
                tool_name=tool_name,
                correlation_id=invocation.correlation_id,
                execution_time_ms=_elapsed_ms(start),
            )

        return await self._run(registration, invocation, start)

    # ------------------------------------------------------------------
    # Async bookkeeping
    # ------------------------------------------------------------------

    def pending_ids(self) -> list[str]:
        return list(self._pending)

    async def wait_pending(self) -> None:
        """Wait until every scheduled async invocation has been delivered."""
        while self._pending:
            await asyncio.gather(*self._pending.values(), return_exceptions=True)

    def _schedule(
        self,
        registration: ToolRegistration,
        invocation: ToolInvocation,
        start: float,
    ) -> None:
        correlation_id = invocation.correlation_id
        task = asyncio.create_task(
            self._run_and_deliver(registration, invocation, start),
            name=f"hostlens-tool-{registration.name}-{correlation_id}",
        )
        self._pending[correlation_id] = task
        LOGGER.debug("Scheduled async tool %s (%s)", registration.name, correlation_id)

    async def _run_and_deliver(
        self,
        registration: ToolRegistration,
        invocation: ToolInvocation,
        start: float,
    ) -> DispatchResult:
        try:
            result = await self._run(registration, invocation, start)
        finally:
            self._pending.pop(invocation.correlation_id, None)
        callback = self._on_async_result
        if callback is None:
            LOGGER.warning(
                "Async result for %s (%s) has no continuation",
                invocation.name,
                invocation.correlation_id,
            )
            return result
        try:
            outcome = callback(result)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            LOGGER.exception(
                "Async result continuation failed for %s (%s)",
                invocation.name,
                invocation.correlation_id,
            )
        return result

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def _confirm(self, spec: ToolSpec, invocation: ToolInvocation) -> ToolError | None:
        gate = self._confirmation_gate
        if gate is None:
            return ConfirmationRequiredError(
                message=f"Tool '{spec.name}' requires operator confirmation and none is available.",
            )
        try:
            approved = gate(spec, invocation)
            if inspect.isawaitable(approved):
                approved = await approved
        except Exception:
            LOGGER.exception("Confirmation gate failed for %s", spec.name)
            approved = False
        if approved:
            return None
        return ConfirmationDeclinedError(
            message=f"The operator declined to run '{spec.name}'.",
        )

    async def _run(
        self,
        registration: ToolRegistration,
        invocation: ToolInvocation,
        start: float,
    ) -> DispatchResult:
        try:
            value = await self._execute(registration, invocation.arguments)
        except Exception as exc:
            return self._finish_error(invocation, _normalize_error(registration.name, exc), start)
        return self._finish_success(invocation, value, start)

    async def _execute(self, registration: ToolRegistration, arguments: Mapping[str, Any]) -> Any:
        handler = registration.handler
        kwargs = dict(arguments)
        if registration.spec.is_async and not inspect.iscoroutinefunction(handler):
            return await asyncio.to_thread(handler, **kwargs)
        result = handler(**kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    # ------------------------------------------------------------------
    # Result Building
    # ------------------------------------------------------------------

    def _finish_success(
        self,
        invocation: ToolInvocation,
        value: Any,
        start: float,
    ) -> DispatchResult:
        content = render_value(value)
        truncated = False
        if isinstance(content, str):
            content, truncated = truncate_text(content, self._max_result_chars)
        result = DispatchResult(
            status=ResultStatus.OK,
            tool_name=invocation.name,
            correlation_id=invocation.correlation_id,
            content=content,
            execution_time_ms=_elapsed_ms(start),
            truncated=truncated,
        )
        self._notify_complete(result)
        return result

    def _finish_error(
        self,
        invocation: ToolInvocation,
        error: ToolError,
        start: float,
    ) -> DispatchResult:
        result = DispatchResult(
            status=ResultStatus.ERROR,
            tool_name=invocation.name,
            correlation_id=invocation.correlation_id,
            error=error,
            execution_time_ms=_elapsed_ms(start),
        )
        self._notify_error(invocation.name, error)
        self._notify_complete(result)
        return result

    def _notify_start(self, tool_name: str, arguments: Mapping[str, Any]) -> None:
        if self._listener:
            try:
                self._listener.on_tool_start(tool_name, arguments)
            except Exception:
                LOGGER.debug("Listener on_tool_start failed", exc_info=True)

    def _notify_complete(self, result: DispatchResult) -> None:
        if self._listener:
            try:
                self._listener.on_tool_complete(result)
            except Exception:
                LOGGER.debug("Listener on_tool_complete failed", exc_info=True)

    def _notify_error(self, tool_name: str, error: ToolError) -> None:
        if self._listener:
            try:
                self._listener.on_tool_error(tool_name, error)
            except Exception:
                LOGGER.debug("Listener on_tool_error failed", exc_info=True)


def _normalize_error(tool_name: str, exc: Exception) -> ToolError:
    if isinstance(exc, ToolError):
        return exc
    if isinstance(exc, UnsupportedLanguageError):
        return UnsupportedLanguageToolError(message=str(exc), unit=exc.unit)
    LOGGER.warning("Tool %s failed: %s", tool_name, exc, exc_info=LOGGER.isEnabledFor(logging.DEBUG))
    return ToolRuntimeError.from_exception(exc)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000
