"""
Deadline-bounded dispatch of one completion request.

The remote call runs as its own task and races a timer. When the timer
wins, the call is abandoned rather than cancelled: it keeps running in the
background and its eventual outcome is only logged.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from openrouter_mcp.client import CompletionBackend
from openrouter_mcp.config import DEFAULT_DISPATCH_TIMEOUT
from openrouter_mcp.errors import DispatchTimeoutError, RemoteCallError
from openrouter_mcp.response import ChatResponse
from openrouter_mcp.types import CompletionRequest

__all__ = ["DispatchController"]


class DispatchController:
    def __init__(
        self,
        backend: CompletionBackend,
        timeout: Optional[float] = DEFAULT_DISPATCH_TIMEOUT,
        *,
        cancel_on_timeout: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Args:
            backend: Performs the actual remote call.
            timeout: Deadline in seconds; ``None`` waits indefinitely.
            cancel_on_timeout: Cancel the remote call when the deadline
                passes instead of leaving it to finish on its own.
            logger: Optional logger instance.
        """
        self.backend = backend
        self.timeout = timeout
        self.cancel_on_timeout = cancel_on_timeout
        self.logger = logger or logging.getLogger(__name__)
        # strong references so abandoned calls are not garbage collected mid-flight
        self._abandoned: set[asyncio.Task] = set()

    @property
    def abandoned_count(self) -> int:
        return len(self._abandoned)

    async def dispatch(self, request: CompletionRequest) -> str:
        """Run the remote call under the deadline and return the response text.

        Raises:
            DispatchTimeoutError: the deadline passed first.
            RemoteCallError: the completion service reported a failure.
        """
        task = asyncio.create_task(self.backend.chat(request))
        done, _ = await asyncio.wait({task}, timeout=self.timeout)

        if task not in done:
            self._abandon(task, request.model)
            raise DispatchTimeoutError(self.timeout)

        try:
            response: ChatResponse = task.result()
        except Exception as exc:
            raise RemoteCallError(f"{type(exc).__name__}: {exc}", exc) from exc

        if response.is_error:
            original = response.raw if isinstance(response.raw, Exception) else None
            raise RemoteCallError(response.error, original)
        return response.content

    def _abandon(self, task: asyncio.Task, model: str) -> None:
        self.logger.warning(
            "Completion for model %s exceeded %gs deadline; %s",
            model,
            self.timeout,
            "cancelling" if self.cancel_on_timeout else "abandoning",
        )
        if self.cancel_on_timeout:
            task.cancel()
        self._abandoned.add(task)
        task.add_done_callback(self._settle_abandoned)

    def _settle_abandoned(self, task: asyncio.Task) -> None:
        self._abandoned.discard(task)
        if task.cancelled():
            self.logger.debug("Abandoned completion was cancelled")
        elif task.exception() is not None:
            self.logger.debug("Abandoned completion failed: %s", task.exception())
        else:
            self.logger.debug("Abandoned completion settled after the deadline")
