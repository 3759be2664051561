"""
The send_message tool: gatekeeping, file context, composition and dispatch
for one invocation.

Every stage raises a `BridgeError` on failure; `SendMessageTool.run` is the
single place those errors become an error `ToolResult`.
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import Any, Mapping, Optional

from openrouter_mcp.client import CompletionBackend, OpenRouterLLM
from openrouter_mcp.composer import compose_messages, resolve_system_prompt
from openrouter_mcp.config import BridgeConfig, GatekeeperMode
from openrouter_mcp.context_files import FileContextLoader
from openrouter_mcp.dispatch import DispatchController
from openrouter_mcp.errors import BridgeError
from openrouter_mcp.gatekeeper import ModelGatekeeper
from openrouter_mcp.types import CompletionRequest, ToolRequest, ToolResult

__all__ = ["InvocationState", "SendMessageTool", "TOOL_NAME", "TOOL_DESCRIPTION"]

TOOL_NAME = "send_message"
TOOL_DESCRIPTION = "Send a message to an AI model via OpenRouter and receive a response"


class InvocationState(StrEnum):
    VALIDATING = "validating"
    LOADING_CONTEXT = "loading_context"
    COMPOSING = "composing"
    DISPATCHING = "dispatching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SendMessageTool:
    def __init__(
        self,
        gatekeeper: ModelGatekeeper,
        loader: FileContextLoader,
        dispatcher: DispatchController,
        *,
        default_system_prompt: Optional[str] = None,
        model_examples: str = "",
        logger: Optional[logging.Logger] = None,
        name: str = TOOL_NAME,
    ) -> None:
        self.gatekeeper = gatekeeper
        self.loader = loader
        self.dispatcher = dispatcher
        self.default_system_prompt = default_system_prompt
        self.model_examples = model_examples
        self.logger = logger or logging.getLogger(__name__)
        self.name = name

    @classmethod
    def from_config(
        cls,
        config: BridgeConfig,
        backend: Optional[CompletionBackend] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> "SendMessageTool":
        """Wire the pipeline from process configuration.

        ``backend`` defaults to an `OpenRouterLLM` built from ``config``.
        """
        if backend is None:
            backend = OpenRouterLLM.from_config(config)
        return cls(
            gatekeeper=ModelGatekeeper.from_config(config),
            loader=FileContextLoader(config.max_files, config.max_file_size),
            dispatcher=DispatchController(backend, config.dispatch_timeout),
            default_system_prompt=config.default_system_prompt,
            model_examples=config.model_examples,
            logger=logger,
        )

    async def __call__(self, arguments: Mapping[str, Any]) -> ToolResult:
        """Validate raw arguments, then run. Raises `InvalidArgumentsError`."""
        return await self.run(ToolRequest.from_arguments(arguments))

    async def run(self, request: ToolRequest) -> ToolResult:
        """Run one invocation. Never raises; failures come back as error results."""
        state = InvocationState.VALIDATING
        try:
            self.gatekeeper.check(request.model)

            state = InvocationState.LOADING_CONTEXT
            blocks = []
            if request.append_files:
                blocks = await asyncio.to_thread(self.loader.load, request.append_files)

            state = InvocationState.COMPOSING
            system_prompt = resolve_system_prompt(
                request.system_prompt, self.default_system_prompt
            )
            messages = compose_messages(request.message, blocks, system_prompt)
            completion = CompletionRequest(
                model=request.model,
                messages=tuple(messages),
                sampling=request.sampling,
            )

            state = InvocationState.DISPATCHING
            text = await self.dispatcher.dispatch(completion)
        except BridgeError as exc:
            self._log(f"{state.value} -> failed: {type(exc).__name__}: {exc}", logging.WARNING)
            return ToolResult.from_error(exc)
        except Exception as exc:
            self._log(f"{state.value} -> failed unexpectedly", logging.ERROR)
            return ToolResult.from_error(exc)

        self._log(f"Completed request for model {request.model}", logging.DEBUG)
        return ToolResult.success(text)

    # --- schema --------------------------------------------------------------
    def model_description(self) -> str:
        text = "The model to use."
        if self.model_examples:
            text += f" Examples: {self.model_examples}"
        if self.gatekeeper.mode is GatekeeperMode.RESTRICTIVE:
            text += f" Allowed models: {', '.join(self.gatekeeper.allowed_models)}"
        return text

    def input_schema(self) -> dict[str, Any]:
        """JSON Schema for the tool arguments."""
        file_ref = {
            "anyOf": [
                {"type": "string", "minLength": 1},
                {
                    "type": "object",
                    "properties": {
                        "path": {"type": "string", "minLength": 1},
                        "header": {"type": "string"},
                        "description": {"type": "string"},
                    },
                    "required": ["path"],
                },
            ]
        }
        return {
            "type": "object",
            "properties": {
                "model": {
                    "type": "string",
                    "minLength": 1,
                    "description": self.model_description(),
                },
                "message": {
                    "type": "string",
                    "minLength": 1,
                    "description": "The message to send to the AI model",
                },
                "system_prompt": {
                    "type": "string",
                    "description": "Optional system prompt to set the AI's behavior",
                },
                "temperature": {
                    "type": "number",
                    "minimum": 0,
                    "maximum": 2,
                    "description": "Sampling temperature (0-2). Lower values are more "
                    "focused, higher values are more creative.",
                },
                "max_tokens": {
                    "type": "integer",
                    "exclusiveMinimum": 0,
                    "description": "Maximum number of tokens to generate in the response",
                },
                "top_p": {
                    "type": "number",
                    "minimum": 0,
                    "maximum": 1,
                    "description": "Nucleus sampling parameter (0-1). Alternative to temperature.",
                },
                "append_files": {
                    "type": "array",
                    "items": file_ref,
                    "description": "Local text files appended to the message as context. "
                    f"At most {self.loader.max_files} files of "
                    f"{self.loader.max_file_size // 1024}KB each.",
                },
            },
            "required": ["model", "message"],
        }

    def _log(self, message: str, level: int = logging.INFO) -> None:
        self.logger.log(level, f"[{self.name}] {message}")
