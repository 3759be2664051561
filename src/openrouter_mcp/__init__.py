"""
openrouter-mcp - send a message, optionally with local files as context,
to a model on OpenRouter.
"""

import logging

__version__ = "1.0.0"

from .client import CompletionBackend, OpenRouterLLM
from .config import BridgeConfig, ConfigError, GatekeeperMode, load_config
from .context_files import FileBlock, FileContextLoader
from .composer import compose_messages, resolve_system_prompt
from .dispatch import DispatchController
from .gatekeeper import ModelGatekeeper
from .response import ChatResponse
from .tool import InvocationState, SendMessageTool
from .types import (
    ChatMessage,
    CompletionRequest,
    FileReference,
    SamplingParams,
    ToolRequest,
    ToolResult,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BridgeConfig",
    "ChatMessage",
    "ChatResponse",
    "CompletionBackend",
    "CompletionRequest",
    "ConfigError",
    "DispatchController",
    "FileBlock",
    "FileContextLoader",
    "FileReference",
    "GatekeeperMode",
    "InvocationState",
    "ModelGatekeeper",
    "OpenRouterLLM",
    "SamplingParams",
    "SendMessageTool",
    "ToolRequest",
    "ToolResult",
    "compose_messages",
    "load_config",
    "resolve_system_prompt",
]
