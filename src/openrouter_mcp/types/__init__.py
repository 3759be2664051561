from .chat import ChatMessage, Role, system_message, user_message
from .request import CompletionRequest, FileReference, SamplingParams, ToolRequest
from .result import SERVICE_NAME, ToolResult

__all__ = [
    "ChatMessage",
    "Role",
    "system_message",
    "user_message",
    "CompletionRequest",
    "FileReference",
    "SamplingParams",
    "ToolRequest",
    "SERVICE_NAME",
    "ToolResult",
]
