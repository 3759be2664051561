from __future__ import annotations

import logging
from dataclasses import dataclass

from openrouter_mcp.errors import BridgeError

__all__ = ["ToolResult", "SERVICE_NAME"]

SERVICE_NAME = "OpenRouter"

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Outcome of one invocation: response text, or an error description."""

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(text=text, is_error=False)

    @classmethod
    def from_error(cls, exc: Exception, service: str = SERVICE_NAME) -> "ToolResult":
        """The one place a failure of any stage is rendered for the caller."""
        if not isinstance(exc, BridgeError):
            logger.error("Unexpected failure in send_message", exc_info=exc)
        return cls(text=f"Error calling {service}: {exc}", is_error=True)
