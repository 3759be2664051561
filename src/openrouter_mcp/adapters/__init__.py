"""Pure transformation adapters for the completion service."""

from .openai import NO_RESPONSE_TEXT, OpenRouterRequestAdapter

__all__ = ["NO_RESPONSE_TEXT", "OpenRouterRequestAdapter"]
