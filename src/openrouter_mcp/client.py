"""
Async client for the OpenRouter completion service.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Self

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from openrouter_mcp.adapters import OpenRouterRequestAdapter
from openrouter_mcp.config import DEFAULT_BASE_URL, BridgeConfig
from openrouter_mcp.errors import classify_error
from openrouter_mcp.response import ChatResponse
from openrouter_mcp.types import CompletionRequest

__all__ = ["CompletionBackend", "OpenRouterLLM"]


class CompletionBackend(Protocol):
    """Anything that can turn a `CompletionRequest` into a `ChatResponse`.

    Implementations report transport failures through ``ChatResponse.error``
    instead of raising.
    """

    async def chat(self, request: CompletionRequest) -> ChatResponse:
        ...


class OpenRouterLLM:
    """
    OpenRouter completion client (async-only).

    Use ``OpenRouterLLM.from_client`` when you already have an ``AsyncOpenAI``
    instance.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        max_retries: int = 0,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.name = name or self.__class__.__name__
        # timeout is owned by the dispatch deadline, not the HTTP client
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=max_retries,
            timeout=None,
        )
        self._adapter = OpenRouterRequestAdapter()

    @classmethod
    def from_config(cls, config: BridgeConfig, **kwargs: Any) -> Self:
        return cls(api_key=config.api_key, base_url=config.base_url, **kwargs)

    # Alternate constructor
    @classmethod
    def from_client(
        cls,
        client: AsyncOpenAI,
        *,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> Self:
        """
        Build an ``OpenRouterLLM`` around an already-configured ``AsyncOpenAI`` client.
        """
        if not isinstance(client, AsyncOpenAI):
            raise TypeError(
                f"OpenRouterLLM.from_client expects AsyncOpenAI; got {type(client).__name__}"
            )

        self = cls.__new__(cls)  # bypass __init__
        self.logger = logger or logging.getLogger(__name__)
        self.name = name or cls.__name__
        self._client = client
        self._adapter = OpenRouterRequestAdapter()
        return self

    async def chat(self, request: CompletionRequest) -> ChatResponse:
        """
        Send one completion request and return a single response.

        Exceptions raised by the SDK are classified and returned as an
        error ``ChatResponse``.
        """
        args = self._adapter.to_provider(request)
        optional = sorted(k for k in args if k not in ("model", "messages"))
        self._log(
            f"Sending request to model {request.model} "
            f"({len(args['messages'])} messages, params: {', '.join(optional) or 'none'})"
        )
        try:
            raw: ChatCompletion = await self._client.chat.completions.create(**args)
        except Exception as exc:
            return self._wrap_error(exc)
        return self._adapter.from_provider(raw)

    def _wrap_error(self, exc: Exception) -> ChatResponse:
        """Wrap exception into an error response."""
        msg = classify_error(exc, self.logger)
        return ChatResponse(content="", error=msg, raw=exc)

    def _log(self, message: str, level: int = logging.INFO) -> None:
        self.logger.log(level, f"[{self.name}] {message}")

    # --- lifecycle ---------------------------------------------------------
    async def aclose(self) -> None:
        """
        Close the underlying HTTP client. Safe to call multiple times.
        """
        close = getattr(self._client, "close", None)
        if close:
            await close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
