"""Test helpers shared across modules."""

import asyncio

from openrouter_mcp.response import ChatResponse


class FakeBackend:
    """In-memory stand-in for the completion service."""

    def __init__(self, content="model output", *, error=None, hang=False, exc=None):
        self.content = content
        self.error = error
        self.hang = hang
        self.exc = exc
        self.requests = []
        self.release = asyncio.Event()
        self.cancelled = False
        self.finished = False

    async def chat(self, request):
        self.requests.append(request)
        try:
            if self.hang:
                await self.release.wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        self.finished = True
        if self.exc is not None:
            raise self.exc
        if self.error is not None:
            return ChatResponse(content="", error=self.error)
        return ChatResponse(content=self.content)

    @property
    def called(self):
        return bool(self.requests)
