from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ChatResponse:
    """Normalized outcome of one call to the completion service."""

    content: str
    raw: Any = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None
