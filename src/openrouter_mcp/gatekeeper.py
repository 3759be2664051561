from __future__ import annotations

import logging
from typing import Optional, Sequence

from openrouter_mcp.config import BridgeConfig, GatekeeperMode
from openrouter_mcp.errors import DisallowedModelError

__all__ = ["ModelGatekeeper"]


class ModelGatekeeper:
    """
    Decides whether a model identifier may be dispatched.

    The mode is fixed at construction: with a non-empty allow-list the
    gatekeeper is restrictive and compares identifiers exactly (no
    case-folding, no patterns); without one every model passes.
    """

    def __init__(
        self,
        allowed_models: Optional[Sequence[str]] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.allowed_models: tuple[str, ...] = tuple(allowed_models or ())
        self._allowed_set = frozenset(self.allowed_models)
        self.mode = (
            GatekeeperMode.RESTRICTIVE if self.allowed_models else GatekeeperMode.PERMISSIVE
        )
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: BridgeConfig, **kwargs) -> "ModelGatekeeper":
        return cls(config.allowed_models, **kwargs)

    def is_allowed(self, model: str) -> bool:
        if self.mode is GatekeeperMode.PERMISSIVE:
            return True
        return model in self._allowed_set

    def check(self, model: str) -> None:
        """Raise `DisallowedModelError` unless ``model`` may be used."""
        if not self.is_allowed(model):
            self.logger.warning("Rejected model %r", model)
            raise DisallowedModelError(model, self.allowed_models)
