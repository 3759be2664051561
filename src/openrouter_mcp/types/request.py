"""
Request-side data model for one send_message invocation.

`ToolRequest.from_arguments` is the boundary check: it accepts the raw
argument mapping handed over by the host transport and rejects anything
outside the documented ranges before the pipeline starts.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional, Sequence

from openrouter_mcp.errors import InvalidArgumentsError
from openrouter_mcp.types.chat import ChatMessage

__all__ = ["FileReference", "SamplingParams", "ToolRequest", "CompletionRequest"]


@dataclass(frozen=True, slots=True)
class FileReference:
    """A local file to inline into the user turn.

    ``structured`` is False for references given as a bare path string.
    """

    path: str
    header: Optional[str] = None
    description: Optional[str] = None
    structured: bool = True

    @classmethod
    def parse(cls, raw: Any) -> "FileReference":
        """Build a reference from a bare path or a ``{path, header?, description?}`` mapping."""
        if isinstance(raw, str):
            if not raw:
                raise InvalidArgumentsError("append_files entries must not be empty")
            return cls(path=raw, structured=False)
        if isinstance(raw, Mapping):
            path = raw.get("path")
            if not isinstance(path, str) or not path:
                raise InvalidArgumentsError("append_files entries need a non-empty 'path'")
            header = raw.get("header")
            description = raw.get("description")
            for name, value in (("header", header), ("description", description)):
                if value is not None and not isinstance(value, str):
                    raise InvalidArgumentsError(f"append_files '{name}' must be a string")
            return cls(path=path, header=header, description=description)
        raise InvalidArgumentsError(
            f"append_files entries must be a path or an object, got {type(raw).__name__}"
        )


@dataclass(frozen=True, slots=True)
class SamplingParams:
    """Optional sampling controls. ``None`` means "not supplied", never a default."""

    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None

    def as_dict(self, exclude_none: bool = True) -> dict[str, Any]:
        """
        Convert to dictionary, optionally excluding None values.

        Args:
            exclude_none: If True, exclude fields the caller did not supply

        Returns:
            Dictionary representation of the params
        """
        result = asdict(self)
        if exclude_none:
            return {k: v for k, v in result.items() if v is not None}
        return result


@dataclass(frozen=True, slots=True)
class ToolRequest:
    """Validated input to one invocation."""

    model: str
    message: str
    system_prompt: Optional[str] = None
    sampling: SamplingParams = field(default_factory=SamplingParams)
    append_files: tuple[FileReference, ...] = ()

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any] | None) -> "ToolRequest":
        """Validate raw tool arguments and build a request.

        Raises:
            InvalidArgumentsError: if a field is missing, mistyped or out of range.
        """
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise InvalidArgumentsError(
                f"arguments must be an object, got {type(arguments).__name__}"
            )

        model = _required_text(arguments, "model")
        message = _required_text(arguments, "message")

        system_prompt = arguments.get("system_prompt")
        if system_prompt is not None and not isinstance(system_prompt, str):
            raise InvalidArgumentsError("system_prompt must be a string")

        sampling = SamplingParams(
            temperature=_optional_number(arguments, "temperature", 0.0, 2.0),
            max_tokens=_optional_max_tokens(arguments),
            top_p=_optional_number(arguments, "top_p", 0.0, 1.0),
        )

        raw_files = arguments.get("append_files")
        if raw_files is None:
            files: tuple[FileReference, ...] = ()
        elif isinstance(raw_files, (str, bytes)) or not isinstance(raw_files, Sequence):
            raise InvalidArgumentsError("append_files must be an array")
        else:
            files = tuple(FileReference.parse(item) for item in raw_files)

        return cls(
            model=model,
            message=message,
            system_prompt=system_prompt,
            sampling=sampling,
            append_files=files,
        )


@dataclass(frozen=True, slots=True)
class CompletionRequest:
    """What is sent to the completion service."""

    model: str
    messages: tuple[ChatMessage, ...]
    sampling: SamplingParams = field(default_factory=SamplingParams)

    def as_dict(self) -> dict[str, Any]:
        """Request body with only the sampling parameters the caller supplied."""
        return {
            "model": self.model,
            "messages": [dict(m) for m in self.messages],
            **self.sampling.as_dict(exclude_none=True),
        }


def _required_text(arguments: Mapping[str, Any], name: str) -> str:
    value = arguments.get(name)
    if not isinstance(value, str) or not value:
        raise InvalidArgumentsError(f"{name} must be a non-empty string")
    return value


def _optional_number(
    arguments: Mapping[str, Any], name: str, low: float, high: float
) -> Optional[float]:
    value = arguments.get(name)
    if value is None:
        return None
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentsError(f"{name} must be a number")
    if math.isnan(value) or not low <= value <= high:
        raise InvalidArgumentsError(f"{name} must be between {low:g} and {high:g}")
    return value


def _optional_max_tokens(arguments: Mapping[str, Any]) -> Optional[int]:
    value = arguments.get("max_tokens")
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentsError("max_tokens must be a number")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidArgumentsError("max_tokens must be a whole number")
        value = int(value)
    if value <= 0:
        raise InvalidArgumentsError("max_tokens must be greater than 0")
    return value
