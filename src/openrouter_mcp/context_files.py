"""
Loading local files as extra context for the user turn.

Loading is fail-fast: the first reference that cannot be used aborts the
whole batch with a `FileContextError`, and nothing after it is touched.
"""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from openrouter_mcp.config import DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_FILES
from openrouter_mcp.errors import (
    BinaryFileError,
    FileReadError,
    FileTooLargeError,
    TooManyFilesError,
)
from openrouter_mcp.types import FileReference

__all__ = ["FileBlock", "FileContextLoader", "BLOCK_OPEN", "BLOCK_CLOSE"]

BLOCK_OPEN = "--- FILE ---"
BLOCK_CLOSE = "--- END FILE ---"


@dataclass(frozen=True, slots=True)
class FileBlock:
    """One successfully loaded file, ready to be inlined."""

    path: str
    text: str
    header: Optional[str] = None
    description: Optional[str] = None

    def render(self) -> str:
        lines = [BLOCK_OPEN]
        if self.header:
            lines.append(f"header: {self.header}")
        if self.description:
            lines.append(f"description: {self.description}")
        lines.append(f"path: {self.path}")
        lines.append(BLOCK_CLOSE)
        lines.append(self.text)
        return "\n".join(lines)


class FileContextLoader:
    """Reads a bounded set of text files."""

    def __init__(
        self,
        max_files: int = DEFAULT_MAX_FILES,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.max_files = max_files
        self.max_file_size = max_file_size
        self.logger = logger or logging.getLogger(__name__)

    def load(self, references: Sequence[FileReference]) -> list[FileBlock]:
        """Load every reference in order.

        Raises:
            TooManyFilesError: before any file is touched, when there are
                more references than ``max_files``.
            FileTooLargeError, BinaryFileError, FileReadError: for the first
                reference that fails.
        """
        if len(references) > self.max_files:
            raise TooManyFilesError(len(references), self.max_files)
        return [self.load_one(ref) for ref in references]

    def load_one(self, reference: FileReference) -> FileBlock:
        path = reference.path
        try:
            text = self._read_text(path)
        except (OSError, ValueError) as exc:
            raise FileReadError(path, exc) from exc

        if reference.structured:
            return FileBlock(
                path=path,
                text=text,
                header=reference.header,
                description=reference.description,
            )
        return FileBlock(path=path, text=text)

    def _read_text(self, path: str) -> str:
        target = Path(os.path.expanduser(path))
        # stat first so oversized files are never read into memory
        info = target.stat()
        if not stat.S_ISREG(info.st_mode):
            # devices and FIFOs report no usable size and may never hit EOF
            raise FileReadError(path, OSError("not a regular file"))
        if info.st_size > self.max_file_size:
            raise FileTooLargeError(path, info.st_size, self.max_file_size)

        # bounded read; the file may have grown since stat
        with target.open("rb") as handle:
            data = handle.read(self.max_file_size + 1)
        if len(data) > self.max_file_size:
            raise FileTooLargeError(path, len(data), self.max_file_size)
        if b"\x00" in data:
            raise BinaryFileError(path)

        self.logger.debug("Loaded context file %s (%d bytes)", path, len(data))
        return data.decode("utf-8")
