"""Shared pytest fixtures."""

import pytest

from openrouter_mcp.context_files import FileContextLoader
from openrouter_mcp.dispatch import DispatchController
from openrouter_mcp.gatekeeper import ModelGatekeeper
from openrouter_mcp.tool import SendMessageTool

from helpers import FakeBackend


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def make_tool():
    """Build a SendMessageTool around a backend with overridable settings."""

    def _make(
        backend,
        *,
        allowed_models=None,
        max_files=10,
        max_file_size=153600,
        timeout=120.0,
        default_system_prompt=None,
    ):
        return SendMessageTool(
            gatekeeper=ModelGatekeeper(allowed_models),
            loader=FileContextLoader(max_files, max_file_size),
            dispatcher=DispatchController(backend, timeout),
            default_system_prompt=default_system_prompt,
            model_examples="'openai/gpt-5.2'",
        )

    return _make


@pytest.fixture
def write_file(tmp_path):
    """Write a file under tmp_path and return its path as a string."""

    def _write(name, content):
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return str(path)

    return _write
