"""End-to-end tests for the send_message pipeline."""

import asyncio

import pytest

from helpers import FakeBackend
from openrouter_mcp.config import BridgeConfig, GatekeeperMode
from openrouter_mcp.context_files import BLOCK_CLOSE
from openrouter_mcp.errors import InvalidArgumentsError
from openrouter_mcp.tool import SendMessageTool
from openrouter_mcp.types import ToolRequest, ToolResult


class TestSendMessageTool:
    @pytest.mark.asyncio
    async def test_plain_message(self, make_tool, backend):
        tool = make_tool(backend)

        result = await tool({"model": "openai/gpt-5.2", "message": "Hello"})

        assert result == ToolResult(text="model output", is_error=False)
        (request,) = backend.requests
        assert request.messages == ({"role": "user", "content": "Hello"},)
        assert request.sampling.as_dict() == {}

    @pytest.mark.asyncio
    async def test_summarize_file_scenario(self, make_tool, backend, write_file):
        notes = write_file("notes.txt", "hello")
        tool = make_tool(backend, allowed_models=["allowed/model"])

        result = await tool(
            {
                "model": "allowed/model",
                "message": "Summarize this",
                "append_files": [{"path": notes}],
            }
        )

        assert result == ToolResult(text="model output", is_error=False)
        user_turn = backend.requests[0].messages[-1]
        assert user_turn["role"] == "user"
        assert user_turn["content"].startswith("Summarize this\n\n")
        assert user_turn["content"].endswith(f"path: {notes}\n{BLOCK_CLOSE}\nhello")

    @pytest.mark.asyncio
    async def test_disallowed_model_never_dispatches(self, make_tool, backend):
        tool = make_tool(backend, allowed_models=["allowed/model"])

        result = await tool({"model": "other/model", "message": "Hi"})

        assert result.is_error
        assert result.text == (
            "Error calling OpenRouter: Model 'other/model' is not allowed. "
            "Allowed models: allowed/model"
        )
        assert not backend.called

    @pytest.mark.asyncio
    async def test_too_many_files(self, make_tool, backend):
        tool = make_tool(backend, max_files=10)

        result = await tool(
            {"model": "m", "message": "x", "append_files": [f"f{i}.txt" for i in range(11)]}
        )

        assert result == ToolResult(
            text="Error calling OpenRouter: Too many files: 11 exceeds maximum of 10",
            is_error=True,
        )
        assert not backend.called

    @pytest.mark.asyncio
    async def test_binary_file(self, make_tool, backend, write_file):
        path = write_file("image.bin", b"\x89PNG\x00\x00")

        result = await make_tool(backend)({"model": "m", "message": "x", "append_files": [path]})

        assert result.is_error
        assert f"Binary file not supported: {path}" in result.text
        assert not backend.called

    @pytest.mark.asyncio
    async def test_system_prompt_resolution(self, make_tool, backend):
        tool = make_tool(backend, default_system_prompt="Default")

        await tool({"model": "m", "message": "a"})
        await tool({"model": "m", "message": "b", "system_prompt": "Override"})

        first, second = backend.requests
        assert first.messages[0] == {"role": "system", "content": "Default"}
        assert second.messages[0] == {"role": "system", "content": "Override"}
        assert [len(r.messages) for r in backend.requests] == [2, 2]

    @pytest.mark.asyncio
    async def test_sampling_params_forwarded(self, make_tool, backend):
        await make_tool(backend)(
            {"model": "m", "message": "x", "temperature": 0, "max_tokens": 64}
        )

        assert backend.requests[0].as_dict() == {
            "model": "m",
            "messages": [{"role": "user", "content": "x"}],
            "temperature": 0,
            "max_tokens": 64,
        }

    @pytest.mark.asyncio
    async def test_timeout_result(self, make_tool):
        backend = FakeBackend(hang=True)
        tool = make_tool(backend, timeout=0.05)

        result = await tool({"model": "m", "message": "x"})

        assert result.is_error
        assert result.text == "Error calling OpenRouter: Request timed out after 0.05 seconds"
        backend.release.set()
        await asyncio.sleep(0.01)

    @pytest.mark.asyncio
    async def test_remote_failure(self, make_tool):
        backend = FakeBackend(error="API error (402): insufficient credits")

        result = await make_tool(backend)({"model": "m", "message": "x"})

        assert result == ToolResult(
            text="Error calling OpenRouter: API error (402): insufficient credits",
            is_error=True,
        )

    @pytest.mark.asyncio
    async def test_placeholder_text_is_success(self, make_tool):
        backend = FakeBackend("No response received")

        result = await make_tool(backend)({"model": "m", "message": "x"})

        assert result == ToolResult(text="No response received", is_error=False)

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_funneled(self, make_tool, backend, monkeypatch):
        tool = make_tool(backend)

        def explode(*args, **kwargs):
            raise KeyError("surprise")

        monkeypatch.setattr("openrouter_mcp.tool.compose_messages", explode)

        result = await tool.run(ToolRequest(model="m", message="x"))

        assert result.is_error
        assert result.text.startswith("Error calling OpenRouter: ")

    @pytest.mark.asyncio
    async def test_invalid_arguments_raise(self, make_tool, backend):
        with pytest.raises(InvalidArgumentsError):
            await make_tool(backend)({"model": "m", "message": "", "top_p": 3})


class TestToolSchema:
    def test_schema_lists_allowed_models(self, make_tool, backend):
        tool = make_tool(backend, allowed_models=["a/one", "b/two"])

        schema = tool.input_schema()

        assert schema["required"] == ["model", "message"]
        assert "Allowed models: a/one, b/two" in schema["properties"]["model"]["description"]
        assert "openai/gpt-5.2" in schema["properties"]["model"]["description"]

    def test_permissive_schema(self, make_tool, backend):
        description = make_tool(backend).input_schema()["properties"]["model"]["description"]
        assert "Allowed models" not in description

    def test_from_config(self, backend):
        config = BridgeConfig(api_key="k", allowed_models=("x/y",), max_files=3)

        tool = SendMessageTool.from_config(config, backend)

        assert tool.gatekeeper.mode is GatekeeperMode.RESTRICTIVE
        assert tool.loader.max_files == 3
        assert tool.dispatcher.timeout == 120.0
        assert tool.dispatcher.backend is backend
