"""Call the send_message pipeline directly, without an MCP host."""

import asyncio
import sys

from openrouter_mcp import OpenRouterLLM, SendMessageTool, load_config

MODEL_NAME = "openai/gpt-4.1-nano"


async def basic_example():
    """Plain question, no files."""
    print("=== Basic send_message ===")
    config = load_config()

    async with OpenRouterLLM.from_config(config) as llm:
        tool = SendMessageTool.from_config(config, llm)
        result = await tool({
            "model": MODEL_NAME,
            "message": "What is the capital of Italy?",
            "max_tokens": 150,
        })

        if result.is_error:
            print(f"❌ {result.text}")
        else:
            print(f"🤖 {result.text}")


async def file_context_example(paths: list[str]):
    """Ask for a summary of local files."""
    print("\n=== send_message with append_files ===")
    config = load_config()

    async with OpenRouterLLM.from_config(config) as llm:
        tool = SendMessageTool.from_config(config, llm)
        result = await tool({
            "model": MODEL_NAME,
            "message": "Summarize these files in three bullet points.",
            "system_prompt": "You are a concise technical writer.",
            "append_files": [{"path": p, "header": f"File {i}"} for i, p in enumerate(paths, 1)],
        })

        if result.is_error:
            print(f"❌ {result.text}")
        else:
            print(f"🤖 {result.text}")


async def main():
    await basic_example()
    if len(sys.argv) > 1:
        await file_context_example(sys.argv[1:])

if __name__ == "__main__":
    asyncio.run(main())
