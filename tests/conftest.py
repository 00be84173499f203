"""
Shared pytest configuration.

Pins the environment before any project module is imported so unit tests
never reach a live model or tracing backend. A real GOOGLE_API_KEY is kept
aside for tests marked `integration`, which are skipped without one.
"""

import os

LIVE_API_KEY = os.environ.get("GOOGLE_API_KEY", "")

os.environ["GOOGLE_API_KEY"] = ""
os.environ["LANGFUSE_ENABLED"] = "false"
os.environ["DEBUG"] = "false"

import pytest  # noqa: E402


def pytest_collection_modifyitems(config, items):
    if LIVE_API_KEY:
        return
    skip_integration = pytest.mark.skip(reason="GOOGLE_API_KEY not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def live_model(monkeypatch):
    """Point ai.llm_service at the real API key for one test."""
    import ai.llm_service as llm_service

    monkeypatch.setattr(llm_service, "GOOGLE_API_KEY", LIVE_API_KEY)
    monkeypatch.setattr(llm_service, "_client", None)
    yield


def chat_completion(content=None, tool_calls=None):
    """Chat-completion dict as returned by ai.invoke_llm."""
    return {
        "id": "chatcmpl-test",
        "model": "gemini-2.5-flash",
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": content, "tool_calls": tool_calls},
            "finish_reason": "tool_calls" if tool_calls else "stop",
        }],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


def tool_call(name, arguments, call_id="call_0"):
    """One tool call in the chat wire shape; `arguments` is the raw JSON string."""
    return {"id": call_id, "type": "function", "function": {"name": name, "arguments": arguments}}


@pytest.fixture
def make_completion():
    return chat_completion


@pytest.fixture
def make_tool_call():
    return tool_call
