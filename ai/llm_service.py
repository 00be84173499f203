"""
LLM Service - Gemini API Wrapper with Langfuse Observability

This service is the single model-invocation boundary for Kai. It accepts
requests in the chat-completion wire shape (messages, function tools,
tool_choice, response_format), sends them to Google's Gemini API and returns
the response in the same chat-completion shape, so the orchestrator and the
extraction pipelines never touch SDK types.

Features:
- Automatic retry with exponential backoff on transient errors
- Request timeout
- Langfuse tracing for every call
- Token usage tracking
- Function calling (tools) and JSON-schema constrained output
- Image inputs from data: URLs or downloaded http(s) URLs

All model calls in Kai go through `invoke_llm`.
"""

import base64
import json
import logging
import mimetypes
import time
import uuid
from functools import wraps
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import urlparse

import httpx
from google import genai
from google.genai import types
from langfuse import Langfuse, observe

from config import (
    GOOGLE_API_KEY,
    GEMINI_MODEL,
    TEMPERATURE,
    MAX_TOKENS,
    TOP_P,
    TOP_K,
    MAX_RETRIES,
    RETRY_DELAY,
    TIMEOUT,
    LANGFUSE_PUBLIC_KEY,
    LANGFUSE_SECRET_KEY,
    LANGFUSE_HOST,
    LANGFUSE_ENABLED,
    LOG_LEVEL,
)

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

Message = Dict[str, Any]

# ============================================================================
# INITIALIZATION
# ============================================================================

_client: Optional[genai.Client] = None

# Initialize Langfuse client (if enabled)
_langfuse_client: Optional[Langfuse] = None

if LANGFUSE_ENABLED:
    try:
        _langfuse_client = Langfuse(
            public_key=LANGFUSE_PUBLIC_KEY,
            secret_key=LANGFUSE_SECRET_KEY,
            host=LANGFUSE_HOST,
        )
        logger.info("✅ Langfuse observability initialized")
    except Exception as e:
        logger.warning(f"⚠️  Langfuse initialization failed: {e}. Continuing without tracing.")
        _langfuse_client = None
else:
    logger.info("ℹ️  Langfuse observability disabled")


def get_langfuse_client() -> Optional[Langfuse]:
    """Get the Langfuse client instance."""
    return _langfuse_client


def get_client() -> genai.Client:
    """
    Get the shared Gemini client, creating it on first use.

    Raises:
        ValueError: If GOOGLE_API_KEY is not configured
    """
    global _client

    if _client is None:
        if not GOOGLE_API_KEY:
            raise ValueError(
                "GOOGLE_API_KEY not found in environment variables. "
                "Please set it in your .env file."
            )
        _client = genai.Client(
            api_key=GOOGLE_API_KEY,
            http_options=types.HttpOptions(timeout=TIMEOUT * 1000),
        )
    return _client


def trace_llm_call(name: str):
    """
    Decorator that records the wrapped call as a Langfuse generation.

    No-op when Langfuse is disabled.
    """
    def decorator(func):
        if not _langfuse_client:
            return func
        return observe(name=name, as_type="generation")(func)
    return decorator


# ============================================================================
# RETRY DECORATOR
# ============================================================================

RETRYABLE_STATUS_CODES = {429, 500, 503}


def _is_retryable(error: Exception) -> bool:
    """Whether an upstream error is worth retrying."""
    if getattr(error, "code", None) in RETRYABLE_STATUS_CODES:
        return True

    error_msg = str(error).lower()
    return any([
        "rate limit" in error_msg,
        "quota" in error_msg,
        "timeout" in error_msg,
        "timed out" in error_msg,
        "503" in error_msg,
        "429" in error_msg,
        "500" in error_msg,
    ])


def retry_on_error(max_retries: int = MAX_RETRIES, delay: float = RETRY_DELAY):
    """
    Decorator to retry function calls on transient upstream errors.
    Implements exponential backoff.

    Args:
        max_retries: Maximum number of attempts
        delay: Initial delay between retries (seconds)
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            attempt = 1
            current_delay = delay

            while True:
                try:
                    return func(*args, **kwargs)

                except Exception as e:
                    error_type = type(e).__name__

                    if not _is_retryable(e) or attempt >= max_retries:
                        logger.error(f"❌ {func.__name__} failed: {error_type}: {e}")
                        raise

                    logger.warning(
                        f"⚠️  {func.__name__} failed (attempt {attempt}/{max_retries}): "
                        f"{error_type}. Retrying in {current_delay}s..."
                    )

                    time.sleep(current_delay)
                    current_delay *= 2  # Exponential backoff
                    attempt += 1

        return wrapper
    return decorator


# ============================================================================
# REQUEST TRANSLATION (chat wire shape -> Gemini)
# ============================================================================

def _image_part(url: str) -> types.Part:
    """
    Build an inline image part from a data: URL or an http(s) URL.

    Remote images are downloaded here and sent as bytes; Gemini only accepts
    file URIs for its own Files API and Cloud Storage.

    Raises:
        httpx.HTTPError: If a remote image cannot be downloaded
    """
    if url.startswith("data:"):
        header, _, payload = url.partition(",")
        mime_type = header[len("data:"):].split(";")[0] or "image/png"
        return types.Part.from_bytes(data=base64.b64decode(payload), mime_type=mime_type)

    logger.info(f"🖼️  Downloading image: {url[:80]}")
    response = httpx.get(url, timeout=TIMEOUT, follow_redirects=True)
    response.raise_for_status()

    mime_type = response.headers.get("content-type", "").split(";")[0].strip()
    if not mime_type.startswith("image/"):
        mime_type, _ = mimetypes.guess_type(urlparse(url).path)
    return types.Part.from_bytes(data=response.content, mime_type=mime_type or "image/jpeg")


def _content_parts(content: Union[str, List[Dict[str, Any]], None]) -> List[types.Part]:
    """Convert message content (plain text or a list of typed parts) to Gemini parts."""
    if content is None:
        return []
    if isinstance(content, str):
        return [types.Part(text=content)]

    parts = []
    for item in content:
        item_type = item.get("type")
        if item_type == "text":
            parts.append(types.Part(text=item["text"]))
        elif item_type == "image_url":
            image = item["image_url"]
            url = image["url"] if isinstance(image, dict) else image
            parts.append(_image_part(url))
        else:
            raise ValueError(f"Unsupported message content part: {item_type!r}")
    return parts


def convert_messages(messages: List[Message]) -> Tuple[Optional[str], List[types.Content]]:
    """
    Split chat messages into a Gemini system instruction and conversation contents.

    System messages are joined into the system instruction in order; assistant
    turns become "model" turns.

    Returns:
        Tuple of (system_instruction or None, contents)
    """
    system_parts: List[str] = []
    contents: List[types.Content] = []

    for message in messages:
        role = message.get("role")
        content = message.get("content")

        if role == "system":
            if content:
                system_parts.append(content)
            continue

        if role not in ("user", "assistant"):
            raise ValueError(f"Unsupported message role: {role!r}")

        contents.append(types.Content(
            role="model" if role == "assistant" else "user",
            parts=_content_parts(content),
        ))

    system_instruction = "\n\n".join(system_parts) if system_parts else None
    return system_instruction, contents


def convert_tools(tools: List[Dict[str, Any]]) -> List[types.Tool]:
    """Convert function-tool definitions into one Gemini tool with function declarations."""
    declarations = []
    for tool in tools:
        function = tool.get("function", tool)
        declarations.append(types.FunctionDeclaration(
            name=function["name"],
            description=function.get("description", ""),
            parameters_json_schema=function.get("parameters") or {"type": "object", "properties": {}},
        ))
    return [types.Tool(function_declarations=declarations)]


def convert_tool_choice(tool_choice: Union[str, Dict[str, Any]]) -> types.ToolConfig:
    """Map a tool_choice value ("auto", "none", "required" or a named function) to a ToolConfig."""
    if isinstance(tool_choice, dict):
        name = tool_choice["function"]["name"]
        config = types.FunctionCallingConfig(mode="ANY", allowed_function_names=[name])
    else:
        modes = {"auto": "AUTO", "none": "NONE", "required": "ANY"}
        if tool_choice not in modes:
            raise ValueError(f"Unsupported tool_choice: {tool_choice!r}")
        config = types.FunctionCallingConfig(mode=modes[tool_choice])
    return types.ToolConfig(function_calling_config=config)


def get_generation_config(
    system_instruction: Optional[str] = None,
    tools: Optional[List[Dict[str, Any]]] = None,
    tool_choice: Optional[Union[str, Dict[str, Any]]] = None,
    response_format: Optional[Dict[str, Any]] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> types.GenerateContentConfig:
    """
    Create a generation configuration for Gemini API calls.

    Args:
        system_instruction: System prompt
        tools: Function-tool definitions
        tool_choice: Tool selection policy
        response_format: {"type": "json_object"} or {"type": "json_schema", "json_schema": {...}}
        temperature: Sampling temperature. Defaults to config value.
        max_tokens: Maximum tokens to generate. Defaults to config value.

    Returns:
        GenerateContentConfig object
    """
    config_dict: Dict[str, Any] = {
        "temperature": TEMPERATURE if temperature is None else temperature,
        "max_output_tokens": max_tokens or MAX_TOKENS,
        "top_p": TOP_P,
        "top_k": TOP_K,
    }

    if system_instruction:
        config_dict["system_instruction"] = system_instruction

    if tools:
        config_dict["tools"] = convert_tools(tools)
        config_dict["tool_config"] = convert_tool_choice(tool_choice or "auto")

    # Structured output configuration
    if response_format:
        format_type = response_format.get("type")
        if format_type in ("json_object", "json_schema"):
            config_dict["response_mime_type"] = "application/json"
        if format_type == "json_schema":
            config_dict["response_json_schema"] = response_format["json_schema"]["schema"]

    return types.GenerateContentConfig(**config_dict)


# ============================================================================
# RESPONSE TRANSLATION (Gemini -> chat wire shape)
# ============================================================================

def _finish_reason(candidate: types.Candidate, has_tool_calls: bool) -> Optional[str]:
    if has_tool_calls:
        return "tool_calls"
    reason = getattr(candidate, "finish_reason", None)
    if reason is None:
        return None
    name = getattr(reason, "name", str(reason))
    return {"STOP": "stop", "MAX_TOKENS": "length", "SAFETY": "content_filter"}.get(name, name.lower())


def build_chat_response(response: types.GenerateContentResponse, model_name: str) -> Dict[str, Any]:
    """
    Convert a Gemini response into the chat-completion shape.

    Function-call arguments are serialized to JSON strings. When there is no
    candidate, `choices` is empty.
    """
    result: Dict[str, Any] = {
        "id": getattr(response, "response_id", None) or f"chatcmpl-{uuid.uuid4().hex}",
        "model": getattr(response, "model_version", None) or model_name,
        "choices": [],
        "usage": None,
    }

    usage = getattr(response, "usage_metadata", None)
    if usage is not None:
        result["usage"] = {
            "prompt_tokens": usage.prompt_token_count or 0,
            "completion_tokens": usage.candidates_token_count or 0,
            "total_tokens": usage.total_token_count or 0,
        }

    if not response.candidates:
        return result

    candidate = response.candidates[0]
    texts: List[str] = []
    tool_calls: List[Dict[str, Any]] = []

    parts = candidate.content.parts if candidate.content and candidate.content.parts else []
    for part in parts:
        if part.function_call:
            func_call = part.function_call
            tool_calls.append({
                "id": func_call.id or f"call_{len(tool_calls)}",
                "type": "function",
                "function": {
                    "name": func_call.name,
                    "arguments": json.dumps(dict(func_call.args or {})),
                },
            })
        elif part.text and not part.thought:
            texts.append(part.text)

    result["choices"].append({
        "index": 0,
        "message": {
            "role": "assistant",
            "content": "".join(texts) if texts else None,
            "tool_calls": tool_calls or None,
        },
        "finish_reason": _finish_reason(candidate, bool(tool_calls)),
    })
    return result


# ============================================================================
# CORE LLM FUNCTION
# ============================================================================

@trace_llm_call("invoke_llm")
@retry_on_error()
def invoke_llm(
    messages: List[Message],
    tools: Optional[List[Dict[str, Any]]] = None,
    tool_choice: Optional[Union[str, Dict[str, Any]]] = None,
    response_format: Optional[Dict[str, Any]] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    model_name: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Make one model call with Langfuse tracing.

    Args:
        messages: Chat messages ({"role", "content"}), system messages first
        tools: Function-tool definitions the model may call
        tool_choice: "auto", "none", "required" or {"type": "function", "function": {"name": ...}}
        response_format: JSON output constraint
        temperature: Sampling temperature (overrides default)
        max_tokens: Max output tokens (overrides default)
        model_name: Model to use (overrides default)

    Returns:
        Chat-completion dict: {"id", "model", "choices": [{"message": {...}, ...}], "usage"}

    Raises:
        ValueError: If the API key is missing or the request is malformed
        Exception: If the API call fails after retries
    """
    model_name = model_name or GEMINI_MODEL

    system_instruction, contents = convert_messages(messages)
    config = get_generation_config(
        system_instruction=system_instruction,
        tools=tools,
        tool_choice=tool_choice,
        response_format=response_format,
        temperature=temperature,
        max_tokens=max_tokens,
    )

    start_time = time.time()
    response = get_client().models.generate_content(
        model=model_name,
        contents=contents,
        config=config,
    )
    latency = time.time() - start_time

    result = build_chat_response(response, model_name)

    usage = result["usage"]
    if usage:
        if _langfuse_client:
            _langfuse_client.update_current_generation(
                model=model_name,
                usage_details={
                    "input": usage["prompt_tokens"],
                    "output": usage["completion_tokens"],
                    "total": usage["total_tokens"],
                },
            )

        logger.debug(
            f"📊 Tokens: {usage['prompt_tokens']} in, "
            f"{usage['completion_tokens']} out, "
            f"⏱️  {latency:.2f}s"
        )

    return result
