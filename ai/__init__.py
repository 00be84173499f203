"""
AI Infrastructure Module

This module provides the model-invocation boundary for Kai:
- Gemini API client with timeout and retry logic
- Langfuse observability integration
- Token usage tracking
- Function calling and structured output support

All model calls should go through this module to ensure consistent
observability, error handling, and configuration.
"""

from .llm_service import (
    # Main LLM function
    invoke_llm,

    # Client access
    get_client,

    # Observability
    get_langfuse_client,
    trace_llm_call,
)

__all__ = [
    "invoke_llm",
    "get_client",
    "get_langfuse_client",
    "trace_llm_call",
]
