"""
Core Assistant Logic Module

This module contains the conversational core of Kai:
- Orchestrator: builds the model request, invokes the model once and
  classifies the reply as text or tool-call requests
- UI block mapper: turns executed tool results into typed cards and lists

Both are stateless between calls; conversation history is caller-supplied.
"""

from .orchestrator import (
    KaiOrchestrator,
    KaiResponse,
    FunctionCall,
    ConversationMessage,
    ToolArgumentError,
    chat_with_kai,
    parse_tool_call,
)

from .ui_blocks import (
    EntityKind,
    FormattedResults,
    StudentCardBlock,
    StudentListBlock,
    LeadCardBlock,
    LeadListBlock,
    UIBlock,
    FUNCTION_ENTITY_KINDS,
    format_function_results,
)

__all__ = [
    # Orchestrator
    "KaiOrchestrator",
    "KaiResponse",
    "FunctionCall",
    "ConversationMessage",
    "ToolArgumentError",
    "chat_with_kai",
    "parse_tool_call",

    # UI blocks
    "EntityKind",
    "FormattedResults",
    "StudentCardBlock",
    "StudentListBlock",
    "LeadCardBlock",
    "LeadListBlock",
    "UIBlock",
    "FUNCTION_ENTITY_KINDS",
    "format_function_results",
]
