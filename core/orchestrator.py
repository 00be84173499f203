"""
Conversation Orchestrator - Single-Turn Tool-Calling Protocol

Implements one conversational turn with the assistant:
1. Assemble: system prompt, caller-supplied history, then the new message
2. Invoke: one model call with the full tool set and automatic tool choice
3. Classify: either a final text answer or a list of tool-call requests

Tool execution is not done here; requested calls are returned to the caller.
The orchestrator is fail-soft: upstream errors come back as a degraded
response that echoes the user's message, never as an exception.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from ai import invoke_llm
from config import ASSISTANT_NAME, KAI_SYSTEM_PROMPT, TOOL_DEFINITIONS, format_prompt, get_tool_by_name

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = 'I\'m here to help! You asked: "{message}". Let me check the data for you.'
EMPTY_RESPONSE = "I apologize, but I couldn't process that request."

VALID_ROLES = ("user", "assistant", "system")


# ============================================================================
# ERRORS
# ============================================================================

class ToolArgumentError(ValueError):
    """Raised when a tool call carries arguments that are not a JSON object."""

    def __init__(self, tool_name: str, raw_arguments: Any, reason: str):
        self.tool_name = tool_name
        self.raw_arguments = raw_arguments
        super().__init__(f"Invalid arguments for tool '{tool_name}': {reason}")


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True)
class ConversationMessage:
    """One turn of caller-supplied history."""
    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class FunctionCall:
    """
    A tool call requested by the model.

    Attributes:
        name: Tool name
        arguments: Decoded JSON object arguments
        call_id: Upstream call identifier, if any
    """
    name: str
    arguments: Dict[str, Any]
    call_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "arguments": self.arguments}


@dataclass
class KaiResponse:
    """
    Result of one conversational turn.

    Attributes:
        response: Text to show the user (may be empty when tools were requested)
        function_calls: Requested tool calls, or None when the model answered directly
        degraded: True when the reply is the fail-soft fallback
        error: Description of the upstream failure behind a degraded reply
    """
    response: str
    function_calls: Optional[List[FunctionCall]] = None
    degraded: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"response": self.response}
        if self.function_calls is not None:
            result["functionCalls"] = [call.to_dict() for call in self.function_calls]
        return result


HistoryItem = Union[ConversationMessage, Mapping[str, Any]]


# ============================================================================
# TOOL CALL PARSING
# ============================================================================

def parse_tool_call(tool_call: Mapping[str, Any]) -> FunctionCall:
    """
    Decode one tool call from the chat wire shape.

    Args:
        tool_call: {"id", "type": "function", "function": {"name", "arguments": <JSON string>}}

    Returns:
        FunctionCall with decoded arguments

    Raises:
        ToolArgumentError: If the arguments are not valid JSON or not a JSON object
    """
    function = tool_call["function"]
    name = function["name"]
    raw_arguments = function.get("arguments")

    if isinstance(raw_arguments, Mapping):
        arguments = dict(raw_arguments)
    else:
        if not isinstance(raw_arguments, str):
            raise ToolArgumentError(name, raw_arguments, "arguments must be a JSON string")
        try:
            arguments = json.loads(raw_arguments)
        except json.JSONDecodeError as e:
            raise ToolArgumentError(name, raw_arguments, str(e)) from e

    if not isinstance(arguments, dict):
        raise ToolArgumentError(name, raw_arguments, "arguments must decode to a JSON object")

    return FunctionCall(name=name, arguments=arguments, call_id=tool_call.get("id"))


# ============================================================================
# ORCHESTRATOR
# ============================================================================

class KaiOrchestrator:
    """
    Single-call conversation orchestrator.

    One instance can serve any number of independent turns; it keeps no
    per-conversation state.
    """

    def __init__(
        self,
        tools: Sequence[Dict[str, Any]] = TOOL_DEFINITIONS,
        llm: Optional[Callable[..., Dict[str, Any]]] = None,
        system_prompt_template: str = KAI_SYSTEM_PROMPT,
        assistant_name: str = ASSISTANT_NAME,
    ):
        """
        Initialize the orchestrator.

        Args:
            tools: Tool definitions offered to the model on every turn
            llm: Model-invocation callable (defaults to ai.invoke_llm)
            system_prompt_template: System prompt with an {assistant_name} placeholder
            assistant_name: Persona name used when a turn does not specify one
        """
        self.tools = tuple(tools)
        self.llm = llm or invoke_llm
        self.system_prompt_template = system_prompt_template
        self.assistant_name = assistant_name

    @classmethod
    def for_tools(cls, tool_names: Sequence[str], **kwargs) -> "KaiOrchestrator":
        """
        Build an orchestrator that offers only the named tools, in the given order.

        Raises:
            ValueError: If a name is not a known tool
        """
        return cls(tools=[get_tool_by_name(name) for name in tool_names], **kwargs)

    @property
    def tool_names(self) -> List[str]:
        return [tool["function"]["name"] for tool in self.tools]

    def build_messages(
        self,
        user_message: str,
        history: Optional[Sequence[HistoryItem]] = None,
        assistant_name: Optional[str] = None,
    ) -> List[Dict[str, str]]:
        """
        Assemble the request messages: system prompt, history in order, new message.

        Raises:
            ValueError: If a history entry has an unknown role or non-text content
        """
        system_prompt = format_prompt(
            self.system_prompt_template,
            assistant_name=assistant_name or self.assistant_name,
        )
        messages = [{"role": "system", "content": system_prompt}]

        for index, item in enumerate(history or []):
            if isinstance(item, ConversationMessage):
                item = item.to_dict()
            role = item.get("role")
            content = item.get("content")
            if role not in VALID_ROLES:
                raise ValueError(f"History entry {index} has invalid role: {role!r}")
            if not isinstance(content, str):
                raise ValueError(f"History entry {index} content must be text")
            messages.append({"role": role, "content": content})

        messages.append({"role": "user", "content": user_message})
        return messages

    def converse(
        self,
        user_message: str,
        history: Optional[Sequence[HistoryItem]] = None,
        assistant_name: Optional[str] = None,
    ) -> KaiResponse:
        """
        Run one turn: exactly one model call, no retries, no streaming.

        Args:
            user_message: The user's input (passed through unchanged, even if empty)
            history: Previous conversation turns, oldest first
            assistant_name: Persona name for this turn

        Returns:
            KaiResponse; degraded with a fallback echo of the message on any failure
        """
        logger.info(f"💬 Kai turn: {user_message[:50]!r} ({len(history or [])} history messages)")

        try:
            messages = self.build_messages(user_message, history, assistant_name)

            response = self.llm(
                messages=messages,
                tools=list(self.tools),
                tool_choice="auto",
            )

            return self._classify(response)

        except Exception as e:
            logger.error(f"❌ Kai turn failed: {e}", exc_info=True)
            return KaiResponse(
                response=format_prompt(FALLBACK_RESPONSE, message=user_message),
                degraded=True,
                error=str(e) or type(e).__name__,
            )

    def _classify(self, response: Mapping[str, Any]) -> KaiResponse:
        """
        Classify the model response as tool calls or a final answer.

        Raises:
            ValueError: If the response has no message
            ToolArgumentError: If any tool call has malformed arguments
        """
        choices = response.get("choices") or []
        message = choices[0].get("message") if choices else None
        if not message:
            raise ValueError("No response from LLM")

        tool_calls = message.get("tool_calls") or []
        if tool_calls:
            function_calls = [parse_tool_call(call) for call in tool_calls]
            logger.info(f"🔧 Model requested tools: {[call.name for call in function_calls]}")
            return KaiResponse(
                response=message.get("content") or "",
                function_calls=function_calls,
            )

        return KaiResponse(response=message.get("content") or EMPTY_RESPONSE)


# ============================================================================
# CONVENIENCE FUNCTION
# ============================================================================

def chat_with_kai(
    user_message: str,
    history: Optional[Sequence[HistoryItem]] = None,
    assistant_name: Optional[str] = None,
) -> KaiResponse:
    """
    Convenience function to run one turn with the default tool set and model.

    Args:
        user_message: The user's input
        history: Previous conversation turns
        assistant_name: Persona name (defaults to ASSISTANT_NAME)

    Returns:
        KaiResponse
    """
    orchestrator = KaiOrchestrator()
    return orchestrator.converse(
        user_message=user_message,
        history=history,
        assistant_name=assistant_name,
    )
