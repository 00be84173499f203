"""
Kai Service - Turn Coordinator

Ties one assistant turn together for a caller that owns the CRM data:
1. Runs the orchestrator once for the user's message
2. Executes each requested tool call against the caller's tool registry
3. Maps the successful results to a text summary and UI blocks

The model is called exactly once per turn; tool results are not sent back
for a second completion.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from core import (
    FormattedResults,
    FunctionCall,
    KaiOrchestrator,
    KaiResponse,
    format_function_results,
)
from config import TOOL_DEFINITIONS
from core.orchestrator import HistoryItem

logger = logging.getLogger(__name__)


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass
class ToolResult:
    """
    Result from a tool execution.

    Attributes:
        tool_name: Name of the tool that was called
        success: Whether the tool executed successfully
        result: The actual result data
        error: Error message if unsuccessful
        execution_time: Time taken to execute (seconds)
        metadata: Additional metadata about the execution
    """
    tool_name: str
    success: bool
    result: Any = None
    error: Optional[str] = None
    execution_time: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class KaiTurn:
    """
    Everything the chat UI needs to render one turn.

    Attributes:
        kai_response: The orchestrator's reply
        tool_results: One entry per requested call, in request order
        formatted: Summary text and UI blocks for the successful results
    """
    kai_response: KaiResponse
    tool_results: List[ToolResult] = field(default_factory=list)
    formatted: FormattedResults = field(default_factory=FormattedResults)

    @property
    def degraded(self) -> bool:
        return self.kai_response.degraded

    def to_dict(self) -> Dict[str, Any]:
        result = self.kai_response.to_dict()
        result.update(self.formatted.to_dict())
        return result


# ============================================================================
# KAI SERVICE
# ============================================================================

class KaiService:
    """
    Coordinates the orchestrator, the caller's CRM tools and the block mapper.

    Example:
        >>> service = KaiService({"get_student": crm.get_student})
        >>> turn = service.process_message("Show me Michael Chen")
        >>> turn.to_dict()["ui_blocks"]
        [{'type': 'student_card', 'studentId': 789, 'label': 'Michael Chen'}]
    """

    def __init__(
        self,
        tool_registry: Mapping[str, Callable[..., Any]],
        orchestrator: Optional[KaiOrchestrator] = None,
    ):
        """
        Args:
            tool_registry: Tool name -> callable taking the decoded arguments as keywords
            orchestrator: Orchestrator to use (defaults to one offering only the
                known tools this registry implements)
        """
        self.tool_registry = dict(tool_registry)
        self.orchestrator = orchestrator or KaiOrchestrator.for_tools([
            tool["function"]["name"]
            for tool in TOOL_DEFINITIONS
            if tool["function"]["name"] in self.tool_registry
        ])

        unregistered = set(self.orchestrator.tool_names) - set(self.tool_registry)
        if unregistered:
            logger.warning(f"⚠️  Tools offered to the model without an implementation: {sorted(unregistered)}")

        logger.info(f"✅ KaiService initialized with {len(self.tool_registry)} tools")

    def process_message(
        self,
        user_message: str,
        history: Optional[Sequence[HistoryItem]] = None,
        assistant_name: Optional[str] = None,
    ) -> KaiTurn:
        """
        Process one user message end to end.

        Args:
            user_message: The user's input text
            history: Previous conversation turns, oldest first
            assistant_name: Persona name for this turn

        Returns:
            KaiTurn with the reply, the executed tool results and the UI blocks
        """
        kai_response = self.orchestrator.converse(
            user_message=user_message,
            history=history,
            assistant_name=assistant_name,
        )

        if not kai_response.function_calls:
            return KaiTurn(kai_response=kai_response)

        tool_results = [self._execute_tool(call) for call in kai_response.function_calls]

        formatted = format_function_results([
            {"function": tr.tool_name, "result": tr.result}
            for tr in tool_results
            if tr.success
        ])

        failures = [tr.tool_name for tr in tool_results if not tr.success]
        if failures:
            logger.warning(f"⚠️  {len(failures)} tool call(s) failed: {failures}")

        return KaiTurn(
            kai_response=kai_response,
            tool_results=tool_results,
            formatted=formatted,
        )

    def _execute_tool(self, call: FunctionCall) -> ToolResult:
        """
        Execute a specific tool with the model's arguments.

        Args:
            call: The requested function call

        Returns:
            ToolResult with execution outcome
        """
        start_time = time.time()

        if call.name not in self.tool_registry:
            logger.error(f"❌ Tool '{call.name}' not found in registry")
            return ToolResult(
                tool_name=call.name,
                success=False,
                error=f"Tool '{call.name}' not found in registry",
                execution_time=time.time() - start_time,
                metadata={"args": call.arguments},
            )

        tool_func = self.tool_registry[call.name]
        logger.info(f"🔧 Executing tool: {call.name}")

        try:
            result = tool_func(**call.arguments)

            return ToolResult(
                tool_name=call.name,
                success=True,
                result=result,
                execution_time=time.time() - start_time,
                metadata={"args": call.arguments},
            )

        except Exception as e:
            logger.error(f"❌ Tool {call.name} execution failed: {e}", exc_info=True)

            return ToolResult(
                tool_name=call.name,
                success=False,
                error=str(e),
                execution_time=time.time() - start_time,
                metadata={"args": call.arguments},
            )


# ============================================================================
# CONVENIENCE FUNCTION
# ============================================================================

def process_user_message(
    user_message: str,
    tool_registry: Mapping[str, Callable[..., Any]],
    history: Optional[Sequence[HistoryItem]] = None,
    assistant_name: Optional[str] = None,
) -> KaiTurn:
    """
    Convenience function to process one message with a fresh KaiService.

    Args:
        user_message: The user's input
        tool_registry: Tool name -> CRM callable
        history: Previous conversation turns
        assistant_name: Persona name

    Returns:
        KaiTurn
    """
    service = KaiService(tool_registry)
    return service.process_message(user_message, history, assistant_name)
