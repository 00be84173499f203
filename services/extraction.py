"""
Structured Extraction Runner

Shared machinery for the schema-constrained extraction pipelines
(schedules, rosters):
1. One model call constrained to a strict JSON schema
2. JSON parse of the returned content
3. Validation against the pydantic model that mirrors the schema
4. Fail-soft shaping: every failure returns a `success=False` result

Nothing here raises past its boundary; callers branch on `result.success`.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ai import invoke_llm
from config import EXTRACTION_MODEL, EXTRACTION_TEMPERATURE

logger = logging.getLogger(__name__)

PARSE_FAILURE_MESSAGE = "Failed to parse LLM response"


class ExtractionModel(BaseModel):
    """Base for extraction records: camelCase on the wire, immutable once built."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


ResultT = TypeVar("ResultT", bound=ExtractionModel)


def image_message(prompt: str, image_url: str) -> Dict[str, Any]:
    """User message carrying a text prompt and one high-detail image."""
    return {
        "role": "user",
        "content": [
            {"type": "text", "text": prompt},
            {"type": "image_url", "image_url": {"url": image_url, "detail": "high"}},
        ],
    }


def _first_message_content(response: Dict[str, Any]) -> Any:
    choices = response.get("choices") or []
    if not choices:
        return None
    message = choices[0].get("message") or {}
    return message.get("content")


def run_structured_extraction(
    messages: List[Dict[str, Any]],
    schema: Dict[str, Any],
    result_model: Type[ResultT],
    failure: Callable[[str], ResultT],
    raw_text: Optional[str] = None,
    llm: Optional[Callable[..., Dict[str, Any]]] = None,
) -> ResultT:
    """
    Run one schema-constrained extraction.

    Args:
        messages: System and user messages for the model
        schema: {"name", "strict", "schema"} JSON schema definition
        result_model: Pydantic model mirroring `schema`
        failure: Builds the failure result from an error message
        raw_text: Source text echoed back on the result (text inputs only)
        llm: Model-invocation callable (defaults to ai.invoke_llm)

    Returns:
        The validated result, or `failure(<message>)` on any error
    """
    llm = llm or invoke_llm

    try:
        response = llm(
            messages=messages,
            response_format={"type": "json_schema", "json_schema": schema},
            temperature=EXTRACTION_TEMPERATURE,
            model_name=EXTRACTION_MODEL,
        )

        content = _first_message_content(response)
        if not isinstance(content, str):
            logger.warning(f"⚠️  {schema['name']}: model returned no text content")
            return failure(PARSE_FAILURE_MESSAGE)

        parsed = json.loads(content)
        result = result_model.model_validate(parsed)

        if raw_text is not None:
            result = result.model_copy(update={"raw_text": raw_text})

        logger.info(f"📋 {schema['name']}: extraction finished (success={result.success})")
        return result

    except Exception as e:
        logger.error(f"❌ {schema['name']} failed: {e}", exc_info=True)
        return failure(str(e) or type(e).__name__)
