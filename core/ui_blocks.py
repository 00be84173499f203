"""
UI Block Mapper - Function Results to Renderable Blocks

Turns the results of executed tool calls into a short text summary plus a list
of typed UI blocks (student/lead cards and lists). The block variant is chosen
from the entity kind of the function and the cardinality of its result:

    (student, one)  -> student_card      (lead, one)  -> lead_card
    (student, many) -> student_list      (lead, many) -> lead_list
    empty result or unknown function     -> no block

Pure functions only: no I/O and no model calls.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union


# ============================================================================
# ENTITY CLASSIFICATION
# ============================================================================

class EntityKind(Enum):
    """Entity kinds that get rendered as blocks."""
    STUDENT = "student"
    LEAD = "lead"


class Cardinality(Enum):
    """Shape of a normalized result."""
    EMPTY = "empty"
    ONE = "one"
    MANY = "many"


# Every name here is also a tool in config.TOOL_DEFINITIONS
FUNCTION_ENTITY_KINDS: Dict[str, EntityKind] = {
    "search_students": EntityKind.STUDENT,
    "get_student": EntityKind.STUDENT,
    "find_student": EntityKind.STUDENT,
    "list_at_risk_students": EntityKind.STUDENT,
    "list_late_payments": EntityKind.STUDENT,
    "search_leads": EntityKind.LEAD,
    "get_lead": EntityKind.LEAD,
}

# Keys under which the CRM data layer wraps list payloads
_COLLECTION_KEYS = {
    EntityKind.STUDENT: "students",
    EntityKind.LEAD: "leads",
}


def classify_function(function_name: str) -> Optional[EntityKind]:
    """Entity kind produced by a function, or None for functions that are not rendered as blocks."""
    return FUNCTION_ENTITY_KINDS.get(function_name)


# ============================================================================
# UI BLOCKS
# ============================================================================

@dataclass(frozen=True)
class StudentCardBlock:
    student_id: int
    label: str
    type: str = field(default="student_card", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "studentId": self.student_id, "label": self.label}


@dataclass(frozen=True)
class StudentListBlock:
    student_ids: List[int]
    label: str
    type: str = field(default="student_list", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "studentIds": list(self.student_ids), "label": self.label}


@dataclass(frozen=True)
class LeadCardBlock:
    lead_id: int
    label: str
    type: str = field(default="lead_card", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "leadId": self.lead_id, "label": self.label}


@dataclass(frozen=True)
class LeadListBlock:
    lead_ids: List[int]
    label: str
    type: str = field(default="lead_list", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "leadIds": list(self.lead_ids), "label": self.label}


UIBlock = Union[StudentCardBlock, StudentListBlock, LeadCardBlock, LeadListBlock]


@dataclass
class FormattedResults:
    """
    Output of the mapper.

    Attributes:
        text: Short natural-language summary (may be empty)
        ui_blocks: One block per entity-returning, non-empty result, in input order
    """
    text: str = ""
    ui_blocks: List[UIBlock] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "ui_blocks": [block.to_dict() for block in self.ui_blocks],
        }


# ============================================================================
# BLOCK BUILDERS
# ============================================================================

def display_name(entity: Mapping[str, Any], kind: EntityKind) -> str:
    """'<firstName> <lastName>', or '<Kind> #<id>' when the entity has no name."""
    name = " ".join(
        str(part).strip()
        for part in (entity.get("firstName"), entity.get("lastName"))
        if part
    ).strip()
    if name:
        return name
    return f"{kind.value.capitalize()} #{entity.get('id')}"


def _list_label(count: int, kind: EntityKind) -> str:
    return f"{count} {kind.value}s"


def _student_card(items: Sequence[Mapping[str, Any]]) -> UIBlock:
    entity = items[0]
    return StudentCardBlock(student_id=entity["id"], label=display_name(entity, EntityKind.STUDENT))


def _student_list(items: Sequence[Mapping[str, Any]]) -> UIBlock:
    return StudentListBlock(
        student_ids=[item["id"] for item in items],
        label=_list_label(len(items), EntityKind.STUDENT),
    )


def _lead_card(items: Sequence[Mapping[str, Any]]) -> UIBlock:
    entity = items[0]
    return LeadCardBlock(lead_id=entity["id"], label=display_name(entity, EntityKind.LEAD))


def _lead_list(items: Sequence[Mapping[str, Any]]) -> UIBlock:
    return LeadListBlock(
        lead_ids=[item["id"] for item in items],
        label=_list_label(len(items), EntityKind.LEAD),
    )


BLOCK_BUILDERS: Dict[tuple, Callable[[Sequence[Mapping[str, Any]]], UIBlock]] = {
    (EntityKind.STUDENT, Cardinality.ONE): _student_card,
    (EntityKind.STUDENT, Cardinality.MANY): _student_list,
    (EntityKind.LEAD, Cardinality.ONE): _lead_card,
    (EntityKind.LEAD, Cardinality.MANY): _lead_list,
}


# ============================================================================
# NORMALIZATION
# ============================================================================

def normalize_result(result: Any, kind: EntityKind) -> List[Mapping[str, Any]]:
    """
    Normalize a function result to a list of entities.

    None -> [], a single entity -> [entity], a {"students": [...]} or
    {"leads": [...]} payload -> its list. Order is preserved; nothing is
    sorted or de-duplicated.
    """
    if result is None or isinstance(result, (str, bytes)):
        return []
    if isinstance(result, Mapping):
        collection_key = _COLLECTION_KEYS[kind]
        if collection_key in result and "id" not in result:
            return normalize_result(result[collection_key], kind)
        return [result]
    return list(result)


def cardinality_of(items: Sequence[Any]) -> Cardinality:
    if not items:
        return Cardinality.EMPTY
    if len(items) == 1:
        return Cardinality.ONE
    return Cardinality.MANY


def _summarize(kind: EntityKind, items: Sequence[Mapping[str, Any]]) -> str:
    cardinality = cardinality_of(items)
    if cardinality is Cardinality.EMPTY:
        return f"No {kind.value}s found."
    if cardinality is Cardinality.ONE:
        return f"Found {display_name(items[0], kind)}."
    return f"Found {_list_label(len(items), kind)}."


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def _plain_text(result: Any) -> str:
    """
    Text for a function with no entity kind.

    Strings and numbers are echoed. A flat mapping of scalars reads as
    "key: value, key: value" with None values left out. Booleans, lists and
    mappings holding nested values give no text.
    """
    if _is_scalar(result):
        return str(result)
    if isinstance(result, Mapping):
        present = {key: value for key, value in result.items() if value is not None}
        if present and all(_is_scalar(value) for value in present.values()):
            return ", ".join(f"{key}: {value}" for key, value in present.items())
    return ""


# ============================================================================
# MAPPER
# ============================================================================

def format_function_results(results: Sequence[Mapping[str, Any]]) -> FormattedResults:
    """
    Map executed function results to a text summary and UI blocks.

    Args:
        results: Entries shaped {"function": name, "result": entity | entity[] | None}

    Returns:
        FormattedResults with one block per entity-returning, non-empty entry,
        in input order. Entries are never merged: two single-student results
        give two cards.

    Example:
        >>> formatted = format_function_results([
        ...     {"function": "get_student", "result": {"id": 789, "firstName": "Michael", "lastName": "Chen"}}
        ... ])
        >>> formatted.to_dict()["ui_blocks"]
        [{'type': 'student_card', 'studentId': 789, 'label': 'Michael Chen'}]
    """
    summaries: List[str] = []
    blocks: List[UIBlock] = []

    for entry in results:
        function_name = entry.get("function", "")
        result = entry.get("result")
        kind = classify_function(function_name)

        if kind is None:
            # Text-only fallback
            text = _plain_text(result)
            if text:
                summaries.append(text)
            continue

        items = normalize_result(result, kind)
        summaries.append(_summarize(kind, items))

        builder = BLOCK_BUILDERS.get((kind, cardinality_of(items)))
        if builder is not None:
            blocks.append(builder(items))

    return FormattedResults(text=" ".join(s for s in summaries if s), ui_blocks=blocks)
