"""
Prompt templates, tool definitions and output schemas for Kai.

This module contains:
- The conversational system prompt for the assistant
- Persona prompts for schedule and roster extraction
- Function calling tool definitions
- JSON schemas for structured outputs

All prompts should be maintained here (not hardcoded in services/core).
"""

from typing import Dict

from .settings import DAYS_OF_WEEK

# ============================================================================
# SYSTEM PROMPTS
# ============================================================================

KAI_SYSTEM_PROMPT = """You are {assistant_name}, the assistant living inside this martial arts school's management system. You help the school owner and staff run the dojo: students, leads, attendance, schedules and revenue.

**Your personality:**
- Warm and encouraging, like a sensei who is also a good training partner
- Celebrate wins, offer calm guidance when numbers are down
- A light touch of martial arts philosophy is welcome, never at the expense of clarity

**Data tools available:**
- get_student_count, find_student, search_students, get_student: look up students
- list_at_risk_students: students who are inactive or on hold
- list_late_payments: students with overdue payments
- get_leads, search_leads, get_lead: look up prospective students
- get_revenue: revenue for a period

**Rules:**
- Keep answers short: two to four sentences unless the user asks for detail
- Only state facts that come from the conversation or from tool results. If you do not have the data, call a tool or say you don't know
- Format numbers clearly: "$1,234" for money, "42 students" for counts, percentages with at most one decimal
- When you retrieve students or leads with a tool, the interface renders cards for them automatically. Refer to them naturally by name ("I found Emma Johnson, a blue belt in Kids Karate") instead of repeating every field

**Pasted tables and spreadsheets:**
When the user pastes tabular data (rosters, class schedules, lead lists):
1. Summarize what you see: the kind of data, the number of rows and the columns you recognized
2. Point out anything missing or ambiguous
3. Ask the user to confirm before anything is imported. Never claim data was imported until the user has confirmed

Remember: you are a trusted companion in building a thriving school, not just a query tool."""

# Shared persona for every extraction pipeline
EXTRACTION_PERSONA = """You are a {task} extraction assistant for a martial arts school management system called {system_name}.
Your task is to analyze {source} and extract structured {subject} information."""

SCHEDULE_EXTRACTION_GUIDELINES = """Guidelines:
- Extract every class in the schedule
- Convert all times to 24-hour HH:MM format (e.g., 4:30 PM = "16:30", 6pm = "18:00")
- dayOfWeek must be one of: {days}
- If a class meets on several days (e.g., "Mon-Wed-Fri" or "Tue/Thu"), create one separate entry per day
- If an end time is not given, estimate it from typical durations: 45-60 minutes for kids/youth classes, 60-90 minutes for adult classes
- Set confidence from 0.0 to 1.0 based on legibility and completeness of the source
- Add a warning for every value you inferred or found ambiguous (estimated end times, unclear days, guessed instructors)

Common martial arts class types:
- Karate, Taekwondo, Judo, Brazilian Jiu-Jitsu (BJJ), Muay Thai, Kickboxing
- Kids classes, Adult classes, Competition/Advanced classes
- Open mat, Sparring, Fundamentals"""

ROSTER_EXTRACTION_GUIDELINES = """Guidelines:
- Extract every student in the document
- Look for columns or fields containing: names, phone numbers, emails, belt ranks, ages/DOB, guardian info
- Parse CSV, tab-separated, or plain text layouts
- Format phone numbers as XXX-XXX-XXXX
- Convert dates to YYYY-MM-DD
- Infer program from age when available (Kids: 4-12, Teens: 13-17, Adults: 18+)
- If guardian info is present, the student is likely a minor
- Set confidence from 0.0 to 1.0 based on legibility and completeness of the source
- Add a warning for every value you inferred or found ambiguous (e.g., illegible handwriting)

Common belt rank systems:
- Traditional: White, Yellow, Orange, Green, Blue, Purple, Brown, Black
- Some schools use stripes or tips between ranks
- "No belt" or blank usually means a White belt beginner"""

# ============================================================================
# USER PROMPT TEMPLATES (Extraction)
# ============================================================================

SCHEDULE_IMAGE_PROMPT = "Please extract the class schedule from this image."
SCHEDULE_TEXT_PROMPT = "Please extract the class schedule from this text:\n\n{text}"
SCHEDULE_TEXT_WITH_CONTEXT_PROMPT = (
    "Please extract the class schedule from this text. "
    "Additional context: {context}\n\nSchedule text:\n{text}"
)

ROSTER_IMAGE_PROMPT = (
    "Please extract the student roster from this image. Look for student names, "
    "contact information, belt ranks, and any guardian/parent information."
)
ROSTER_TEXT_PROMPT = "Please extract the student roster from this text:\n\n{text}"
ROSTER_TEXT_WITH_CONTEXT_PROMPT = (
    "Please extract the student roster from this text. "
    "Additional context: {context}\n\nRoster data:\n{text}"
)

# ============================================================================
# TOOL DEFINITIONS (Function Calling)
# ============================================================================

def _function_tool(name: str, description: str, properties: Dict, required=None) -> Dict:
    """Build one function-tool definition in the chat wire shape."""
    parameters = {"type": "object", "properties": properties}
    if required:
        parameters["required"] = list(required)
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": parameters,
        },
    }


_SEARCH_QUERY = {
    "query": {
        "type": "string",
        "description": "Search query (name, email, or phone)",
    }
}

TOOL_DEFINITIONS = (
    _function_tool(
        "get_student_count",
        "Get the total number of students in the dojo",
        {
            "status": {
                "type": "string",
                "enum": ["active", "inactive", "all"],
                "description": "Filter by student status",
            }
        },
    ),
    _function_tool(
        "find_student",
        "Find a student by name, email, or phone number",
        {
            "query": {
                "type": "string",
                "description": "Student name, email, or phone to search for",
            }
        },
        required=["query"],
    ),
    _function_tool(
        "get_revenue",
        "Get revenue information for the dojo",
        {
            "period": {
                "type": "string",
                "enum": ["today", "week", "month", "year"],
                "description": "Time period for revenue calculation",
            }
        },
    ),
    _function_tool(
        "get_leads",
        "Get information about leads (prospective students)",
        {
            "status": {
                "type": "string",
                "enum": ["new", "contacted", "converted", "all"],
                "description": "Filter by lead status",
            }
        },
    ),
    _function_tool(
        "search_students",
        "Search for students by name, email, or phone number. Returns a list of matching students with their IDs.",
        _SEARCH_QUERY,
        required=["query"],
    ),
    _function_tool(
        "get_student",
        "Get full details for a specific student by ID",
        {"studentId": {"type": "number", "description": "Student ID"}},
        required=["studentId"],
    ),
    _function_tool(
        "list_at_risk_students",
        "Find students who are inactive or on hold. Returns a list of at-risk students.",
        {},
    ),
    _function_tool(
        "list_late_payments",
        "Find students with overdue payments. Returns a list of students with late payments.",
        {},
    ),
    _function_tool(
        "search_leads",
        "Search for leads by name, email, or phone number. Returns a list of matching leads with their IDs.",
        _SEARCH_QUERY,
        required=["query"],
    ),
    _function_tool(
        "get_lead",
        "Get full details for a specific lead by ID",
        {"leadId": {"type": "number", "description": "Lead ID"}},
        required=["leadId"],
    ),
)

# ============================================================================
# JSON SCHEMAS (Structured Outputs)
# ============================================================================

SCHEDULE_EXTRACTION_SCHEMA = {
    "name": "schedule_extraction",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "success": {
                "type": "boolean",
                "description": "Whether a schedule was found and extracted",
            },
            "classes": {
                "type": "array",
                "description": "One entry per class per day",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "description": "Class name"},
                        "dayOfWeek": {"type": "string", "enum": list(DAYS_OF_WEEK)},
                        "startTime": {"type": "string", "description": "24-hour HH:MM"},
                        "endTime": {"type": "string", "description": "24-hour HH:MM"},
                        "instructor": {"type": "string"},
                        "location": {"type": "string"},
                        "level": {
                            "type": "string",
                            "description": "Beginner, Intermediate, Advanced, All Levels",
                        },
                        "maxCapacity": {"type": "integer"},
                        "notes": {"type": "string"},
                    },
                    "required": ["name", "dayOfWeek", "startTime", "endTime"],
                    "additionalProperties": False,
                },
            },
            "confidence": {
                "type": "number",
                "description": "Confidence from 0 to 1 in the extraction",
            },
            "warnings": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Inferred or ambiguous values",
            },
        },
        "required": ["success", "classes", "confidence"],
        "additionalProperties": False,
    },
}

BELT_RANKS = ["White", "Yellow", "Orange", "Green", "Blue", "Purple", "Brown", "Red", "Black", "None"]
PROGRAMS = ["Kids", "Teens", "Adults", "Family", "Competition"]
MEMBERSHIP_STATUSES = ["Active", "Trial", "Inactive", "Pending"]

ROSTER_EXTRACTION_SCHEMA = {
    "name": "roster_extraction",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "success": {
                "type": "boolean",
                "description": "Whether student data was successfully extracted",
            },
            "students": {
                "type": "array",
                "description": "List of extracted students",
                "items": {
                    "type": "object",
                    "properties": {
                        "firstName": {"type": "string"},
                        "lastName": {"type": "string"},
                        "email": {"type": "string"},
                        "phone": {"type": "string", "description": "XXX-XXX-XXXX"},
                        "dateOfBirth": {"type": "string", "description": "YYYY-MM-DD"},
                        "beltRank": {"type": "string", "enum": BELT_RANKS},
                        "program": {"type": "string", "enum": PROGRAMS},
                        "guardianName": {"type": "string"},
                        "guardianPhone": {"type": "string"},
                        "guardianEmail": {"type": "string"},
                        "address": {"type": "string"},
                        "city": {"type": "string"},
                        "state": {"type": "string", "description": "Two-letter state code"},
                        "zipCode": {"type": "string"},
                        "notes": {"type": "string"},
                        "membershipStatus": {"type": "string", "enum": MEMBERSHIP_STATUSES},
                    },
                    "required": ["firstName", "lastName"],
                    "additionalProperties": False,
                },
            },
            "confidence": {
                "type": "number",
                "description": "Confidence from 0 to 1 in the extraction",
            },
            "warnings": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Inferred or ambiguous values",
            },
            "totalFound": {
                "type": "integer",
                "description": "Total number of students found in the document",
            },
        },
        "required": ["success", "students", "confidence", "totalFound"],
        "additionalProperties": False,
    },
}

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def format_prompt(template: str, **kwargs) -> str:
    """
    Format a prompt template with provided variables.

    Args:
        template: Prompt template string with {placeholders}
        **kwargs: Variables to substitute into the template

    Returns:
        Formatted prompt string
    """
    try:
        return template.format(**kwargs)
    except KeyError as e:
        raise ValueError(f"Missing required prompt variable: {e}")


def get_tool_by_name(tool_name: str) -> Dict:
    """
    Retrieve tool definition by name.

    Args:
        tool_name: Name of the tool to retrieve

    Returns:
        Tool definition dictionary

    Raises:
        ValueError: If tool name not found
    """
    tool = next((t for t in TOOL_DEFINITIONS if t["function"]["name"] == tool_name), None)
    if not tool:
        available = [t["function"]["name"] for t in TOOL_DEFINITIONS]
        raise ValueError(f"Tool '{tool_name}' not found. Available: {available}")
    return tool


def build_schedule_system_prompt(source: str, system_name: str) -> str:
    """System prompt for schedule extraction from `source` ("images" or "text content")."""
    persona = format_prompt(
        EXTRACTION_PERSONA,
        task="schedule",
        system_name=system_name,
        source=f"{source} of class schedules",
        subject="class",
    )
    guidelines = format_prompt(SCHEDULE_EXTRACTION_GUIDELINES, days=", ".join(DAYS_OF_WEEK))
    return f"{persona}\n\n{guidelines}"


def build_roster_system_prompt(source: str, system_name: str) -> str:
    """System prompt for roster extraction from `source`."""
    persona = format_prompt(
        EXTRACTION_PERSONA,
        task="student roster",
        system_name=system_name,
        source=f"{source} of student rosters, sign-in sheets, or enrollment lists",
        subject="student",
    )
    return f"{persona}\n\n{ROSTER_EXTRACTION_GUIDELINES}"
