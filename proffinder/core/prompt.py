"""
Centralized LLM prompt template for ProfFinder.
"""
from ..models.schema import Query
from .config import LINK_NOT_WORKING

ANY_INSTITUTE = "Any relevant IIT/NIT"
ANY_DEPARTMENT = "Any relevant department"
NO_KEYWORD = "Not specified"

PROFESSOR_SEARCH_TEMPLATE = """\
You are a smart outreach automation assistant. Your task is to fetch details of professors at selected IITs/NITs and stream them as you find them.

User's Search Criteria:
- Institute: {institute}
- Department/Branch: {department}
- Research Keyword/Topic: {keyword}

Rules:
- Find professors matching the user's criteria.
- If a keyword is provided, filter professors whose research aligns with the keyword.
- For each professor, find all the required details.
- CRITICAL: If you cannot find a valid, working webpage for the professor or their department, you MUST return "{link_not_working}" for the "Institute Website" field. Do not invent links.
- CRITICAL: Return each professor found as a separate, complete JSON object on a new line. Do not wrap them in a JSON array. Each line must be a valid JSON object.
- If no professors are found, return nothing.

Example of a single line of output for one professor:
{{"Name": "Dr. Example Name", "Designation": "Professor, Computer Science", "Institute": "IIT Example", "Email": "prof@example.com", "LinkedIn": "https://linkedin.com/in/prof", "Research Interests": "AI, ML", "Internship/Outreach": null, "Institute Website": "https://example.edu/prof", "Summary": "A summary of work."}}
"""


def _or(value, fallback: str) -> str:
    value = (value or "").strip()
    return value or fallback


def build_prompt(query: Query) -> str:
    return PROFESSOR_SEARCH_TEMPLATE.format(
        institute=_or(query.institute, ANY_INSTITUTE),
        department=_or(query.department, ANY_DEPARTMENT),
        keyword=_or(query.keyword, NO_KEYWORD),
        link_not_working=LINK_NOT_WORKING,
    )


__all__ = [
    "ANY_INSTITUTE",
    "ANY_DEPARTMENT",
    "NO_KEYWORD",
    "PROFESSOR_SEARCH_TEMPLATE",
    "build_prompt",
]
