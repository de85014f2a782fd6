from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

# Wire keys, exactly as the model is told to emit them.
NAME = "Name"
DESIGNATION = "Designation"
INSTITUTE = "Institute"
EMAIL = "Email"
LINKEDIN = "LinkedIn"
RESEARCH_INTERESTS = "Research Interests"
OUTREACH = "Internship/Outreach"
INSTITUTE_WEBSITE = "Institute Website"
SUMMARY = "Summary"

REQUIRED_FIELDS: Tuple[str, ...] = (NAME, DESIGNATION)
OPTIONAL_FIELDS: Tuple[str, ...] = (
    INSTITUTE,
    EMAIL,
    LINKEDIN,
    RESEARCH_INTERESTS,
    OUTREACH,
    INSTITUTE_WEBSITE,
    SUMMARY,
)

Record = Mapping[str, Any]


@dataclass(frozen=True)
class Query:
    institute: Optional[str] = None
    department: Optional[str] = None
    keyword: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((value or "").strip() for value in (self.institute, self.department, self.keyword))


@dataclass
class ExtractStats:
    """Per-call counters; `emitted == 0` alone cannot tell "nothing found" from "all lines bad"."""

    lines: int = 0
    emitted: int = 0
    malformed: int = 0
    invalid: int = 0
    failed: bool = False

    @property
    def skipped(self) -> int:
        return self.malformed + self.invalid

    def to_dict(self) -> dict:
        return {
            "lines": self.lines,
            "emitted": self.emitted,
            "malformed": self.malformed,
            "invalid": self.invalid,
            "skipped": self.skipped,
            "failed": self.failed,
        }


def is_valid_record(obj: Any) -> bool:
    """A record needs both mandatory fields as non-empty strings; everything else is optional."""
    if not isinstance(obj, dict):
        return False
    for key in REQUIRED_FIELDS:
        value = obj.get(key)
        if not isinstance(value, str) or not value:
            return False
    return True


def normalize_record(obj: Mapping[str, Any]) -> Record:
    """
    Build the read-only mapping handed to the caller.

    Missing optional fields become None; keys we do not know about are kept as-is.
    """
    record = {key: obj.get(key) for key in REQUIRED_FIELDS + OPTIONAL_FIELDS}
    for key, value in obj.items():
        if key not in record:
            record[key] = value
    return MappingProxyType(record)
