"""Core data models shared by the harvesting pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping


@dataclass(slots=True)
class BusinessRecord:
    """Structured snapshot of one business detail page.

    Every extracted field is a string; an empty string means the label was
    missing or carried no value.
    """

    url: str
    business_name: str = ""
    phone: str = ""
    address: str = ""
    typical_job_cost: str = ""
    license_number: str = ""
    followers: str = ""
    website: str = ""
    facebook: str = ""
    linkedin: str = ""
    other_website: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BusinessRecord":
        """Build a record from stored JSON, ignoring unknown keys."""
        if not data.get("url"):
            raise ValueError("url is required to build a BusinessRecord")
        values = {}
        for f in fields(cls):
            value = data.get(f.name)
            values[f.name] = "" if value is None else str(value)
        return cls(**values)


RECORD_FIELDS = tuple(f.name for f in fields(BusinessRecord))
