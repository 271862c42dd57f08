"""Student search document — the flat projection of a student written to the index.

The model keeps a fixed, typed shape in Python while serializing to the
index's wire field names (``_text_``, ``courseId``, ``registrationStatus``
and so on) through aliases.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rostersearch.models.student import RegistrationStatus

# Index field names
ID_FIELD = "id"
TEXT_FIELD = "_text_"
COURSE_ID_FIELD = "courseId"
EMAIL_FIELD = "email"
NAME_FIELD = "name"
TEAM_FIELD = "team"
SECTION_FIELD = "section"
REGISTRATION_STATUS_FIELD = "registrationStatus"

# Fields a filter clause may target
FILTERABLE_FIELDS = frozenset({COURSE_ID_FIELD, SECTION_FIELD, TEAM_FIELD, REGISTRATION_STATUS_FIELD})


class StudentSearchDocument(BaseModel):
    """Searchable representation of one student.

    Field order matches the index document layout and is preserved by
    :meth:`to_index_fields`.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(alias=ID_FIELD, description="Student id; re-indexing the same id overwrites")
    text: str = Field(alias=TEXT_FIELD, description="Free-text blob used by the primary query clause")
    course_id: str = Field(alias=COURSE_ID_FIELD)
    email: str = Field(alias=EMAIL_FIELD)
    name: str = Field(alias=NAME_FIELD)
    team: str = Field(alias=TEAM_FIELD)
    section: str = Field(alias=SECTION_FIELD)
    registration_status: RegistrationStatus = Field(alias=REGISTRATION_STATUS_FIELD)

    def to_index_fields(self) -> dict[str, str]:
        """Serialize to the index document format (wire field names)."""
        return self.model_dump(by_alias=True, mode="json")


def first_value(val: Any) -> Any:
    """Backends may return single-valued fields as lists; unwrap transparently."""
    if isinstance(val, list):
        return val[0] if val else ""
    return val
