"""Student, course and instructor privilege records as held by the store."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class RegistrationStatus(str, Enum):
    """Registration state of a student, as written to the index."""

    REGISTERED = "REGISTERED"
    UNREGISTERED = "UNREGISTERED"

    @classmethod
    def from_flag(cls, is_registered: bool) -> RegistrationStatus:
        return cls.REGISTERED if is_registered else cls.UNREGISTERED

    @classmethod
    def parse(cls, value: str | None) -> RegistrationStatus | None:
        """Match a user-supplied token against the two literal values.

        Surrounding whitespace and case are ignored. Returns None for
        anything that is not exactly one of the two values.
        """
        if value is None:
            return None
        normalized = value.strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            return None


class StudentRecord(BaseModel):
    """A student enrolled in a course.

    ``(email, course_id)`` is the natural key used to re-fetch a record
    after a search hit.
    """

    id: str = Field(description="Durable student identifier, reused as the index document id")
    name: str = Field(description="Display name")
    email: str = Field(description="Email address, unique within a course")
    course_id: str = Field(description="Identifier of the enrolling course")
    team: str = Field(default="", description="Team name")
    section: str = Field(default="", description="Section name")
    google_id: str | None = Field(default=None, description="Linked account id, set once the student registers")
    is_registered: bool = Field(default=False, description="Whether the student has joined the course")

    @property
    def registration_status(self) -> RegistrationStatus:
        return RegistrationStatus.from_flag(self.is_registered)

    def sort_key(self) -> tuple[str, str, str, str, str]:
        return (self.course_id, self.section, self.team, self.name, self.email)


class CourseRecord(BaseModel):
    """A course, looked up to enrich student documents with its name."""

    id: str = Field(description="Course identifier")
    name: str = Field(default="", description="Course display name")


class InstructorPrivilege(BaseModel):
    """One instructor's standing in one course."""

    course_id: str = Field(description="Course the privilege applies to")
    can_view_student_in_sections: bool = Field(
        default=False,
        description="Whether the instructor may view students in this course's sections",
    )
    email: str | None = Field(default=None, description="Instructor email, informational only")
