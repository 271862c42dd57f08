"""Document builder — Projects a student (and its course) into an index document."""

from __future__ import annotations

from rostersearch.models.document import StudentSearchDocument
from rostersearch.models.student import CourseRecord, StudentRecord


def build_document(student: StudentRecord, course: CourseRecord | None = None) -> StudentSearchDocument:
    """Build the search document for one student.

    The free-text field concatenates name, email, course id, course name,
    team, section and registration status in that order. A missing course
    contributes an empty name.

    Args:
        student: The student to project.
        course: The student's course, or None if it was deleted or not loaded.

    Returns:
        The document to write to the index.
    """
    status = student.registration_status
    searchable_texts = [
        student.name,
        student.email,
        student.course_id,
        course.name if course is not None else "",
        student.team,
        student.section,
        status.value,
    ]

    return StudentSearchDocument(
        id=student.id,
        text=" ".join(searchable_texts),
        course_id=student.course_id,
        email=student.email,
        name=student.name,
        team=student.team,
        section=student.section,
        registration_status=status,
    )
