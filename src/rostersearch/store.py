"""Store collaborator — Keyed lookup of students and courses.

The search manager only reads from the store: courses to enrich documents
on write, students to rebuild full records from search hits.
``InMemoryStudentStore`` backs the CLI roster files and the tests.
"""

from __future__ import annotations

from typing import Any, Protocol

from rostersearch.models.student import CourseRecord, StudentRecord


class StudentStore(Protocol):
    """Read access to persisted courses and students."""

    async def find_course(self, course_id: str) -> CourseRecord | None:
        """Return the course, or None if it does not exist."""
        ...

    async def find_student_by_email(self, course_id: str, email: str) -> StudentRecord | None:
        """Return the student enrolled in ``course_id`` with ``email``, or None."""
        ...


class InMemoryStudentStore:
    """Dictionary-backed ``StudentStore``."""

    def __init__(
        self,
        courses: list[CourseRecord] | None = None,
        students: list[StudentRecord] | None = None,
    ) -> None:
        self._courses: dict[str, CourseRecord] = {}
        self._students: dict[tuple[str, str], StudentRecord] = {}
        for course in courses or []:
            self.put_course(course)
        for student in students or []:
            self.put_student(student)

    @classmethod
    def from_roster(cls, data: dict[str, Any]) -> InMemoryStudentStore:
        """Build a store from a roster mapping with ``courses`` and ``students`` lists."""
        return cls(
            courses=[CourseRecord.model_validate(c) for c in data.get("courses") or []],
            students=[StudentRecord.model_validate(s) for s in data.get("students") or []],
        )

    def put_course(self, course: CourseRecord) -> None:
        self._courses[course.id] = course

    def put_student(self, student: StudentRecord) -> None:
        self._students[(student.course_id, student.email)] = student

    def remove_course(self, course_id: str) -> None:
        self._courses.pop(course_id, None)

    def remove_student(self, course_id: str, email: str) -> None:
        self._students.pop((course_id, email), None)

    @property
    def students(self) -> list[StudentRecord]:
        return list(self._students.values())

    async def find_course(self, course_id: str) -> CourseRecord | None:
        return self._courses.get(course_id)

    async def find_student_by_email(self, course_id: str, email: str) -> StudentRecord | None:
        return self._students.get((course_id, email))
