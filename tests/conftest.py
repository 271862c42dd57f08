"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from rostersearch.adapters.memory.adapter import MemoryAdapter
from rostersearch.config.settings import Settings
from rostersearch.core.manager import StudentSearchManager
from rostersearch.models.student import CourseRecord, InstructorPrivilege, StudentRecord
from rostersearch.store import InMemoryStudentStore


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance using the in-memory backend."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        index={"backend": "memory", "reset_allowed": True},
    )


@pytest.fixture
def courses() -> list[CourseRecord]:
    return [
        CourseRecord(id="CS101", name="Intro to Programming"),
        CourseRecord(id="CS201", name="Data Structures"),
        CourseRecord(id="MA101", name="Calculus I"),
    ]


@pytest.fixture
def students() -> list[StudentRecord]:
    return [
        StudentRecord(
            id="s-bob",
            name="Bob",
            email="bob@x.com",
            course_id="CS101",
            team="teamX",
            section="sec2",
            google_id="bob.g",
            is_registered=True,
        ),
        StudentRecord(
            id="s-ann",
            name="Ann",
            email="ann@x.com",
            course_id="CS101",
            team="teamY",
            section="sec1",
            is_registered=False,
        ),
        StudentRecord(
            id="s-cid",
            name="Cid Moss",
            email="cid@x.com",
            course_id="CS201",
            team="Team (A)",
            section='Section "1"',
            google_id="cid.g",
            is_registered=True,
        ),
        StudentRecord(
            id="s-dee",
            name="Dee",
            email="dee@x.com",
            course_id="MA101",
            team="teamZ",
            section="sec1",
            is_registered=False,
        ),
    ]


@pytest.fixture
def store(courses: list[CourseRecord], students: list[StudentRecord]) -> InMemoryStudentStore:
    return InMemoryStudentStore(courses=courses, students=students)


@pytest.fixture
async def memory_adapter() -> MemoryAdapter:
    adapter = MemoryAdapter()
    await adapter.initialize()
    return adapter


@pytest.fixture
async def manager(memory_adapter: MemoryAdapter, store: InMemoryStudentStore) -> StudentSearchManager:
    """Manager over an in-memory index pre-loaded with every student."""
    manager = StudentSearchManager(memory_adapter, store, reset_allowed=True)
    await manager.index_students(store.students)
    return manager


@pytest.fixture
def cs101_viewer() -> list[InstructorPrivilege]:
    """Instructor who can view students in CS101 only."""
    return [
        InstructorPrivilege(course_id="CS101", can_view_student_in_sections=True, email="prof@x.com"),
        InstructorPrivilege(course_id="MA101", can_view_student_in_sections=False, email="prof@x.com"),
    ]


@pytest.fixture
def no_view_instructors() -> list[InstructorPrivilege]:
    """Instructor records without any view-student privilege."""
    return [
        InstructorPrivilege(course_id="CS101", can_view_student_in_sections=False),
        InstructorPrivilege(course_id="CS201", can_view_student_in_sections=False),
    ]
