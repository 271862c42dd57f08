"""Student search manager — Orchestrates indexing and visibility-aware search.

The search pipeline:
  1. Compile the raw text (with the REGISTERED / UNREGISTERED shortcut)
  2. Resolve the caller's visible courses; nothing visible returns early
  3. Add the visibility clause and any structured filters
  4. Execute against the index adapter
  5. Re-check every hit's course against the visible set
  6. Rebuild full student records from the store by ``(courseId, email)``
  7. Sort by course, section, team, name, email

The index-side visibility clause is treated as best effort: step 5 is the
authoritative check, so a stale or partially honoured clause can never
leak a student from an invisible course.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING

from rostersearch.adapters.base.adapter import AdapterHealth, SearchAdapter
from rostersearch.adapters.base.exceptions import ConfigurationError
from rostersearch.adapters.base.registry import AdapterRegistry
from rostersearch.core.document_builder import build_document
from rostersearch.core.query_compiler import QueryCompiler
from rostersearch.core.visibility import add_visibility_filter, allowed_courses
from rostersearch.models.document import COURSE_ID_FIELD, EMAIL_FIELD, first_value
from rostersearch.models.query import SearchFilters
from rostersearch.models.student import CourseRecord, InstructorPrivilege, StudentRecord
from rostersearch.store import StudentStore

if TYPE_CHECKING:
    from rostersearch.config.settings import Settings

logger = logging.getLogger(__name__)

STUDENT_COLLECTION = "students"


class StudentSearchManager:
    """Search proxy for student records.

    Holds no per-request state; safe to share across concurrent searches as
    long as the adapter and store are.

    Attributes:
        adapter: Index adapter the documents are written to and searched in.
        store: Store used for course lookups and record reconstruction.
        compiler: Query compiler.
        collection: Index collection name.
        max_results: Maximum number of documents fetched per search.
        reset_allowed: Whether ``reset_collection`` may wipe the collection.
    """

    def __init__(
        self,
        adapter: SearchAdapter,
        store: StudentStore,
        *,
        compiler: QueryCompiler | None = None,
        collection: str = STUDENT_COLLECTION,
        max_results: int = 1000,
        reset_allowed: bool = False,
    ) -> None:
        self.adapter = adapter
        self.store = store
        self.compiler = compiler or QueryCompiler()
        self.collection = collection
        self.max_results = max_results
        self.reset_allowed = reset_allowed

    @classmethod
    async def from_settings(
        cls,
        settings: Settings,
        store: StudentStore,
        registry: AdapterRegistry | None = None,
    ) -> StudentSearchManager:
        """Create a manager with an initialized adapter for the configured backend."""
        registry = registry or AdapterRegistry()
        adapter = await registry.create_from_settings(settings.index)
        return cls(
            adapter,
            store,
            collection=settings.index.collection,
            max_results=settings.index.max_results,
            reset_allowed=settings.index.reset_allowed,
        )

    async def health_check(self) -> AdapterHealth:
        return await self.adapter.health_check()

    async def shutdown(self) -> None:
        await self.adapter.shutdown()

    # ──────────────────────────────────────────────────────────────────────
    # Write path
    # ──────────────────────────────────────────────────────────────────────

    async def index_student(self, student: StudentRecord, course: CourseRecord | None = None) -> None:
        """Write (or overwrite) the search document for one student.

        Args:
            student: The student to index.
            course: The student's course. Looked up in the store when None;
                a course missing from the store contributes an empty name.
        """
        if course is None:
            course = await self.store.find_course(student.course_id)
        document = build_document(student, course)
        await self.adapter.index_documents(self.collection, [document.to_index_fields()])
        logger.debug("Indexed student %s in course %s", student.id, student.course_id)

    async def index_students(self, students: Iterable[StudentRecord]) -> int:
        """Write search documents for many students in one index call.

        Each distinct course is looked up once.

        Returns:
            Number of documents written.
        """
        courses: dict[str, CourseRecord | None] = {}
        documents = []
        for student in students:
            if student.course_id not in courses:
                courses[student.course_id] = await self.store.find_course(student.course_id)
            documents.append(build_document(student, courses[student.course_id]).to_index_fields())

        await self.adapter.index_documents(self.collection, documents)
        logger.info("Indexed %d students across %d courses", len(documents), len(courses))
        return len(documents)

    async def delete_student(self, student_id: str) -> None:
        """Remove one student's document from the index."""
        await self.adapter.delete_documents(self.collection, [student_id])

    async def reset_collection(self) -> None:
        """Delete every student document.

        Raises:
            ConfigurationError: If this manager was not created with
                ``reset_allowed=True``.
        """
        if not self.reset_allowed:
            raise ConfigurationError(f"Resetting collection '{self.collection}' is not allowed.")
        await self.adapter.delete_all(self.collection)

    # ──────────────────────────────────────────────────────────────────────
    # Search
    # ──────────────────────────────────────────────────────────────────────

    async def search(
        self,
        raw_text: str | None,
        instructors: list[InstructorPrivilege] | None,
        filters: SearchFilters | None = None,
    ) -> list[StudentRecord]:
        """Search for students visible to the given instructors.

        Args:
            raw_text: Free-text query. ``REGISTERED`` / ``UNREGISTERED`` select
                every student of that status.
            instructors: The caller's instructor records, or None for an
                unrestricted (internal) search.
            filters: Optional course / section / team / registration filters.

        Returns:
            Matching students in course, section, team, name, email order.
            Empty when nothing matches or nothing is visible.

        Raises:
            SearchServiceError: If the index call fails.
        """
        start_time = time.monotonic()

        query = self.compiler.compile(raw_text)

        allowed = allowed_courses(instructors)
        if allowed is not None and not allowed:
            logger.info("Search skipped: instructors have no course with view-student privilege")
            return []

        add_visibility_filter(self.compiler, query, allowed)
        self.compiler.apply_filters(query, filters)

        raw = await self.adapter.search(self.collection, query, self.max_results)

        students: list[StudentRecord] = []
        for document in raw.documents:
            course_id = first_value(document.get(COURSE_ID_FIELD))
            if allowed is not None and course_id not in allowed:
                logger.warning("Dropping hit %s from invisible course %s", document.get("id"), course_id)
                continue

            email = first_value(document.get(EMAIL_FIELD))
            student = await self.store.find_student_by_email(course_id, email)
            if student is None:
                logger.debug("Dropping stale hit: no student %s in course %s", email, course_id)
                continue
            students.append(student)

        students.sort(key=StudentRecord.sort_key)

        logger.info(
            "Search complete: %d of %d hits returned in %d ms",
            len(students),
            len(raw.documents),
            int((time.monotonic() - start_time) * 1000),
        )
        return students
