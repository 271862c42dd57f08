"""Visibility resolver — Which courses an instructor list may see students in."""

from __future__ import annotations

from collections.abc import Iterable

from rostersearch.core.query_compiler import QueryCompiler
from rostersearch.models.document import COURSE_ID_FIELD
from rostersearch.models.query import CompiledQuery
from rostersearch.models.student import InstructorPrivilege


def allowed_courses(instructors: Iterable[InstructorPrivilege] | None) -> frozenset[str] | None:
    """Resolve the visibility set for a caller.

    Args:
        instructors: The caller's instructor records. None means the caller
            is not restricted (internal or admin use).

    Returns:
        None when unrestricted; otherwise the distinct ids of courses where
        the instructor can view students in sections. Blank course ids are
        ignored. An empty set means nothing is visible.
    """
    if instructors is None:
        return None
    return frozenset(
        i.course_id for i in instructors if i.can_view_student_in_sections and i.course_id.strip()
    )


def add_visibility_filter(
    compiler: QueryCompiler,
    query: CompiledQuery,
    allowed: frozenset[str] | None,
) -> CompiledQuery:
    """Restrict ``query`` to the visible courses as a single ``courseId`` clause.

    Unrestricted callers (``allowed is None``) get no clause. Course ids are
    sorted so identical callers produce identical queries.
    """
    if allowed is None:
        return query
    return compiler.add_filter(query, COURSE_ID_FIELD, sorted(allowed))
