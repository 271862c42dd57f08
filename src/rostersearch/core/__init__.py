"""Core query/visibility pipeline."""

from rostersearch.core.document_builder import build_document
from rostersearch.core.manager import STUDENT_COLLECTION, StudentSearchManager
from rostersearch.core.query_compiler import QueryCompiler
from rostersearch.core.visibility import add_visibility_filter, allowed_courses

__all__ = [
    "STUDENT_COLLECTION",
    "QueryCompiler",
    "StudentSearchManager",
    "add_visibility_filter",
    "allowed_courses",
    "build_document",
]
