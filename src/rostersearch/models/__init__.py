"""Domain and index models."""

from rostersearch.models.document import StudentSearchDocument
from rostersearch.models.query import CompiledQuery, FilterClause, SearchFilters
from rostersearch.models.student import CourseRecord, InstructorPrivilege, RegistrationStatus, StudentRecord

__all__ = [
    "CompiledQuery",
    "CourseRecord",
    "FilterClause",
    "InstructorPrivilege",
    "RegistrationStatus",
    "SearchFilters",
    "StudentRecord",
    "StudentSearchDocument",
]
