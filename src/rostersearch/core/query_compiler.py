"""Query compiler — Turns raw query text and structured filters into a ``CompiledQuery``.

The compiler never talks to the index. It produces a backend-neutral query
(a primary text clause plus exact-match filter clauses) that each adapter
renders in its own syntax, escaping filter values on the way so that query
syntax inside a course id, section or team name cannot leak into the query.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from rostersearch.models.document import (
    COURSE_ID_FIELD,
    FILTERABLE_FIELDS,
    REGISTRATION_STATUS_FIELD,
    SECTION_FIELD,
    TEAM_FIELD,
)
from rostersearch.models.query import MATCH_ALL, CompiledQuery, FilterClause, SearchFilters
from rostersearch.models.student import RegistrationStatus

logger = logging.getLogger(__name__)


class QueryCompiler:
    """Builds compiled queries for the student collection.

    Stateless; a single instance may be shared across concurrent searches.

    Example:
        >>> compiler = QueryCompiler()
        >>> query = compiler.compile("  registered ")
        >>> query.text
        '*:*'
        >>> query.filters[0].values
        ('REGISTERED',)
    """

    def compile(self, raw_text: str | None) -> CompiledQuery:
        """Compile the primary clause from raw query text.

        A query that is exactly ``REGISTERED`` or ``UNREGISTERED`` (ignoring
        case and surrounding whitespace) becomes a match-all query with a
        ``registrationStatus`` filter, so the token finds every student of
        that status instead of students whose text merely contains it.

        Args:
            raw_text: Text typed by the user. None is treated as empty.

        Returns:
            A new query with the primary clause and any shortcut filter.
        """
        trimmed = (raw_text or "").strip()

        status = RegistrationStatus.parse(trimmed)
        if status is not None:
            query = CompiledQuery(text=MATCH_ALL)
            return self.add_filter(query, REGISTRATION_STATUS_FIELD, status.value)

        return CompiledQuery(text=trimmed)

    def add_filter(
        self,
        query: CompiledQuery,
        field: str,
        value: str | Iterable[str | None] | None,
    ) -> CompiledQuery:
        """Add one exact-match clause on ``field``.

        A None or blank value, or a collection with no non-blank values, adds
        nothing. Multiple values are OR-combined within the single clause.

        Args:
            query: Query to extend in place.
            field: One of the filterable index fields.
            value: A single value or a collection of values.

        Returns:
            The same query, for chaining.

        Raises:
            ValueError: If ``field`` is not a filterable index field.
        """
        if field not in FILTERABLE_FIELDS:
            raise ValueError(f"Cannot filter on '{field}'. Filterable fields: {sorted(FILTERABLE_FIELDS)}")

        values = self._clean_values(value)
        if not values:
            return query

        query.filters.append(FilterClause(field=field, values=values))
        return query

    def apply_filters(self, query: CompiledQuery, filters: SearchFilters | None) -> CompiledQuery:
        """Add a clause for each structured filter that carries a value."""
        if filters is None:
            return query

        self.add_filter(query, COURSE_ID_FIELD, filters.course_id)
        self.add_filter(query, SECTION_FIELD, filters.section)
        self.add_filter(query, TEAM_FIELD, filters.team)

        if filters.registration_status is not None and filters.registration_status.strip():
            status = RegistrationStatus.parse(filters.registration_status)
            if status is None:
                logger.debug("Ignoring unrecognised registration filter: %r", filters.registration_status)
            else:
                self.add_filter(query, REGISTRATION_STATUS_FIELD, status.value)

        return query

    @staticmethod
    def _clean_values(value: str | Iterable[str | None] | None) -> tuple[str, ...]:
        """Drop None and blank values; keep the first occurrence of each."""
        if value is None:
            return ()
        candidates = (value,) if isinstance(value, str) else value

        cleaned: list[str] = []
        for candidate in candidates:
            if candidate is None or not candidate.strip():
                continue
            if candidate not in cleaned:
                cleaned.append(candidate)
        return tuple(cleaned)
