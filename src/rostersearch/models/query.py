"""Compiled query and structured filter models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Primary clause that matches every document in the collection
MATCH_ALL = "*:*"


class FilterClause(BaseModel):
    """Exact-match constraint on one index field.

    Values are OR-combined inside the clause; clauses are AND-combined
    across a query. Clauses are frozen once built.
    """

    model_config = ConfigDict(frozen=True)

    field: str = Field(description="Index field name, e.g. 'courseId'")
    values: tuple[str, ...] = Field(min_length=1, description="Accepted exact values")


class CompiledQuery(BaseModel):
    """Query understood by a search adapter.

    A document matches when it satisfies ``text`` and every clause in
    ``filters``. An empty ``text`` or ``MATCH_ALL`` matches everything.
    """

    text: str = Field(default="", description="Primary free-text clause")
    filters: list[FilterClause] = Field(default_factory=list, description="Conjunctive filter clauses")

    @property
    def matches_all(self) -> bool:
        return self.text in ("", MATCH_ALL)

    def clauses_for(self, field: str) -> list[FilterClause]:
        return [clause for clause in self.filters if clause.field == field]


class SearchFilters(BaseModel):
    """Optional structured filters for a student search.

    Every field defaults to unconstrained. Blank values are treated the
    same as ``None``.
    """

    course_id: str | None = Field(default=None, description="Restrict to one course")
    section: str | None = Field(default=None, description="Restrict to one section")
    team: str | None = Field(default=None, description="Restrict to one team")
    registration_status: str | None = Field(
        default=None,
        description="REGISTERED or UNREGISTERED (case-insensitive)",
    )
