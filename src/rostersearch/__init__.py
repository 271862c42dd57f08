"""RosterSearch — Visibility-aware student search over an external index."""

__version__ = "0.1.0"
