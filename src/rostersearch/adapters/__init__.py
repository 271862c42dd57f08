"""Index adapter layer — Pluggable connectors for the student search index.

Built-in adapters:
  - solr: Apache Solr v8+ (JSON Request API over HTTP)
  - memory: In-process index for local runs and tests

Implement ``SearchAdapter`` to connect another index backend.
"""
