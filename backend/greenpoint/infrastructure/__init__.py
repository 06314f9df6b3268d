"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external calls wrapped with timeout/error mapping
    - Source clients never raise past their own boundary (SourceResult out)

Design Decisions:
    - Resilient wrappers over raw clients (ADR: single responsibility)
"""
