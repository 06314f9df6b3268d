"""Source Clients — one adapter per environmental data provider.

Invariants:
    - fetch(latitude, longitude) -> SourceResult; never raises
    - Each adapter owns its URL, query shape, timeout and (soil only) retry policy
    - Only the sub-structure the pipeline needs is returned in SourceOk

Design Decisions:
    - Template method in base.SourceClient: shared error mapping, per-provider
      request building and extraction (ADR: one failure-handling path)
"""
