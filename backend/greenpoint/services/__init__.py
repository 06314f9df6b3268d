"""Services Layer — async orchestration over core types and infrastructure clients.

Invariants:
    - Services never build HTTP responses (api/ does)
    - Every external failure is captured into SourceResult / AnalysisResult here
      or below; only request-level errors propagate

Design Decisions:
    - One module per pipeline stage: aggregator, analysis_invoker, suitability_pipeline
"""
