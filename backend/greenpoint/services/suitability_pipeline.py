"""Suitability Pipeline — sequences species lookup → aggregation → analysis.

Invariants:
    - SpeciesNotFoundError propagates untouched (404); analysis never invoked
    - Source and analysis failures are already captured in the report
    - Any other failure is logged with detail and re-raised as PipelineError
      whose client-facing message is redacted

Design Decisions:
    - Kept out of the route module: routes stay thin, pipeline testable without HTTP
"""

import logging
from dataclasses import dataclass

from greenpoint.core.errors import GreenPointError, PipelineError
from greenpoint.core.records import AggregatedRecord, AnalysisResult
from greenpoint.services.aggregator import Aggregator
from greenpoint.services.analysis_invoker import AnalysisInvoker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuitabilityReport:
    aggregated_record: AggregatedRecord
    analysis_result: AnalysisResult

    def to_dict(self) -> dict:
        return {
            "aggregatedRecord": self.aggregated_record.to_dict(),
            "analysisResult": self.analysis_result.to_dict(),
        }


class SuitabilityPipeline:
    def __init__(self, aggregator: Aggregator, analysis: AnalysisInvoker) -> None:
        self.aggregator = aggregator
        self.analysis = analysis

    async def run(
        self,
        latitude: float,
        longitude: float,
        scientific_name: str,
        plan_description: str,
    ) -> SuitabilityReport:
        try:
            record = await self.aggregator.aggregate(
                latitude, longitude, scientific_name, plan_description,
            )
            logger.info(
                "Aggregated record prepared for analysis",
                extra={"scientific_name": record.species_requirements.scientific_name},
            )
            analysis = await self.analysis.analyze(record)
        except GreenPointError:
            raise
        except Exception as e:
            logger.error(f"Suitability pipeline failed: {e}", exc_info=True)
            raise PipelineError(str(e)) from e
        return SuitabilityReport(record, analysis)
