from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .models import AnalysisReport, NewsVerificationResult, Stage1Decision
from .stage1 import run_stage1
from .trust_engine import VerificationEngine

logger = logging.getLogger(__name__)


@dataclass
class NewsVerificationPipeline:
    """Stage 1, then Stage 2 only when the article was let through."""

    engine: VerificationEngine = field(default_factory=VerificationEngine)

    def stage1(self, content: str, source_url: str | None = None) -> Stage1Decision:
        return run_stage1(content, source_url)

    async def stage2(self, content: str, source_url: str | None = None) -> NewsVerificationResult:
        return await self.engine.verify(content, source_url)

    async def analyze(self, content: str, source_url: str | None = None) -> AnalysisReport:
        decision = self.stage1(content, source_url)
        if not decision.ready_for_stage2:
            logger.info("Analysis stopped after Stage 1: %s", decision.reason)
            return AnalysisReport(stage1=decision)
        result = await self.stage2(content, source_url)
        return AnalysisReport(stage1=decision, stage2=result)


async def run_stage2(
    content: str,
    source_url: str | None = None,
    *,
    engine: VerificationEngine | None = None,
) -> NewsVerificationResult:
    return await (engine or VerificationEngine()).verify(content, source_url)


__all__ = ["NewsVerificationPipeline", "run_stage1", "run_stage2"]
