"""
Public operations surface of the tagging core.

TaggingService is what any front-end (HTTP routes, scripts) talks to:
submit, lookup, remove, remove_many, organize and render. It owns no state
beyond the registry and pipeline it is built with.
"""

import logging
from typing import Iterable, List, Optional

from tagassist.agents.tagging.agent import GeminiGenerationBackend, GenerationBackend
from tagassist.config import settings
from tagassist.exceptions import NotFoundError
from tagassist.schemas.tags import OrganizedTags, RecommendationSet, Work
from tagassist.services import rendering
from tagassist.services.recommendation_pipeline import RecommendationPipeline, ResubmissionPolicy
from tagassist.services.registry import WorkRegistry
from tagassist.services.vocabulary import CsvVocabularySource, VocabularySource

logger = logging.getLogger(__name__)


class TaggingService:
    """Facade over one WorkRegistry and the pipeline that fills it."""

    def __init__(self, pipeline: RecommendationPipeline):
        self.pipeline = pipeline
        self.registry = pipeline.registry

    async def submit(self, work: Work) -> RecommendationSet:
        return await self.pipeline.submit(work)

    def lookup(self, work: Work) -> Optional[RecommendationSet]:
        return self.registry.lookup(work)

    def find(self, work_id: str) -> Optional[RecommendationSet]:
        return self.registry.find(work_id)

    def get(self, work: Work) -> RecommendationSet:
        """Like lookup, but a missing entry raises NotFoundError."""
        rec_set = self.registry.lookup(work)
        if rec_set is None:
            raise NotFoundError(f"Work '{work.title}' ({work.work_id}) has no recommendations")
        return rec_set

    def remove(self, work: Work) -> RecommendationSet:
        logger.info(f"Removing recommendations for work_id={work.work_id}")
        return self.registry.remove(work)

    def remove_many(self, works: Iterable[Work]) -> List[RecommendationSet]:
        """
        Remove the sets of several works, in order.

        Not atomic: the first work without a set raises NotFoundError and
        the removals before it stay applied.
        """
        removed = []
        for work in works:
            removed.append(self.registry.remove(work))
        logger.info(f"Removed recommendations for {len(removed)} work(s)")
        return removed

    def organize(self, work: Work) -> OrganizedTags:
        return rendering.organize(self.get(work))

    def render(self, work: Work) -> str:
        return rendering.render(self.get(work))


def create_tagging_service(
    registry: Optional[WorkRegistry] = None,
    backend: Optional[GenerationBackend] = None,
    vocabulary_source: Optional[VocabularySource] = None,
) -> TaggingService:
    """
    Build a TaggingService wired from settings.

    Any collaborator can be passed in to replace the configured default.
    """
    pipeline = RecommendationPipeline(
        registry=registry if registry is not None else WorkRegistry(),
        backend=backend if backend is not None else GeminiGenerationBackend(),
        vocabulary_source=(
            vocabulary_source
            if vocabulary_source is not None
            else CsvVocabularySource(settings.VOCABULARY_CSV_PATH)
        ),
        policy=ResubmissionPolicy(settings.RESUBMISSION_POLICY.lower()),
        enforce_vocabulary=settings.ENFORCE_VOCABULARY,
    )
    return TaggingService(pipeline)
