"""
Recommendation pipeline: work in, validated RecommendationSet out.

This service:
1. Applies the resubmission policy
2. Builds the prompt from the work and the freshly loaded vocabulary
3. Awaits the generation backend (the only suspension point)
4. Extracts and shape-checks the JSON payload
5. Validates every candidate tag, collecting all violations
6. Commits the new set to the registry

Resubmission is transactional under both policies: the registry is only
written in step 6, so a failed submission leaves any previous set for the
work exactly as it was. No retries happen here; callers resubmit explicitly.
"""

import logging
from enum import Enum
from typing import Union

from tagassist.agents.tagging.agent import GenerationBackend
from tagassist.agents.tagging.prompts import build_tagging_user_prompt
from tagassist.exceptions import AlreadySubmittedError, BackendError
from tagassist.schemas.tags import RecommendationSet, Work
from tagassist.services.registry import WorkRegistry
from tagassist.services.response_parser import (
    parse_recommendation_response,
    validate_recommendations,
)
from tagassist.services.vocabulary import VocabularySource
from tagassist.utils.logging import truncate_for_log

logger = logging.getLogger(__name__)


class ResubmissionPolicy(str, Enum):
    """What happens when a work that already has a set is submitted again."""

    REPLACE = "replace"
    REJECT = "reject"


class RecommendationPipeline:
    """Stateless submission logic bound to one registry, backend and vocabulary."""

    def __init__(
        self,
        registry: WorkRegistry,
        backend: GenerationBackend,
        vocabulary_source: VocabularySource,
        policy: Union[ResubmissionPolicy, str] = ResubmissionPolicy.REPLACE,
        enforce_vocabulary: bool = True,
    ):
        self.registry = registry
        self.backend = backend
        self.vocabulary_source = vocabulary_source
        self.policy = ResubmissionPolicy(policy)
        self.enforce_vocabulary = enforce_vocabulary

    async def submit(self, work: Work) -> RecommendationSet:
        """
        Request, validate and store recommendations for a work.

        Args:
            work: The work to tag

        Returns:
            The RecommendationSet now stored for the work

        Raises:
            AlreadySubmittedError: Reject policy and the work already has a set
            VocabularyUnavailableError: The vocabulary could not be loaded
            BackendError: The generation backend failed
            MalformedResponseError: The response has no usable JSON payload
            InvalidRecommendationError: One or more tags broke the rules
        """
        logger.info(
            f"Submission received for work_id={work.work_id}, title='{work.title[:50]}', "
            f"author_tags={len(work.author_tags)}"
        )

        replace = self.policy is ResubmissionPolicy.REPLACE
        if not replace and self.registry.lookup(work) is not None:
            logger.warning(f"Rejected resubmission of work_id={work.work_id}")
            raise AlreadySubmittedError(
                f"Work '{work.title}' ({work.work_id}) already has recommendations"
            )

        vocabulary = self.vocabulary_source.load()
        prompt = build_tagging_user_prompt(work, vocabulary)

        logger.info("Requesting tag recommendations from generation backend...")
        try:
            response_text = await self.backend.generate(prompt)
        except BackendError:
            raise
        except Exception as e:
            logger.error(f"Generation backend failed: {e}")
            raise BackendError(f"Generation backend failed: {e}") from e

        logger.info("Received response from generation backend")
        logger.debug(f"Raw response: {truncate_for_log(response_text)}")

        raw_to_add, raw_to_remove = parse_recommendation_response(response_text)

        vocabulary_names = None
        if self.enforce_vocabulary:
            vocabulary_names = frozenset(entry.name for entry in vocabulary)

        to_add, to_remove = validate_recommendations(
            work, raw_to_add, raw_to_remove, vocabulary_names
        )

        rec_set = RecommendationSet(work=work, to_add=to_add, to_remove=to_remove)
        self.registry.store(work, rec_set, replace=replace)

        logger.info(
            f"Stored recommendations for work_id={work.work_id}: "
            f"{len(to_add)} to add, {len(to_remove)} to remove"
        )
        return rec_set
