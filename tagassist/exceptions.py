"""
TagAssist exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""

from typing import List, Sequence


class TagAssistError(Exception):
    """Base class for every error raised by the recommendation core."""


class NotFoundError(TagAssistError):
    """The referenced work has no current recommendation set."""


class AlreadySubmittedError(TagAssistError):
    """Raised under the reject policy when a tracked work is submitted again."""


class VocabularyUnavailableError(TagAssistError):
    """The controlled vocabulary could not be loaded."""


class BackendError(TagAssistError):
    """The generation backend failed; the original error is chained as __cause__."""


class MalformedResponseError(TagAssistError):
    """The model response could not be parsed into the required shape."""


class InvalidRecommendationError(TagAssistError):
    """The response had the right shape but broke one or more tagging rules."""

    def __init__(self, violations: Sequence[str]):
        self.violations: List[str] = list(violations)
        super().__init__(
            "Model provided disallowed recommendations:\n- " + "\n- ".join(self.violations)
        )
