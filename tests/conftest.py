"""
Pytest configuration for TagAssist tests.

Sets up test environment and global fixtures.
"""
import json
import os
from typing import Callable, List, Optional
from unittest.mock import AsyncMock

import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")

from tagassist.schemas.tags import VocabularyEntry, Work  # noqa: E402
from tagassist.services.recommendation_pipeline import (  # noqa: E402
    RecommendationPipeline,
    ResubmissionPolicy,
)
from tagassist.services.registry import WorkRegistry  # noqa: E402


class StaticVocabularySource:
    """In-memory vocabulary source; counts how often it was read."""

    def __init__(self, entries: List[VocabularyEntry]):
        self.entries = entries
        self.loads = 0

    def load(self) -> List[VocabularyEntry]:
        self.loads += 1
        return list(self.entries)


def build_tag_payload(to_add=(), to_remove=()) -> str:
    """Build a model response body in the expected JSON shape."""
    return json.dumps({"content": {"toAdd": list(to_add), "toRemove": list(to_remove)}})


@pytest.fixture
def tag_payload() -> Callable[..., str]:
    """The response body builder, for tests that set backend.generate."""
    return build_tag_payload


@pytest.fixture
def vocabulary_entries() -> List[VocabularyEntry]:
    return [
        VocabularyEntry(category="fandom", name="Example Fandom", uses=1200),
        VocabularyEntry(category="character", name="Example Hero", uses=640),
        VocabularyEntry(category="character", name="Example Rival", uses=310),
        VocabularyEntry(category="freeform", name="Fluff", uses=650389),
        VocabularyEntry(category="freeform", name="Angst", uses=810264),
    ]


@pytest.fixture
def vocabulary_source(vocabulary_entries) -> StaticVocabularySource:
    return StaticVocabularySource(vocabulary_entries)


@pytest.fixture
def registry() -> WorkRegistry:
    return WorkRegistry()


@pytest.fixture
def backend() -> AsyncMock:
    """Generation backend whose generate() result each test sets."""
    mock_backend = AsyncMock()
    mock_backend.generate.return_value = build_tag_payload()
    return mock_backend


@pytest.fixture
def make_pipeline(registry, backend, vocabulary_source) -> Callable[..., RecommendationPipeline]:
    def factory(
        policy: ResubmissionPolicy = ResubmissionPolicy.REPLACE,
        enforce_vocabulary: bool = True,
        vocabulary: Optional[StaticVocabularySource] = None,
    ) -> RecommendationPipeline:
        return RecommendationPipeline(
            registry=registry,
            backend=backend,
            vocabulary_source=vocabulary or vocabulary_source,
            policy=policy,
            enforce_vocabulary=enforce_vocabulary,
        )
    return factory


@pytest.fixture
def untagged_work() -> Work:
    return Work(title="A Quiet Evening", body="The hero walked through the world of Example.", author_tags=())


@pytest.fixture
def tagged_work() -> Work:
    return Work(
        title="Rivals",
        body="Example Hero and Example Rival argue, then make tea.",
        author_tags=("Example Fandom", "Angst"),
    )
