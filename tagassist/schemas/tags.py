"""
Pydantic models for the tagging domain.

A Work is the creative text being tagged. Its identity is the opaque
work_id handle assigned at construction, never its content: two works
with identical title, body and tags are tracked as separate entities.
"""

from typing import Dict, List, Tuple
from uuid import uuid4

from pydantic import BaseModel, Field


class Work(BaseModel):
    """A piece of creative writing plus the tags its author chose."""

    model_config = {"frozen": True}

    title: str = Field(..., description="Title of the work")
    body: str = Field(..., description="Full text of the work")
    author_tags: Tuple[str, ...] = Field(
        default=(),
        description="Tags proposed by the author, in the order given",
    )
    work_id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Opaque identity handle assigned when the work is created",
    )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Work):
            return NotImplemented
        return self.work_id == other.work_id

    def __hash__(self) -> int:
        return hash(self.work_id)

    def has_author_tag(self, name: str) -> bool:
        return name in self.author_tags


class Tag(BaseModel):
    """A vocabulary term with its category and the model's justification."""

    name: str = Field(..., min_length=1, description="Vocabulary term", examples=["Harry Potter - J. K. Rowling"])
    type: str = Field(..., min_length=1, description="Category of the term in the vocabulary", examples=["fandom"])
    reason: str = Field(..., min_length=1, description="Why the tag should be added or removed")


class RecommendationSet(BaseModel):
    """The accepted additions and removals for exactly one work."""

    work: Work
    to_add: List[Tag] = Field(default_factory=list)
    to_remove: List[Tag] = Field(default_factory=list)


class OrganizedTags(BaseModel):
    """Recommendations grouped by category, first-seen category order kept."""

    to_add: Dict[str, List[Tag]] = Field(default_factory=dict)
    to_remove: Dict[str, List[Tag]] = Field(default_factory=dict)


class VocabularyEntry(BaseModel):
    """One row of the controlled vocabulary."""

    model_config = {"frozen": True}

    category: str
    name: str
    uses: int = 0
