"""
Pydantic schemas for the work submission endpoints.

These models define the request/response contracts for the HTTP surface.
Works are referenced by the opaque work_id returned on creation.
"""

from typing import Dict, List

from pydantic import BaseModel, Field

from tagassist.schemas.tags import RecommendationSet, Tag

# ============================================================================
# REQUEST MODELS
# ============================================================================

class WorkCreateRequest(BaseModel):
    """
    Request to create a work and request tag recommendations for it.

    Every request creates a new work with a fresh work_id, even when the
    title, body and tags match an earlier submission.
    """
    title: str = Field(
        ...,
        description="Title of the work",
        min_length=1,
        max_length=500,
        examples=["The Boy Who Lived Again"]
    )
    body: str = Field(
        ...,
        description="Full text of the work",
        min_length=1,
    )
    author_tags: List[str] = Field(
        default_factory=list,
        description="Tags the author proposes, in order",
        examples=[["Harry Potter - J. K. Rowling", "Time Travel"]]
    )


class BulkDeleteRequest(BaseModel):
    """Request to remove the recommendation sets of several works, in order."""
    work_ids: List[str] = Field(
        ...,
        description="Handles of the works whose recommendations should be removed",
        min_length=1,
    )


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class RecommendationResponse(BaseModel):
    """The current recommendation set of a work."""
    work_id: str = Field(..., description="Opaque work handle")
    title: str = Field(..., description="Title of the work")
    to_add: List[Tag] = Field(default_factory=list, description="Tags proposed for addition")
    to_remove: List[Tag] = Field(default_factory=list, description="Author tags proposed for removal")

    @classmethod
    def from_set(cls, rec_set: RecommendationSet) -> "RecommendationResponse":
        return cls(
            work_id=rec_set.work.work_id,
            title=rec_set.work.title,
            to_add=rec_set.to_add,
            to_remove=rec_set.to_remove,
        )


class OrganizedRecommendationResponse(BaseModel):
    """Recommendations grouped by category."""
    work_id: str
    to_add: Dict[str, List[Tag]] = Field(default_factory=dict)
    to_remove: Dict[str, List[Tag]] = Field(default_factory=dict)


class BulkDeleteResponse(BaseModel):
    """Result of a bulk delete."""
    removed: int = Field(..., description="Number of recommendation sets removed")
