"""
Work submission and recommendation endpoints.

Endpoints:
- POST /works - Create a work and request recommendations for it
- POST /works/{work_id}/resubmit - Request fresh recommendations for a tracked work
- GET /works/{work_id}/recommendations - Current recommendation set
- GET /works/{work_id}/recommendations/organized - Set grouped by category
- GET /works/{work_id}/recommendations/report - Plain-text report
- DELETE /works/{work_id}/recommendations - Remove the set
- POST /recommendations/bulk-delete - Remove several sets, in order

Error mapping:
- NotFoundError -> 404
- AlreadySubmittedError -> 409
- InvalidRecommendationError -> 422 (with every violation)
- MalformedResponseError, BackendError -> 502
- VocabularyUnavailableError -> 503
"""

import logging
from typing import Annotated, Iterator, List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse

from tagassist.dependencies import get_tagging_service
from tagassist.exceptions import (
    AlreadySubmittedError,
    BackendError,
    InvalidRecommendationError,
    MalformedResponseError,
    NotFoundError,
    TagAssistError,
    VocabularyUnavailableError,
)
from tagassist.schemas.tags import RecommendationSet, Work
from tagassist.schemas.works import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    OrganizedRecommendationResponse,
    RecommendationResponse,
    WorkCreateRequest,
)
from tagassist.services.tagging_service import TaggingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/works", tags=["works"])
bulk_router = APIRouter(prefix="/recommendations", tags=["works"])

TaggingServiceDep = Annotated[TaggingService, Depends(get_tagging_service)]

_ERROR_STATUS = [
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (AlreadySubmittedError, status.HTTP_409_CONFLICT, "already_submitted"),
    (InvalidRecommendationError, status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_recommendation"),
    (MalformedResponseError, status.HTTP_502_BAD_GATEWAY, "malformed_response"),
    (BackendError, status.HTTP_502_BAD_GATEWAY, "backend_error"),
    (VocabularyUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE, "vocabulary_unavailable"),
]


def _raise_http_error(error: TagAssistError) -> NoReturn:
    """Translate a core error into an HTTPException."""
    for error_type, status_code, kind in _ERROR_STATUS:
        if isinstance(error, error_type):
            detail = {"error": kind, "message": str(error)}
            if isinstance(error, InvalidRecommendationError):
                detail["violations"] = error.violations
            raise HTTPException(status_code=status_code, detail=detail) from error

    logger.error(f"Unmapped tagging error: {error}", exc_info=True)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": "internal_error", "message": str(error)},
    ) from error


def _require_set(service: TaggingService, work_id: str) -> RecommendationSet:
    rec_set = service.find(work_id)
    if rec_set is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "not_found", "message": f"Work {work_id} has no recommendations"},
        )
    return rec_set


async def _submit(service: TaggingService, work: Work) -> RecommendationResponse:
    try:
        rec_set = await service.submit(work)
    except TagAssistError as e:
        logger.warning(f"Submission failed for work_id={work.work_id}: {type(e).__name__}")
        _raise_http_error(e)

    return RecommendationResponse.from_set(rec_set)


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post(
    "",
    response_model=RecommendationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a work and request tag recommendations",
    description="""
    Creates a new work from the given title, body and author tags, asks the
    model for tags to add and remove, validates them and stores the result.

    Every call creates a new work with a fresh work_id. Use the returned
    work_id for lookups, reports and resubmission.
    """
)
async def create_work(request: WorkCreateRequest, service: TaggingServiceDep) -> RecommendationResponse:
    """Create a work and run the first submission."""
    work = Work(title=request.title, body=request.body, author_tags=tuple(request.author_tags))
    logger.info(f"POST /works called, work_id={work.work_id}, title='{work.title[:50]}'")
    return await _submit(service, work)


@router.post(
    "/{work_id}/resubmit",
    response_model=RecommendationResponse,
    summary="Request fresh recommendations for a tracked work",
    description="""
    Runs the submission again for a work that currently has recommendations.
    Under the replace policy the new set replaces the old one only once it
    validates; under the reject policy this returns 409.
    """
)
async def resubmit_work(work_id: str, service: TaggingServiceDep) -> RecommendationResponse:
    """Resubmit a tracked work."""
    rec_set = _require_set(service, work_id)
    logger.info(f"POST /works/{work_id}/resubmit called")
    return await _submit(service, rec_set.work)


@router.get(
    "/{work_id}/recommendations",
    response_model=RecommendationResponse,
    summary="Get the current recommendation set",
)
async def get_recommendations(work_id: str, service: TaggingServiceDep) -> RecommendationResponse:
    """Return the set stored for a work."""
    return RecommendationResponse.from_set(_require_set(service, work_id))


@router.get(
    "/{work_id}/recommendations/organized",
    response_model=OrganizedRecommendationResponse,
    summary="Get recommendations grouped by category",
)
async def get_organized_recommendations(
    work_id: str, service: TaggingServiceDep
) -> OrganizedRecommendationResponse:
    """Return the set for a work grouped by tag type."""
    work = _require_set(service, work_id).work
    try:
        organized = service.organize(work)
    except NotFoundError as e:
        _raise_http_error(e)

    return OrganizedRecommendationResponse(
        work_id=work_id,
        to_add=organized.to_add,
        to_remove=organized.to_remove,
    )


@router.get(
    "/{work_id}/recommendations/report",
    response_class=PlainTextResponse,
    summary="Get a plain-text recommendation report",
)
async def get_recommendation_report(work_id: str, service: TaggingServiceDep) -> PlainTextResponse:
    """Render the set for a work as readable text."""
    work = _require_set(service, work_id).work
    try:
        report = service.render(work)
    except NotFoundError as e:
        _raise_http_error(e)

    return PlainTextResponse(report)


@router.delete(
    "/{work_id}/recommendations",
    response_model=RecommendationResponse,
    summary="Remove the recommendation set of a work",
)
async def delete_recommendations(work_id: str, service: TaggingServiceDep) -> RecommendationResponse:
    """Remove and return the set stored for a work."""
    work = _require_set(service, work_id).work
    try:
        removed = service.remove(work)
    except NotFoundError as e:
        _raise_http_error(e)

    logger.info(f"Deleted recommendations for work_id={work_id}")
    return RecommendationResponse.from_set(removed)


@bulk_router.post(
    "/bulk-delete",
    response_model=BulkDeleteResponse,
    summary="Remove the recommendation sets of several works",
    description="""
    Removes each work's set in the given order. Not atomic: the first
    work_id without a set returns 404 and the removals before it stay applied.
    """
)
async def bulk_delete_recommendations(
    request: BulkDeleteRequest, service: TaggingServiceDep
) -> BulkDeleteResponse:
    """Remove several sets in order."""
    logger.info(f"POST /recommendations/bulk-delete called for {len(request.work_ids)} work(s)")

    def works_in_order(work_ids: List[str]) -> Iterator[Work]:
        for work_id in work_ids:
            yield _require_set(service, work_id).work

    try:
        removed = service.remove_many(works_in_order(request.work_ids))
    except NotFoundError as e:
        _raise_http_error(e)

    return BulkDeleteResponse(removed=len(removed))
