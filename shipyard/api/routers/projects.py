"""Public projects router: showcase listing, detail and reviews."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
import structlog

from shipyard.models import Project, ProjectStatus, Review
from shipyard.schemas import ProjectPublic, ReviewCreate, ReviewRead
from shipyard.services import Services

from ..dependencies import get_services

logger = structlog.get_logger()

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("/", response_model=list[ProjectPublic])
async def list_deployed_projects(
    services: Services = Depends(get_services),
) -> list[Project]:
    """List deployed projects, newest first."""
    return await services.store.list_projects(status=ProjectStatus.DEPLOYED)


@router.get("/{project_id}", response_model=ProjectPublic)
async def get_project(
    project_id: str,
    services: Services = Depends(get_services),
) -> Project:
    project = await services.store.find_by_id(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post(
    "/{project_id}/reviews",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
)
async def add_review(
    project_id: str,
    review_in: ReviewCreate,
    services: Services = Depends(get_services),
) -> Review:
    """Append a review regardless of the project's deployment status."""
    try:
        review = await services.store.add_review(
            project_id,
            rating=review_in.rating,
            comment=review_in.comment,
            reviewer_name=review_in.reviewer_name,
        )
    except IntegrityError as e:
        logger.warning("review_rejected", project_id=project_id, error=str(e.orig))
        raise HTTPException(status_code=400, detail="Review violates constraints") from e

    if review is None:
        raise HTTPException(status_code=404, detail="Project not found")

    logger.info("review_added", project_id=project_id, rating=review.rating)
    return review
