"""Admin router: project intake, inspection, update and deletion."""

import asyncio
from pathlib import Path
import re
import shutil
import time
import uuid

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.exc import IntegrityError
import structlog

from shipyard.models import LogLevel, Project, ProjectStatus
from shipyard.pipeline.naming import derive_subdomain
from shipyard.pipeline.staging import remove_path
from shipyard.schemas import MessageResponse, ProjectCreated, ProjectRead, ProjectUpdate
from shipyard.services import Services

from ..dependencies import get_services, require_admin

logger = structlog.get_logger()

router = APIRouter(
    prefix="/admin/projects",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def _save_upload(upload: UploadFile, uploads_dir: Path) -> Path:
    uploads_dir.mkdir(parents=True, exist_ok=True)
    safe_name = re.sub(r"\s+", "_", Path(upload.filename or "upload.zip").name)
    destination = uploads_dir / f"{int(time.time() * 1000)}-{safe_name}"
    with destination.open("wb") as out:
        shutil.copyfileobj(upload.file, out)
    return destination


@router.post("/", response_model=ProjectCreated, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_name: str = Form(...),
    description: str | None = Form(None),
    repo_url: str | None = Form(None),
    subdomain: str | None = Form(None),
    project_file: UploadFile | None = File(None),
    services: Services = Depends(get_services),
) -> dict:
    """Create a project and enqueue its deployment pipeline.

    Returns as soon as the record exists; progress is visible through the
    project's ``status`` and ``logs``.
    """
    name = project_name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Project name is required.")

    project = Project(
        id=uuid.uuid4().hex,
        name=name,
        description=description.strip() if description else None,
        repo_url=repo_url.strip() if repo_url and repo_url.strip() else None,
        subdomain=derive_subdomain(name, subdomain),
        status=ProjectStatus.PENDING_SETUP.value,
    )
    intake_logs = [("Project creation initiated by admin.", LogLevel.INFO)]

    if project_file is not None and project_file.filename:
        saved = await asyncio.to_thread(
            _save_upload, project_file, Path(services.settings.uploads_dir)
        )
        project.file_path = str(saved)
        intake_logs.append((f"File {project_file.filename} uploaded.", LogLevel.INFO))

    logger.info("creating_project", project_id=project.id, name=name, subdomain=project.subdomain)
    try:
        await services.store.create(project, intake_logs)
    except IntegrityError as e:
        if project.file_path:
            remove_path(project.file_path)
        logger.warning("project_creation_failed_duplicate", subdomain=project.subdomain)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Subdomain already in use.",
        ) from e

    created = await services.store.find_by_id(project.id)
    services.runner.submit(project.id)

    return {
        "message": "Project created. Deployment process initiated.",
        "project": ProjectRead.model_validate(created),
    }


@router.get("/", response_model=list[ProjectRead])
async def list_projects(
    status: ProjectStatus | None = None,
    services: Services = Depends(get_services),
) -> list[Project]:
    """List all projects, optionally filtered by status."""
    return await services.store.list_projects(status=status)


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: str,
    services: Services = Depends(get_services),
) -> Project:
    project = await services.store.find_by_id(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.put("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: str,
    project_in: ProjectUpdate,
    services: Services = Depends(get_services),
) -> Project:
    """Manual correction of project details by an admin."""
    project = await services.store.find_by_id(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")

    if project_in.deployment_url is not None and not project.vercel_project_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="deployment_url can only be corrected once a Vercel project is recorded.",
        )

    changes = project_in.model_dump(exclude_none=True)
    if changes:
        await services.store.update_fields(project_id, **changes)

    new_status = changes.get("status", project.status)
    await services.store.append_log(
        project_id, f"Project details updated by admin. Status: {ProjectStatus(new_status).value}"
    )

    logger.info("project_updated", project_id=project_id, fields=sorted(changes))
    return await services.store.find_by_id(project_id)


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: str,
    services: Services = Depends(get_services),
) -> dict:
    """Tear down remote resources and delete the project.

    Teardown failures do not block deletion; they are reported in the service logs.
    """
    result = await services.teardown.teardown(project_id)
    if not result.found:
        raise HTTPException(status_code=404, detail="Project not found")

    return {
        "message": (
            f'Project "{result.project_name}" and associated resources '
            "deletion process finished."
        )
    }
