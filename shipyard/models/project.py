"""Project, log and review models."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow


class ProjectStatus(str, Enum):
    """Project lifecycle status.

    The happy path is linear; each pipeline stage owns exactly one error leaf.
    """

    # Intake
    PENDING_SETUP = "pending_setup"
    PROCESSING = "processing"

    # Archive path
    PROCESSING_ZIP = "processing_zip"
    CREATING_GITHUB_REPO = "creating_github_repo"
    PUSHING_TO_GITHUB = "pushing_to_github"

    # Reference path
    LINKING_TO_VERCEL = "linking_to_vercel"

    # Deployment
    DEPLOYING_TO_VERCEL = "deploying_to_vercel"
    DEPLOYED = "deployed"

    # No source supplied
    PENDING_MANUAL_SETUP = "pending_manual_setup"

    # Stage failures
    ERROR_ZIP_EXTRACTION = "error_zip_extraction"
    ERROR_GITHUB_CREATION = "error_github_creation"
    ERROR_GITHUB_PUSH = "error_github_push"
    ERROR_INVALID_REPO_URL = "error_invalid_repo_url"
    ERROR_GITHUB_FETCH_ID = "error_github_fetch_id"
    ERROR_MISSING_GH_DETAILS = "error_missing_gh_details"
    ERROR_VERCEL_DEPLOYMENT = "error_vercel_deployment"
    ERROR = "error"

    # Set by admins only
    ARCHIVED = "archived"

    @property
    def is_error(self) -> bool:
        return self.value.startswith("error")

    @property
    def is_terminal(self) -> bool:
        return self.is_error or self in _TERMINAL_OK


_TERMINAL_OK = frozenset(
    {ProjectStatus.DEPLOYED, ProjectStatus.PENDING_MANUAL_SETUP, ProjectStatus.ARCHIVED}
)


class LogLevel(str, Enum):
    """Severity tag of a project log entry."""

    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    DEPLOY = "deploy"


class Project(Base):
    """Project model - a submitted artifact and its deployment state."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Source: uploaded archive wins over a repository URL when both are set
    repo_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    file_path: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    subdomain: Mapped[str | None] = mapped_column(String(63), unique=True, nullable=True)

    status: Mapped[str] = mapped_column(
        String(50), default=ProjectStatus.PENDING_SETUP.value, index=True
    )

    # Written together on success
    deployment_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    vercel_project_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # GitHub full name (owner/repo) and immutable numeric ID
    github_repo_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    github_repo_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # True only for repositories created by the pipeline; teardown may delete those
    github_repo_created: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false()
    )

    logs: Mapped[list["ProjectLog"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectLog.id",
        lazy="selectin",
    )
    reviews: Mapped[list["Review"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Review.id",
        lazy="selectin",
    )


class ProjectLog(Base):
    """Append-only log entry. Never updated once written."""

    __tablename__ = "project_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    message: Mapped[str] = mapped_column(Text)
    level: Mapped[str] = mapped_column(String(16), default=LogLevel.INFO.value)

    project: Mapped[Project] = relationship(back_populates="logs")


class Review(Base):
    """User review of a project, independent of its deployment state."""

    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    rating: Mapped[int] = mapped_column(Integer)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    project: Mapped[Project] = relationship(back_populates="reviews")
