"""Deployment pipeline: staging, provisioning, push, deployment and teardown."""

from .coordinator import PipelineCoordinator
from .deployer import DeploymentResult, DeploymentTrigger
from .errors import (
    DeploymentError,
    ExtractionError,
    InvalidRepoReferenceError,
    MissingRepoDetailsError,
    PipelineError,
    PushError,
    RepoCreationError,
    RepoFetchError,
)
from .git import PushExecutor
from .provisioner import ProvisionedRepo, RepositoryProvisioner
from .runner import PipelineRunner
from .staging import RepoReference, parse_repo_reference, stage_archive
from .teardown import TeardownExecutor, TeardownResult

__all__ = [
    "DeploymentError",
    "DeploymentResult",
    "DeploymentTrigger",
    "ExtractionError",
    "InvalidRepoReferenceError",
    "MissingRepoDetailsError",
    "PipelineCoordinator",
    "PipelineError",
    "PipelineRunner",
    "ProvisionedRepo",
    "PushError",
    "PushExecutor",
    "RepoCreationError",
    "RepoFetchError",
    "RepoReference",
    "RepositoryProvisioner",
    "TeardownExecutor",
    "TeardownResult",
    "parse_repo_reference",
    "stage_archive",
]
