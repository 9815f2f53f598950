"""
Provider drivers and the contract they implement.
"""

from .base import (
    Driver,
    GitService,
    OrganizationService,
    RepositoryService,
    WebhookService,
)
from .github import GitHubDriver
from .gitea import GiteaDriver
from .gogs import GogsDriver

__all__ = [
    "Driver",
    "GitService",
    "OrganizationService",
    "RepositoryService",
    "WebhookService",
    "GitHubDriver",
    "GiteaDriver",
    "GogsDriver",
]
