"""
Public client API for scmbridge.

The provider is chosen once, when the client is built; every call after
that goes through the selected driver. Clients share no configuration or
transport, so several can be configured side by side. Logging verbosity is
the one process-wide setting: it lives on the package logger.
"""

import logging
from typing import Dict, Optional, Type

from ..infrastructure.error_handler import ValidationError
from ..infrastructure.logger import logger
from ..infrastructure.transport import HttpxTransport, Transport
from ..models.config import ClientConfig
from ..services.base import (
    Driver,
    GitService,
    OrganizationService,
    RepositoryService,
    WebhookService,
)
from ..services.gitea import GiteaDriver
from ..services.github import GitHubDriver
from ..services.gogs import GogsDriver


DRIVERS: Dict[str, Type[Driver]] = {
    GitHubDriver.name: GitHubDriver,
    GiteaDriver.name: GiteaDriver,
    GogsDriver.name: GogsDriver,
}


def register_driver(driver: Type[Driver]) -> None:
    """Make an additional provider selectable by name."""

    if not driver.name:
        raise ValidationError("driver must declare a name")
    DRIVERS[driver.name] = driver


class Client:
    """
    Provider-agnostic source-control client.

    Example:
        async with Client("github", ClientConfig(token="...")) as client:
            commit, res = await client.git.find_commit("octocat/hello-world", sha)
    """

    def __init__(
        self,
        provider: str,
        config: Optional[ClientConfig] = None,
        transport: Optional[Transport] = None,
        verbose: bool = False,
    ):
        """
        Initialize the client.

        Args:
            provider: Registered driver name (``github``, ``gitea``, ``gogs``)
            config: Client settings; defaults to ``ClientConfig()``
            transport: HTTP collaborator; defaults to an httpx-backed transport
            verbose: Turn on debug logging for the package logger; a
                non-verbose client leaves the current level alone
        """
        driver_class = DRIVERS.get(provider)
        if driver_class is None:
            raise ValidationError(
                f"Unknown provider {provider!r}; expected one of {sorted(DRIVERS)}"
            )

        self.verbose = verbose
        if verbose:
            logger.setLevel(logging.DEBUG)

        self.config = config or ClientConfig()
        self.transport = transport or HttpxTransport(timeout=self.config.timeout)
        self.driver = driver_class(self.config, self.transport)
        logger.debug(f"Client configured for {provider} at {self.driver.base_url}")

    @property
    def provider(self) -> str:
        return self.driver.name

    @property
    def git(self) -> GitService:
        return self.driver.git

    @property
    def organizations(self) -> OrganizationService:
        return self.driver.organizations

    @property
    def repositories(self) -> RepositoryService:
        return self.driver.repositories

    @property
    def webhooks(self) -> WebhookService:
        return self.driver.webhooks

    def set_verbose(self, verbose: bool) -> None:
        """
        Toggle debug logging.

        The level is set on the shared ``scmbridge`` logger, so it applies to
        every client in the process.
        """

        self.verbose = verbose
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


__all__ = [
    "DRIVERS",
    "register_driver",
    "Client",
]
