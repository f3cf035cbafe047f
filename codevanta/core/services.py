# -*- coding: utf-8 -*-
"""CodeVanta Services / Composition Root

Minimal dependency container to centralize object creation.

Design goals:
- Credentials are read once, when the container builds the gateway.
- Provide a single place to construct shared services (API client,
  gateway, sync controller).
- Support injection of a settings provider and gateway factory for tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class _SettingsLike(Protocol):
    def load_github_host(self) -> str: ...

    def load_github_token(self) -> str | None: ...

    def load_user_agent(self) -> str: ...


@dataclass
class ServiceContainer:
    """Small container for shared service construction.

    This is intentionally minimal and mostly a composition root.
    """

    settings: _SettingsLike
    gateway_factory: Callable[[], object] | None = None

    def github_api_client(self):
        """Create a GitHubApiClient from the stored token, or return None."""

        token = self.settings.load_github_token()
        if not token:
            return None

        from codevanta.github.api_client import GitHubApiClient

        host = (self.settings.load_github_host() or "").strip() or "api.github.com"
        return GitHubApiClient(host, token, self.settings.load_user_agent())

    def gateway(self):
        """Create the RemoteGateway, or None when no token is configured."""

        if self.gateway_factory is not None:
            return self.gateway_factory()

        client = self.github_api_client()
        if client is None:
            return None

        from codevanta.github.gateway import GitHubGateway

        return GitHubGateway(client)

    def sync_controller(
        self, on_busy_changed: Optional[Callable[[bool], None]] = None
    ):
        """Build a SyncController, or None when the remote is unreachable."""

        gateway = self.gateway()
        if gateway is None:
            return None

        from codevanta.workspace.controller import SyncController

        return SyncController(gateway, on_busy_changed=on_busy_changed)


_singleton: ServiceContainer | None = None


def get_services() -> ServiceContainer:
    """Default app-wide service container."""

    global _singleton
    if _singleton is None:
        from codevanta.core import settings as settings_module

        _singleton = ServiceContainer(settings=settings_module)
    return _singleton
