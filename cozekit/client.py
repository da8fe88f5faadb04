"""Entry point that wires the API resources to one HTTP connection."""

from __future__ import annotations

import httpx

from .transport import COM_BASE_URL, HTTPCore
from .workflow_chat import WorkflowsChat
from .workflow_runs import WorkflowRuns
from .workspaces import Workspaces


class Workflows:
    """Workflow runs and workflow chats."""

    def __init__(self, core: HTTPCore) -> None:
        self.runs = WorkflowRuns(core)
        self.chat = WorkflowsChat(core)


class Coze:
    """Client for the API, holding every resource behind one authorised connection."""

    def __init__(
        self,
        token: str,
        base_url: str = COM_BASE_URL,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.core = HTTPCore(token, base_url, http_client)
        self.workflows = Workflows(self.core)
        self.workspaces = Workspaces(self.core)

    def close(self) -> None:
        self.core.close()

    def __enter__(self) -> Coze:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()