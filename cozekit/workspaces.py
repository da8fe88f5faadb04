"""Listing the workspaces the token has access to."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .transport import HTTPCore

DEFAULT_PAGE_NUM = 1
DEFAULT_PAGE_SIZE = 20


class WorkspaceRoleType(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class WorkspaceType(str, Enum):
    PERSONAL = "personal"
    TEAM = "team"


def _as_enum(kind: type[Enum], value: Any) -> Any:
    raw = value or ""
    try:
        return kind(raw)
    except ValueError:
        return raw


@dataclass
class Workspace:
    """A workspace and the caller's role in it."""

    id: str = ""
    name: str = ""
    icon_url: str = ""
    role_type: WorkspaceRoleType | str = ""
    workspace_type: WorkspaceType | str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Workspace:
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
            icon_url=data.get("icon_url") or "",
            role_type=_as_enum(WorkspaceRoleType, data.get("role_type")),
            workspace_type=_as_enum(WorkspaceType, data.get("workspace_type")),
        )


@dataclass
class ListWorkspacesRequest:
    """Which page of workspaces to fetch; zero values fall back to the defaults."""

    page_num: int = DEFAULT_PAGE_NUM
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class WorkspacePage:
    """One page of workspaces."""

    items: list[Workspace] = field(default_factory=list)
    total: int = 0
    has_more: bool = False
    page_num: int = DEFAULT_PAGE_NUM
    page_size: int = DEFAULT_PAGE_SIZE
    log_id: str = ""


class Workspaces:
    """Access to the caller's workspaces."""

    def __init__(self, core: HTTPCore) -> None:
        self._core = core

    def list(self, request: ListWorkspacesRequest | None = None) -> WorkspacePage:
        """Fetch one page of workspaces."""
        request = request or ListWorkspacesRequest()
        page_num = request.page_num or DEFAULT_PAGE_NUM
        page_size = request.page_size or DEFAULT_PAGE_SIZE
        payload, log_id = self._core.request(
            "GET",
            "/v1/workspaces",
            params={"page_num": page_num, "page_size": page_size},
        )
        data = payload.get("data") or {}
        items = [Workspace.from_json(item) for item in data.get("workspaces") or [] if isinstance(item, dict)]
        return WorkspacePage(
            items=items,
            total=int(data.get("total_count") or 0),
            has_more=len(items) >= page_size,
            page_num=page_num,
            page_size=page_size,
            log_id=log_id,
        )

    def iter_all(self, request: ListWorkspacesRequest | None = None) -> Iterator[Workspace]:
        """Yield workspaces from the requested page onwards, fetching pages as needed."""
        request = request or ListWorkspacesRequest()
        page_num = request.page_num or DEFAULT_PAGE_NUM
        page_size = request.page_size or DEFAULT_PAGE_SIZE
        while True:
            page = self.list(ListWorkspacesRequest(page_num=page_num, page_size=page_size))
            yield from page.items
            if not page.has_more or not page.items:
                return
            page_num += 1