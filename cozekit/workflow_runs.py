"""Running workflows, resuming interrupted runs and reading their run histories."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

from .transport import EventStream, HTTPCore
from .workflow_events import WorkflowEvent, read_workflow_events


class WorkflowRunMode(IntEnum):
    """How a workflow was run."""

    SYNCHRONOUS = 0
    STREAMING = 1
    ASYNCHRONOUS = 2


class WorkflowExecuteStatus(str, Enum):
    """Execution status of a workflow run."""

    SUCCESS = "Success"
    RUNNING = "Running"
    FAIL = "Fail"


@dataclass
class RunWorkflowsRequest:
    """Request to run a published workflow."""

    workflow_id: str
    parameters: dict[str, Any] | None = None
    bot_id: str = ""
    ext: dict[str, str] | None = None
    is_async: bool = False
    app_id: str = ""

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {"workflow_id": self.workflow_id}
        if self.parameters:
            body["parameters"] = self.parameters
        if self.bot_id:
            body["bot_id"] = self.bot_id
        if self.ext:
            body["ext"] = self.ext
        if self.is_async:
            body["is_async"] = True
        if self.app_id:
            body["app_id"] = self.app_id
        return body


@dataclass
class ResumeRunWorkflowsRequest:
    """Request to resume a workflow run that stopped at an interrupt."""

    workflow_id: str
    event_id: str
    resume_data: str
    interrupt_type: int

    def to_json(self) -> dict[str, Any]:
        return {
            "workflow_id": self.workflow_id,
            "event_id": self.event_id,
            "resume_data": self.resume_data,
            "interrupt_type": self.interrupt_type,
        }


@dataclass
class RunWorkflowsResult:
    """Outcome of a non-streaming workflow run."""

    execute_id: str = ""
    data: str = ""
    debug_url: str = ""
    token: int = 0
    cost: str = ""
    log_id: str = ""

    @classmethod
    def from_json(cls, payload: dict[str, Any], log_id: str = "") -> RunWorkflowsResult:
        return cls(
            execute_id=payload.get("execute_id") or "",
            data=payload.get("data") or "",
            debug_url=payload.get("debug_url") or "",
            token=int(payload.get("token") or 0),
            cost=str(payload.get("cost") or ""),
            log_id=log_id,
        )


def _as_status(value: Any) -> WorkflowExecuteStatus | str:
    raw = value or ""
    try:
        return WorkflowExecuteStatus(raw)
    except ValueError:
        return raw


def _as_run_mode(value: Any) -> WorkflowRunMode | int:
    raw = int(value or 0)
    try:
        return WorkflowRunMode(raw)
    except ValueError:
        return raw


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass
class WorkflowRunHistory:
    """One recorded execution of a workflow."""

    execute_id: str = ""
    execute_status: WorkflowExecuteStatus | str = ""
    bot_id: str = ""
    connector_id: str = ""
    connector_uid: str = ""
    run_mode: WorkflowRunMode | int = WorkflowRunMode.SYNCHRONOUS
    log_id: str = ""
    create_time: int = 0
    update_time: int = 0
    output: str = ""
    error_code: str = ""
    error_message: str = ""
    debug_url: str = ""

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> WorkflowRunHistory:
        return cls(
            execute_id=_as_text(data.get("execute_id")),
            execute_status=_as_status(data.get("execute_status")),
            bot_id=_as_text(data.get("bot_id")),
            connector_id=_as_text(data.get("connector_id")),
            connector_uid=_as_text(data.get("connector_uid")),
            run_mode=_as_run_mode(data.get("run_mode")),
            log_id=_as_text(data.get("logid")),
            create_time=int(data.get("create_time") or 0),
            update_time=int(data.get("update_time") or 0),
            output=_as_text(data.get("output")),
            error_code=_as_text(data.get("error_code")),
            error_message=_as_text(data.get("error_message")),
            debug_url=_as_text(data.get("debug_url")),
        )


@dataclass
class WorkflowRunHistories:
    """Run histories returned for one execution, with the response's log id."""

    histories: list[WorkflowRunHistory] = field(default_factory=list)
    log_id: str = ""


class WorkflowRunHistoriesAPI:
    """Access to the run histories of workflows."""

    def __init__(self, core: HTTPCore) -> None:
        self._core = core

    def retrieve(self, workflow_id: str, execute_id: str) -> WorkflowRunHistories:
        """Fetch the history of one asynchronous workflow execution."""
        path = f"/v1/workflows/{workflow_id}/run_histories/{execute_id}"
        payload, log_id = self._core.request("GET", path)
        items = payload.get("data") or []
        return WorkflowRunHistories(
            histories=[WorkflowRunHistory.from_json(item) for item in items if isinstance(item, dict)],
            log_id=log_id,
        )


class WorkflowRuns:
    """Starting, streaming and resuming workflow runs."""

    def __init__(self, core: HTTPCore) -> None:
        self._core = core
        self.histories = WorkflowRunHistoriesAPI(core)

    def create(self, request: RunWorkflowsRequest) -> RunWorkflowsResult:
        """Run a workflow and wait for its result (or its execute id when asynchronous)."""
        payload, log_id = self._core.request("POST", "/v1/workflow/run", request.to_json())
        return RunWorkflowsResult.from_json(payload, log_id)

    def stream(self, request: RunWorkflowsRequest) -> EventStream[WorkflowEvent]:
        """Run a workflow and stream its events."""
        return self._core.stream("POST", "/v1/workflow/stream_run", request.to_json(), read_workflow_events)

    def resume(self, request: ResumeRunWorkflowsRequest) -> EventStream[WorkflowEvent]:
        """Resume an interrupted workflow and stream its events."""
        return self._core.stream(
            "POST", "/v1/workflow/stream_resume", request.to_json(), read_workflow_events
        )