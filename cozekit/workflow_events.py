"""Workflow stream events and their parsing from the server-sent event stream."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class WorkflowEventType(str, Enum):
    """Kind of event a workflow stream delivers."""

    MESSAGE = "Message"
    ERROR = "Error"
    DONE = "Done"
    INTERRUPT = "Interrupt"


@dataclass
class WorkflowEventMessage:
    content: str = ""
    node_title: str = ""
    node_seq_id: str = ""
    node_is_finish: bool = False
    ext: dict[str, Any] | None = None


@dataclass
class WorkflowEventInterruptData:
    event_id: str = ""
    type: int = 0


@dataclass
class WorkflowEventInterrupt:
    interrupt_data: WorkflowEventInterruptData | None = None
    node_title: str = ""


@dataclass
class WorkflowEventError:
    error_code: int = 0
    error_message: str = ""


@dataclass
class WorkflowEventDebugURL:
    url: str = ""


@dataclass
class WorkflowEvent:
    id: int
    event: WorkflowEventType
    message: WorkflowEventMessage | None = None
    interrupt: WorkflowEventInterrupt | None = None
    error: WorkflowEventError | None = None
    debug_url: WorkflowEventDebugURL | None = None
    extra: dict[str, Any] = field(default_factory=dict, repr=False)

    def is_done(self) -> bool:
        return self.event is WorkflowEventType.DONE


def _load_object(data: str) -> dict[str, Any]:
    value = json.loads(data)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


def parse_workflow_event_error(data: str) -> WorkflowEventError:
    """Parse the JSON data of an error event."""
    obj = _load_object(data)
    return WorkflowEventError(
        error_code=int(obj.get("error_code") or 0),
        error_message=obj.get("error_message") or "",
    )


def parse_workflow_event_interrupt(data: str) -> WorkflowEventInterrupt:
    """Parse the JSON data of an interrupt event."""
    obj = _load_object(data)
    raw = obj.get("interrupt_data")
    interrupt_data = None
    if isinstance(raw, dict):
        interrupt_data = WorkflowEventInterruptData(
            event_id=raw.get("event_id") or "",
            type=int(raw.get("type") or 0),
        )
    return WorkflowEventInterrupt(interrupt_data=interrupt_data, node_title=obj.get("node_title") or "")


def parse_workflow_event_message(data: str) -> WorkflowEventMessage:
    """Parse the JSON data of a message event."""
    obj = _load_object(data)
    return WorkflowEventMessage(
        content=obj.get("content") or "",
        node_title=obj.get("node_title") or "",
        node_seq_id=obj.get("node_seq_id") or "",
        node_is_finish=bool(obj.get("node_is_finish", False)),
        ext=obj.get("ext"),
    )


def _parse_id(event_id: str) -> int:
    try:
        return int(event_id)
    except ValueError:
        return 0


def parse_workflow_event(event_id: str, event: str, data: str) -> WorkflowEvent:
    """Build an event from its id, type name and JSON data; unknown types are read as messages."""
    ident = _parse_id(event_id)
    if event == WorkflowEventType.INTERRUPT.value:
        return WorkflowEvent(ident, WorkflowEventType.INTERRUPT, interrupt=parse_workflow_event_interrupt(data))
    if event == WorkflowEventType.ERROR.value:
        return WorkflowEvent(ident, WorkflowEventType.ERROR, error=parse_workflow_event_error(data))
    if event == WorkflowEventType.DONE.value:
        obj = _load_object(data)
        return WorkflowEvent(
            ident,
            WorkflowEventType.DONE,
            debug_url=WorkflowEventDebugURL(url=obj.get("debug_url") or ""),
        )
    return WorkflowEvent(ident, WorkflowEventType.MESSAGE, message=parse_workflow_event_message(data))


def read_workflow_events(lines: Iterable[str]) -> Iterator[WorkflowEvent]:
    """Yield events from stream lines, stopping after the Done event.

    Each event is three lines, ``id:``, ``event:`` and ``data:``; other lines are skipped.
    """
    it = iter(lines)
    for line in it:
        line = line.rstrip("\r\n")
        if not line.startswith("id:"):
            continue
        event_id = line[3:].strip()
        try:
            event_line = next(it)
            data_line = next(it)
        except StopIteration:
            raise ValueError(f"truncated workflow event with id {event_id!r}") from None
        event = event_line.rstrip("\r\n")[6:].strip()
        data = data_line.rstrip("\r\n")[5:].strip()
        parsed = parse_workflow_event(event_id, event, data)
        yield parsed
        if parsed.is_done():
            return