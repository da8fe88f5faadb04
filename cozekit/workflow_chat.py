"""Chatting with a workflow through a streamed conversation."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from .transport import EventStream, HTTPCore

CHAT_EVENT_CONVERSATION_CHAT_CREATED = "conversation.chat.created"
CHAT_EVENT_CONVERSATION_MESSAGE_DELTA = "conversation.message.delta"
CHAT_EVENT_DONE = "done"


@dataclass
class Message:
    """A message handed to the conversation along with the request."""

    role: str
    content: str = ""
    content_type: str = ""
    meta_data: dict[str, str] | None = None

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.content_type:
            body["content_type"] = self.content_type
        if self.meta_data:
            body["meta_data"] = self.meta_data
        return body


@dataclass
class ChatEvent:
    """One event of a chat stream: its name and its decoded data."""

    event: str
    data: Any = None
    raw: str = ""

    def is_done(self) -> bool:
        return self.event == CHAT_EVENT_DONE


@dataclass
class WorkflowsChatStreamRequest:
    """Request to chat with a workflow and stream the answer."""

    workflow_id: str
    additional_messages: list[Message] = field(default_factory=list)
    parameters: dict[str, Any] | None = None
    app_id: str | None = None
    bot_id: str | None = None
    conversation_id: str | None = None
    ext: dict[str, str] | None = None

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "workflow_id": self.workflow_id,
            "additional_messages": [message.to_json() for message in self.additional_messages],
        }
        if self.parameters:
            body["parameters"] = self.parameters
        if self.app_id is not None:
            body["app_id"] = self.app_id
        if self.bot_id is not None:
            body["bot_id"] = self.bot_id
        if self.conversation_id is not None:
            body["conversation_id"] = self.conversation_id
        if self.ext:
            body["ext"] = self.ext
        return body


def _build_event(name: str, parts: list[str]) -> ChatEvent:
    raw = "\n".join(parts)
    try:
        data = json.loads(raw) if raw else None
    except ValueError:
        data = None
    return ChatEvent(event=name, data=data, raw=raw)


def read_chat_events(lines: Iterable[str]) -> Iterator[ChatEvent]:
    """Yield chat events from server-sent event lines, stopping after the ``done`` event."""
    name: str | None = None
    parts: list[str] = []
    for raw_line in lines:
        line = raw_line.rstrip("\r\n")
        if not line:
            if name is not None:
                event = _build_event(name, parts)
                yield event
                if event.is_done():
                    return
            name, parts = None, []
            continue
        if line.startswith("event:"):
            name = line[6:].strip()
        elif line.startswith("data:"):
            parts.append(line[5:].strip())
    if name is not None:
        yield _build_event(name, parts)


class WorkflowsChat:
    """Chat conversations driven by a workflow."""

    def __init__(self, core: HTTPCore) -> None:
        self._core = core

    def stream(self, request: WorkflowsChatStreamRequest) -> EventStream[ChatEvent]:
        """Start a workflow chat and stream its events."""
        return self._core.stream("POST", "/v1/workflows/chat", request.to_json(), read_chat_events)