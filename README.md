# cozekit

A small synchronous client for the Coze HTTP APIs that deal with workflows
and workspaces. With it you can:

- run a published workflow and wait for its result, or stream its events
  as they arrive;
- resume a workflow that stopped at an interrupt (for example a
  "Question" node);
- look up the run history of an asynchronous execution;
- chat with a workflow as a conversation, receiving a stream of chat events;
- list the workspaces the token can see, one page at a time or all of them.

The only runtime dependency is `httpx`.

## Getting started

```python
from cozekit.client import Coze
from cozekit.workflow_runs import RunWorkflowsRequest

with Coze(token="token", base_url="https://api.example.com") as coze:
    result = coze.workflows.runs.create(
        RunWorkflowsRequest(workflow_id="workflow1", parameters={"city": "Paris"})
    )
    print(result.execute_id, result.data, result.token, result.cost, result.log_id)
```

`Coze` sends every request with an `Authorization: Bearer <token>` header.
When `base_url` is left out, `cozekit.transport.COM_BASE_URL` is used.
You may pass an `httpx.Client` of your own through `http_client`, for custom
timeouts, proxies or test transports; a client you pass in is left open
when `Coze` is closed, while the one `Coze` creates itself (60 second
timeout) is closed with it.

`Coze` exposes:

- `coze.workflows.runs` — a `cozekit.workflow_runs.WorkflowRuns`, with
  `create`, `stream`, `resume` and `histories.retrieve`;
- `coze.workflows.chat` — a `cozekit.workflow_chat.WorkflowsChat`, with `stream`;
- `coze.workspaces` — a `cozekit.workspaces.Workspaces`, with `list` and `iter_all`.

## Errors

Errors reported by the service are raised as `cozekit.transport.CozeError`,
with the attributes `code`, `message`, `log_id` (from the `X-Tt-Logid`
response header) and `status_code`. It is raised when the HTTP status is an
error, when the JSON envelope carries a non-zero `code`, and when a plain
request's answer is not a JSON object. A streaming call that is answered
with a JSON body instead of an event stream is checked the same way.

Malformed event data inside a workflow stream (invalid JSON, or an event
cut off after its `id:` line) raises `ValueError`.

## Streaming a workflow run

`stream` returns an `EventStream`: iterate over it to receive
`WorkflowEvent` objects. Iteration stops after the `Done` event, and the
response is closed when iteration ends, when it fails, or when the
`with` block is left. Events of an unknown type are read as messages.

```python
from cozekit.workflow_events import WorkflowEventType

with coze.workflows.runs.stream(RunWorkflowsRequest(workflow_id="workflow1")) as events:
    for event in events:
        if event.event is WorkflowEventType.MESSAGE:
            print(event.message.content, end="")
        elif event.event is WorkflowEventType.INTERRUPT:
            interrupt = event.interrupt
            print("interrupted at", interrupt.node_title)
        elif event.event is WorkflowEventType.ERROR:
            print("error", event.error.error_code, event.error.error_message)
        elif event.is_done():
            print("\ndebug page:", event.debug_url.url)
```

The parsers are also usable on their own:
`cozekit.workflow_events.parse_workflow_event_error`,
`parse_workflow_event_interrupt` and `parse_workflow_event_message` read
the JSON data of one event, `parse_workflow_event(event_id, event, data)`
builds a whole `WorkflowEvent`, and `read_workflow_events(lines)` turns an
iterable of stream lines into events.

## Resuming after an interrupt

```python
from cozekit.workflow_runs import ResumeRunWorkflowsRequest

request = ResumeRunWorkflowsRequest(
    workflow_id="workflow1",
    event_id=interrupt.interrupt_data.event_id,
    resume_data="Tomorrow",
    interrupt_type=interrupt.interrupt_data.type,
)
with coze.workflows.runs.resume(request) as events:
    for event in events:
        ...
```

## Run histories

For runs started with `is_async=True`, the returned `execute_id` can be
used to fetch the outcome later:

```python
histories = coze.workflows.runs.histories.retrieve("workflow1", result.execute_id)
for history in histories.histories:
    print(history.execute_status, history.run_mode, history.output)
```

`execute_status` is a `WorkflowExecuteStatus` (`SUCCESS`, `RUNNING`,
`FAIL`) and `run_mode` a `WorkflowRunMode` (`SYNCHRONOUS`, `STREAMING`,
`ASYNCHRONOUS`); values the service sends that these do not know are kept
as plain strings or integers.

## Chatting with a workflow

```python
from cozekit.workflow_chat import Message, WorkflowsChatStreamRequest

request = WorkflowsChatStreamRequest(
    workflow_id="workflow1",
    additional_messages=[Message(role="user", content="Hello")],
    parameters={"topic": "weather"},
)
with coze.workflows.chat.stream(request) as events:
    for chat_event in events:
        print(chat_event.event, chat_event.data)
```

Each `ChatEvent` holds the event name, its data decoded from JSON (or
`None` when it is not JSON) and the raw data text. Iteration stops after
the `done` event. `read_chat_events(lines)` parses chat events from any
iterable of stream lines.

## Workspaces

```python
from cozekit.workspaces import ListWorkspacesRequest

page = coze.workspaces.list(ListWorkspacesRequest())
print(page.total, page.has_more)
for workspace in page.items:
    print(workspace.id, workspace.name, workspace.role_type, workspace.workspace_type)

for workspace in coze.workspaces.iter_all(ListWorkspacesRequest(page_size=50)):
    print(workspace.name)
```

Page numbers start at 1 and the default page size is 20; a page number or
size of 0 falls back to these defaults. A page reports `has_more` when it
came back full, and `iter_all` keeps fetching pages until one does not.

## What this package does not do

It covers only workflows, workflow chats and workspaces. It has no
asynchronous client, no command-line tool, no token issuing or OAuth
flows, and no access to bots, conversations, files or other parts of the
service.

## Tests

The tests use pytest; install the package with its `test` extra and run
pytest from the project directory.