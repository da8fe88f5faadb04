import json

import pytest

from cozekit.workflow_events import (
    WorkflowEventType,
    parse_workflow_event,
    parse_workflow_event_error,
    parse_workflow_event_interrupt,
    parse_workflow_event_message,
    read_workflow_events,
)

STREAM_RUN = """id:0
event:Message
data:{"content":"Hello","node_title":"Start","node_seq_id":"0","node_is_finish":false}

id:1
event:Message
data:{"content":"World","node_title":"End","node_seq_id":"1","node_is_finish":true}

id:2
event:Done
data:{"debug_url":"https://www.coze.cn/work_flow?***"}
"""

RESUME = """id:0
event:Message
data:{"content":"Resumed","node_title":"Resume","node_seq_id":"0","node_is_finish":true}

id:1
event:Done
data:{"debug_url":"https://www.coze.cn/work_flow?***"}
"""


def test_stream_run_events():
    events = list(read_workflow_events(STREAM_RUN.splitlines()))
    assert len(events) == 3

    first = events[0]
    assert first.id == 0
    assert first.event == WorkflowEventType.MESSAGE
    assert first.message.content == "Hello"
    assert first.message.node_title == "Start"
    assert first.message.node_seq_id == "0"
    assert first.message.node_is_finish is False

    second = events[1]
    assert second.id == 1
    assert second.event == WorkflowEventType.MESSAGE
    assert second.message.content == "World"
    assert second.message.node_title == "End"
    assert second.message.node_seq_id == "1"
    assert second.message.node_is_finish is True

    done = events[2]
    assert done.id == 2
    assert done.event == WorkflowEventType.DONE
    assert done.debug_url.url == "https://www.coze.cn/work_flow?***"
    assert done.is_done() is True


def test_resume_events_with_newlines_kept():
    events = list(read_workflow_events(RESUME.splitlines(keepends=True)))
    assert [e.id for e in events] == [0, 1]
    assert events[0].message.content == "Resumed"
    assert events[0].message.node_title == "Resume"
    assert events[0].message.node_is_finish is True
    assert events[1].is_done() is True
    assert events[1].debug_url.url == "https://www.coze.cn/work_flow?***"


def test_error_event():
    text = 'id:0\nevent:Error\ndata:{"error_code":400,"error_message":"Bad Request"}\n'
    (event,) = list(read_workflow_events(text.splitlines()))
    assert event.event == WorkflowEventType.ERROR
    assert event.error.error_code == 400
    assert event.error.error_message == "Bad Request"
    assert event.is_done() is False


def test_interrupt_event():
    text = 'id:0\nevent:Interrupt\ndata:{"interrupt_data":{"event_id":"event1","type":1},"node_title":"Question"}\n'
    (event,) = list(read_workflow_events(text.splitlines()))
    assert event.event == WorkflowEventType.INTERRUPT
    assert event.interrupt.interrupt_data.event_id == "event1"
    assert event.interrupt.interrupt_data.type == 1
    assert event.interrupt.node_title == "Question"


def test_parse_workflow_event_error():
    err = parse_workflow_event_error('{"error_code":400,"error_message":"Bad Request"}')
    assert err.error_code == 400
    assert err.error_message == "Bad Request"


def test_parse_workflow_event_interrupt():
    interrupt = parse_workflow_event_interrupt(
        '{"interrupt_data":{"event_id":"event1","type":1},"node_title":"Question"}'
    )
    assert interrupt.interrupt_data.event_id == "event1"
    assert interrupt.interrupt_data.type == 1
    assert interrupt.node_title == "Question"


@pytest.mark.parametrize(
    "parser",
    [parse_workflow_event_error, parse_workflow_event_interrupt, parse_workflow_event_message],
)
def test_invalid_json_raises(parser):
    with pytest.raises(ValueError):
        parser("invalid json")


def test_message_round_trip_of_ext():
    payload = {"content": "Hello", "node_title": "Start", "node_seq_id": "0", "node_is_finish": True, "ext": {"k": "v"}}
    message = parse_workflow_event_message(json.dumps(payload))
    assert message.ext == {"k": "v"}
    assert message.node_is_finish is True


def test_unknown_event_type_is_read_as_message():
    event = parse_workflow_event("5", "Something", '{"content":"Hello"}')
    assert event.event == WorkflowEventType.MESSAGE
    assert event.id == 5
    assert event.message.content == "Hello"


def test_non_numeric_id_becomes_zero():
    event = parse_workflow_event("abc", "Message", '{"content":"Hello"}')
    assert event.id == 0


def test_reading_stops_after_done():
    text = RESUME + STREAM_RUN
    events = list(read_workflow_events(text.splitlines()))
    assert len(events) == 2
    assert events[-1].is_done() is True


def test_lines_without_id_are_skipped():
    text = ": keep-alive\n\n" + STREAM_RUN
    events = list(read_workflow_events(text.splitlines()))
    assert [e.id for e in events] == [0, 1, 2]


def test_truncated_event_raises():
    with pytest.raises(ValueError):
        list(read_workflow_events(["id:0", "event:Message"]))


def test_done_with_empty_data_raises():
    with pytest.raises(ValueError):
        parse_workflow_event("0", "Done", "")