import dataclasses

import pytest

from mockdb_shared.data_models import FunctionCall, Message, ToolCall, TurnResult


def test_tool_call_wire_shape_before_and_after_dispatch():
    proposed = ToolCall(id="call_1", function=FunctionCall("list_users", "{}"))
    assert proposed.to_dict() == {
        "id": "call_1",
        "type": "function",
        "function": {"name": "list_users", "arguments": "{}"},
    }

    done = dataclasses.replace(proposed, status="ok", result=None, duration_ms=3)
    data = done.to_dict()
    assert data["status"] == "ok"
    assert data["result"] is None
    assert data["durationMs"] == 3
    assert ToolCall.from_dict(data) == done


def test_message_round_trip_keeps_tool_calls_and_timestamp():
    data = {
        "role": "assistant",
        "content": "",
        "timestamp": "2026-01-01T00:00:00+00:00",
        "tool_calls": [
            {
                "id": "c1",
                "type": "function",
                "function": {"name": "search_user", "arguments": '{"user_id": "u1"}'},
                "status": "error",
                "result": {"error": "Unknown tool"},
                "durationMs": 0,
            }
        ],
    }
    msg = Message.from_dict(data)
    assert msg.tool_calls[0].status == "error"
    assert msg.to_dict() == data


def test_message_rejects_unknown_role():
    with pytest.raises(ValueError):
        Message.from_dict({"role": "tool", "content": "x"})


def test_turn_result_fallback_content():
    turn = TurnResult(content="", tool_calls=[], db={})
    assert turn.to_message(fallback_content="called a tool").content == "called a tool"
    assert TurnResult(content="hi", tool_calls=[], db={}).to_message().content == "hi"
