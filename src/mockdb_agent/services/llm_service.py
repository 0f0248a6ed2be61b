import json
import logging
from collections.abc import Sequence
from typing import Any, Protocol

from mockdb_agent.app.config import LLM_TEMPERATURE, MODEL_UNAVAILABLE_ERROR, TOOL_CHOICE
from mockdb_mcp.mcp.prompts import render_prompt
from mockdb_mcp.mcp.router import execute_tool_calls
from mockdb_mcp.mcp.schemas import openai_tools
from mockdb_mcp.tools.mock_db import MockDatabase
from mockdb_shared.data_models import Message, ToolCall, TurnResult
from mockdb_shared.errors import ModelTimeoutError, ModelUnavailableError

logger = logging.getLogger(__name__)


class LLMClient(Protocol):
    def generate(
        self,
        messages: list[dict[str, Any]],
        *,
        tools: list[dict[str, Any]],
        tool_choice: str = ...,
        temperature: float = ...,
    ) -> dict[str, Any]: ...


def _to_model_messages(history: Sequence[Message]) -> list[dict[str, Any]]:
    """
    Convert the transcript into Chat Completions messages, system prompt first.

    An assistant message that carries tool calls is followed by one `tool`
    message per call with its recorded result, as the API requires.
    """
    model_messages: list[dict[str, Any]] = [{"role": "system", "content": render_prompt()}]
    for msg in history:
        item: dict[str, Any] = {"role": msg.role, "content": msg.content}
        calls = [tc for tc in msg.tool_calls if tc.function is not None]
        if calls:
            item["tool_calls"] = [
                {"id": tc.id, "type": tc.type, "function": tc.to_dict()["function"]}
                for tc in calls
            ]
        model_messages.append(item)
        for tc in calls:
            model_messages.append({
                "role": "tool",
                "tool_call_id": tc.id,
                "content": json.dumps({"status": tc.status, "result": tc.result}),
            })
    return model_messages


def converse(
    history: Sequence[Message],
    *,
    store: MockDatabase,
    llm: LLMClient,
) -> TurnResult:
    """
    Run one turn: ask the model for a tool call, dispatch what it proposes
    against `store` and return the enriched assistant reply.

    Raises:
        ModelUnavailableError: If the model call failed or returned nothing.
            Provider detail stays on `__cause__`, never in the message.
        ModelTimeoutError: If the model call timed out.
    """
    model_messages = _to_model_messages(history)

    try:
        llm_response = llm.generate(
            model_messages,
            tools=openai_tools(),
            tool_choice=TOOL_CHOICE,
            temperature=LLM_TEMPERATURE,
        )
    except ModelTimeoutError:
        raise
    except Exception as e:
        logger.error(f"Error calling the model: {e}")
        raise ModelUnavailableError(MODEL_UNAVAILABLE_ERROR) from e

    if not llm_response:
        raise ModelUnavailableError("No response from model")

    proposed = [
        ToolCall.from_dict(tc) for tc in llm_response.get("tool_calls") or [] if isinstance(tc, dict)
    ]
    executed = execute_tool_calls(store, proposed)

    return TurnResult(
        content=llm_response.get("content") or "",
        tool_calls=executed,
        db=store.snapshot(),
        model_version=llm_response.get("model_version"),
        usage=llm_response.get("usage"),
    )
