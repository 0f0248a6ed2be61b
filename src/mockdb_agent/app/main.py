import json
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from redis.exceptions import RedisError

from mockdb_agent.app.config import (
    APOLOGY_MESSAGE,
    MODEL_TIMEOUT_ERROR,
    MODEL_UNAVAILABLE_ERROR,
    REDIS_NAMESPACE,
    TOOL_FALLBACK_MESSAGE,
    AgentSettings,
    get_settings,
)
from mockdb_agent.app.logging import log_turn_response
from mockdb_agent.app.process_event import get_session_id, process_chat_event
from mockdb_agent.infrastructure.openai_gpt_manager import OpenAIChat
from mockdb_agent.infrastructure.platform_manager import create_logger
from mockdb_agent.services.llm_service import LLMClient, converse
from mockdb_mcp.tools.mock_db import MockDatabase
from mockdb_shared.data_models import Message
from mockdb_shared.errors import ModelTimeoutError, ModelUnavailableError
from mockdb_shared.redis_manager import RedisManager, TranscriptStore, build_redis_manager

logger = create_logger(logger_name="mockdb-agent", log_level="INFO")


@dataclass
class AgentRuntime:
    """Process-wide collaborators of a chat turn."""

    store: MockDatabase
    redis_manager: RedisManager
    llm: LLMClient


def build_runtime(settings: AgentSettings) -> AgentRuntime:
    logger.setLevel(settings.log_level)
    return AgentRuntime(
        store=MockDatabase(),
        redis_manager=build_redis_manager(
            settings.redis_url,
            namespace=REDIS_NAMESPACE,
            default_transcript_ttl=settings.transcript_ttl_seconds,
        ),
        llm=OpenAIChat(
            model=settings.openai_model,
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout_seconds,
        ),
    )


@lru_cache(maxsize=1)
def get_runtime() -> AgentRuntime:
    """Build the runtime once per process; the mock store lives as long as it does."""
    logger.info("Starting Mock DB Chat Agent")
    return build_runtime(get_settings())


def create_response(
    status_code: int, body: str, content_type: str = "text/plain"
) -> dict[str, Any]:
    """
    Create a standard HTTP response.
    """
    return {
        "statusCode": status_code,
        "body": body,
        "headers": {"Content-Type": content_type},
        "isBase64Encoded": False,
    }


def json_response(status_code: int, payload: dict[str, Any]) -> dict[str, Any]:
    return create_response(status_code, json.dumps(payload), "application/json")


def chat_turn(event: dict[str, Any], runtime: AgentRuntime) -> dict[str, Any]:
    """Persist the user message, run one turn and persist the assistant reply."""
    try:
        data = process_chat_event(event)
    except ValueError as e:
        logger.error(e)
        return create_response(status_code=400, body=str(e))

    transcripts = TranscriptStore(runtime.redis_manager, data["session_id"])
    history = transcripts.append(Message(role="user", content=data["message"]))

    try:
        turn = converse(history, store=runtime.store, llm=runtime.llm)
    except ModelUnavailableError as e:
        logger.error(f"AI model error: {e}")
        transcripts.append(Message(role="assistant", content=APOLOGY_MESSAGE))
        if isinstance(e, ModelTimeoutError):
            return json_response(504, {"error": MODEL_TIMEOUT_ERROR, "message": APOLOGY_MESSAGE})
        return json_response(502, {"error": MODEL_UNAVAILABLE_ERROR, "message": APOLOGY_MESSAGE})

    log_turn_response(turn, logger)
    assistant = turn.to_message(fallback_content=TOOL_FALLBACK_MESSAGE)
    transcripts.append(assistant)

    return json_response(200, {"message": assistant.to_dict(), "db": turn.db})


def read_transcript(event: dict[str, Any], runtime: AgentRuntime) -> dict[str, Any]:
    try:
        session_id = get_session_id(event)
    except ValueError as e:
        return create_response(status_code=400, body=str(e))
    messages = TranscriptStore(runtime.redis_manager, session_id).read_all()
    return json_response(200, {"messages": [m.to_dict() for m in messages]})


def clear_transcript(event: dict[str, Any], runtime: AgentRuntime) -> dict[str, Any]:
    try:
        session_id = get_session_id(event)
    except ValueError as e:
        return create_response(status_code=400, body=str(e))
    TranscriptStore(runtime.redis_manager, session_id).clear()
    logger.info(f"Transcript cleared for session {session_id}")
    return json_response(200, {"cleared": True})


def process(event: dict[str, Any], runtime: AgentRuntime | None = None) -> dict[str, Any]:
    """Process the incoming HTTP Gateway event."""
    route_key = event.get("routeKey", "")
    method, _, route = route_key.partition(" ")
    logger.info(f"Processing request: {method} {route}")

    if not route:
        logger.error("No route found")
        return create_response(404, "Not Found")

    runtime = runtime or get_runtime()

    try:
        if method == "POST" and route == "/agents/chat":
            return chat_turn(event, runtime)

        elif method == "GET" and route == "/agents/chat/transcript":
            return read_transcript(event, runtime)

        elif method == "DELETE" and route == "/agents/chat/transcript":
            return clear_transcript(event, runtime)

        elif method == "GET" and route == "/agents/chat/db":
            return json_response(200, runtime.store.snapshot())

    except RedisError as e:
        logger.error(f"Transcript store error: {e}")
        return create_response(503, "Transcript store unavailable")

    # Default case for unmatched routes
    return create_response(404, "Route and method not Found")
