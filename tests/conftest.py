from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import pytest

from mockdb_agent.app.main import AgentRuntime
from mockdb_mcp.tools.mock_db import MockDatabase
from mockdb_shared.redis_manager import RedisManager, build_redis_manager


class FakeRedis:
    """In-memory stand-in for the handful of list commands the transcript uses."""

    def __init__(self) -> None:
        self.lists: dict[str, list[str]] = {}
        self.ttls: dict[str, int] = {}
        self.fail_with: Exception | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def rpush(self, key: str, *values: str) -> int:
        self._check()
        self.lists.setdefault(key, []).extend(values)
        return len(self.lists[key])

    def lrange(self, key: str, start: int, end: int) -> list[str]:
        self._check()
        items = self.lists.get(key, [])
        return items[start:] if end == -1 else items[start : end + 1]

    def expire(self, key: str, ttl: int) -> bool:
        self._check()
        self.ttls[key] = ttl
        return key in self.lists

    def delete(self, *keys: str) -> int:
        self._check()
        removed = 0
        for key in keys:
            if self.lists.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed


class FakeLLM:
    """Returns queued responses (or raises queued exceptions) and records each request."""

    def __init__(self, *responses: dict[str, Any] | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def generate(
        self,
        messages: list[dict[str, Any]],
        *,
        tools: list[dict[str, Any]],
        tool_choice: str = "required",
        temperature: float = 0.1,
    ) -> dict[str, Any]:
        self.calls.append({
            "messages": messages,
            "tools": tools,
            "tool_choice": tool_choice,
            "temperature": temperature,
        })
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def tool_call(call_id: str, name: str, args: dict[str, Any] | str | None = None) -> dict[str, Any]:
    arguments = args if isinstance(args, str) else json.dumps(args or {})
    return {"id": call_id, "type": "function", "function": {"name": name, "arguments": arguments}}


def llm_reply(*calls: dict[str, Any], content: str | None = None) -> dict[str, Any]:
    return {
        "content": content,
        "tool_calls": list(calls),
        "usage": {"input_tokens": 10, "output_tokens": 5, "total_tokens": 15},
        "model_version": "gpt-4o-mini-test",
    }


@pytest.fixture
def store() -> MockDatabase:
    return MockDatabase()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis_manager(fake_redis: FakeRedis) -> RedisManager:
    return build_redis_manager(redis_client=fake_redis, default_transcript_ttl=600)  # type: ignore[arg-type]


@pytest.fixture
def make_runtime(store: MockDatabase, redis_manager: RedisManager):
    def _make(*responses: dict[str, Any] | Exception) -> AgentRuntime:
        return AgentRuntime(store=store, redis_manager=redis_manager, llm=FakeLLM(*responses))

    return _make


def raising_sdk_client(error: Exception) -> Any:
    """Shape of `openai.OpenAI` whose chat completion call raises `error`."""

    def create(**kwargs: Any) -> Any:
        raise error

    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
