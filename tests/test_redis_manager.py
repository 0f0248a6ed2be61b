import pytest

from conftest import FakeRedis
from mockdb_shared.data_models import FunctionCall, Message, ToolCall
from mockdb_shared.redis_manager import RedisManager, TranscriptStore, build_redis_manager


def test_append_returns_full_history_in_order(redis_manager: RedisManager):
    transcript = TranscriptStore(redis_manager, "s1")
    transcript.append(Message(role="user", content="hello"))
    history = transcript.append(Message(role="assistant", content="hi"))

    assert [(m.role, m.content) for m in history] == [("user", "hello"), ("assistant", "hi")]
    assert all(m.timestamp for m in history)
    assert transcript.read_all() == history


def test_tool_calls_survive_persistence(redis_manager: RedisManager):
    call = ToolCall(
        id="c1",
        function=FunctionCall("search_user", '{"user_id": "u1"}'),
        status="ok",
        result={"id": "u1"},
        duration_ms=1,
    )
    transcript = TranscriptStore(redis_manager, "s1")
    transcript.append(Message(role="assistant", content="", tool_calls=(call,)))

    assert transcript.read_all()[0].tool_calls == (call,)


def test_sessions_are_isolated_and_clear(redis_manager: RedisManager):
    a = TranscriptStore(redis_manager, "a")
    b = TranscriptStore(redis_manager, "b")
    a.append(Message(role="user", content="in a"))

    assert b.read_all() == []
    a.clear()
    assert a.read_all() == []


def test_ttl_is_refreshed_on_append(fake_redis: FakeRedis, redis_manager: RedisManager):
    TranscriptStore(redis_manager, "s1").append(Message(role="user", content="x"))
    assert fake_redis.ttls == {"mockdb:chat:transcript:s1": 600}


def test_corrupt_entries_are_skipped(fake_redis: FakeRedis, redis_manager: RedisManager):
    key = redis_manager.get_transcript_key("s1")
    fake_redis.rpush(key, "not json", '{"role": "robot", "content": "?"}', "[1]")
    transcript = TranscriptStore(redis_manager, "s1")
    transcript.append(Message(role="user", content="ok"))

    assert [m.content for m in transcript.read_all()] == ["ok"]


def test_session_id_required(redis_manager: RedisManager):
    with pytest.raises(ValueError):
        TranscriptStore(redis_manager, "")


def test_build_redis_manager_needs_url_or_client():
    with pytest.raises(ValueError):
        build_redis_manager()


def test_namespace_is_normalised(fake_redis: FakeRedis):
    manager = build_redis_manager(redis_client=fake_redis, namespace="demo:")  # type: ignore[arg-type]
    assert manager.get_transcript_key("x") == "demo:transcript:x"
