"""
Shared data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

Role = Literal["user", "assistant", "system"]
ToolStatus = Literal["ok", "error"]

_ROLES = ("user", "assistant", "system")


@dataclass(frozen=True)
class FunctionCall:
    name: str
    arguments: str  # JSON-encoded


@dataclass(frozen=True)
class ToolCall:
    """
    A function call proposed by the model.

    `status`, `result` and `duration_ms` stay unset until the dispatcher has run.
    On the wire the duration is carried as `durationMs`.
    """

    id: str
    function: FunctionCall | None
    type: str = "function"
    status: ToolStatus | None = None
    result: Any = None
    duration_ms: int | None = None

    @property
    def dispatched(self) -> bool:
        return self.status is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "type": self.type}
        if self.function is not None:
            data["function"] = {
                "name": self.function.name,
                "arguments": self.function.arguments,
            }
        if self.dispatched:
            data["status"] = self.status
            data["result"] = self.result
            data["durationMs"] = self.duration_ms
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolCall:
        function = data.get("function")
        fn: FunctionCall | None = None
        if isinstance(function, dict):
            arguments = function.get("arguments")
            fn = FunctionCall(
                name=str(function.get("name") or ""),
                arguments=arguments if isinstance(arguments, str) else "",
            )
        status = data.get("status")
        return cls(
            id=str(data.get("id") or ""),
            function=fn,
            type=str(data.get("type") or "function"),
            status=status if status in ("ok", "error") else None,
            result=data.get("result"),
            duration_ms=data.get("durationMs"),
        )


@dataclass(frozen=True)
class Message:
    role: Role
    content: str
    tool_calls: tuple[ToolCall, ...] = field(default_factory=tuple)
    timestamp: str | None = None  # ISO-8601, set by the transcript

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            data["tool_calls"] = [tc.to_dict() for tc in self.tool_calls]
        if self.timestamp:
            data["timestamp"] = self.timestamp
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        role = data.get("role")
        if role not in _ROLES:
            raise ValueError(f"Unknown message role: {role}")
        raw_calls = data.get("tool_calls") or []
        if not isinstance(raw_calls, list):
            raise ValueError("tool_calls must be a list")
        return cls(
            role=role,
            content=str(data.get("content") or ""),
            tool_calls=tuple(ToolCall.from_dict(tc) for tc in raw_calls if isinstance(tc, dict)),
            timestamp=data.get("timestamp"),
        )


@dataclass(frozen=True)
class TurnResult:
    """The enriched assistant reply for one turn, plus the store state after it."""

    content: str
    tool_calls: list[ToolCall]
    db: dict[str, Any]
    model_version: str | None = None
    usage: dict[str, Any] | None = None

    def to_message(self, *, fallback_content: str = "") -> Message:
        return Message(
            role="assistant",
            content=self.content or fallback_content,
            tool_calls=tuple(self.tool_calls),
        )
