from __future__ import annotations

import dataclasses
import json
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from mockdb_mcp.mcp.schemas import tool_names
from mockdb_mcp.tools.mock_db import MockDatabase, Product, UpdatableField, User
from mockdb_shared.data_models import ToolCall
from mockdb_shared.errors import ToolError, ToolValidationError, UnknownToolError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedArguments:
    args: dict[str, Any]


@dataclass(frozen=True)
class EmptyArguments:
    reason: str
    args: dict[str, Any] = field(default_factory=dict)


def parse_arguments(raw: str | None) -> ParsedArguments | EmptyArguments:
    """
    Parse a tool call's JSON argument string.

    Malformed or non-object JSON degrades to an empty argument set instead of failing.
    """
    if not raw:
        return EmptyArguments(reason="no arguments")
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        return EmptyArguments(reason=f"invalid JSON in tool arguments: {e}")
    if not isinstance(parsed, dict):
        return EmptyArguments(reason="arguments are not a JSON object")
    return ParsedArguments(args=parsed)


def _get_string(args: dict[str, Any], key: str) -> str:
    value = args.get(key)
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return str(value)


def _get_number(args: dict[str, Any], key: str) -> float | None:
    value = args.get(key)
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _to_result(value: Any) -> Any:
    """Convert store rows into plain JSON-serializable structures."""
    if isinstance(value, User | Product):
        return value.to_dict()
    if isinstance(value, list):
        return [_to_result(v) for v in value]
    return value


def call_tool(store: MockDatabase, name: str, args: dict[str, Any]) -> Any:
    """
    Run the store operation behind the tool `name`.

    Raises:
        UnknownToolError: If `name` is not in the tool catalog.
        ToolValidationError: If the arguments are rejected before or by the store.
    """
    if name == "search_product":
        return _to_result(
            store.search_product(
                _get_string(args, "product_name"), _get_number(args, "product_price")
            )
        )
    if name == "search_user":
        return _to_result(store.search_user(_get_string(args, "user_id")))
    if name == "search_users_by_name":
        return _to_result(store.search_users_by_name(_get_string(args, "name")))
    if name == "update_user_record":
        field_name = UpdatableField.parse(_get_string(args, "field"))
        if field_name is None:
            raise ToolValidationError("Unsupported field. Allowed: name, email, status")
        return _to_result(
            store.update_user_record(
                _get_string(args, "user_id"), field_name, _get_string(args, "value")
            )
        )
    if name == "list_users":
        return _to_result(store.list_users())
    if name == "list_products":
        return _to_result(store.list_products())
    if name == "reset_db":
        return store.reset_db()
    raise UnknownToolError(name)


def execute_tool_call(store: MockDatabase, tool_call: ToolCall) -> ToolCall:
    """
    Dispatch one model-proposed tool call and return it enriched with
    status, result and duration. Never raises.
    """
    start = time.perf_counter()
    status = "ok"
    result: Any = None

    name = tool_call.function.name if tool_call.function else ""
    parsed = parse_arguments(tool_call.function.arguments if tool_call.function else None)
    if isinstance(parsed, EmptyArguments) and tool_call.function and tool_call.function.arguments:
        logger.warning(f"Tool call {tool_call.id} ({name}): {parsed.reason}; using empty arguments")

    try:
        # Only function calls are dispatched; other kinds pass through with no result
        if tool_call.type == "function":
            if name not in tool_names():
                raise UnknownToolError(name)
            result = call_tool(store, name, parsed.args)
    except ToolError as e:
        status = "error"
        result = {"error": str(e)}
        logger.info(f"Tool call {tool_call.id} ({name}) rejected: {e}")
    except Exception as e:
        status = "error"
        result = {"error": str(e) or "Tool execution error"}
        logger.exception(f"Tool call {tool_call.id} ({name}) failed")

    duration_ms = max(0, int((time.perf_counter() - start) * 1000))
    return dataclasses.replace(tool_call, status=status, result=result, duration_ms=duration_ms)


def execute_tool_calls(store: MockDatabase, tool_calls: Iterable[ToolCall]) -> list[ToolCall]:
    """Dispatch each call independently, keeping the order the model emitted them in."""
    return [execute_tool_call(store, tc) for tc in tool_calls]
