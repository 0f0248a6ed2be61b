import json
from typing import Any

_MAX_MESSAGE_LENGTH = 4000


def parse_body(event: dict[str, Any]) -> dict[str, Any]:
    """Decode the event body into a dict; an absent body is an empty dict."""
    body = event.get("body") or {}
    if isinstance(body, bytes | str):
        try:
            body = json.loads(body) if body else {}
        except json.JSONDecodeError as e:
            raise ValueError(f"Body is not valid JSON: {e}") from e
    if not isinstance(body, dict):
        raise ValueError("Body must be a JSON object")
    return body


def get_session_id(event: dict[str, Any]) -> str:
    """Read the session id from the query string."""
    query = event.get("queryStringParameters") or {}
    session_id = query.get("session_id")
    if not session_id or not isinstance(session_id, str):
        raise ValueError("No session_id provided")
    return session_id


def validate_chat_data(data: dict[str, Any]) -> bool:
    """Validate a chat turn request."""
    # All chat events should have a session id
    if not data.get("session_id") or not isinstance(data.get("session_id"), str):
        raise ValueError("No session_id provided in the request")

    # All chat events should have a non-blank message
    message = data.get("message")
    if not message or not isinstance(message, str) or not message.strip():
        raise ValueError("No message provided")

    if len(message) > _MAX_MESSAGE_LENGTH:
        raise ValueError(f"Message longer than {_MAX_MESSAGE_LENGTH} characters")

    return True


def process_chat_event(event: dict[str, Any]) -> dict[str, Any]:
    """Extract and validate the chat turn payload."""
    data = parse_body(event)
    try:
        validate_chat_data(data)
    except ValueError as e:
        raise ValueError(f"Invalid data: {e}") from e
    return data
