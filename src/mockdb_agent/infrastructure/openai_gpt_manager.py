import logging
from typing import Any, cast

import openai
from openai import OpenAI

from mockdb_shared.errors import ModelTimeoutError, ModelUnavailableError

logger = logging.getLogger(__name__)

# Default configuration constants
DEFAULT_TOOL_CHOICE = "required"
DEFAULT_TEMPERATURE = 0.1
DEFAULT_TIMEOUT = 30.0


def _tool_call_to_dict(item: Any) -> dict[str, Any]:
    """Flatten an SDK tool call object into the wire shape."""
    fn = getattr(item, "function", None)
    return {
        "id": getattr(item, "id", "") or "",
        "type": getattr(item, "type", "function") or "function",
        "function": {
            "name": getattr(fn, "name", "") or "",
            "arguments": getattr(fn, "arguments", "") or "",
        },
    }


class OpenAIChat:
    """
    A client for OpenAI Chat Completions with forced tool calling.

    One request per call: there is no retry. Timeouts are surfaced as
    ModelTimeoutError, every other failure as ModelUnavailableError.
    """

    def __init__(
        self,
        model: str,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: OpenAI | None = None,
    ) -> None:
        """
        Initialize the OpenAI chat client.

        Args:
            model: The OpenAI model to use (e.g., 'gpt-4o-mini')
            api_key: OpenAI API key
            timeout: Seconds to wait for the model before giving up
            client: Pre-built SDK client (for tests)

        Raises:
            ValueError: If the API key is missing
        """
        if client is None:
            if not api_key:
                raise ValueError("OPENAI_API_KEY not found in environment")
            client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

        self.client: OpenAI = client
        self.model = model
        self.timeout = timeout

    def generate(
        self,
        messages: list[dict[str, Any]],
        *,
        tools: list[dict[str, Any]],
        tool_choice: str = DEFAULT_TOOL_CHOICE,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> dict[str, Any]:
        """
        Send the conversation to the model and return its reply.

        Args:
            messages: Chat Completions formatted messages
            tools: Chat Completions tool specs
            tool_choice: "required" forces a tool call
            temperature: Sampling temperature

        Returns:
            Dictionary containing:
                - content: The assistant text ("" when absent)
                - tool_calls: Proposed tool calls as wire-shaped dicts
                - usage: Token usage information
                - model_version: Model version used

        Raises:
            ModelTimeoutError: If the request timed out
            ModelUnavailableError: If the request failed or returned no message
        """
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=cast(Any, messages),
                tools=cast(Any, tools),
                tool_choice=cast(Any, tool_choice),
                temperature=temperature,
                timeout=self.timeout,
            )
        except (openai.APITimeoutError, TimeoutError) as e:
            logger.error(f"{self.model} timed out after {self.timeout}s")
            raise ModelTimeoutError(f"Model call timed out after {self.timeout}s") from e
        except Exception as e:  # Non-retryable
            logger.error(f"Fatal error calling {self.model}: {e}")
            raise ModelUnavailableError(f"Fatal error calling {self.model}: {e}") from e

        choices = getattr(resp, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        if message is None:
            raise ModelUnavailableError("No response from model")

        # Extract usage information
        u = getattr(resp, "usage", None)
        usage = {
            "input_tokens": getattr(u, "prompt_tokens", 0),
            "output_tokens": getattr(u, "completion_tokens", 0),
            "total_tokens": getattr(u, "total_tokens", 0),
        }

        return {
            "content": getattr(message, "content", None) or "",
            "tool_calls": [_tool_call_to_dict(tc) for tc in getattr(message, "tool_calls", None) or []],
            "usage": usage,
            "model_version": getattr(resp, "model", None),
        }
