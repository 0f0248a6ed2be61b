"""
Error kinds shared by the tool and agent services.

Per-call faults (`ToolError`) are reported inline in the tool call's result.
Whole-turn faults (`ModelUnavailableError`) abort the turn.
"""


class ToolError(Exception):
    """A tool call failed; the turn carries on."""


class UnknownToolError(ToolError):
    def __init__(self, name: str) -> None:
        super().__init__("Unknown tool")
        self.name = name


class ToolValidationError(ToolError, ValueError):
    """Rejected input: disallowed field, malformed email or status."""


class ModelUnavailableError(RuntimeError):
    """The model call failed or returned nothing."""


class ModelTimeoutError(ModelUnavailableError):
    """The model call did not complete within the configured timeout."""
