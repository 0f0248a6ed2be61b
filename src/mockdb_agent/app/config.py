from dataclasses import dataclass

from mockdb_agent.infrastructure.platform_manager import get_parameters

# Constants that don't change
LLM_TEMPERATURE = 0.1  # tool selection should be reproducible
TOOL_CHOICE = "required"
REDIS_NAMESPACE = "mockdb:chat"
APOLOGY_MESSAGE = (
    "Sorry, I encountered an error while processing your request. "
    "Please make sure your OpenAI API key is configured correctly."
)
TOOL_FALLBACK_MESSAGE = "I called a tool to help with your request."
MODEL_UNAVAILABLE_ERROR = "Failed to get response from AI assistant"
MODEL_TIMEOUT_ERROR = "AI assistant timed out"

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_LLM_TIMEOUT_SECONDS = 30.0
DEFAULT_TRANSCRIPT_TTL_SECONDS = 86400


@dataclass
class AgentSettings:
    """Agent configuration settings loaded from the environment."""

    openai_api_key: str
    openai_model: str
    redis_url: str
    llm_timeout_seconds: float
    transcript_ttl_seconds: int
    log_level: str = "INFO"


def _parse_float(value: str | None, *, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _parse_int(value: str | None, *, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class Config:
    """Singleton configuration manager for the chat agent."""

    _instance = None
    _settings = None

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def get_settings(self) -> AgentSettings:
        """Get agent settings, loading from the environment if not already cached."""
        if self._settings is None:
            self._settings = self._load_settings()
        return self._settings

    def reset(self) -> None:
        """Drop cached settings so the next access reloads them."""
        self._settings = None

    def _load_settings(self) -> AgentSettings:
        params = get_parameters(
            [
                "openai_api_key",
                "open_ai_secret",
                "openai_model",
                "redis_url",
                "llm_timeout_seconds",
                "transcript_ttl_seconds",
                "log_level",
            ]
        )

        timeout = _parse_float(params["llm_timeout_seconds"], default=DEFAULT_LLM_TIMEOUT_SECONDS)
        # Keep bounds sane
        timeout = max(1.0, min(timeout, 120.0))

        settings = AgentSettings(
            openai_api_key=params["openai_api_key"] or params["open_ai_secret"] or "",
            openai_model=params["openai_model"] or DEFAULT_OPENAI_MODEL,
            redis_url=params["redis_url"] or DEFAULT_REDIS_URL,
            llm_timeout_seconds=timeout,
            transcript_ttl_seconds=_parse_int(
                params["transcript_ttl_seconds"], default=DEFAULT_TRANSCRIPT_TTL_SECONDS
            ),
            log_level=(params["log_level"] or "INFO").upper(),
        )

        self._validate_settings(settings)

        return settings

    def _validate_settings(self, settings: AgentSettings) -> None:
        """Validate that all required settings have valid values."""
        required_fields = ["openai_api_key", "openai_model", "redis_url"]
        for field in required_fields:
            if not getattr(settings, field):
                raise ValueError(f"Configuration value is invalid: {field.upper()}")
        if settings.transcript_ttl_seconds <= 0:
            raise ValueError("Configuration value is invalid: TRANSCRIPT_TTL_SECONDS")


# Create singleton instance
config = Config()


# Convenience functions
def get_settings() -> AgentSettings:
    """Get agent settings from the singleton config."""
    return config.get_settings()
