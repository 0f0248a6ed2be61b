import logging
from typing import Any

from mockdb_agent.app.main import process

logger = logging.getLogger("mockdb-agent")


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """AWS Lambda entry point for the Mock DB Chat Agent."""
    try:
        return process(event)
    except Exception as e:
        logger.exception("Unhandled error in Mock DB Chat Agent")
        raise RuntimeError(f"Error in processing Mock DB Chat Agent: {e}") from e
