import logging

from mockdb_shared.data_models import TurnResult


def log_turn_response(turn: TurnResult, logger: logging.Logger) -> None:
    logger.info(f"Turn answered by model: {turn.model_version or 'Unknown'}")
    logger.info(f"Usage: {turn.usage or 'Unknown'}")
    for tc in turn.tool_calls:
        name = tc.function.name if tc.function else "Unknown"
        logger.info(f"Tool call {tc.id}: {name} -> {tc.status} in {tc.duration_ms}ms")
        logger.debug(f"Arguments: {tc.function.arguments if tc.function else 'Unknown'}")
