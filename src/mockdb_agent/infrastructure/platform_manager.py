import logging
import os
from pathlib import Path


def create_logger(
    log_level: str = "INFO",
    logger_name: str = "mockdb-agent",
    logs_dir: str | Path | None = None,
) -> logging.Logger:
    """
    Create a logger that outputs to console and optionally to a file.

    Args:
        log_level (str): Logging level (e.g., "INFO", "DEBUG").
        logger_name (str): Name for the logger instance and its log file.
        logs_dir (str | Path | None): Directory for log files. If None, only the
            console handler is attached.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.DEBUG))
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s %(message)s")

    if not logger.hasHandlers():  # Prevent handler duplication
        # Console handler (stdio) - always add this
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if logs_dir is not None:
            try:
                logs_path = Path(logs_dir)
                logs_path.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(logs_path / logger_name)
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)
            except OSError:
                # If file logging fails, just continue with console logging
                logger.warning(f"File logging unavailable in {logs_dir}")

    return logger


def get_parameters(param_names: list[str] | str) -> dict[str, str | None]:
    """
    Retrieve configuration parameters from environment variables.

    Args:
        param_names (list[str] | str): Lowercase parameter names. Each is looked up
            as the uppercase environment variable of the same name.

    Returns:
        dict[str, str | None]: Mapping of lowercase names to values (None if unset).
    """
    if isinstance(param_names, str):
        param_names = [param_names]

    result = {}
    for param_name in param_names:
        # Parameters are stored in the environment variables in uppercase
        # But we want to store them in lowercase in the result dictionary
        result[param_name.lower()] = os.getenv(param_name.upper())
    return result
