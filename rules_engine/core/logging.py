"""
Logging for the rules engine.

Engine modules log through the ``rules_engine`` logger. Nothing is printed
until the host calls ``setup_logging``, which attaches a rich handler to that
logger only, leaving the root logger of the host application alone.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

ENGINE_LOGGER_NAME = "rules_engine"


def setup_logging(level: int = logging.INFO) -> None:
    """
    Attaches a rich handler to the engine logger.

    Calling it again replaces the handler installed by a previous call.

    Args:
        level (int): The logging level to set. Defaults to logging.INFO.

    """
    engine_logger = logging.getLogger(ENGINE_LOGGER_NAME)
    for handler in list(engine_logger.handlers):
        if isinstance(handler, RichHandler):
            engine_logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True, width=120),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    engine_logger.addHandler(handler)
    engine_logger.setLevel(level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Returns the engine logger, or one of its children.

    Args:
        name (str | None): Child name (e.g., 'combat'). None for the engine
            logger itself.

    Returns:
        logging.Logger: The logger.

    """
    if not name or name == ENGINE_LOGGER_NAME:
        return logging.getLogger(ENGINE_LOGGER_NAME)
    return logging.getLogger(f"{ENGINE_LOGGER_NAME}.{name}")


logger = get_logger()


def _with_context(message: str, context: dict[str, Any] | None) -> str:
    """Appends the context as key=value pairs to the message."""
    if context:
        context_str = " ".join(f"{k}={v}" for k, v in context.items())
        message = f"{message} [{context_str}]"
    return message


def log_error(message: str, context: dict[str, Any] | None = None) -> None:
    """
    Logs an error message with optional context.

    Args:
        message (str): The error message.
        context (dict[str, Any] | None): Optional context dictionary.

    """
    logger.error(_with_context(message, context))


def log_warning(message: str, context: dict[str, Any] | None = None) -> None:
    """
    Logs a warning message with optional context.

    Args:
        message (str): The warning message.
        context (dict[str, Any] | None): Optional context dictionary.

    """
    logger.warning(_with_context(message, context))


def log_info(message: str, context: dict[str, Any] | None = None) -> None:
    """
    Logs an info message with optional context.

    Args:
        message (str): The info message.
        context (dict[str, Any] | None): Optional context dictionary.

    """
    logger.info(_with_context(message, context))


def log_debug(message: str, context: dict[str, Any] | None = None) -> None:
    """
    Logs a debug message with optional context.

    Args:
        message (str): The debug message.
        context (dict[str, Any] | None): Optional context dictionary.

    """
    logger.debug(_with_context(message, context))
