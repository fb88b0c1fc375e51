"""
Logging configuration for the inspiration board using eliot.

This module provides structured logging throughout the application using eliot,
which provides context-aware logging with support for nested actions
and structured data.
"""

import eliot
import logging
import sys
from eliot import log_message, write_traceback
from eliot.stdlib import EliotHandler
from pathlib import Path


class HumanReadableDestination:
    """Destination that formats logs in a human-readable format."""

    # Noisy message types already covered by a player_action message
    SKIP_MESSAGES = {
        "playback_notify",
        "storage_operation",
        "interaction_ignored",
    }

    def __init__(self, file):
        self.file = file

    def format(self, message: dict) -> str | None:
        """Return the display line for an eliot message, or None to skip it."""
        # Skip internal Eliot messages (action start/status messages)
        if not message.get("message_type"):
            return None

        msg_type = message["message_type"]
        if msg_type in self.SKIP_MESSAGES:
            return None

        action = message.get("action", msg_type)
        description = message.get("description", "")
        trigger = message.get("trigger_source", "")

        if msg_type == "player_action":
            if not trigger:
                return None
            track = message.get("track", "")
            old_state = message.get("old_state", "")
            new_state = message.get("new_state", "")
            if track and old_state and new_state:
                return f"[{trigger.upper()}] {action}: {track} ({old_state} → {new_state})"
            if track:
                return f"[{trigger.upper()}] {action}: {track}"
            if description:
                return f"[{trigger.upper()}] {description}"
            return f"[{trigger.upper()}] {action}"

        if msg_type == "api_request":
            output = f"[API] {action}"
            if description:
                output += f": {description}"
            return output

        if msg_type == "error_occurred":
            return f"[ERROR] {message.get('error_type', '')}: {message.get('error_message', '')}"

        if description:
            return description
        if "message" in message:
            return message["message"]
        return None

    def __call__(self, message):
        """Format and write log message."""
        output = self.format(message)
        if output and output.strip():
            self.file.write(output + "\n")
            self.file.flush()


def setup_logging(log_level: str = "INFO", log_file: str = None, stream=None) -> None:
    """
    Set up eliot logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write raw JSON logs to
        stream: Human-readable output stream (defaults to stdout)
    """
    eliot.add_destination(HumanReadableDestination(stream or sys.stdout))

    # Raw JSON for machine parsing
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        eliot.to_file(open(log_path, "a"))

    # Route stdlib logging (requests, urllib3) through eliot
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.addHandler(EliotHandler())

    log_message(
        message_type="logging_setup", log_level=log_level, log_file=log_file or "stdout", message="Eliot logging configured"
    )


def get_logger(name: str):
    """
    Get an eliot logger instance for a specific component.

    The returned Logger is meant for start_action() contexts; use
    eliot.log_message() for individual messages.

    Args:
        name: Module or component name

    Returns:
        Eliot Logger instance for use with start_action()
    """
    from eliot import Logger

    return Logger()


# Global logger instances for different components
app_logger = get_logger("board_app")
store_logger = get_logger("board_store")
playback_logger = get_logger("board_playback")
source_logger = get_logger("board_sources")


def log_player_action(action: str, **context):
    """
    Log player actions with context.

    Args:
        action: Player action (play, pause, next, previous, etc.)
        **context: Additional context data
    """
    log_message(message_type="player_action", action=action, **context)


def log_storage_operation(operation: str, key: str = None, **context):
    """
    Log key-value store operations with context.

    Args:
        operation: Type of operation (read, write, remove)
        key: Storage key involved
        **context: Additional context data
    """
    log_message(message_type="storage_operation", operation=operation, key=key, **context)


def log_api_request(action: str, trigger_source: str = "api", **context):
    """
    Log requests to the proxy API with context.

    Args:
        action: API action being performed
        trigger_source: Source of the request (default: "api")
        **context: Additional context data (request parameters, response, etc.)
    """
    log_message(message_type="api_request", action=action, trigger_source=trigger_source, **context)


def log_error(logger: eliot.Logger, error: Exception, **context):
    """
    Log errors with full context and traceback.

    Args:
        logger: Eliot logger instance
        error: Exception that occurred
        **context: Additional context data
    """
    write_traceback(logger, exc_info=(type(error), error, error.__traceback__))
    log_message(message_type="error_occurred", error_message=str(error), error_type=type(error).__name__, **context)
