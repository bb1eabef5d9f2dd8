"""Structured logging configuration using structlog."""

import inspect
import logging
import os
import socket

import structlog

from pagecache.config import settings

# Cache hostname and PID at module load time (they don't change)
_HOSTNAME = socket.gethostname()
_PID = os.getpid()

# Caller info walks the stack on every log call; only enable it in debug mode
_ENABLE_CALLER_INFO = settings.debug


def _add_caller_info(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict,
) -> dict:
    """
    Add caller information (class, method, line number) to the log event.

    Only enabled in debug mode to avoid the stack walk in normal operation.
    """
    if not _ENABLE_CALLER_INFO:
        return event_dict

    frame = inspect.currentframe()
    try:
        # Skip frames: _add_caller_info -> structlog internals -> actual caller
        for _ in range(10):
            if frame is None:
                break
            frame = frame.f_back
            if frame is None:
                break

            module = frame.f_globals.get("__name__", "")
            if module.startswith(
                ("structlog", "logging", "pagecache.logger", "pagecache.core.cache.logging")
            ):
                continue

            func_name = frame.f_code.co_name
            lineno = frame.f_lineno
            filename = os.path.basename(frame.f_code.co_filename)

            local_vars = frame.f_locals
            class_name = None
            if "self" in local_vars:
                class_name = type(local_vars["self"]).__name__
            elif "cls" in local_vars:
                class_name = local_vars["cls"].__name__

            if class_name:
                event_dict["caller"] = f"{filename}:{class_name}.{func_name}:{lineno}"
            else:
                event_dict["caller"] = f"{filename}:{func_name}:{lineno}"
            break
    finally:
        del frame

    return event_dict


def _format_log_message(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict,
) -> str:
    """
    Render a single log line.

    Produces output like: DEBUG:    [hostname:pid] [file:Class.method:line] event_name key=value
    """
    level = event_dict.pop("level", "info").upper()
    event = event_dict.pop("event", "")
    caller = event_dict.pop("caller", "")

    context_parts = [f"{k}={v}" for k, v in event_dict.items()]
    context_str = " ".join(context_parts)

    prefix = f"{level}:     [{_HOSTNAME}:{_PID}]"
    if caller:
        prefix = f"{prefix} [{caller}]"

    if context_str:
        return f"{prefix} {event} {context_str}"
    return f"{prefix} {event}"


def setup_logging(*, debug: bool | None = None) -> None:
    """
    Configure structlog for the library.

    Sets up structured logging with:
    - Context variable merging so callers can bind a sequence or request id
    - Log level filtering based on the DEBUG setting
    - A compact one-line renderer
    """
    enabled = settings.debug if debug is None else debug
    log_level = logging.DEBUG if enabled else logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            _add_caller_info,
            _format_log_message,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,  # Allow reconfiguration
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """
    Get a logger instance.

    Args:
        name: Optional logger name, typically __name__ of the module.

    Returns:
        A bound structlog logger instance.
    """
    return structlog.get_logger(name)


def _outcome_from_error(error: BaseException | None) -> str:
    if error is None:
        return "success"
    return "error"


def log_sequence_run(
    *,
    sequence: str,
    requested_pages: int,
    loaded_pages: int,
    fetched_pages: int,
    duration_ms: float,
    error: BaseException | None = None,
    cache_delta: dict | None = None,
) -> None:
    """Emit a structured performance log for one paginated fetch run.

    ``sequence`` is a short hash of the sequence identity, never the raw key.
    """

    logger = get_logger("pagecache.performance")
    payload: dict[str, object] = {
        "sequence": sequence,
        "requested_pages": requested_pages,
        "loaded_pages": loaded_pages,
        "fetched_pages": fetched_pages,
        "outcome": _outcome_from_error(error),
        "duration_ms": round(duration_ms, 3),
    }
    if error is not None:
        payload["error_type"] = type(error).__name__
    if cache_delta:
        payload["cache_delta"] = cache_delta

    logger.debug("sequence_run", **payload)
