"""structlog setup for processes hosting the AMM."""

import logging

import structlog


def configure_logging(level: str | int = "INFO", *, json_logs: bool = False) -> None:
    """Configure structlog for console or JSON output.

    Args:
        level: Minimum level, as a name ("DEBUG") or a logging constant
        json_logs: Render one JSON object per line instead of console output
    """
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    processors: list[structlog.types.Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
