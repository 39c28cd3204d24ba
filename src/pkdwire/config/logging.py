"""Route pkdwire's log records through structlog.

Library modules use plain ``logging.getLogger(__name__)``; the codec logs
rejected actions at DEBUG and clock faults at CRITICAL. The CLI calls
:func:`configure_logging` once per invocation so ``-v`` surfaces the DEBUG
records and ``--log-json`` switches stderr to JSON lines.
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGE_LOGGER = "pkdwire"


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install one structlog-formatted stderr handler on the root logger.

    Calling again replaces the handler rather than adding a second one.
    """
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
