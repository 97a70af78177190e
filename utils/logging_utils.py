import logging
import structlog
from structlog.stdlib import add_log_level, add_logger_name

# Third-party loggers that are chatty at DEBUG (PNG chunk dumps on atlas load)
NOISY_LOGGERS = ("PIL",)


def setup_logging(level: int = logging.INFO, colors: bool = True) -> None:
    """Route structlog through standard logging at ``level``.

    Loggers in ``NOISY_LOGGERS`` are held at WARNING whatever ``level`` is.
    """
    logging.basicConfig(level=level, format="%(message)s")
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_logger_name,
            add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
