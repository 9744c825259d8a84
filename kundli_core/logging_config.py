import logging

from kundli_core.config import settings


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging for applications embedding kundli_core.

    The library itself only creates module loggers; calling this is optional.
    """
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
