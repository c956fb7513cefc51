import logging
import sys

from camper_planner.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once for the whole service."""
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())
    if any(getattr(h, "_camper_planner", False) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._camper_planner = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
