# sitestore/logging_utils.py
import os, json, uuid, logging, traceback
from typing import Optional
from sitestore.timeutil import isoz, utcnow

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Initialize basic logging with a shared format. The level can be given
    directly or via LOG_LEVEL (defaults to INFO).
    """
    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=resolved_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def log_exception(error_log: str, exc: BaseException, context: Optional[dict] = None) -> str:
    """Write traceback + context as one JSON line to error_log and return its id."""
    err_id = f"err_{uuid.uuid4().hex[:8]}"
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    entry = {
        "id": err_id,
        "time": isoz(utcnow()),
        "context": context or {},
        "traceback": tb,
        "exc_str": str(exc),
    }
    logger.error("%s %s: %s", err_id, type(exc).__name__, exc)
    try:
        with open(error_log, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")
    except OSError as e:
        logger.error("failed to write error log %s: %s", error_log, e)
    return err_id


def last_error(error_log: str) -> Optional[dict]:
    if not os.path.exists(error_log):
        return None
    last = None
    with open(error_log, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                last = json.loads(line)
            except ValueError:
                continue
    return last
