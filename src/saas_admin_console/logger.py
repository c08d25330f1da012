import json
import logging
from datetime import datetime, timezone
from typing import Any

SENSITIVE_KEYS = ("token", "password", "secret", "authorization")


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def _sanitize(context: dict[str, Any]) -> dict[str, Any]:
    return {
        key: value
        for key, value in context.items()
        if not any(marker in key.lower() for marker in SENSITIVE_KEYS)
    }


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    outcome: str,
    trace_id: str | None = None,
    **context: Any,
) -> None:
    level = "ERROR" if outcome == "failure" else "INFO"
    logger.log(
        logging.ERROR if level == "ERROR" else logging.INFO,
        json.dumps(
            {
                "ts": datetime.now(timezone.utc).isoformat(),
                "level": level,
                "module": module,
                "action": action,
                "outcome": outcome,
                "trace_id": trace_id,
                **_sanitize(context),
            },
            default=str,
        ),
    )
