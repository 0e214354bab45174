"""
Structured JSON line events.

Keys: ts, level, message, request_id, event, module (+ any extra).
"""
from __future__ import annotations

import datetime
import json
import logging
import os
from typing import Any, Dict, Optional

_log = logging.getLogger("app")
if not _log.handlers:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))


def now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def emit(level: str, event: str, message: str, request_id: Optional[str], module: str, **extra: Any) -> None:
    payload: Dict[str, Any] = {
        "ts": now_iso(),
        "level": level.lower(),
        "message": message,
        "request_id": request_id,
        "event": event,
        "module": module,
    }
    payload.update(extra)
    print(json.dumps(payload, ensure_ascii=False, default=str), flush=True)
