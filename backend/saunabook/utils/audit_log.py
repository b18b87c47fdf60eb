from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Literal, Optional

from .request_id import get_request_id

AuditAction = Literal[
    "reservation.created",
    "reservation.cancelled",
    "shared_reservation.joined",
]

_audit_logger = logging.getLogger("audit")
_audit_logger.setLevel(logging.INFO)
if not _audit_logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    _audit_logger.addHandler(handler)
_audit_logger.propagate = False


def _jsonable(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "value"):
        return str(value.value)
    return value


def emit_audit_log(
    *,
    action: AuditAction,
    club_id: Optional[int],
    sauna_id: Optional[int],
    boat_id: Optional[int],
    reservation_id: Optional[int] = None,
    shared_reservation_id: Optional[int] = None,
    start_time: Optional[datetime] = None,
    adults: Optional[int] = None,
    kids: Optional[int] = None,
    status_from: Any = None,
    status_to: Any = None,
    extra: Optional[dict[str, Any]] = None,
) -> None:
    """Emit structured JSON audit log. Raises RuntimeError if logging fails."""
    payload: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": "info",
        "action": action,
        "request_id": get_request_id(),
        "club_id": club_id,
        "sauna_id": sauna_id,
        "boat_id": boat_id,
        "reservation_id": reservation_id,
        "shared_reservation_id": shared_reservation_id,
        "start_time": _jsonable(start_time),
        "adults": adults,
        "kids": kids,
        "status_from": _jsonable(status_from),
        "status_to": _jsonable(status_to),
    }
    if extra:
        payload.update({k: _jsonable(v) for k, v in extra.items()})

    compact_payload = {k: v for k, v in payload.items() if v is not None}
    try:
        _audit_logger.info(json.dumps(compact_payload, ensure_ascii=True))
    except Exception as exc:
        raise RuntimeError("failed to emit audit log") from exc
