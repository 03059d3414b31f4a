import logging
from typing import Any, Dict, Optional

from django.db import DatabaseError

from care.models import AuditEvent, User

logger = logging.getLogger(__name__)


def log_action(*, user, action: str, object_type: Optional[str] = None, object_id: Optional[int] = None,
               detail: Optional[Dict[str, Any]] = None, using: str = 'default') -> Optional[AuditEvent]:
    """Persist an audit event; a failed write is logged, not raised."""
    try:
        return AuditEvent.objects.using(using).create(
            user=user if isinstance(user, User) else None,
            action=action,
            object_type=object_type, object_id=object_id,
            detail=detail or {},
        )
    except DatabaseError:
        logger.warning('audit write failed for %s', action, exc_info=True)
        return None
