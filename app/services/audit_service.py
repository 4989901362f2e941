import math
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session, joinedload

from app.models import audit_log as audit_model
from app.models import user as user_model

def record(
    db: Session,
    user: Optional[user_model.User],
    action: str,
    entity_type: str,
    entity_id: int,
    details: Optional[Dict[str, Any]] = None,
) -> audit_model.AuditLog:
    # Added to the caller's session so it commits with the change it describes
    entry = audit_model.AuditLog(
        user_id=user.id if user is not None else None,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details,
    )
    db.add(entry)
    return entry

def list_audit_logs(
    db: Session,
    page: int = 1,
    limit: int = 20,
    action: Optional[str] = None,
    entity_type: Optional[str] = None,
) -> dict:
    query = db.query(audit_model.AuditLog)
    if action:
        query = query.filter(audit_model.AuditLog.action == action)
    if entity_type:
        query = query.filter(audit_model.AuditLog.entity_type == entity_type)

    total = query.count()
    logs = query.options(joinedload(audit_model.AuditLog.user))\
        .order_by(audit_model.AuditLog.created_at.desc(), audit_model.AuditLog.id.desc())\
        .offset((page - 1) * limit)\
        .limit(limit)\
        .all()
    return {
        "logs": logs,
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit),
    }
