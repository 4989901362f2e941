from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel

class AuditUser(BaseModel):
    id: int
    name: Optional[str] = None
    email: str

    class Config:
        from_attributes = True

class AuditLogRead(BaseModel):
    id: int
    action: str
    entity_type: str
    entity_id: int
    details: Optional[Any] = None
    created_at: datetime
    user: Optional[AuditUser] = None

    class Config:
        from_attributes = True

class AuditLogPage(BaseModel):
    logs: List[AuditLogRead]
    page: int
    limit: int
    total: int
    total_pages: int
