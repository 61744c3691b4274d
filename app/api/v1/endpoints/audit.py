"""
Audit log endpoints.
"""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.api.dependencies import get_current_actor
from app.db.session import get_db
from app.schemas.actor import Actor
from app.schemas.audit import AuditPage, AuditQuery
from app.services.audit_service import AuditRecorder

router = APIRouter()


@router.get("", summary="Query the audit log, newest first.", response_model=AuditPage, )
def query_audit_log(actor_id: Optional[str] = Query(None), entity_type: Optional[str] = Query(None),
                    action_type: Optional[str] = Query(None), start: Optional[datetime.datetime] = Query(None),
                    end: Optional[datetime.datetime] = Query(None), limit: int = Query(50, ge=1, le=500),
                    offset: int = Query(0, ge=0), db: Session = Depends(get_db),
                    actor: Actor = Depends(get_current_actor), ):
    filters = AuditQuery(actor_id=actor_id, entity_type=entity_type, action_type=action_type, start=start, end=end,
                         limit=limit, offset=offset, )
    return AuditRecorder(db).page(actor, filters)
