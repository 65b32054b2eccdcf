import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from models.log import Log

logger = logging.getLogger(__name__)

def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None or request.client is None:
        return None
    return request.client.host

def write_log(db: Session, *, actor, action, resource, status="SUCCESS", ip=None, meta=None):
    entry = Log(actor=actor, action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    try:
        db.commit()
    except SQLAlchemyError:
        # Audit failures never fail the request
        db.rollback()
        logger.exception(f"Audit entry {action}/{resource} could not be stored")
