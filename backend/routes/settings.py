# backend/routes/settings.py
import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.setting import SiteSetting
from schemas.admin import AdminUser, SiteSettingWrite
from utils.audit import client_ip, write_log
from utils.tokenJWT import get_current_admin

router = APIRouter(prefix="/admin/settings", tags=["Admin"])
logger = logging.getLogger(__name__)


@router.get("")
def get_settings(db: Session = Depends(get_db), admin: AdminUser = Depends(get_current_admin)) -> Dict[str, Any]:
    return {s.key: s.value for s in db.query(SiteSetting).order_by(SiteSetting.key).all()}


# Insert or replace one setting
@router.post("")
def upsert_setting(
    payload: SiteSettingWrite,
    request: Request,
    db: Session = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin),
) -> Dict[str, Any]:
    key = payload.key.strip()
    if not key:
        raise HTTPException(status_code=400, detail="Setting key is required")

    setting = db.query(SiteSetting).filter(SiteSetting.key == key).first()
    created = setting is None
    if created:
        setting = SiteSetting(key=key)
        db.add(setting)
    setting.value = payload.value

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Could not save setting {key}")
        raise HTTPException(status_code=500, detail="Internal server error")

    write_log(db, actor=admin.username, action="SETTING_UPDATE", resource="settings",
              ip=client_ip(request), meta={"key": key, "created": created})
    return {"key": key, "value": payload.value}
