# backend/routes/auth.py
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from utils.tokenJWT import bearer_scheme, check_admin_credentials, create_access_token, decode_admin_token
from utils.audit import client_ip, write_log
from schemas import admin as schemas
from database import get_db

router = APIRouter(prefix="/admin", tags=["Auth"])


# Authenticate the back-office account and issue a JWT token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.AdminLogin, request: Request, db: Session = Depends(get_db)):
    # Validate credentials and log failure on error
    if not check_admin_credentials(payload.username, payload.password):
        write_log(db, actor=payload.username, action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token = create_access_token(data={"sub": payload.username, "role": "admin"})

    write_log(db, actor=payload.username, action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request))

    return {"access_token": access_token, "token_type": "bearer",
            "user": schemas.AdminUser(username=payload.username)}


# Check a token from the Authorization header or the request body
@router.post("/verify", response_model=schemas.TokenVerifyResponse)
def verify(
    payload: Optional[schemas.TokenVerifyRequest] = None,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
):
    token = credentials.credentials if credentials else (payload.token if payload else None)
    admin = decode_admin_token(token)
    if admin is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    return {"valid": True, "user": admin}
