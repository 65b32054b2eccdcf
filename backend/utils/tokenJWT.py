# utils/tokenJWT.py
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from config import settings
from schemas.admin import AdminUser

# Authorization scheme; missing headers are turned into 401 below
bearer_scheme = HTTPBearer(auto_error=False)

def check_admin_credentials(username: str, password: str) -> bool:
    # Single configured back-office account
    return username == settings.ADMIN_USERNAME and password == settings.ADMIN_PASSWORD

# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ADMIN_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

# Decode a token into the admin identity, None when invalid or expired
def decode_admin_token(token: Optional[str]) -> Optional[AdminUser]:
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    username = payload.get("sub")
    role = payload.get("role")
    if username is None or role != "admin":
        return None
    return AdminUser(username=username, role=role)

# Retrieve the currently authenticated admin based on the bearer token
def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AdminUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    admin = decode_admin_token(credentials.credentials if credentials else None)
    if admin is None:
        raise credentials_exception
    return admin
