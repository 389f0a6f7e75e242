# parking_registry/services/auth_service.py
"""
Admin access control.
Login checks the stored password hash and issues a short-lived HS256 JWT
carrying {sub, role}. require_admin guards every /api/admin route except login.
"""

from datetime import datetime, timedelta

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from parking_registry.config import Settings
from parking_registry.errors import AuthError
from parking_registry.models.admin import Admin
from parking_registry.utils.logger import get_logger

logger = get_logger(__name__)

ADMIN_ROLE = "admin"
ALGORITHM = "HS256"

# pbkdf2_sha256 avoids bcrypt build/runtime issues
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
auth_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def create_token(settings: Settings, username: str, role: str) -> str:
    now = datetime.utcnow()
    payload = {
        "sub": username,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_EXPIRES_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_token(settings: Settings, token: str) -> dict:
    """Verify signature + expiry and the admin role. Returns the payload."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token đã hết hạn")
    except jwt.InvalidTokenError:
        raise AuthError("Token không hợp lệ")

    if payload.get("role") != ADMIN_ROLE or not payload.get("sub"):
        raise AuthError("Token không hợp lệ")
    return payload


def login(db: Session, settings: Settings, username: str, password: str) -> str:
    admin = db.query(Admin).filter(Admin.username == username).first()
    if not admin:
        logger.warning(f"[Auth] Login failed: unknown user '{username}'")
        raise AuthError("Tài khoản không tồn tại")
    if not verify_password(password, admin.hashed_password):
        logger.warning(f"[Auth] Login failed: wrong password for '{username}'")
        raise AuthError("Mật khẩu sai")

    logger.info(f"[Auth] Admin '{username}' logged in")
    return create_token(settings, admin.username, admin.role)


def ensure_admin(db: Session, username: str, password: str, role: str = ADMIN_ROLE) -> bool:
    """Create the admin account if it does not exist. Returns True when created."""
    if db.query(Admin).filter(Admin.username == username).first():
        return False
    db.add(Admin(username=username, hashed_password=hash_password(password), role=role))
    db.commit()
    logger.info(f"[Auth] Admin account '{username}' created")
    return True


def get_settings(request: Request) -> Settings:
    """FastAPI dependency: the Settings instance built in create_app()."""
    return request.app.state.settings


def require_admin(
    credentials: HTTPAuthorizationCredentials = Depends(auth_scheme),
    settings: Settings = Depends(get_settings),
) -> dict:
    """FastAPI dependency: returns the verified token payload."""
    if credentials is None or not credentials.credentials:
        raise AuthError("Không có token")
    return decode_token(settings, credentials.credentials)
