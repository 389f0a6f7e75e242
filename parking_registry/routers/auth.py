# parking_registry/routers/auth.py
"""Admin login: exchanges username/password for a bearer token."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parking_registry.config import Settings
from parking_registry.database import get_db
from parking_registry.schemas.auth import LoginRequest, Token
from parking_registry.services.auth_service import get_settings, login

router = APIRouter()


@router.post("/login", response_model=Token, summary="Admin login")
def admin_login(body: LoginRequest, db: Session = Depends(get_db),
                settings: Settings = Depends(get_settings)):
    return {"token": login(db, settings, body.username, body.password)}
