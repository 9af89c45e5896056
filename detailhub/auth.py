import hashlib
import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import Detailer

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401 from us, not a 403 from FastAPI
security = HTTPBearer(auto_error=False)


def hash_api_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def generate_api_token() -> tuple[str, str]:
    """Generate a dashboard API token. Returns (token, sha256 hash for storage)"""
    token = secrets.token_urlsafe(32)
    return token, hash_api_token(token)


async def get_current_detailer(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Detailer:
    """Resolve the detailer that owns the bearer token"""
    if not credentials or not credentials.credentials:
        logger.warning("⚠️ No credentials provided")
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token_hash = hash_api_token(credentials.credentials)
    detailer = (
        db.query(Detailer)
        .filter(Detailer.api_token_hash == token_hash, Detailer.is_active.is_(True))
        .first()
    )

    if not detailer:
        logger.warning("⚠️ Authentication failed: unknown or inactive token")
        raise HTTPException(
            status_code=401,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.debug(f"✅ Authenticated detailer {detailer.id}")
    return detailer
