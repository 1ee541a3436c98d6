#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

import logging
from functools import partial
from typing import Generator, Optional

import jwt
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session, sessionmaker

from core.config_loader import AuthConfig
from core.lifecycle import LifecycleService
from database import database
from database.uow import tulen_uow
from .config import get_config

logger = logging.getLogger(__name__)


def get_session_factory() -> sessionmaker:
    """
    Session factory shared by read endpoints and the lifecycle service.

    Built on the engine from database.database, the one init_db also uses.
    """
    return database.get_session_factory()


def get_db(session_factory: sessionmaker = Depends(get_session_factory)) -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...

    Yields:
        Session: Database session that will be automatically closed.
    """
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def get_lifecycle_service(session_factory: sessionmaker = Depends(get_session_factory)) -> LifecycleService:
    """LifecycleService whose units of work open sessions from the shared factory."""
    return LifecycleService(uow_factory=partial(tulen_uow, session_factory))


def get_auth_config() -> AuthConfig:
    return get_config().auth


def decode_user_id(token: str, auth: AuthConfig) -> int:
    """
    Verify a bearer token and extract the caller's user id.

    Raises:
        HTTPException: 401 if the token is invalid, expired or carries no user id.
    """
    try:
        claims = jwt.decode(token, auth.jwt_secret, algorithms=[auth.jwt_algorithm])
    except jwt.PyJWTError as e:
        logger.warning(f"Token verification failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = claims.get(auth.user_id_claim, claims.get("sub"))
    try:
        return int(user_id)
    except (TypeError, ValueError):
        logger.warning(f"Token has no usable '{auth.user_id_claim}' claim")
        raise HTTPException(status_code=401, detail="Invalid token")


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    return authorization.split(" ", 1)[1].strip() or None


def get_current_user_id(
    authorization: Optional[str] = Header(default=None),
    auth: AuthConfig = Depends(get_auth_config)
) -> int:
    """Caller id from a required `Authorization: Bearer <jwt>` header."""
    token = _bearer_token(authorization)
    if token is None:
        raise HTTPException(status_code=401, detail="No token provided")
    return decode_user_id(token, auth)


def get_optional_user_id(
    authorization: Optional[str] = Header(default=None),
    auth: AuthConfig = Depends(get_auth_config)
) -> Optional[int]:
    """Caller id when a bearer token is sent; None for anonymous reads."""
    token = _bearer_token(authorization)
    if token is None:
        return None
    return decode_user_id(token, auth)
