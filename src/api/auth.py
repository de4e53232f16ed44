# src/api/auth.py

import logging
import os

import jwt
from fastapi import Depends, Header, HTTPException, status

from src.domain.roles import Principal, principal_for


logger = logging.getLogger(__name__)


def _jwt_secret() -> str:
    secret = os.getenv("JWT_SECRET")
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT secret not configured. Set JWT_SECRET.",
        )
    return secret


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_principal(token: str) -> Principal:
    """
    Turn a verified bearer token into a principal. Tokens are issued
    elsewhere and carry the user id (``id`` or ``sub``) and ``role``.
    """
    algorithm = os.getenv("JWT_ALGORITHM", "HS256")
    try:
        claims = jwt.decode(token, _jwt_secret(), algorithms=[algorithm])
    except jwt.PyJWTError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise _unauthorized("Token is not valid") from exc

    user_id = claims.get("id") or claims.get("sub")
    try:
        return principal_for(claims.get("role"), str(user_id) if user_id else "")
    except ValueError as exc:
        raise _unauthorized("Token is not valid") from exc


def get_current_principal(
    authorization: str | None = Header(default=None),
) -> Principal:
    if not authorization:
        raise _unauthorized("No token, authorization denied")

    token_parts = authorization.split(" ")
    if len(token_parts) != 2 or token_parts[0] != "Bearer":
        raise _unauthorized("Invalid token format")

    return decode_principal(token_parts[1])


def require_attendee(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if not principal.can_book_seats():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only attendees can book seats",
        )
    return principal


def require_event_creator(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if not principal.can_create_events():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only event organizers can create events",
        )
    return principal
