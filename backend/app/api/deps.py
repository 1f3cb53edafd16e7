"""Caller identity from the auth gateway headers. Token issuance and checks live upstream."""
from fastapi import Header, HTTPException

from app.core.constants import ADMIN_ROLE, USER_ID_HEADER, USER_ROLE_HEADER
from app.core.errors import MSG_AUTH_REQUIRED, STATUS_UNAUTHORIZED


def current_user_id(x_user_id: str | None = Header(None, alias=USER_ID_HEADER)) -> str:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=STATUS_UNAUTHORIZED, detail={"error": MSG_AUTH_REQUIRED})
    return user_id


def is_admin(x_user_role: str | None = Header(None, alias=USER_ROLE_HEADER)) -> bool:
    return (x_user_role or "").strip().lower() == ADMIN_ROLE
