import logging
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException


logger = logging.getLogger(__name__)

ROLE_ADMIN = "ADMIN"
ROLE_PROFESSIONAL = "PROFESSIONAL"
ROLE_STORE = "STORE"

ROLES = (ROLE_ADMIN, ROLE_PROFESSIONAL, ROLE_STORE)


@dataclass(frozen=True)
class CurrentUser:
    id: int
    role: str
    store_id: int | None = None


def get_current_user(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    x_user_role: str | None = Header(default=None, alias="X-User-Role"),
    x_store_id: str | None = Header(default=None, alias="X-Store-Id"),
) -> CurrentUser:
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=401,
            detail="Missing identity. Provide X-User-Id and X-User-Role headers.",
        )

    try:
        user_id = int(x_user_id)
        store_id = int(x_store_id) if x_store_id else None
    except ValueError:
        raise HTTPException(status_code=401, detail="X-User-Id and X-Store-Id must be integers")

    role = x_user_role.strip().upper()
    if role not in ROLES:
        raise HTTPException(status_code=401, detail=f"Unknown role: {x_user_role}")

    return CurrentUser(id=user_id, role=role, store_id=store_id)


def require_roles(*roles: str):
    def _dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            logger.warning("User %s with role %s denied (requires %s)", user.id, user.role, ", ".join(roles))
            raise HTTPException(status_code=403, detail="Role not allowed for this operation")
        return user

    return _dependency
