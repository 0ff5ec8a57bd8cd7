"""
Caller identity supplied by the upstream auth gateway
"""
from typing import Optional

from fastapi import Depends, Header

from jobmatch.models.schemas import Caller, Role
from jobmatch.utils.exceptions import AuthenticationError, NotAuthorized


async def get_caller(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Caller:
    """Trusts the X-User-Id / X-User-Role headers; no token checks happen here."""
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError()
    try:
        role = Role((x_user_role or Role.CANDIDATE.value).strip().lower())
    except ValueError as e:
        raise NotAuthorized(f"Unknown role: {x_user_role}", cause=e) from e
    return Caller(user_id=x_user_id.strip(), role=role)


async def require_employer(caller: Caller = Depends(get_caller)) -> Caller:
    if caller.role not in (Role.EMPLOYER, Role.ADMIN):
        raise NotAuthorized("Employer or admin role required")
    return caller
