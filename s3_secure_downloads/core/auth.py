from __future__ import annotations

from fastapi import Header, HTTPException, status

from s3_secure_downloads.core.config import settings


def require_logged_in_user(x_user_key: str | None = Header(default=None)) -> bool:
    """
    Login gate for the download proxy.

    Current behavior:
    - If REQUIRE_LOGGED_IN_USER is off, everyone passes.
    - If it is on, require an `x-user-key` matching USER_API_KEY.
    - If it is on but USER_API_KEY is empty, deny by default.
    """
    if not settings.require_logged_in_user:
        return True
    if not settings.user_api_key:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Login required but USER_API_KEY not configured")
    if x_user_key != settings.user_api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
    return True
