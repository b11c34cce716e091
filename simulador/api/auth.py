"""HTTP Basic Auth guarding the admin proposal listing.

One credential pair, ADMIN_WEB_USER / ADMIN_WEB_PASSWORD. With either unset the
listing is disabled (503) rather than open.
"""

from __future__ import annotations

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from simulador.config import settings

security = HTTPBasic()

INVALID_CREDENTIALS = "Credenciais inválidas. Verifique email e senha."


def _same(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


async def verify_admin(
    credentials: HTTPBasicCredentials = Depends(security),  # noqa: B008
) -> str:
    """Return the admin username, or raise 401 (bad credentials) / 503 (not configured)."""
    admin = settings.security
    if not (admin.admin_web_user and admin.admin_web_password):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="ADMIN_WEB_USER / ADMIN_WEB_PASSWORD not configured",
        )

    # Both comparisons always run
    user_ok = _same(credentials.username, admin.admin_web_user)
    password_ok = _same(credentials.password, admin.admin_web_password)
    if not (user_ok and password_ok):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username
