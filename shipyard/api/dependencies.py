"""FastAPI dependencies."""

import secrets

from fastapi import Depends, Header, HTTPException, Request, status

from shipyard.services import Services


def get_services(request: Request) -> Services:
    return request.app.state.services


async def require_admin(
    authorization: str | None = Header(None),
    services: Services = Depends(get_services),
) -> None:
    """Require ``Authorization: Bearer <ADMIN_TOKEN>``.

    Raises 503 if no admin token is configured, 401 if it does not match.
    """
    expected = services.settings.admin_token
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin access is not configured",
        )

    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not secrets.compare_digest(
        token.strip().encode(), expected.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing admin token",
            headers={"WWW-Authenticate": "Bearer"},
        )
