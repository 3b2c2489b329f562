"""Shared FastAPI dependencies."""

from fastapi import Depends, Header, HTTPException, Request, status

from hungry_owl.containers import AppContainer
from hungry_owl.domain.models import UserRecord


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the running app."""
    return request.app.state.container


def current_user(
    x_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
    container: AppContainer = Depends(get_container),
) -> UserRecord:
    """Resolve the signed-in user forwarded by the identity provider."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return container.user_service.ensure_user(x_user_id, email=x_user_email or "")
