"""Admin API endpoints guarded by a shared token."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from bakery_costing.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _configured_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_configured_token),
) -> None:
    """Reject requests whose X-Admin-Token does not match the configured one."""
    if not x_admin_token or not secrets.compare_digest(x_admin_token, admin_token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin token"
        )


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/stats", dependencies=[Depends(require_admin)])
async def dashboard_stats(request: Request) -> dict[str, object]:
    """Record counts, average product margin and products that cannot be costed."""
    container: AppContainer = request.app.state.container
    return container.admin_service.dashboard_stats()
